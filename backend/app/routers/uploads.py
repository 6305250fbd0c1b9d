from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.config import settings
from app.dependencies import enforce_upload_rate_limit, get_order_service, require_upload_token
from app.errors import UpstreamError, ValidationError
from app.models.order import IncomingFile
from app.schemas.order import UploadResponse, result_to_response
from app.services.order_service import OrderService
from app.services.validation import is_allowed_file_type, validate_submission

router = APIRouter(
    tags=["uploads"],
    dependencies=[Depends(enforce_upload_rate_limit), Depends(require_upload_token)],
)

# Failures raised before an order id exists still carry the key.
NO_ORDER = {"orderId": None}


async def _read_upload(file: UploadFile, max_bytes: int) -> IncomingFile:
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise ValidationError(
                f"O ficheiro {file.filename} excede o tamanho máximo de {max_bytes // (1024 * 1024)} MB.",
                code="FILE_TOO_LARGE",
                details=NO_ORDER,
            )
        chunks.append(chunk)
    return IncomingFile(filename=file.filename or "", content_type=file.content_type, content=b"".join(chunks))


async def read_upload_files(files: list[UploadFile]) -> list[IncomingFile]:
    """Apply the per-request file limits: count, type allow-list, size."""
    # Browsers send an empty part when the file input is left blank.
    files = [f for f in files if f.filename]
    if len(files) > settings.max_files_per_request:
        raise ValidationError(
            f"Máximo de {settings.max_files_per_request} ficheiros por pedido.",
            code="TOO_MANY_FILES",
            details=NO_ORDER,
        )
    for f in files:
        if not is_allowed_file_type(f.filename, f.content_type):
            raise ValidationError(
                f"Tipo de ficheiro não suportado: {f.filename}",
                code="UNSUPPORTED_FILE_TYPE",
                details=NO_ORDER,
            )
    return [await _read_upload(f, settings.max_upload_bytes) for f in files]


@router.post("/upload", response_model=UploadResponse)
async def upload_order(
    nome: str | None = Form(None),
    email: str | None = Form(None),
    telefone: str | None = Form(None),
    comentarios: str | None = Form(None),
    ficheiros: list[UploadFile] | None = File(None),
    service: OrderService = Depends(get_order_service),
):
    incoming = await read_upload_files(ficheiros or [])
    try:
        submission = validate_submission(
            {"nome": nome, "email": email, "telefone": telefone, "comentarios": comentarios},
            incoming,
        )
    except ValidationError as exc:
        exc.details.update(NO_ORDER)
        raise

    if not (service.storage.configured and service.repository.configured):
        raise UpstreamError(
            "Serviço temporariamente indisponível.",
            code="SERVICE_UNAVAILABLE",
            status_code=503,
            cause="object store or order store not configured",
            details=NO_ORDER,
        )

    result = await service.submit(submission)
    return result_to_response(result)
