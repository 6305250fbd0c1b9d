from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.order import OrderRecord, OrderResult, UploadedFile


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedFileResponse(CamelModel):
    original_name: str
    storage_key: str
    remote_id: str
    url: str
    thumbnail_url: str | None
    size_bytes: int
    mime_type: str | None


class OrderData(CamelModel):
    order_id: str
    record_id: str
    files: list[UploadedFileResponse]
    files_count: int
    folder_path: str
    next_steps: list[str]


class UploadResponse(CamelModel):
    success: bool = True
    message: str
    data: OrderData


class OrderStatusData(CamelModel):
    order_id: str
    record_id: str
    status: str | None
    name: str | None
    submitted_at: str | None
    description: str | None


class OrderStatusResponse(CamelModel):
    success: bool = True
    data: OrderStatusData


NEXT_STEPS = [
    "A nossa equipa vai analisar os seus ficheiros.",
    "Receberá um orçamento detalhado por email em até 48 horas úteis.",
    "Guarde o número da encomenda para acompanhar o estado do pedido.",
]


def file_to_response(f: UploadedFile) -> UploadedFileResponse:
    return UploadedFileResponse(
        original_name=f.original_name,
        storage_key=f.storage_key,
        remote_id=f.remote_id,
        url=f.url,
        thumbnail_url=f.thumbnail_url,
        size_bytes=f.size_bytes,
        mime_type=f.mime_type,
    )


def result_to_response(result: OrderResult) -> UploadResponse:
    files = [file_to_response(f) for f in result.order.files]
    return UploadResponse(
        message="Encomenda recebida com sucesso.",
        data=OrderData(
            order_id=result.order.order_id,
            record_id=result.record_id,
            files=files,
            files_count=len(files),
            folder_path=result.folder_path,
            next_steps=NEXT_STEPS,
        ),
    )


def record_to_response(record: OrderRecord) -> OrderStatusResponse:
    return OrderStatusResponse(
        data=OrderStatusData(
            order_id=record.order_id,
            record_id=record.record_id,
            status=record.status,
            name=record.name,
            submitted_at=record.submitted_at,
            description=record.description,
        )
    )
