import re
from collections.abc import Mapping
from pathlib import PurePosixPath

from app.errors import ValidationError
from app.models.order import IncomingFile, OrderSubmission

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/svg+xml",
    "image/webp",
    "application/pdf",
    "text/plain",
    "application/illustrator",
    "application/postscript",
}

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".svg", ".webp", ".pdf", ".txt", ".ai", ".eps"}


def is_allowed_file_type(filename: str, content_type: str | None) -> bool:
    """Either the declared MIME type or the extension has to be on the allow-list."""
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime in ALLOWED_MIME_TYPES:
        return True
    return PurePosixPath(filename).suffix.lower() in ALLOWED_EXTENSIONS


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_submission(fields: Mapping[str, str | None], files: list[IncomingFile]) -> OrderSubmission:
    """Check the business-required fields of an upload form.

    File count, size and type limits are enforced while the multipart body is
    read; this only re-checks what an order cannot exist without.
    """
    name = _clean(fields.get("nome"))
    email = _clean(fields.get("email"))

    if not name or not email:
        raise ValidationError(
            "Nome e email são obrigatórios.",
            code="MISSING_REQUIRED_FIELDS",
        )
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Email inválido.", code="INVALID_EMAIL")
    if not files:
        raise ValidationError("Nenhum ficheiro foi enviado.", code="NO_FILES")

    return OrderSubmission(
        name=name,
        email=email,
        phone=_clean(fields.get("telefone")),
        description=_clean(fields.get("comentarios")),
        files=list(files),
    )
