from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class IncomingFile:
    """A file part as received from the multipart form, already read into memory."""

    filename: str
    content_type: str | None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class OrderSubmission:
    name: str
    email: str
    phone: str | None
    description: str | None
    files: list[IncomingFile]


@dataclass(frozen=True)
class StoredFile:
    """What the object store returns for one persisted file."""

    remote_id: str
    url: str
    thumbnail_url: str | None
    size_bytes: int


@dataclass(frozen=True)
class UploadedFile:
    original_name: str
    sanitized_name: str
    storage_key: str
    folder_path: str
    mime_type: str | None
    remote_id: str
    url: str
    thumbnail_url: str | None
    size_bytes: int


@dataclass(frozen=True)
class Order:
    order_id: str
    name: str
    email: str
    phone: str | None
    description: str | None
    submitted_at: date
    files: list[UploadedFile] = field(default_factory=list)


@dataclass(frozen=True)
class OrderRecord:
    """An order row as read back from the tabular store."""

    record_id: str
    order_id: str
    name: str | None
    status: str | None
    submitted_at: str | None
    description: str | None


@dataclass(frozen=True)
class OrderResult:
    order: Order
    record_id: str
    folder_path: str
