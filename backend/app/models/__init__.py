from app.models.order import (
    IncomingFile,
    Order,
    OrderRecord,
    OrderResult,
    OrderSubmission,
    StoredFile,
    UploadedFile,
)

__all__ = [
    "IncomingFile",
    "Order",
    "OrderRecord",
    "OrderResult",
    "OrderSubmission",
    "StoredFile",
    "UploadedFile",
]
