from pydantic import BaseModel

from app.schemas.order import CamelModel


class ProductType(BaseModel):
    value: str
    label: str


class ProductTypesResponse(BaseModel):
    success: bool = True
    data: list[ProductType]


class ServiceStatus(CamelModel):
    object_store: str
    order_store: str
    notifier: str


class HealthResponse(CamelModel):
    status: str
    timestamp: str
    services: ServiceStatus
