from fastapi import APIRouter, Depends

from app.dependencies import get_order_repository
from app.errors import NotFoundError, UpstreamError
from app.schemas.order import OrderStatusResponse, record_to_response
from app.services.order_repository import AirtableOrderRepository

router = APIRouter(tags=["orders"])


@router.get("/status/{order_id}", response_model=OrderStatusResponse)
async def order_status(order_id: str, repository: AirtableOrderRepository = Depends(get_order_repository)):
    """Look up an order by its exact id."""
    if not repository.configured:
        raise UpstreamError(
            "Serviço temporariamente indisponível.",
            code="SERVICE_UNAVAILABLE",
            status_code=503,
            cause="order store not configured",
        )
    record = await repository.find_order(order_id)
    if record is None:
        raise NotFoundError("Encomenda não encontrada.", code="ORDER_NOT_FOUND")
    return record_to_response(record)
