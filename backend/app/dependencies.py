import logging
import secrets

from fastapi import Header, Request

from app.config import settings
from app.errors import AuthError, RateLimitError
from app.services.order_repository import AirtableOrderRepository
from app.services.order_service import OrderService
from app.services.rate_limiter import upload_rate_limiter

logger = logging.getLogger("app.auth")


async def require_upload_token(authorization: str | None = Header(None)):
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Token de autenticação em falta.", code="UNAUTHORIZED", status_code=401)
    token = authorization[7:]
    expected = settings.upload_api_token
    if not expected:
        logger.error("UPLOAD_API_TOKEN is not set; rejecting all uploads.")
    if not expected or not secrets.compare_digest(token.encode(), expected.encode()):
        raise AuthError("Token de autenticação inválido.", code="FORBIDDEN", status_code=403)
    return token


async def enforce_upload_rate_limit(request: Request):
    client_host = request.client.host if request.client else "unknown"
    retry_after = upload_rate_limiter.retry_after(
        f"upload:{client_host}",
        settings.upload_rate_limit,
        settings.upload_rate_window_seconds,
    )
    if retry_after > 0:
        raise RateLimitError(
            "Demasiados pedidos de upload. Tente novamente mais tarde.",
            details={"retryAfterSeconds": round(retry_after)},
        )


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_order_repository(request: Request) -> AirtableOrderRepository:
    return request.app.state.order_repository
