import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("app.errors")

GENERIC_ERROR_MESSAGE = "Erro interno do servidor. Por favor tente novamente mais tarde."

# Framework-raised HTTP errors (unknown route, wrong method, unparseable body).
HTTP_ERROR_CODES = {
    400: ("BAD_REQUEST", "Pedido inválido."),
    404: ("NOT_FOUND", "Recurso não encontrado."),
    405: ("METHOD_NOT_ALLOWED", "Método não permitido."),
}


def error_envelope(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        payload.update(details)
    return payload


class ApplicationError(Exception):
    """Base for errors that map onto a JSON error response."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = dict(details or {})


class ValidationError(ApplicationError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthError(ApplicationError):
    status_code = 401
    code = "UNAUTHORIZED"


class NotFoundError(ApplicationError):
    status_code = 404
    code = "NOT_FOUND"


class RateLimitError(ApplicationError):
    status_code = 429
    code = "RATE_LIMITED"


class UpstreamError(ApplicationError):
    """A storage, database or email provider call failed.

    The client only ever sees the generic message; ``cause`` is for logs.
    """

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, *, cause: Exception | str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.cause = cause


class UploadFailed(UpstreamError):
    def __init__(self, display_name: str, cause: Exception | str):
        super().__init__(cause=cause)
        self.display_name = display_name

    def __str__(self) -> str:
        return f"upload of {self.display_name!r} failed: {self.cause}"


class OrderPersistFailed(UpstreamError):
    def __init__(self, cause: Exception | str):
        super().__init__(cause=cause)

    def __str__(self) -> str:
        return f"order record could not be created: {self.cause}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        if isinstance(exc, UpstreamError):
            logger.error("%s %s -> %s (%s)", request.method, request.url.path, exc.code, exc)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code, message = HTTP_ERROR_CODES.get(exc.status_code, ("HTTP_ERROR", GENERIC_ERROR_MESSAGE))
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(code, message),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("%s %s -> invalid request: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content=error_envelope("INVALID_REQUEST", "Pedido inválido."),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_envelope("INTERNAL_SERVER_ERROR", GENERIC_ERROR_MESSAGE),
        )
