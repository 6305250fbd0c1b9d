import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, settings
from app.errors import register_exception_handlers
from app.routers import catalog, orders, uploads
from app.schemas.catalog import HealthResponse, ServiceStatus
from app.services.notification_service import EmailNotifier
from app.services.order_repository import AirtableOrderRepository
from app.services.order_service import OrderService
from app.services.storage_service import ImageKitStorage

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")


def build_order_service(config: Settings, client: httpx.AsyncClient) -> OrderService:
    storage = ImageKitStorage(
        client,
        private_key=config.imagekit_private_key,
        namespace=config.storage_namespace,
        upload_url=config.imagekit_upload_url,
        api_url=config.imagekit_api_url,
    )
    repository = AirtableOrderRepository(
        client,
        api_key=config.airtable_api_key,
        base_id=config.airtable_base_id,
        table=config.airtable_table,
        api_url=config.airtable_api_url,
        files_field=config.airtable_files_field,
        numeric_order_id=config.airtable_order_id_numeric,
    )
    notifier = EmailNotifier(
        client,
        api_key=config.resend_api_key,
        sender=config.notification_from,
        recipient=config.notification_to,
        url_endpoint=config.imagekit_url_endpoint,
        api_url=config.resend_api_url,
    )
    return OrderService(
        storage,
        repository,
        notifier,
        cleanup_orphaned_files=config.cleanup_orphaned_files,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one shared outbound client for all three providers
    client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    service = build_order_service(settings, client)
    app.state.order_service = service
    app.state.order_repository = service.repository
    logger.info("Upload gateway started (environment=%s)", settings.environment)
    for name, ok in (
        ("object store", settings.object_store_configured),
        ("order store", settings.order_store_configured),
        ("notifier", settings.notifier_configured),
    ):
        if not ok:
            logger.warning("%s is not configured", name)
    yield
    # Shutdown
    await client.aclose()


app = FastAPI(
    title="Order Upload Gateway",
    description="Receives customer artwork uploads and records them as orders",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Cross-Origin-Resource-Policy", "cross-origin")
    return response


register_exception_handlers(app)

app.include_router(catalog.router, prefix=settings.api_prefix)
app.include_router(uploads.router, prefix=settings.api_prefix)
app.include_router(orders.router, prefix=settings.api_prefix)


def _service_state(configured: bool) -> str:
    return "connected" if configured else "not configured"


@app.get("/health", response_model=HealthResponse)
async def health():
    services = ServiceStatus(
        object_store=_service_state(settings.object_store_configured),
        order_store=_service_state(settings.order_store_configured),
        notifier=_service_state(settings.notifier_configured),
    )
    healthy = (
        settings.object_store_configured
        and settings.order_store_configured
        and settings.notifier_configured
    )
    body = HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        services=services,
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump(by_alias=True))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
