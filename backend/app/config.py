from pydantic_settings import BaseSettings

PRODUCTION_ORIGINS = ["https://mellowsigns.com", "https://www.mellowsigns.com"]
DEVELOPMENT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseSettings):
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 3000
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Shared secret expected in "Authorization: Bearer <token>" on uploads.
    upload_api_token: str | None = None

    imagekit_private_key: str | None = None
    imagekit_url_endpoint: str | None = None
    imagekit_upload_url: str = "https://upload.imagekit.io/api/v1/files/upload"
    imagekit_api_url: str = "https://api.imagekit.io/v1"
    storage_namespace: str = "mellow-signs"

    airtable_api_key: str | None = None
    airtable_base_id: str | None = None
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_table: str = "Orders"
    airtable_files_field: str | None = None
    # Number columns hold doubles; set False to store "Order ID" as text.
    airtable_order_id_numeric: bool = True

    resend_api_key: str | None = None
    resend_api_url: str = "https://api.resend.com"
    notification_from: str = "Mellow Signs <encomendas@mellowsigns.com>"
    notification_to: str = "geral@mellowsigns.com"

    max_upload_bytes: int = 40 * 1024 * 1024  # 40 MiB
    max_files_per_request: int = 10
    upload_rate_limit: int = 20
    upload_rate_window_seconds: int = 15 * 60
    http_timeout_seconds: float = 30.0
    # Delete already-stored files when the order record cannot be written.
    cleanup_orphaned_files: bool = False

    @property
    def object_store_configured(self) -> bool:
        return bool(self.imagekit_private_key)

    @property
    def order_store_configured(self) -> bool:
        return bool(self.airtable_api_key and self.airtable_base_id)

    @property
    def notifier_configured(self) -> bool:
        return bool(self.resend_api_key and self.notification_to)

    @property
    def cors_origins(self) -> list[str]:
        if self.environment == "production":
            return PRODUCTION_ORIGINS
        return DEVELOPMENT_ORIGINS

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
