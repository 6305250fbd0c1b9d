"""
Order submission pipeline.

validate -> generate id -> upload files concurrently -> record order -> notify.
Uploads fail fast: the first failed upload fails the request, siblings still
in flight are left to finish and their results are dropped. Nothing already
stored is rolled back unless ``cleanup_orphaned_files`` is set.
"""
import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime, timezone

from app.errors import OrderPersistFailed, UploadFailed, UpstreamError
from app.models.order import IncomingFile, Order, OrderResult, OrderSubmission, UploadedFile
from app.services.notification_service import EmailNotifier
from app.services.order_repository import AirtableOrderRepository
from app.services.storage_service import ImageKitStorage
from app.utils.identifiers import generate_order_id
from app.utils.storage_paths import sanitize_filename, storage_key

logger = logging.getLogger("app.orders")


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class OrderService:
    def __init__(
        self,
        storage: ImageKitStorage,
        repository: AirtableOrderRepository,
        notifier: EmailNotifier,
        cleanup_orphaned_files: bool = False,
        id_factory: Callable[[], str] = generate_order_id,
        today: Callable[[], date] = _utc_today,
    ):
        self.storage = storage
        self.repository = repository
        self.notifier = notifier
        self.cleanup_orphaned_files = cleanup_orphaned_files
        self._id_factory = id_factory
        self._today = today

    async def _upload_one(self, file: IncomingFile, order_id: str, index: int, on: date) -> UploadedFile:
        try:
            stored = await self.storage.store(file.content, file.filename, order_id, index, on)
        except UpstreamError:
            raise
        except Exception as exc:
            raise UploadFailed(file.filename, exc) from exc
        sanitized = sanitize_filename(file.filename)
        return UploadedFile(
            original_name=file.filename,
            sanitized_name=sanitized,
            storage_key=storage_key(order_id, index, sanitized),
            folder_path=self.storage.folder_for(order_id, on),
            mime_type=file.content_type,
            remote_id=stored.remote_id,
            url=stored.url,
            thumbnail_url=stored.thumbnail_url,
            size_bytes=stored.size_bytes,
        )

    async def _persist(self, order: Order) -> str:
        try:
            return await self.repository.create_order(order)
        except UpstreamError:
            raise
        except Exception as exc:
            raise OrderPersistFailed(exc) from exc

    async def _discard(self, files: list[UploadedFile]) -> None:
        for f in files:
            try:
                await self.storage.delete(f.remote_id)
            except Exception:
                logger.exception("Could not delete orphaned file %s (%s)", f.remote_id, f.storage_key)

    async def submit(self, submission: OrderSubmission) -> OrderResult:
        order_id = self._id_factory()
        today = self._today()
        folder = self.storage.folder_for(order_id, today)
        logger.info("Order %s accepted with %d file(s)", order_id, len(submission.files))

        try:
            uploaded = await asyncio.gather(*(
                self._upload_one(f, order_id, i, today) for i, f in enumerate(submission.files)
            ))
        except UpstreamError as exc:
            logger.warning(
                "Order %s aborted during upload; files already stored under %s are orphaned",
                order_id, folder,
            )
            exc.details["orderId"] = order_id
            raise

        order = Order(
            order_id=order_id,
            name=submission.name,
            email=submission.email,
            phone=submission.phone,
            description=submission.description,
            submitted_at=today,
            files=list(uploaded),
        )

        try:
            record_id = await self._persist(order)
        except UpstreamError as exc:
            logger.warning(
                "Order %s not recorded; %d orphaned file(s): %s",
                order_id, len(order.files), ", ".join(f.remote_id for f in order.files),
            )
            if self.cleanup_orphaned_files:
                await self._discard(order.files)
            exc.details["orderId"] = order_id
            raise

        try:
            await self.notifier.notify(order, folder)
        except Exception:
            logger.exception("Notification for order %s failed", order_id)

        return OrderResult(order=order, record_id=record_id, folder_path=folder)
