import asyncio
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.dependencies import get_order_repository, get_order_service
from app.errors import OrderPersistFailed, UploadFailed
from app.main import app
from app.models.order import OrderRecord, StoredFile
from app.services.order_service import OrderService
from app.services.rate_limiter import upload_rate_limiter
from app.utils.storage_paths import folder_path, sanitize_filename, storage_key

TOKEN = "test-upload-token"


class FakeStorage:
    def __init__(self, namespace: str = "mellow-signs"):
        self.namespace = namespace
        self.configured = True
        self.calls: list[tuple[str, str, int, date]] = []
        self.deleted: list[str] = []
        self.fail_on: set[int] = set()
        self.delays: dict[int, float] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    def folder_for(self, order_id: str, on: date) -> str:
        return folder_path(self.namespace, order_id, on)

    async def store(self, content, display_name, order_id, index, on):
        self.calls.append((display_name, order_id, index, on))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(index, 0))
            if index in self.fail_on:
                raise UploadFailed(display_name, "provider rejected the file")
        finally:
            self.in_flight -= 1
        key = storage_key(order_id, index, sanitize_filename(display_name))
        return StoredFile(
            remote_id=f"file-{index}",
            url=f"https://ik.imagekit.io/test{self.folder_for(order_id, on)}{key}",
            thumbnail_url=None,
            size_bytes=len(content),
        )

    async def delete(self, remote_id):
        self.deleted.append(remote_id)


class FakeRepository:
    def __init__(self):
        self.configured = True
        self.calls = []
        self.records: dict[str, OrderRecord] = {}
        self.fail = False

    async def create_order(self, order):
        self.calls.append(order)
        if self.fail:
            raise OrderPersistFailed("table not found")
        record_id = f"rec{len(self.calls):03d}"
        self.records[order.order_id] = OrderRecord(
            record_id=record_id,
            order_id=order.order_id,
            name=order.name,
            status=None,
            submitted_at=order.submitted_at.isoformat(),
            description=order.description,
        )
        return record_id

    async def find_order(self, order_id):
        return self.records.get(order_id)


class FakeNotifier:
    def __init__(self):
        self.configured = True
        self.calls = []
        self.fail = False

    async def notify(self, order, folder):
        self.calls.append((order, folder))
        if self.fail:
            raise RuntimeError("smtp relay down")
        return "msg-1"


class Fakes:
    def __init__(self):
        self.storage = FakeStorage()
        self.repository = FakeRepository()
        self.notifier = FakeNotifier()
        self.service = OrderService(self.storage, self.repository, self.notifier)


@pytest.fixture
def fakes():
    return Fakes()


@pytest.fixture
def fresh_rate_limiter():
    upload_rate_limiter.reset()
    yield upload_rate_limiter
    upload_rate_limiter.reset()


@pytest.fixture
def client(fakes, fresh_rate_limiter):
    original_token = settings.upload_api_token
    settings.upload_api_token = TOKEN
    app.dependency_overrides[get_order_service] = lambda: fakes.service
    app.dependency_overrides[get_order_repository] = lambda: fakes.repository
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
    settings.upload_api_token = original_token


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {TOKEN}"}
