import logging
from datetime import date

import httpx

from app.errors import UploadFailed
from app.models.order import StoredFile
from app.utils.storage_paths import folder_path, sanitize_filename, storage_key

logger = logging.getLogger("app.storage")


class ImageKitStorage:
    """Object store adapter backed by the ImageKit upload API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        private_key: str | None,
        namespace: str,
        upload_url: str = "https://upload.imagekit.io/api/v1/files/upload",
        api_url: str = "https://api.imagekit.io/v1",
    ):
        self._client = client
        self._private_key = private_key
        self.namespace = namespace
        self._upload_url = upload_url
        self._api_url = api_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self._private_key)

    def folder_for(self, order_id: str, on: date) -> str:
        return folder_path(self.namespace, order_id, on)

    async def store(
        self,
        content: bytes,
        display_name: str,
        order_id: str,
        index: int,
        on: date,
    ) -> StoredFile:
        key = storage_key(order_id, index, sanitize_filename(display_name))
        # multipart/form-data: raw bytes under "file", options as plain fields
        form = {
            "fileName": key,
            "folder": self.folder_for(order_id, on),
            "useUniqueFileName": "false",
            "tags": f"order-{order_id}",
        }
        try:
            response = await self._client.post(
                self._upload_url,
                data=form,
                files={"file": (key, content)},
                auth=(self._private_key or "", ""),
            )
            response.raise_for_status()
            body = response.json()
            stored = StoredFile(
                remote_id=body["fileId"],
                url=body["url"],
                thumbnail_url=body.get("thumbnailUrl"),
                size_bytes=int(body.get("size", len(content))),
            )
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.error("Upload of %r for order %s failed: %s", display_name, order_id, exc)
            raise UploadFailed(display_name, exc) from exc

        logger.debug("Stored %s as %s (%d bytes)", display_name, stored.remote_id, stored.size_bytes)
        return stored

    async def delete(self, remote_id: str) -> None:
        response = await self._client.delete(
            f"{self._api_url}/files/{remote_id}",
            auth=(self._private_key or "", ""),
        )
        response.raise_for_status()
