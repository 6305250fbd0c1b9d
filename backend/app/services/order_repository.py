import json
import logging
from urllib.parse import quote

import httpx

from app.errors import OrderPersistFailed, UpstreamError
from app.models.order import Order, OrderRecord

logger = logging.getLogger("app.orders")

# Column names of the orders table.
FIELD_ORDER_ID = "Order ID"
FIELD_NAME = "Name"
FIELD_EMAIL = "Email"
FIELD_PHONE = "Phone"
FIELD_DATE = "Date"
FIELD_DESCRIPTION = "Description"
FIELD_STATUS = "Status"


class AirtableOrderRepository:
    """Writes one row per order into an Airtable table.

    Customer details live on the order row itself; there is no separate
    customer table and so no lookup before the insert.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_id: str | None,
        table: str = "Orders",
        api_url: str = "https://api.airtable.com/v0",
        files_field: str | None = None,
        numeric_order_id: bool = True,
    ):
        self._client = client
        self._api_key = api_key
        self._base_id = base_id
        self._table = table
        self._api_url = api_url.rstrip("/")
        self._files_field = files_field
        self._numeric_order_id = numeric_order_id

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._base_id)

    @property
    def _table_url(self) -> str:
        return f"{self._api_url}/{self._base_id}/{quote(self._table)}"

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _stored_order_id(self, order_id: str) -> int | str:
        return int(order_id) if self._numeric_order_id else order_id

    def _order_fields(self, order: Order) -> dict:
        fields: dict = {
            FIELD_ORDER_ID: self._stored_order_id(order.order_id),
            FIELD_NAME: order.name,
            FIELD_EMAIL: order.email,
            FIELD_DATE: order.submitted_at.isoformat(),
        }
        if order.phone:
            fields[FIELD_PHONE] = order.phone
        if order.description:
            fields[FIELD_DESCRIPTION] = order.description
        if self._files_field:
            fields[self._files_field] = json.dumps(
                [{"name": f.original_name, "url": f.url, "size": f.size_bytes} for f in order.files],
                ensure_ascii=False,
            )
        return fields

    async def create_order(self, order: Order) -> str:
        payload = {"fields": self._order_fields(order), "typecast": True}
        try:
            response = await self._client.post(self._table_url, json=payload, headers=self._headers)
            response.raise_for_status()
            record_id = response.json()["id"]
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.error("Creating order %s failed: %s", order.order_id, exc)
            raise OrderPersistFailed(exc) from exc

        logger.info("Order %s recorded as %s", order.order_id, record_id)
        return record_id

    async def find_order(self, order_id: str) -> OrderRecord | None:
        """Exact-match lookup on the order id column. ``order_id`` must be all digits.

        A number column stores doubles, so the formula can match a neighbouring
        id; only a row whose stored id equals ``order_id`` is returned.
        """
        if not order_id.isdigit():
            return None
        value = order_id if self._numeric_order_id else f"'{order_id}'"
        params = {
            "filterByFormula": f"{{{FIELD_ORDER_ID}}} = {value}",
            "maxRecords": "3",
        }
        try:
            response = await self._client.get(self._table_url, params=params, headers=self._headers)
            response.raise_for_status()
            records = response.json().get("records", [])
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Looking up order %s failed: %s", order_id, exc)
            raise UpstreamError(cause=exc) from exc

        record = next(
            (r for r in records if str(r.get("fields", {}).get(FIELD_ORDER_ID)) == order_id),
            None,
        )
        if record is None:
            if records:
                logger.warning("Lookup of order %s matched only other ids", order_id)
            return None
        fields = record["fields"]
        return OrderRecord(
            record_id=record["id"],
            order_id=order_id,
            name=fields.get(FIELD_NAME),
            status=fields.get(FIELD_STATUS),
            submitted_at=fields.get(FIELD_DATE),
            description=fields.get(FIELD_DESCRIPTION),
        )
