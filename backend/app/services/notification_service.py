import html
import logging

import httpx

from app.errors import UpstreamError
from app.models.order import Order

logger = logging.getLogger("app.notifications")


def _folder_link(url_endpoint: str | None, folder_path: str) -> str:
    if not url_endpoint:
        return folder_path
    return f"{url_endpoint.rstrip('/')}{folder_path}"


def compose_order_email(order: Order, folder_link: str) -> tuple[str, str, str]:
    """Return (subject, text body, html body) for a new order notification."""
    subject = f"Nova encomenda #{order.order_id} - {order.name}"
    lines = [
        f"Encomenda: {order.order_id}",
        f"Nome: {order.name}",
        f"Email: {order.email}",
        f"Telefone: {order.phone or '-'}",
        f"Data: {order.submitted_at.isoformat()}",
        "",
        "Comentários:",
        order.description or "-",
        "",
        f"Ficheiros ({len(order.files)}):",
    ]
    lines += [f"  - {f.original_name} ({f.size_bytes} bytes): {f.url}" for f in order.files]
    lines += ["", f"Pasta: {folder_link}"]
    text = "\n".join(lines)

    file_items = "".join(
        f'<li><a href="{html.escape(f.url)}">{html.escape(f.original_name)}</a></li>' for f in order.files
    )
    body = (
        f"<h2>Nova encomenda #{html.escape(order.order_id)}</h2>"
        f"<p><strong>Nome:</strong> {html.escape(order.name)}<br>"
        f"<strong>Email:</strong> {html.escape(order.email)}<br>"
        f"<strong>Telefone:</strong> {html.escape(order.phone or '-')}</p>"
        f"<p><strong>Comentários:</strong><br>{html.escape(order.description or '-')}</p>"
        f"<ul>{file_items}</ul>"
        f'<p><a href="{html.escape(folder_link)}">Abrir pasta da encomenda</a></p>'
    )
    return subject, text, body


class EmailNotifier:
    """Sends the new-order email through the Resend HTTP API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        sender: str,
        recipient: str,
        url_endpoint: str | None = None,
        api_url: str = "https://api.resend.com",
    ):
        self._client = client
        self._api_key = api_key
        self._sender = sender
        self._recipient = recipient
        self._url_endpoint = url_endpoint
        self._api_url = api_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._recipient)

    async def notify(self, order: Order, folder_path: str) -> str | None:
        """Send the notification; returns the provider's message id."""
        if not self.configured:
            logger.info("Notifier not configured, skipping email for order %s", order.order_id)
            return None

        subject, text, body = compose_order_email(order, _folder_link(self._url_endpoint, folder_path))
        payload = {
            "from": self._sender,
            "to": [self._recipient],
            "reply_to": order.email,
            "subject": subject,
            "text": text,
            "html": body,
        }
        try:
            response = await self._client.post(
                f"{self._api_url}/emails",
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            message_id = response.json().get("id")
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(cause=exc) from exc

        logger.info("Notification for order %s sent (%s)", order.order_id, message_id)
        return message_id
