import re
from datetime import date

MAX_SANITIZED_LENGTH = 100

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")
_UNDERSCORE_RUNS = re.compile(r"_+")


def sanitize_filename(name: str) -> str:
    """Replace anything outside [A-Za-z0-9.-] with "_", collapse runs, cap at 100 chars."""
    cleaned = _UNSAFE_CHARS.sub("_", name)
    cleaned = _UNDERSCORE_RUNS.sub("_", cleaned)
    return cleaned[:MAX_SANITIZED_LENGTH]


def storage_key(order_id: str, index: int, sanitized_name: str) -> str:
    return f"{order_id}_{index}_{sanitized_name}"


def folder_path(namespace: str, order_id: str, on: date) -> str:
    return f"/{namespace}/orders/{on.isoformat()}/{order_id}/"
