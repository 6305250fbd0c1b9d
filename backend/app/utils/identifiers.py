import random
import time


def generate_order_id(now_ms: int | None = None) -> str:
    """Epoch milliseconds followed by a zero-padded 4-digit random suffix.

    Not unique under concurrent same-millisecond requests; callers must not
    rely on it being so.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{now_ms}{random.randint(0, 9999):04d}"
