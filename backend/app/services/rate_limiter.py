import time
from collections import deque


class RateLimiter:
    """Rolling-window request counter per client key, kept in process memory.

    Keys whose last hit has left the window are dropped, at most once per
    window, so the map only holds clients seen recently.
    """

    def __init__(self):
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep: float | None = None

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, window_seconds: float, now: float) -> None:
        if self._last_sweep is not None and now - self._last_sweep < window_seconds:
            return
        self._last_sweep = now
        cutoff = now - window_seconds
        for key in [k for k, hits in self._hits.items() if hits[-1] <= cutoff]:
            del self._hits[key]

    def _prune(self, key: str, window_seconds: float, now: float) -> deque[float]:
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - window_seconds:
            hits.popleft()
        return hits

    def retry_after(self, key: str, limit: int, window_seconds: float, now: float | None = None) -> float:
        """Record a hit for ``key``. Returns 0 if allowed, else seconds until a slot frees up."""
        now = time.monotonic() if now is None else now
        self._sweep(window_seconds, now)
        hits = self._prune(key, window_seconds, now)
        if len(hits) >= limit:
            return max(0.0, hits[0] + window_seconds - now)
        hits.append(now)
        return 0.0

    def reset(self):
        self._hits.clear()
        self._last_sweep = None


upload_rate_limiter = RateLimiter()
