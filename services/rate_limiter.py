import logging
import math
from dataclasses import dataclass

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, storage_from_string
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: int  # epoch milliseconds


class RateLimiter:
    """Fixed-window request counter keyed by client identifier.

    Counts live in a ``limits`` storage backend. The default ``memory://``
    store is per process; pass a shared backend (for example
    ``redis://host:6379``) to count across workers.
    """

    def __init__(self, storage=None, storage_uri=None):
        if storage is None:
            storage = storage_from_string(storage_uri) if storage_uri else MemoryStorage()
        self.storage = storage
        self._strategy = FixedWindowRateLimiter(storage)

    @staticmethod
    def _window_item(max_requests, window_ms):
        return RateLimitItemPerSecond(max_requests, max(1, math.ceil(window_ms / 1000)))

    def check(self, key, max_requests=100, window_ms=15 * 60 * 1000) -> RateLimitResult:
        item = self._window_item(max_requests, window_ms)
        allowed = self._strategy.hit(item, key)
        stats = self._strategy.get_window_stats(item, key)
        reset_time = int(stats.reset_time * 1000)

        if not allowed:
            logger.info(f"Rate limit exceeded for {key}")
            return RateLimitResult(False, 0, reset_time)

        return RateLimitResult(True, stats.remaining, reset_time)

    def reset(self):
        self.storage.reset()
