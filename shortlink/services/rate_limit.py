"""Fixed-window request limiter for login and password-reset endpoints."""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from shortlink.core.config import settings
from shortlink.core.errors import RateLimitError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many attempts, wait a minute."


@dataclass
class RateLimitCounter:
    count: int
    window_start: float


class RateLimiter:
    """
    Per-key fixed-window counter.

    A window opens on the first hit for a key and lasts window_seconds; the
    count resets on the first hit after it elapses. Counters live in a bounded
    LRU map: once max_keys distinct keys are tracked, the least recently used
    key is evicted. Mutation is guarded by a lock because sync FastAPI
    dependencies run on a threadpool.
    """

    def __init__(
        self,
        max_requests: int = 5,
        window_seconds: float = 60.0,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._counters: OrderedDict[str, RateLimitCounter] = OrderedDict()
        self._lock = threading.Lock()

    def hit(self, key: str) -> int:
        """
        Count one request for key and return the count in the current window.
        Raises RateLimitError once the count exceeds max_requests.
        """
        now = self._clock()
        with self._lock:
            counter = self._counters.get(key)
            if counter is None:
                counter = RateLimitCounter(count=0, window_start=now)
                self._counters[key] = counter
                while len(self._counters) > self.max_keys:
                    self._counters.popitem(last=False)
            else:
                self._counters.move_to_end(key)
            if now - counter.window_start > self.window_seconds:
                counter.count = 0
                counter.window_start = now
            # Saturate so a client hammering a blocked key does not grow the count.
            counter.count = min(counter.count + 1, self.max_requests + 1)
            count = counter.count

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for key=%s", key)
            raise RateLimitError(RATE_LIMIT_MESSAGE)
        return count

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when key is None."""
        with self._lock:
            if key is None:
                self._counters.clear()
            else:
                self._counters.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter (singleton); override the dependency in tests."""
    return RateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SEC,
        max_keys=settings.RATE_LIMIT_MAX_KEYS,
    )
