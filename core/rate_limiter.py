"""
Fixed-window, per-client request limiter.

State lives in an injected store local to this process, so the limit is
enforced per instance rather than globally.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import math
import time

from core.stores import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    window_reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: Optional[int] = None


class RateLimiter:
    def __init__(
        self,
        max_requests: int = 15,
        window_seconds: float = 3600,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._store = store if store is not None else MemoryStore(ttl_seconds=window_seconds, clock=clock)

    def check_and_consume(self, client_id: str) -> RateLimitDecision:
        """
        Charge one request to ``client_id`` if it is under the cap.

        Rejected calls leave the stored entry untouched.
        """
        now = self._clock()
        entry = self._store.get(client_id)

        if entry is None or now > entry.window_reset_at:
            entry = RateLimitEntry(count=0, window_reset_at=now + self.window_seconds)

        if entry.count >= self.max_requests:
            retry_after = max(1, math.ceil(entry.window_reset_at - now))
            logger.warning(f"Rate limit exceeded for client {client_id}; retry in {retry_after}s")
            return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

        self._store.set(client_id, RateLimitEntry(count=entry.count + 1, window_reset_at=entry.window_reset_at))
        return RateLimitDecision(allowed=True)

    def peek(self, client_id: str) -> Optional[RateLimitEntry]:
        return self._store.get(client_id)
