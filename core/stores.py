"""
In-process key/value stores.

The rate limiter and the image proxy receive a store instead of owning a
module-level dict, so each service instance (and each test) gets isolated
state and a controllable clock.
"""

from collections import OrderedDict
from typing import Any, Callable, Optional, Protocol
import time


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def has(self, key: str) -> bool:
        ...


class MemoryStore:
    """
    Dict-backed store with optional TTL expiry and LRU size bound.

    Args:
        max_entries: Evict the least recently used entry beyond this size (None = unbounded)
        ttl_seconds: Entries older than this are treated as absent (None = never expire)
        clock: Returns the current time in seconds
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._clock = clock
        self._data: "OrderedDict[str, tuple]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        item = self._data.get(key)
        if item is None:
            return None
        value, stored_at = item
        if self._ttl is not None and self._clock() - stored_at > self._ttl:
            del self._data[key]
            return None
        if self._max_entries is not None:
            self._data.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._data[key] = (value, now)
        self._data.move_to_end(key)
        if self._max_entries is not None:
            while len(self._data) > self._max_entries:
                self._data.popitem(last=False)

    def _purge_expired(self, now: float) -> None:
        # Oldest entries sit at the front; stop at the first live one
        if self._ttl is None:
            return
        while self._data:
            _, stored_at = next(iter(self._data.values()))
            if now - stored_at <= self._ttl:
                break
            self._data.popitem(last=False)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
