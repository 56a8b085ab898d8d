"""Time-based cache for upstream market-data payloads."""
import time
from collections.abc import Callable
from typing import Any

CacheKey = tuple[str, tuple[tuple[str, str], ...]]


def cache_key(path: str, params: dict[str, Any] | None = None) -> CacheKey:
    """Key an upstream request by path and sorted, stringified params."""
    items = tuple(sorted((k, str(v)) for k, v in (params or {}).items()))
    return (path, items)


class TTLCache:
    """In-process cache whose entries expire after a per-entry TTL.

    Expired entries are dropped lazily on the next lookup; nothing is evicted
    in the background.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize empty cache.

        Args:
            clock: Monotonic seconds source; injectable for tests.
        """
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}

    def get(self, key: CacheKey) -> Any | None:
        """Cached value if present and fresh, None otherwise."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: CacheKey, value: Any, ttl: float) -> None:
        """Store value for ttl seconds."""
        self._entries[key] = (self._clock() + ttl, value)

    def __len__(self) -> int:
        return len(self._entries)
