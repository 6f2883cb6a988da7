"""In-memory TTL cache for remote lookup results."""

import logging
import time
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Keyed cache where every entry expires a fixed time after insertion.

    Entries are independent, so a plain dict is enough: within one event
    loop a read or write never interleaves with another.
    """

    def __init__(
        self,
        default_ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            default_ttl: Lifetime in seconds used when ``put`` gets no ttl
            clock: Monotonic time source in seconds. Override in tests.
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[V, float]] = {}

    def get(self, key: str) -> V | None:
        """Return the cached value, or None on a miss or expired entry."""
        item = self._entries.get(key)
        if item is None:
            return None

        value, expires_at = item
        if expires_at <= self._clock():
            # Expired
            self._entries.pop(key, None)
            return None

        return value

    def put(self, key: str, value: V, ttl: float | None = None) -> None:
        """Insert or overwrite ``key``."""
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + lifetime)

    def cleanup_expired(self) -> int:
        """
        Remove expired entries.

        Returns the number of entries deleted.
        """
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
