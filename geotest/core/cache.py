"""
Response Cache
==============

In-memory TTL cache used to deduplicate identical provider calls
(key = operation + URL) within a short window.

There is no lock: concurrent misses for the same key may both fetch and
the last writer wins. Values for a key are interchangeable results of
the same deterministic request.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    Simple get / set / get-or-fetch cache with a fixed TTL.

    Example:
        >>> cache = ResponseCache(ttl=300)
        >>> result = await cache.get_or_fetch("chatgpt-https://a.com", probe)
    """

    def __init__(self, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        """
        Initialize cache.

        Args:
            ttl: Entry lifetime in seconds
            clock: Monotonic time source
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def _expired(self, stored_at: float) -> bool:
        return self._clock() - stored_at > self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._expired(stored_at):
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any):
        """Store a value; expired entries are purged on every write."""
        self.purge_expired()
        self._entries[key] = (value, self._clock())

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        stale = [key for key, (_, stored_at) in self._entries.items() if self._expired(stored_at)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"Cache purged {len(stale)} expired entries")
        return len(stale)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self, key: str):
        self._entries.pop(key, None)

    def clear_all(self):
        self._entries.clear()

    async def get_or_fetch(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value or await the producer and store its result.

        Args:
            key: Cache key
            producer: Zero-arg coroutine function producing the value

        Returns:
            Cached or freshly produced value
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}, fetching...")
        value = await producer()
        self.set(key, value)
        return value
