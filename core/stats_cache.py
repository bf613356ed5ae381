"""
Time-windowed cache for statistics results.

Keys are tuples of (query name, period_start, period_end, scope), where
scope is e.g. a department id or None. Entries expire after a TTL.

Staleness:
    Recording a new job does NOT refresh cached windows that contain it
    unless the caller invalidates explicitly (invalidate(timestamp)).
    Windows ending "now" should therefore use a short TTL.

Thread Safety:
    - All operations take a threading.Lock
    - Two threads missing the same key may both compute it; results for
      identical inputs are identical, so the second put() is just wasted work
"""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

CacheKey = Tuple[Hashable, ...]


def make_key(
    name: str,
    period_start: datetime,
    period_end: datetime,
    scope: Optional[Hashable] = None
) -> CacheKey:
    """Build the cache key for one statistics query."""
    return (name, period_start, period_end, scope)


class StatisticsCache:
    """
    TTL cache keyed by query window.

    Attributes:
        ttl_seconds: Default lifetime of an entry
        hits / misses: Counters for the health endpoint
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize an empty cache.

        Args:
            ttl_seconds: Default entry lifetime (0 disables caching)
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[Any]:
        """
        Return the cached value for a key, or None if absent or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                expires_at, value = entry
                if self._clock() < expires_at:
                    self.hits += 1
                    logger.debug(f"Cache hit: {key[0]} {key[1]} - {key[2]}")
                    return value
                del self._entries[key]
            self.misses += 1
            logger.debug(f"Cache miss: {key[0]} {key[1]} - {key[2]}")
            return None

    def put(self, key: CacheKey, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key from make_key()
            value: Immutable result to share between readers
            ttl_seconds: Override the default lifetime
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            return
        with self._lock:
            now = self._clock()
            # Open-ended windows rarely repeat a key; drop dead entries as we go
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + ttl, value)

    def invalidate(self, timestamp: datetime) -> int:
        """
        Drop every entry whose window contains a timestamp.

        Args:
            timestamp: Time of a newly recorded job

        Returns:
            Number of entries removed
        """
        with self._lock:
            stale = [
                key for key in self._entries
                if key[1] <= timestamp < key[2]
            ]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached windows containing {timestamp}")
        return len(stale)

    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cached statistics")
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
