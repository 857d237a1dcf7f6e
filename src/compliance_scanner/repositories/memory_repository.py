"""In-process implementation of AnalysisCacheStore.

Backed by cachetools' TLRUCache so every entry carries its own TTL.
Expired entries are dropped lazily on read, and in bulk by ``expire()``
which the background sweeper calls on a fixed period.
"""

import json
import math
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

from compliance_scanner.config import settings
from compliance_scanner.entities import CacheEntryEntity
from compliance_scanner.logging_config import get_logger

logger = get_logger(__name__)


def _time_to_use(key: str, entry: CacheEntryEntity, now: float) -> float:
    return now + entry.ttl_seconds


class InMemoryAnalysisCacheRepository:
    """Process-local TTL map.

    This class satisfies the AnalysisCacheStore protocol through
    structural typing - no explicit inheritance needed.

    All reads and writes go through one lock guarding the whole map, so
    the repository is safe to share between FastAPI's worker threads and
    the sweeper.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory repository.

        Args:
            max_entries: Capacity bound. None means unbounded; when set,
                the least recently used live entry is evicted first.
            timer: Monotonic clock in seconds (injectable for tests).
        """
        self._timer = timer
        self._max_entries = max_entries
        self._cache: TLRUCache = TLRUCache(
            maxsize=max_entries if max_entries is not None else math.inf,
            ttu=_time_to_use,
            timer=timer,
        )
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @classmethod
    def create(cls, max_entries: int | None = None) -> "InMemoryAnalysisCacheRepository":
        """Factory method using settings for the capacity bound.

        Args:
            max_entries: Capacity bound. If None, uses settings.

        Returns:
            Configured InMemoryAnalysisCacheRepository
        """
        max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        if max_entries is None:
            logger.warning(
                "analysis cache has no capacity bound",
                hint="set CACHE_MAX_ENTRIES to cap memory use",
            )
        return cls(max_entries=max_entries)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry: CacheEntryEntity | None = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: int) -> None:
        entry = CacheEntryEntity(key=key, value=value, inserted_at=self._timer(), ttl_seconds=ttl)
        with self._lock:
            self._cache[key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            # Expired entries count as absent
            if key not in self._cache:
                return False
            del self._cache[key]
            return True

    def clear(self) -> int:
        with self._lock:
            removed = len(self._cache)
            self._cache.clear()
            return removed

    def expire(self) -> int:
        with self._lock:
            return len(self._cache.expire())

    def count(self) -> int:
        with self._lock:
            return len(self._cache)

    def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with count, hits, misses and approx_size_kb
        """
        # Freeze the cache timer so nothing expires mid-iteration
        with self._lock, self._cache.timer:
            self._cache.expire()
            size_bytes = sum(
                len(json.dumps(entry.value, default=str)) for entry in self._cache.values()
            )
            return {
                "backend": "memory",
                "count": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "approx_size_kb": round(size_bytes / 1024),
                "max_entries": self._max_entries,
            }
