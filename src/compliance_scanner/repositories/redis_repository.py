"""Redis implementation of AnalysisCacheStore.

Entries are stored as JSON strings under ``<namespace>:<key>`` with a
native Redis expiry, so they are shared by every API worker and expire
without a sweep.
"""

import json
from typing import Any

import redis

from compliance_scanner.config import get_redis_client, settings
from compliance_scanner.logging_config import get_logger

logger = get_logger(__name__)


class RedisAnalysisCacheRepository:
    """Redis-backed analysis cache.

    This class satisfies the AnalysisCacheStore protocol through
    structural typing - no explicit inheritance needed.

    Hit and miss counters are kept per process, matching the in-memory
    backend's "since process start" semantics.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            namespace: Key prefix isolating this cache. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or settings.cache_namespace
        self._hits = 0
        self._misses = 0

    @classmethod
    def create(cls, namespace: str | None = None) -> "RedisAnalysisCacheRepository":
        """Factory method to create RedisAnalysisCacheRepository with defaults.

        Args:
            namespace: Key prefix. If None, uses settings.

        Returns:
            Configured RedisAnalysisCacheRepository
        """
        return cls(namespace=namespace)

    def _storage_key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def _scan(self):
        return self._client.scan_iter(match=f"{self._namespace}:*")

    def get(self, key: str) -> Any | None:
        raw = self._client.get(self._storage_key(key))
        if raw is None:
            self._misses += 1
            return None

        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("discarding unreadable cache entry", key=key)
            self._client.delete(self._storage_key(key))
            self._misses += 1
            return None

        self._hits += 1
        return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        # SET with EX replaces both the value and the expiry
        self._client.set(self._storage_key(key), json.dumps(value, default=str), ex=ttl)

    def delete(self, key: str) -> bool:
        result: int = self._client.delete(self._storage_key(key))  # type: ignore[assignment]
        return result > 0

    def clear(self) -> int:
        count = 0
        for storage_key in self._scan():
            if self._client.delete(storage_key):
                count += 1
        return count

    def expire(self) -> int:
        # Redis evicts expired keys itself
        return 0

    def count(self) -> int:
        return sum(1 for _ in self._scan())

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with count, hits, misses and approx_size_kb
        """
        count = 0
        size_bytes = 0
        for storage_key in self._scan():
            count += 1
            size_bytes += int(self._client.strlen(storage_key) or 0)

        return {
            "backend": "redis",
            "namespace": self._namespace,
            "count": count,
            "hits": self._hits,
            "misses": self._misses,
            "approx_size_kb": round(size_bytes / 1024),
        }

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
