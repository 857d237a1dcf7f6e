"""Analysis cache service.

Wraps an AnalysisCacheStore with the store-wide default TTL and the
cache contract used by request handlers: get, set, delete, clear, stats.
"""

from typing import Any

from compliance_scanner.config import settings
from compliance_scanner.logging_config import get_logger
from compliance_scanner.protocols import AnalysisCacheStore
from compliance_scanner.utils import analysis_key

logger = get_logger(__name__)


class AnalysisCacheService:
    """Process-wide analysis cache.

    This service depends on the AnalysisCacheStore PROTOCOL, not a
    concrete backend, and is injected into handlers through app.state
    rather than living in a module global.

    Example:
        ```python
        from compliance_scanner.repositories import InMemoryAnalysisCacheRepository
        from compliance_scanner.services import AnalysisCacheService

        cache = AnalysisCacheService.create(repository=InMemoryAnalysisCacheRepository())
        key = cache.key_for("document text", marketing=True)
        cache.set(key, {"complianceScore": 90})
        cache.get(key)  # {"complianceScore": 90}
        ```
    """

    def __init__(self, repository: AnalysisCacheStore, default_ttl: int | None = None) -> None:
        """Initialize the cache service.

        Args:
            repository: Cache storage backend (required).
            default_ttl: TTL applied when set() gets none. Defaults to settings (600 s).
        """
        self._repository = repository
        self._default_ttl = default_ttl or settings.cache_ttl

    @classmethod
    def create(
        cls,
        repository: AnalysisCacheStore,
        default_ttl: int | None = None,
    ) -> "AnalysisCacheService":
        """Factory method to create AnalysisCacheService with sensible defaults.

        Args:
            repository: Cache storage backend (required).
            default_ttl: Default TTL in seconds. If None, uses settings.

        Returns:
            Configured AnalysisCacheService
        """
        return cls(repository=repository, default_ttl=default_ttl)

    @staticmethod
    def key_for(text_or_id: str, marketing: bool = False, context: str | None = None) -> str:
        """Build the cache key for an analysis request."""
        return analysis_key(text_or_id, marketing=marketing, context=context)

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss.

        A miss is never an error; the caller computes and stores the value.
        """
        value = self._repository.get(key)
        logger.debug("cache lookup", key=key, hit=value is not None)
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store a value, overwriting any entry and resetting its expiry.

        Args:
            key: The cache key
            value: JSON-serializable value
            ttl: Lifetime in seconds. Defaults to the store-wide TTL.
        """
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        self._repository.set(key, value, ttl or self._default_ttl)

    def delete(self, key: str) -> bool:
        """Delete one entry.

        Returns:
            True if an entry was removed, False otherwise
        """
        return self._repository.delete(key)

    def clear(self) -> int:
        """Remove every entry (e.g. after a guideline update).

        Returns:
            Number of entries removed
        """
        removed = self._repository.clear()
        logger.info("analysis cache cleared", removed=removed)
        return removed

    def sweep(self) -> int:
        """Drop expired entries nobody has re-read.

        Returns:
            Number of entries removed
        """
        return self._repository.expire()

    def stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with count, hits, misses, approx_size_kb and default_ttl
        """
        stats = self._repository.get_stats()
        stats["default_ttl"] = self._default_ttl
        return stats

    def is_healthy(self) -> bool:
        return self._repository.health_check()

    @property
    def default_ttl(self) -> int:
        """Get the store-wide default TTL in seconds."""
        return self._default_ttl

    @property
    def repository(self) -> AnalysisCacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository
