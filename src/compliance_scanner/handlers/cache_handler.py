"""HTTP handlers for cache administration.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error responses.
"""

from fastapi import HTTPException, status

from compliance_scanner.dto import CacheClearResponse, CacheDeleteResponse, CacheStatsResponse
from compliance_scanner.logging_config import get_logger
from compliance_scanner.services import AnalysisCacheService

logger = get_logger(__name__)


def stats_to_dto(stats: dict) -> CacheStatsResponse:
    return CacheStatsResponse(
        backend=stats.get("backend", "memory"),
        keys=stats.get("count", 0),
        hits=stats.get("hits", 0),
        misses=stats.get("misses", 0),
        size_kb=stats.get("approx_size_kb", 0),
        ttl_seconds=stats.get("default_ttl", 0),
        max_entries=stats.get("max_entries"),
    )


class CacheHandler:
    """HTTP handlers for the analysis cache admin routes.

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        @app.get("/admin/cache", response_model=CacheStatsResponse)
        async def cache_stats():
            return await handler.get_stats()
        ```
    """

    def __init__(self, cache_service: AnalysisCacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The analysis cache (required).
        """
        self._cache = cache_service

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /admin/cache requests.

        Raises:
            HTTPException: If the backend cannot report stats
        """
        try:
            return stats_to_dto(self._cache.stats())
        except Exception as e:
            logger.exception("cache stats failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    async def clear_cache(self) -> CacheClearResponse:
        """Handle DELETE /admin/cache requests."""
        try:
            count = self._cache.clear()
        except Exception as e:
            logger.exception("cache clear failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear cache: {e}",
            ) from e

        return CacheClearResponse(
            success=True,
            deleted_count=count,
            message="Cache cleared successfully",
        )

    async def delete_entry(self, key: str) -> CacheDeleteResponse:
        """Handle DELETE /admin/cache/{key} requests.

        Raises:
            HTTPException: 404 if no live entry exists under key
        """
        if not self._cache.delete(key):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No cache entry for key: {key}",
            )
        logger.info("cache entry deleted", key=key)
        return CacheDeleteResponse(success=True, key=key)
