import time
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from compliance_scanner import __version__
from compliance_scanner.config import settings
from compliance_scanner.dto import (
    AnalyzeRequest,
    AnalyzeResponse,
    CacheClearResponse,
    CacheDeleteResponse,
    CacheStatsResponse,
    HealthCheckResponse,
)
from compliance_scanner.handlers.cache_handler import stats_to_dto
from compliance_scanner.protocols import AnalysisCacheStore, ComplianceAnalyzer

from .dependencies import (
    AnalysisHandlerDep,
    CacheHandlerDep,
    CacheServiceDep,
    build_lifespan,
    verify_admin_key,
)


def create_app(
    repository: AnalysisCacheStore | None = None,
    analyzer: ComplianceAnalyzer | None = None,
    admin_api_key: str | None = None,
    sweep_interval: float | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        repository: Cache backend. If None, chosen from settings.
        analyzer: AI provider. If None, chosen from settings.
        admin_api_key: Key required on admin routes. If None, uses settings.
        sweep_interval: Seconds between expiry sweeps. If None, uses settings.
    """
    app = FastAPI(
        title="Compliance Scanner API",
        description="Compliance analysis service with a TTL analysis cache",
        version=__version__,
        lifespan=build_lifespan(repository, analyzer, sweep_interval),
    )
    app.state.admin_api_key = admin_api_key or settings.admin_api_key

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Compliance Scanner API",
            "version": __version__,
            "description": "Compliance analysis service with a TTL analysis cache",
            "endpoints": {
                "analysis": "/analysis",
                "cache": "/admin/cache",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(request: Request, cache: CacheServiceDep) -> HealthCheckResponse:
        """Health check endpoint."""
        cache_healthy = cache.is_healthy()
        analyzer_available = await request.app.state.analyzer.is_available()
        return HealthCheckResponse(
            status="healthy" if cache_healthy and analyzer_available else "degraded",
            cache_healthy=cache_healthy,
            analyzer_available=analyzer_available,
            uptime_seconds=time.monotonic() - request.app.state.started_at,
            cache=stats_to_dto(cache.stats()) if cache_healthy else None,
        )

    @app.post("/analysis", response_model=AnalyzeResponse)
    async def analyze(request: AnalyzeRequest, handler: AnalysisHandlerDep) -> AnalyzeResponse:
        """Analyze a document, serving identical requests from the cache."""
        return await handler.analyze(request)

    @app.get(
        "/admin/cache",
        response_model=CacheStatsResponse,
        dependencies=[Depends(verify_admin_key)],
    )
    async def cache_stats(handler: CacheHandlerDep) -> CacheStatsResponse:
        """Cache statistics."""
        return await handler.get_stats()

    @app.delete(
        "/admin/cache",
        response_model=CacheClearResponse,
        dependencies=[Depends(verify_admin_key)],
    )
    async def clear_cache(handler: CacheHandlerDep) -> CacheClearResponse:
        """Drop every cached analysis (e.g. after a guideline update)."""
        return await handler.clear_cache()

    @app.delete(
        "/admin/cache/{key:path}",
        response_model=CacheDeleteResponse,
        dependencies=[Depends(verify_admin_key)],
    )
    async def delete_cache_entry(key: str, handler: CacheHandlerDep) -> CacheDeleteResponse:
        """Drop one cached analysis."""
        return await handler.delete_entry(key)

    return app


app = create_app()


def main() -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "compliance_scanner.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
