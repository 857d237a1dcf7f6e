"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import time
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from compliance_scanner.config import settings
from compliance_scanner.handlers import AnalysisHandler, CacheHandler
from compliance_scanner.logging_config import get_logger, setup_logging
from compliance_scanner.protocols import AnalysisCacheStore, ComplianceAnalyzer
from compliance_scanner.repositories import (
    GeminiComplianceAnalyzer,
    InMemoryAnalysisCacheRepository,
    OpenAIComplianceAnalyzer,
    RedisAnalysisCacheRepository,
)
from compliance_scanner.services import AnalysisCacheService, AnalysisService, CacheSweeper

logger = get_logger(__name__)

admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


def build_repository() -> AnalysisCacheStore:
    """Create the cache backend selected by CACHE_BACKEND."""
    if settings.is_redis_backend:
        return RedisAnalysisCacheRepository.create()
    return InMemoryAnalysisCacheRepository.create()


def build_analyzer() -> ComplianceAnalyzer:
    """Create the AI provider selected by AI_PROVIDER."""
    if settings.ai_provider.lower() == "gemini":
        return GeminiComplianceAnalyzer.create()
    return OpenAIComplianceAnalyzer.create()


def get_cache_service(request: Request) -> AnalysisCacheService:
    """Dependency injection for AnalysisCacheService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise RuntimeError("AnalysisCacheService not initialized. Check lifespan setup.")
    return service


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_analysis_handler(request: Request) -> AnalysisHandler:
    """Dependency injection for AnalysisHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "analysis_handler", None)
    if handler is None:
        raise RuntimeError("AnalysisHandler not initialized. Check lifespan setup.")
    return handler


def verify_admin_key(request: Request, api_key: str | None = Security(admin_key_header)) -> None:
    """Require X-Admin-Key on admin routes.

    With no key configured every request is allowed (development mode).

    Raises:
        HTTPException: 401 if the key is missing or wrong
    """
    expected_key = getattr(request.app.state, "admin_api_key", None)
    if not expected_key:
        return

    if not api_key or api_key != expected_key:
        logger.warning("rejected admin request", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )


def build_lifespan(
    repository: AnalysisCacheStore | None = None,
    analyzer: ComplianceAnalyzer | None = None,
    sweep_interval: float | None = None,
):
    """Build the lifespan context manager for the FastAPI app.

    Args:
        repository: Cache backend. If None, chosen from settings.
        analyzer: AI provider. If None, chosen from settings.
        sweep_interval: Seconds between expiry sweeps. If None, uses settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Repository (data access) and analyzer
        2. Services stored in app.state.cache_service / analysis_service
        3. Handlers stored in app.state.cache_handler / analysis_handler
        4. The expiry sweeper, cancelled on shutdown
        """
        setup_logging(settings.log_level)

        cache_repository = repository or build_repository()
        cache_analyzer = analyzer or build_analyzer()

        cache_service = AnalysisCacheService.create(repository=cache_repository)
        analysis_service = AnalysisService(cache=cache_service, analyzer=cache_analyzer)
        sweeper = CacheSweeper(cache_service, interval=sweep_interval)

        app.state.cache_service = cache_service
        app.state.analysis_service = analysis_service
        app.state.analyzer = cache_analyzer
        app.state.cache_handler = CacheHandler(cache_service=cache_service)
        app.state.analysis_handler = AnalysisHandler(analysis_service=analysis_service)
        app.state.sweeper = sweeper
        app.state.started_at = time.monotonic()

        sweeper.start()
        logger.info(
            "compliance API started",
            cache_backend=cache_repository.get_stats().get("backend"),
            cache_ttl=cache_service.default_ttl,
            analyzer=cache_analyzer.model_name,
            cache_healthy=cache_service.is_healthy(),
        )

        yield

        await sweeper.stop()
        close = getattr(cache_analyzer, "close", None)
        if close is not None:
            await close()

        del app.state.analysis_handler
        del app.state.cache_handler
        del app.state.analysis_service
        del app.state.cache_service
        del app.state.analyzer
        del app.state.sweeper
        logger.info("compliance API shut down")

    return lifespan


# Type aliases for cleaner dependency injection
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
AnalysisHandlerDep = Annotated[AnalysisHandler, Depends(get_analysis_handler)]
CacheServiceDep = Annotated[AnalysisCacheService, Depends(get_cache_service)]
