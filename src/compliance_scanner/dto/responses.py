"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field

from compliance_scanner.models import ComplianceAnalysis


class AnalyzeResponse(BaseModel):
    """Response DTO for an analysis request."""

    key: str = Field(..., description="Cache key the result is stored under")
    cache_used: bool = Field(..., description="Whether the result was served from the cache")
    processing_time_ms: float = Field(..., description="Time taken to serve the request in milliseconds")
    result: ComplianceAnalysis = Field(..., description="The compliance analysis")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    backend: str = Field(..., description="Cache backend: 'memory' or 'redis'")
    keys: int = Field(..., description="Number of live entries", ge=0)
    hits: int = Field(..., description="Hits since process start", ge=0)
    misses: int = Field(..., description="Misses since process start", ge=0)
    size_kb: int = Field(..., description="Approximate payload size in KB", ge=0)
    ttl_seconds: int = Field(..., description="Default time-to-live in seconds", ge=0)
    max_entries: int | None = Field(None, description="Capacity bound, if any")


class CacheClearResponse(BaseModel):
    """Response DTO for clearing the cache."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheDeleteResponse(BaseModel):
    """Response DTO for deleting one entry."""

    success: bool = Field(..., description="Whether the operation succeeded")
    key: str = Field(..., description="The deleted key")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    analyzer_available: bool = Field(..., description="Whether an AI provider is configured")
    uptime_seconds: float = Field(..., description="Seconds since the API started", ge=0)
    cache: CacheStatsResponse | None = Field(None, description="Cache statistics")
