"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import AnalyzeRequest
from .responses import (
    AnalyzeResponse,
    CacheClearResponse,
    CacheDeleteResponse,
    CacheStatsResponse,
    HealthCheckResponse,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "CacheClearResponse",
    "CacheDeleteResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
