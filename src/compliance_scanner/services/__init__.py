"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from compliance_scanner.services import AnalysisCacheService, AnalysisService

    cache = AnalysisCacheService.create(repository=repo)
    analysis = AnalysisService(cache=cache, analyzer=analyzer)
    ```
"""

from .analysis_service import AnalysisOutcome, AnalysisService, marketing_context_for
from .cache_service import AnalysisCacheService
from .sweeper import CacheSweeper

__all__ = [
    "AnalysisCacheService",
    "AnalysisOutcome",
    "AnalysisService",
    "CacheSweeper",
    "marketing_context_for",
]
