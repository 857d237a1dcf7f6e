"""Compliance Scanner - AI compliance analysis with a TTL analysis cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (AnalysisCacheStore, ComplianceAnalyzer, AuthProvider)
    - repositories: Data access implementations
    - services: Business logic
    - session: Session state store and its middleware chain
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from compliance_scanner.repositories import InMemoryAnalysisCacheRepository
    from compliance_scanner.services import AnalysisCacheService

    cache = AnalysisCacheService.create(repository=InMemoryAnalysisCacheRepository.create())
    ```

For HTTP API:
    ```python
    from compliance_scanner.api.app import app
    ```
"""

__version__ = "0.1.0"

from compliance_scanner.config import get_redis_client, settings  # noqa: E402
from compliance_scanner.entities import AuthSession, CacheEntryEntity, User  # noqa: E402
from compliance_scanner.protocols import (  # noqa: E402
    AnalysisCacheStore,
    AuthProvider,
    AuthTokenSink,
    ComplianceAnalyzer,
)
from compliance_scanner.services import AnalysisCacheService, AnalysisService  # noqa: E402
from compliance_scanner.session import SessionStore  # noqa: E402

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "AnalysisCacheStore",
    "AuthProvider",
    "AuthTokenSink",
    "ComplianceAnalyzer",
    # Services (business logic)
    "AnalysisCacheService",
    "AnalysisService",
    # Session
    "SessionStore",
    # Entities (domain models)
    "AuthSession",
    "CacheEntryEntity",
    "User",
]
