"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the analysis cache backend (memory -> Redis)
- Swapping the AI provider (OpenAI -> Gemini)
- Unit testing with fake auth providers, token sinks and schedulers

Usage:
    ```python
    from compliance_scanner.protocols import AnalysisCacheStore

    store: AnalysisCacheStore = InMemoryAnalysisCacheRepository()  # works
    store: AnalysisCacheStore = RedisAnalysisCacheRepository()     # also works
    ```
"""

from .analyzer import ComplianceAnalyzer
from .auth_provider import AuthProvider, AuthTokenSink, SessionGrant
from .cache_store import AnalysisCacheStore
from .scheduler import RefreshScheduler, TimerHandle

__all__ = [
    "AnalysisCacheStore",
    "AuthProvider",
    "AuthTokenSink",
    "ComplianceAnalyzer",
    "RefreshScheduler",
    "SessionGrant",
    "TimerHandle",
]
