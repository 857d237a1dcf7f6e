"""Repository layer for data access.

This layer abstracts external dependencies (Redis, AI APIs, the auth
provider, the outbound HTTP client) behind protocol-based interfaces.
This enables:
- Swapping implementations (memory -> Redis, OpenAI -> Gemini)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not
inheritance-based. Any class implementing the required methods will
satisfy the protocol.
"""

from compliance_scanner.protocols import AnalysisCacheStore, AuthProvider, ComplianceAnalyzer

from .api_client import ApiClient
from .gemini_analyzer import GeminiComplianceAnalyzer
from .memory_repository import InMemoryAnalysisCacheRepository
from .openai_analyzer import OpenAIComplianceAnalyzer
from .redis_repository import RedisAnalysisCacheRepository
from .supabase_auth_provider import SupabaseAuthProvider

__all__ = [
    "AnalysisCacheStore",
    "AuthProvider",
    "ComplianceAnalyzer",
    "ApiClient",
    "GeminiComplianceAnalyzer",
    "InMemoryAnalysisCacheRepository",
    "OpenAIComplianceAnalyzer",
    "RedisAnalysisCacheRepository",
    "SupabaseAuthProvider",
]
