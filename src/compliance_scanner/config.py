import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Analysis cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")  # "memory" or "redis"
    cache_ttl: int = int(os.getenv("CACHE_TTL", "600"))  # 10 minutes default
    cache_check_period: int = int(os.getenv("CACHE_CHECK_PERIOD", "120"))
    # Unset means unbounded; see DESIGN.md
    cache_max_entries: int | None = _optional_int("CACHE_MAX_ENTRIES")
    cache_namespace: str = os.getenv("CACHE_NAMESPACE", "compliance_cache")

    # AI provider
    ai_provider: str = os.getenv("AI_PROVIDER", "openai")  # "openai" or "gemini"
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    # Supabase auth
    supabase_url: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    supabase_anon_key: str | None = os.getenv("SUPABASE_ANON_KEY")

    # Session
    session_timeout_minutes: int = int(os.getenv("SESSION_TIMEOUT_MINUTES", "30"))
    session_persist_key: str = os.getenv("SESSION_PERSIST_KEY", "persist:compliance-scanner")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"
    admin_api_key: str | None = os.getenv("ADMIN_API_KEY")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_redis_backend(self) -> bool:
        """Check if the analysis cache should live in Redis.

        Returns:
            True if CACHE_BACKEND is "redis", False otherwise
        """
        return self.cache_backend.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend.lower() not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.cache_check_period <= 0:
            raise ValueError("CACHE_CHECK_PERIOD must be a positive number of seconds")

        if self.cache_max_entries is not None and self.cache_max_entries <= 0:
            raise ValueError("CACHE_MAX_ENTRIES must be positive when set")

        if self.ai_provider.lower() not in ("openai", "gemini"):
            raise ValueError(f"AI_PROVIDER must be 'openai' or 'gemini', got {self.ai_provider!r}")

        if self.session_timeout_minutes <= 0:
            raise ValueError("SESSION_TIMEOUT_MINUTES must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
