"""
Tests for settings validation and log masking.
"""

import pytest

from compliance_scanner.config import Settings
from compliance_scanner.logging_config import MASK, mask_sensitive_data, mask_value


def test_defaults():
    settings = Settings(cache_ttl=600, cache_check_period=120, session_timeout_minutes=30)
    assert settings.cache_ttl == 600
    assert settings.session_timeout_minutes == 30


@pytest.mark.parametrize(
    "overrides",
    [
        {"cache_backend": "memcached"},
        {"cache_ttl": 0},
        {"cache_check_period": -1},
        {"cache_max_entries": 0},
        {"ai_provider": "llama"},
        {"session_timeout_minutes": 0},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        Settings(**overrides)


def test_redis_backend_flag():
    assert Settings(cache_backend="REDIS").is_redis_backend is True
    assert Settings(cache_backend="memory").is_redis_backend is False


def test_sensitive_fields_are_masked():
    event = mask_sensitive_data(
        None,
        "info",
        {"event": "login", "token": "abc", "password": "pw", "email": "a@example.com"},
    )
    assert event["token"] == MASK
    assert event["password"] == MASK
    assert event["email"] == "a@example.com"


def test_bearer_values_and_nested_dicts_are_masked():
    assert mask_value("header", "Bearer abc.def") == f"Bearer {MASK}"
    assert mask_value("payload", {"api_key": "k", "n": 1}) == {"api_key": MASK, "n": 1}
    assert mask_value("token", None) is None
