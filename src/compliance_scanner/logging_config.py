"""Structured logging configuration.

Console logging through structlog on top of the standard library, with
a processor that masks tokens, API keys and passwords before rendering.
"""

import logging
import re
import sys
from typing import Any

import structlog

SENSITIVE_KEYS = {
    "token",
    "refresh_token",
    "access_token",
    "api_key",
    "apikey",
    "password",
    "authorization",
    "secret",
}

_BEARER_PATTERN = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9\-._~+/]+=*)")

MASK = "***MASKED***"


def mask_value(key: str, value: Any) -> Any:
    """Mask a single log field if its key or content looks sensitive.

    Args:
        key: The field name
        value: The field value

    Returns:
        The value, masked when sensitive
    """
    if key.lower() in SENSITIVE_KEYS and value is not None:
        return MASK
    if isinstance(value, dict):
        return {k: mask_value(str(k), v) for k, v in value.items()}
    if isinstance(value, str):
        return _BEARER_PATTERN.sub(rf"\1{MASK}", value)
    return value


def mask_sensitive_data(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor that masks sensitive values in the event dict."""
    return {key: mask_value(key, value) for key, value in event_dict.items()}


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # Quiet third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            mask_sensitive_data,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
