"""Utility modules for the compliance scanner."""

from .cache_keys import analysis_key, hash_text, simple_key

__all__ = [
    "analysis_key",
    "hash_text",
    "simple_key",
]
