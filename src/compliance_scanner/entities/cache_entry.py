"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached analysis result.

    Attributes:
        key: The fingerprint the result is stored under
        value: The cached result (JSON-serializable)
        inserted_at: Timer reading when the entry was written
        ttl_seconds: Lifetime of the entry
    """

    key: str
    value: Any
    inserted_at: float
    ttl_seconds: int

    @property
    def expires_at(self) -> float:
        return self.inserted_at + self.ttl_seconds

    def is_expired(self, now: float) -> bool:
        """An entry is stale once now reaches inserted_at + ttl."""
        return now >= self.expires_at
