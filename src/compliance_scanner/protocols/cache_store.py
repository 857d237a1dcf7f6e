"""Analysis cache storage protocol.

Defines the interface for any key/value backend that can hold analysis
results with a per-entry time-to-live.

Implementations:
- In-process TTL map (default)
- Redis with native key expiry
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AnalysisCacheStore(Protocol):
    """Protocol for analysis cache backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. A miss is always reported as None,
    never as an exception.
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired.

        Args:
            key: The cache key

        Returns:
            The cached value or None
        """
        ...

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value, replacing any entry under the same key.

        Args:
            key: The cache key
            value: JSON-serializable value
            ttl: Time-to-live in seconds
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete a single entry.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def expire(self) -> int:
        """Drop entries whose TTL has elapsed.

        Returns:
            Number of entries removed
        """
        ...

    def count(self) -> int:
        """Count live entries.

        Returns:
            Number of unexpired entries
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def get_stats(self) -> dict:
        """Get backend statistics.

        Returns:
            Dictionary with count, hits, misses and approx_size_kb
        """
        ...
