"""One-shot timer scheduling protocol used for token refresh."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        ...


@runtime_checkable
class RefreshScheduler(Protocol):
    """Runs callbacks after a delay, off the dispatch path."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule callback to run once after delay seconds.

        Args:
            delay: Seconds to wait (0 runs as soon as possible)
            callback: Zero-argument callable

        Returns:
            Handle that cancels the pending call
        """
        ...
