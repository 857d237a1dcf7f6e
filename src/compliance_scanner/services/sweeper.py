"""Periodic expiry sweep for the analysis cache.

Lazy expiry only reclaims entries that are read again; the sweeper
reclaims the rest on a fixed interval independent of the TTL.
"""

import asyncio

from compliance_scanner.config import settings
from compliance_scanner.logging_config import get_logger

from .cache_service import AnalysisCacheService

logger = get_logger(__name__)


class CacheSweeper:
    """Background task calling ``AnalysisCacheService.sweep`` every interval.

    Example:
        ```python
        sweeper = CacheSweeper(cache_service)
        sweeper.start()      # inside a running event loop
        ...
        await sweeper.stop()
        ```
    """

    def __init__(self, cache_service: AnalysisCacheService, interval: float | None = None) -> None:
        """Initialize the sweeper.

        Args:
            cache_service: The cache to sweep.
            interval: Seconds between sweeps. Defaults to settings (120 s).
        """
        self._cache = cache_service
        self._interval = interval or settings.cache_check_period
        self._task: asyncio.Task | None = None

    async def run(self) -> None:
        """Sweep forever until cancelled."""
        while True:
            await asyncio.sleep(self._interval)
            removed = self._cache.sweep()
            if removed:
                logger.debug("expired cache entries swept", removed=removed)

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
