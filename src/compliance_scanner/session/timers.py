"""Thread-backed implementation of RefreshScheduler."""

import threading
from collections.abc import Callable


class ThreadingRefreshScheduler:
    """Runs each callback on a daemon ``threading.Timer``.

    ``threading.Timer`` already satisfies the TimerHandle protocol, so
    the timer itself is returned as the handle.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(delay, 0.0), callback)
        timer.daemon = True
        timer.start()
        return timer
