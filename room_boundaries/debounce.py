"""
Cancellable delayed call used to coalesce bursts of scene-change events.
"""

import threading
from typing import Callable, Optional


class DebouncedCall:
    """
    Run `func` once, `delay` seconds after the last schedule() call.

    Each schedule() cancels the pending timer and starts a new one
    (last call wins, nothing is queued).
    """

    def __init__(self, func: Callable[[], object], delay: float = 1.0):
        if delay < 0:
            raise ValueError("delay must not be negative")
        self._func = func
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._func)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        pending = timer.is_alive()
        timer.cancel()
        return pending

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the latest scheduled call to run or be cancelled."""
        with self._lock:
            timer = self._timer
        if timer is not None:
            timer.join(timeout)
