"""
Scheduling facility behind the countdown clock.

A `Ticker` invokes a callback repeatedly at a fixed interval until the
returned handle is cancelled. `ThreadingTicker` does it with a chain of
daemon ``threading.Timer`` objects; tests plug in a manual ticker instead.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Protocol

__all__ = ["Ticker", "TickHandle", "ThreadingTicker"]


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Ticker(Protocol):
    """Minimal protocol for periodic schedulers used by the countdown clock."""

    def schedule(self, interval: float, callback: Callable[[], None]) -> TickHandle: ...


class _RepeatingTimer:
    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self._interval = interval
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._cancelled = False
        self._deadline = time.monotonic()

    def start(self) -> None:
        with self._lock:
            self._schedule_next_unlocked()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _schedule_next_unlocked(self) -> None:
        if self._cancelled:
            return
        self._deadline += self._interval
        delay = max(0.0, self._deadline - time.monotonic())
        timer = threading.Timer(delay, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._schedule_next_unlocked()
        self._callback()


class ThreadingTicker:
    """Ticker backed by daemon ``threading.Timer`` threads."""

    def schedule(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        if interval <= 0:
            raise ValueError("interval must be a positive number of seconds")
        timer = _RepeatingTimer(interval, callback)
        timer.start()
        return timer
