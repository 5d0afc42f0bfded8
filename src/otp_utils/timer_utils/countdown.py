"""
Countdown clock for TOTP windows.

While running, the clock reads the time on every tick and publishes either
`WindowChanged` (first tick after `start()`, or the step window moved) or
`Tick`, each carrying the seconds left before the next step boundary.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
import weakref
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from ..encode_utils.totp import DEFAULT_TIME_STEP, check_time_step
from .publisher import EventPublisher, Subscription
from .ticker import ThreadingTicker, TickHandle, Ticker

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class CountdownEvent:
    seconds_remaining: float
    timestamp: float

    @property
    def value(self) -> float:
        return self.seconds_remaining

    def map_value(self, func: Callable[[float], float]) -> "CountdownEvent":
        """Return a copy of the same event type with ``func`` applied to the countdown."""
        return dataclasses.replace(self, seconds_remaining=func(self.seconds_remaining))


@dataclass(frozen=True)
class WindowChanged(CountdownEvent):
    """First tick of a new step window."""


@dataclass(frozen=True)
class Tick(CountdownEvent):
    """Tick inside the window already announced."""


def countdown_for(timestamp: Number, time_step: int) -> Tuple[int, float]:
    """
    Return ``(window, seconds_remaining)`` for an epoch timestamp.

    A timestamp exactly on a step boundary opens the next window with a full
    ``time_step`` remaining.
    """
    window = int(timestamp // time_step)
    return window, time_step - (timestamp % time_step)


class CountdownClock:
    """Ticking state machine that reports the countdown to the next step boundary."""

    def __init__(
        self,
        time_step: int = DEFAULT_TIME_STEP,
        interval: float = 1.0,
        time_source: Callable[[], float] = time.time,
        ticker: Optional[Ticker] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be a positive number of seconds")
        self.time_step = check_time_step(time_step)
        self.interval = interval
        self.time_source = time_source
        self._ticker: Ticker = ticker or ThreadingTicker()
        self._publisher: EventPublisher[CountdownEvent] = EventPublisher()
        self._state_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._handle: Optional[TickHandle] = None
        self._run_id = 0
        self._last_window: Optional[int] = None

    @property
    def is_running(self) -> bool:
        with self._state_lock:
            return self._handle is not None

    def subscribe(self, handler: Callable[[CountdownEvent], None]) -> Subscription[CountdownEvent]:
        return self._publisher.subscribe(handler)

    def start(self) -> None:
        with self._state_lock:
            if self._handle is not None:
                return
            self._run_id += 1
            self._last_window = None
            run_id = self._run_id
            # the ticker only holds a weak reference so a dropped clock gets finalized
            self._handle = self._ticker.schedule(self.interval, _tick_callback(self, run_id))
        logger.debug(f"Countdown clock started: step={self.time_step}s interval={self.interval}s")

    def stop(self) -> None:
        with self._state_lock:
            handle, self._handle = self._handle, None
            self._last_window = None
        if handle is None:
            return
        handle.cancel()
        logger.debug("Countdown clock stopped")

    def __enter__(self) -> "CountdownClock":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def __del__(self) -> None:
        handle = getattr(self, "_handle", None)
        if handle is not None:
            handle.cancel()

    def _is_current(self, run_id: int) -> bool:
        with self._state_lock:
            return self._handle is not None and run_id == self._run_id

    def _tick(self, run_id: int) -> None:
        # a firing that overlaps a slow one is dropped
        if not self._tick_lock.acquire(blocking=False):
            return
        try:
            if not self._is_current(run_id):
                return
            # stop() must not wait on the time source
            now = self.time_source()
            with self._state_lock:
                if self._handle is None or run_id != self._run_id:
                    return
                window, remaining = countdown_for(now, self.time_step)
                changed = self._last_window is None or window != self._last_window
                self._last_window = window
            if changed:
                logger.debug(f"Countdown window changed: window={window}")
                event: CountdownEvent = WindowChanged(remaining, now)
            else:
                event = Tick(remaining, now)
            self._publisher.publish(event)
        finally:
            self._tick_lock.release()


def _tick_callback(clock: CountdownClock, run_id: int) -> Callable[[], None]:
    clock_ref = weakref.ref(clock)

    def callback() -> None:
        target = clock_ref()
        if target is not None:
            target._tick(run_id)

    return callback
