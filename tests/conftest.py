"""Shared fixtures: a manually driven ticker and stepping time sources."""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest


class ManualHandle:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback: Optional[Callable[[], None]] = callback
        self.cancel_count = 0

    @property
    def cancelled(self) -> bool:
        return self.callback is None

    def cancel(self) -> None:
        self.cancel_count += 1
        self.callback = None


class ManualTicker:
    """Ticker whose firings happen only when the test calls `advance`."""

    def __init__(self) -> None:
        self.handles: List[ManualHandle] = []
        self.intervals: List[float] = []

    def schedule(self, interval: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback)
        self.handles.append(handle)
        self.intervals.append(interval)
        return handle

    @property
    def active(self) -> List[ManualHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            for handle in self.active:
                callback = handle.callback
                if callback is not None:
                    callback()


class SteppingTime:
    """Time source returning ``start``, ``start + step``, ... on successive calls."""

    def __init__(self, start: float, step: float = 1.0) -> None:
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> float:
        value = self.current
        self.current += self.step
        self.calls += 1
        return value


@pytest.fixture
def manual_ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def stepping_time() -> Callable[..., SteppingTime]:
    return SteppingTime
