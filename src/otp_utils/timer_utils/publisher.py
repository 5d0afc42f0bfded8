"""
Event fan-out used by the countdown clock and the OTP event stream.

Handlers subscribe to an `EventPublisher` and get back a `Subscription`;
cancelling the last one fires the optional ``on_empty`` hook.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")
Handler = Callable[[E], None]


class Subscription(Generic[E]):
    """Handle returned by `EventPublisher.subscribe`; cancel to stop receiving events."""

    def __init__(self, publisher: "EventPublisher[E]", handler: Handler) -> None:
        self._publisher: Optional[EventPublisher[E]] = publisher
        self._handler: Optional[Handler] = handler

    @property
    def active(self) -> bool:
        return self._publisher is not None

    def cancel(self) -> None:
        publisher, self._publisher = self._publisher, None
        if publisher is not None:
            publisher._remove(self)
        self._handler = None

    def __enter__(self) -> "Subscription[E]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def _deliver(self, event: E) -> None:
        handler = self._handler
        if handler is not None:
            handler(event)


class EventPublisher(Generic[E]):
    """Fan-out of events to zero or more handlers."""

    def __init__(self, on_empty: Optional[Callable[[], None]] = None) -> None:
        self._subscriptions: List[Subscription[E]] = []
        self._lock = threading.Lock()
        self._on_empty = on_empty

    def subscribe(self, handler: Handler) -> Subscription[E]:
        subscription = Subscription(self, handler)
        with self._lock:
            self._subscriptions.append(subscription)
            count = len(self._subscriptions)
        logger.debug(f"Subscriber added ({count} active)")
        return subscription

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: E) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            if not subscription.active:
                continue
            try:
                subscription._deliver(event)
            except Exception:
                logger.exception(f"Subscriber failed handling {type(event).__name__}")

    def clear(self) -> None:
        with self._lock:
            subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._publisher = None
            subscription._handler = None

    def _remove(self, subscription: Subscription[E]) -> None:
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                return
            now_empty = not self._subscriptions
            count = len(self._subscriptions)
        logger.debug(f"Subscriber removed ({count} active)")
        if now_empty and self._on_empty is not None:
            self._on_empty()
