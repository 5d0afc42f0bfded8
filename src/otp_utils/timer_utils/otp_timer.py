"""
Event stream of countdowns and code changes for a TOTP provider.

`OTPEventStream` listens to a `CountdownClock` and turns its events into
`CodeChanged` (the window moved, a new code is computed) or `Countdown`
(same window, no code computed). The clock runs while the stream has at
least one subscriber, or between explicit `start()` and `stop()` calls.

Example:
    stream = OTPEventStream.from_seed(Seed.base32("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"))

    def show(event):
        if isinstance(event, CodeChanged):
            print(f"code {event.code}, valid for {event.seconds_remaining:.0f}s")
        else:
            print(f"{event.seconds_remaining:.0f}s left")

    subscription = stream.subscribe(show)
    ...
    subscription.cancel()  # last subscriber gone, the clock stops
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from ..encode_utils.crypto_helper import HashAlgorithm
from ..encode_utils.hotp import MIN_DIGITS
from ..encode_utils.seed import SeedLike
from ..encode_utils.totp import DEFAULT_TIME_STEP, Instant, TOTPGenerator, to_epoch_seconds
from .countdown import CountdownClock, CountdownEvent, WindowChanged
from .publisher import EventPublisher, Subscription
from .ticker import Ticker

logger = logging.getLogger(__name__)


class OTPProvider(Protocol):
    """Anything that can tell the code at an instant and its window width."""

    @property
    def time_step(self) -> int: ...

    def at(self, for_time: float) -> str: ...


@dataclass(frozen=True)
class Countdown:
    seconds_remaining: float


@dataclass(frozen=True)
class CodeChanged:
    code: str
    seconds_remaining: float


OTPEvent = Union[Countdown, CodeChanged]


def shifted_time_source(
    starting_at: Instant, time_source: Callable[[], float] = time.time
) -> Callable[[], float]:
    """
    Time source that reads ``starting_at`` now and advances with ``time_source``.

    The offset is fixed when this is called, so the shifted clock keeps
    counting real elapsed time from the chosen starting instant.
    """
    start = to_epoch_seconds(starting_at)
    base = time_source()

    def now() -> float:
        return start + (time_source() - base)

    return now


class OTPEventStream:
    """Publishes `Countdown` / `CodeChanged` events on every clock tick."""

    def __init__(
        self,
        provider: OTPProvider,
        interval: float = 1.0,
        time_source: Callable[[], float] = time.time,
        ticker: Optional[Ticker] = None,
        starting_at: Optional[Instant] = None,
    ) -> None:
        """
        :param provider: computes the code for an instant
        :param interval: seconds between ticks
        :param time_source: callable returning the current epoch seconds
        :param ticker: scheduler driving the clock, a `ThreadingTicker` by default
        :param starting_at: instant the stream reports at creation time; later
            readings advance from it by the elapsed ``time_source`` time
        """
        if starting_at is not None:
            time_source = shifted_time_source(starting_at, time_source)
        self.provider = provider
        self.clock = CountdownClock(
            time_step=provider.time_step,
            interval=interval,
            time_source=time_source,
            ticker=ticker,
        )
        self._publisher: EventPublisher[OTPEvent] = EventPublisher(on_empty=self._on_last_unsubscribe)
        self._clock_subscription: Optional[Subscription[CountdownEvent]] = None
        # guards subscriber count changes together with clock start/stop
        self._lock = threading.RLock()

    @classmethod
    def from_generator(
        cls,
        generator: TOTPGenerator,
        interval: float = 1.0,
        ticker: Optional[Ticker] = None,
        starting_at: Optional[Instant] = None,
    ) -> "OTPEventStream":
        """Stream for a generator, reading time from the generator's own time source."""
        return cls(
            generator,
            interval=interval,
            time_source=generator.time_source,
            ticker=ticker,
            starting_at=starting_at,
        )

    @classmethod
    def from_seed(
        cls,
        seed: SeedLike,
        digits: int = MIN_DIGITS,
        time_step: int = DEFAULT_TIME_STEP,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
        interval: float = 1.0,
        time_source: Callable[[], float] = time.time,
        ticker: Optional[Ticker] = None,
        starting_at: Optional[Instant] = None,
    ) -> "OTPEventStream":
        generator = TOTPGenerator(
            seed,
            digits=digits,
            time_step=time_step,
            algorithm=algorithm,
            time_source=time_source,
        )
        return cls.from_generator(generator, interval=interval, ticker=ticker, starting_at=starting_at)

    @property
    def time_step(self) -> int:
        return self.provider.time_step

    @property
    def is_running(self) -> bool:
        return self.clock.is_running

    def subscribe(self, handler: Callable[[OTPEvent], None]) -> Subscription[OTPEvent]:
        """
        Register ``handler`` for stream events; the first subscriber starts the clock.
        """
        with self._lock:
            subscription = self._publisher.subscribe(handler)
            self.start()
        return subscription

    def start(self) -> None:
        with self._lock:
            if self._clock_subscription is None:
                self._clock_subscription = self.clock.subscribe(self._on_clock_event)
            self.clock.start()

    def stop(self) -> None:
        with self._lock:
            self.clock.stop()
            subscription, self._clock_subscription = self._clock_subscription, None
            if subscription is not None:
                subscription.cancel()

    def close(self) -> None:
        """Stop the clock and drop every subscriber."""
        with self._lock:
            self.stop()
            self._publisher.clear()

    def __enter__(self) -> "OTPEventStream":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _on_last_unsubscribe(self) -> None:
        with self._lock:
            # a subscriber may have arrived since the publisher emptied
            if self._publisher.subscriber_count:
                return
            logger.debug("Last subscriber left, stopping the countdown clock")
            self.stop()

    def _on_clock_event(self, event: CountdownEvent) -> None:
        if isinstance(event, WindowChanged):
            code = self.provider.at(event.timestamp)
            self._publisher.publish(CodeChanged(code, event.seconds_remaining))
        else:
            self._publisher.publish(Countdown(event.seconds_remaining))
