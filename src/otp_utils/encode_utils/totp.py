"""
Time-based one-time passwords (RFC 6238).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Literal, Optional, Union

from .crypto_helper import HashAlgorithm
from .errors import InvalidTimeStep
from .hotp import MIN_DIGITS, HOTPGenerator
from .seed import SeedLike

logger = logging.getLogger(__name__)

DEFAULT_TIME_STEP = 30

TimestampUnit = Literal["seconds", "milliseconds"]


@dataclass(frozen=True)
class UnixTimestamp:
    """An epoch timestamp tagged with its unit."""

    value: Union[int, float]
    unit: TimestampUnit = "seconds"

    @classmethod
    def seconds(cls, value: Union[int, float]) -> "UnixTimestamp":
        return cls(value, "seconds")

    @classmethod
    def milliseconds(cls, value: Union[int, float]) -> "UnixTimestamp":
        return cls(value, "milliseconds")

    @property
    def in_seconds(self) -> Union[int, float]:
        if self.unit == "milliseconds":
            # keep integer precision for whole seconds
            if isinstance(self.value, int) and self.value % 1000 == 0:
                return self.value // 1000
            return self.value / 1000
        if self.unit == "seconds":
            return self.value
        raise ValueError(f"Unknown timestamp unit: {self.unit}")


Instant = Union[datetime, int, float, UnixTimestamp]


def to_epoch_seconds(for_time: Instant) -> Union[int, float]:
    """Normalize a datetime, epoch seconds or `UnixTimestamp` to epoch seconds."""
    if isinstance(for_time, UnixTimestamp):
        return for_time.in_seconds
    if isinstance(for_time, datetime):
        # naive datetimes are local time, as datetime.timestamp() assumes
        return for_time.timestamp()
    if isinstance(for_time, bool) or not isinstance(for_time, (int, float)):
        raise TypeError(f"Unsupported instant type: {type(for_time).__name__}")
    return for_time


def check_time_step(time_step: int) -> int:
    if isinstance(time_step, bool) or not isinstance(time_step, int) or time_step <= 0:
        raise InvalidTimeStep(time_step)
    return time_step


class TOTPGenerator:
    """
    Generator for time-based one-time passwords.

    The step counter is ``floor(epoch_seconds / time_step)``; the code is the
    HOTP code for that counter. The current time is read from the injected
    ``time_source`` so callers and tests can freeze it.
    """

    def __init__(
        self,
        seed: SeedLike,
        digits: int = MIN_DIGITS,
        time_step: int = DEFAULT_TIME_STEP,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
        time_source: Callable[[], float] = time.time,
    ) -> None:
        """
        :param seed: the secret, as a `Seed` or raw bytes
        :param digits: number of digits in the code, 6 to 8
        :param time_step: window width in seconds, usually 30 or 60
        :param algorithm: HMAC hash function, SHA-1 by default
        :param time_source: callable returning the current epoch seconds
        :raises DigitsOutOfRange: if ``digits`` is not in 6..8
        :raises InvalidTimeStep: if ``time_step`` is not a positive integer
        :raises InvalidEncoding: if the seed cannot be decoded
        """
        self._time_step = check_time_step(time_step)
        self._hotp = HOTPGenerator(seed, digits=digits, algorithm=algorithm)
        self.time_source = time_source
        logger.debug(
            f"TOTP generator ready: digits={self.digits} step={self._time_step}s "
            f"algorithm={self.algorithm.value}"
        )

    @property
    def secret(self) -> bytes:
        return self._hotp.secret

    @property
    def digits(self) -> int:
        return self._hotp.digits

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._hotp.algorithm

    @property
    def time_step(self) -> int:
        return self._time_step

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(digits={self.digits}, time_step={self._time_step}, "
            f"algorithm={self.algorithm.value})"
        )

    def counter_for(self, for_time: Instant) -> int:
        """
        Step counter for an instant.

        Raises:
            ValueError: If the instant is before the Unix epoch.
        """
        seconds = to_epoch_seconds(for_time)
        if seconds < 0:
            raise ValueError("instant must not be before the Unix epoch")
        return int(seconds // self._time_step)

    def at(self, for_time: Instant) -> str:
        """
        Code valid at ``for_time``.

        :param for_time: a datetime, epoch seconds, or a `UnixTimestamp`
        """
        return self._hotp.at(self.counter_for(for_time))

    def at_unix(self, value: Union[int, float], unit: TimestampUnit = "seconds") -> str:
        """Code for an epoch timestamp given in seconds or milliseconds."""
        return self.at(UnixTimestamp(value, unit))

    def now(self) -> str:
        """Code valid at the current time."""
        return self.at(self.time_source())

    def seconds_remaining(self, for_time: Optional[Instant] = None) -> float:
        """
        Seconds left in the window containing ``for_time`` (now by default).

        A reading exactly on a step boundary starts a fresh window and
        returns ``time_step``.
        """
        seconds = to_epoch_seconds(self.time_source() if for_time is None else for_time)
        return self._time_step - (seconds % self._time_step)

    def match(
        self, otp: str, for_time: Optional[Instant] = None, valid_window: int = 0
    ) -> Optional[int]:
        """
        Find the step offset, in ``-valid_window..valid_window``, whose code
        equals ``otp``.

        Offsets are tried nearest first; None means no match.
        """
        if valid_window < 0:
            raise ValueError("valid_window must be zero or a positive integer")
        counter = self.counter_for(self.time_source() if for_time is None else for_time)
        for offset in sorted(range(-valid_window, valid_window + 1), key=abs):
            candidate = counter + offset
            if candidate < 0:
                continue
            if self._hotp.verify(otp, candidate):
                return offset
        return None

    def verify(self, otp: str, for_time: Optional[Instant] = None, valid_window: int = 0) -> bool:
        """
        Verify ``otp`` against the code for ``for_time`` (now by default).

        :param valid_window: number of adjacent steps to also accept on each side
        """
        return self.match(otp, for_time, valid_window) is not None
