"""
One-time password (OTP) helper built on the HOTP/TOTP generators.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Union

from .crypto_helper import HashAlgorithm
from .hotp import HOTPGenerator, check_digits
from .seed import SeedLike
from .totp import Instant, TOTPGenerator, check_time_step

if TYPE_CHECKING:
    from ..timer_utils.otp_timer import OTPEventStream
    from ..timer_utils.ticker import Ticker


@dataclass
class OTPOptions:
    window: int = 1
    step: int = 30
    algorithm: Union[HashAlgorithm, str] = "sha1"
    digits: int = 6


@dataclass
class VerifyResult:
    is_valid: bool
    delta: Optional[int] = None


class OTPHelper:
    """Helper for generating and verifying codes with shared options."""

    def __init__(
        self,
        options: Optional[OTPOptions] = None,
        time_source: Callable[[], float] = time.time,
    ):
        self.options = options or OTPOptions()
        check_time_step(self.options.step)
        check_digits(self.options.digits)
        if self.options.window is not None and self.options.window < 0:
            raise ValueError("window must be zero or a positive integer")
        self.algorithm = HashAlgorithm.parse(self.options.algorithm)
        self.time_source = time_source

    def totp(self, seed: SeedLike) -> TOTPGenerator:
        return TOTPGenerator(
            seed,
            digits=self.options.digits,
            time_step=self.options.step,
            algorithm=self.algorithm,
            time_source=self.time_source,
        )

    def hotp(self, seed: SeedLike) -> HOTPGenerator:
        return HOTPGenerator(seed, digits=self.options.digits, algorithm=self.algorithm)

    def timer(self) -> int:
        """
        Remaining whole seconds in the current OTP window.
        """
        elapsed = int(self.time_source()) % self.options.step
        return self.options.step - elapsed

    def get_token(self, seed: SeedLike, for_time: Optional[Instant] = None) -> str:
        """
        Generate the OTP token for the given seed, now or at ``for_time``.
        """
        totp = self.totp(seed)
        return totp.now() if for_time is None else totp.at(for_time)

    def verify_token(self, token: str, seed: SeedLike, window: Optional[int] = None) -> bool:
        """
        Verify an OTP token.
        """
        return self.verify_token_with_detail(token, seed, window).is_valid

    def verify_token_with_detail(
        self, token: str, seed: SeedLike, window: Optional[int] = None
    ) -> VerifyResult:
        """
        Verify an OTP token and report which step offset matched.
        """
        valid_window = window if window is not None else self.options.window
        delta = self.totp(seed).match(token, valid_window=valid_window or 0)
        return VerifyResult(is_valid=delta is not None, delta=delta)

    def event_stream(
        self,
        seed: SeedLike,
        interval: float = 1.0,
        ticker: Optional[Ticker] = None,
        starting_at: Optional[Instant] = None,
    ) -> OTPEventStream:
        """
        Build a countdown/code-change event stream for the given seed.
        """
        # timer_utils depends on this package, so import on use
        from ..timer_utils.otp_timer import OTPEventStream

        return OTPEventStream.from_generator(
            self.totp(seed), interval=interval, ticker=ticker, starting_at=starting_at
        )
