"""Errors raised while building OTP generators or decoding seeds."""

from __future__ import annotations

from typing import Union

__all__ = ["OTPError", "DigitsOutOfRange", "InvalidEncoding", "InvalidTimeStep"]


class OTPError(ValueError):
    """Base class for OTP configuration and decoding failures."""


class DigitsOutOfRange(OTPError):
    """Raised when the requested code length is outside 6..8."""

    def __init__(self, got: int) -> None:
        self.got = got
        super().__init__(f"Expected digits number in (6...8) interval. Got {got}")


class InvalidTimeStep(OTPError):
    """Raised when a TOTP time step is zero or negative."""

    def __init__(self, got: object) -> None:
        self.got = got
        super().__init__(f"time step must be a positive integer, got {got!r}")


class InvalidEncoding(OTPError):
    """
    Raised when a seed cannot be decoded.

    The offending value is kept on ``raw_value`` but left out of the message,
    since it is key material.
    """

    def __init__(self, kind: str, raw_value: Union[str, bytes]) -> None:
        self.kind = kind
        self.raw_value = raw_value
        super().__init__(f"Invalid {kind} representation")
