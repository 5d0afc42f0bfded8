"""
otp-utils: HOTP/TOTP one-time passwords in Python

This package decodes OTP seeds, generates RFC 4226 / RFC 6238 codes and
publishes live countdown and code-change events.
"""

__version__ = "0.1.0"
__author__ = "xzsean666"

from . import encode_utils
from . import timer_utils
from .encode_utils import (
    DigitsOutOfRange,
    HashAlgorithm,
    HOTPGenerator,
    InvalidEncoding,
    InvalidTimeStep,
    OTPError,
    OTPHelper,
    OTPOptions,
    Seed,
    TOTPGenerator,
    UnixTimestamp,
)
from .timer_utils import CodeChanged, Countdown, CountdownClock, OTPEventStream, Tick, WindowChanged

__all__ = [
    "encode_utils",
    "timer_utils",
    "DigitsOutOfRange",
    "HashAlgorithm",
    "HOTPGenerator",
    "InvalidEncoding",
    "InvalidTimeStep",
    "OTPError",
    "OTPHelper",
    "OTPOptions",
    "Seed",
    "TOTPGenerator",
    "UnixTimestamp",
    "CodeChanged",
    "Countdown",
    "CountdownClock",
    "OTPEventStream",
    "Tick",
    "WindowChanged",
]
