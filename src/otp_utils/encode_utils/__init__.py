"""Seed decoding, HMAC and HOTP/TOTP generation utilities."""

from .crypto_helper import CryptoHelper, HashAlgorithm
from .errors import DigitsOutOfRange, InvalidEncoding, InvalidTimeStep, OTPError
from .seed import Seed, decode_seed
from .hotp import HOTPGenerator, dynamic_truncate, generate_otp
from .totp import TOTPGenerator, UnixTimestamp
from .otp_helper import OTPHelper, OTPOptions, VerifyResult

__all__ = [
    "CryptoHelper",
    "HashAlgorithm",
    "OTPError",
    "DigitsOutOfRange",
    "InvalidEncoding",
    "InvalidTimeStep",
    "Seed",
    "decode_seed",
    "HOTPGenerator",
    "dynamic_truncate",
    "generate_otp",
    "TOTPGenerator",
    "UnixTimestamp",
    "OTPHelper",
    "OTPOptions",
    "VerifyResult",
]
