"""
HMAC-based one-time passwords (RFC 4226).
"""

from __future__ import annotations

import logging
import struct
from typing import Optional, Union

from pyotp.utils import strings_equal

from .crypto_helper import CryptoHelper, HashAlgorithm
from .errors import DigitsOutOfRange
from .seed import SeedLike, decode_seed

logger = logging.getLogger(__name__)

MIN_DIGITS = 6
MAX_DIGITS = 8
MAX_COUNTER = 2**64 - 1


def check_digits(digits: int) -> int:
    """Return ``digits`` unchanged, or raise `DigitsOutOfRange`."""
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise DigitsOutOfRange(digits)
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise DigitsOutOfRange(digits)
    return digits


def counter_to_bytes(counter: int) -> bytes:
    """Serialize a counter as the 8-byte big-endian HMAC message."""
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"counter must be in [0, 2**64), got {counter}")
    return struct.pack(">Q", counter)


def dynamic_truncate(digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation to an HMAC digest.

    The low nibble of the last byte selects where four bytes are read; the
    result is that big-endian word with the sign bit cleared.
    """
    offset = digest[-1] & 0x0F
    if offset + 4 > len(digest):
        raise ValueError(f"digest of {len(digest)} bytes is too short for truncation")
    (word,) = struct.unpack_from(">I", digest, offset)
    return word & 0x7FFFFFFF


def generate_otp(
    secret: bytes,
    counter: int,
    digits: int = MIN_DIGITS,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
) -> str:
    """
    Compute the code for a secret and counter.

    Args:
        secret: Raw key bytes.
        counter: HOTP counter, or the TOTP step number.
        digits: Length of the code, 6 to 8.
        algorithm: HMAC hash function.

    Returns:
        The code as a zero-padded decimal string of exactly ``digits`` chars.
    """
    check_digits(digits)
    return _generate(secret, counter, digits, algorithm)


def _generate(secret: bytes, counter: int, digits: int, algorithm: Union[HashAlgorithm, str]) -> str:
    digest = CryptoHelper.calculate_hmac(secret, counter_to_bytes(counter), algorithm)
    code = dynamic_truncate(digest) % 10**digits
    return str(code).zfill(digits)


class HOTPGenerator:
    """Generator for counter-based one-time passwords."""

    def __init__(
        self,
        seed: SeedLike,
        digits: int = MIN_DIGITS,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    ) -> None:
        """
        :param seed: the secret, as a `Seed` or raw bytes
        :param digits: number of digits in the code, 6 to 8
        :param algorithm: HMAC hash function, SHA-1 by default
        :raises DigitsOutOfRange: if ``digits`` is not in 6..8
        :raises InvalidEncoding: if the seed cannot be decoded
        """
        self._digits = check_digits(digits)
        self._algorithm = HashAlgorithm.parse(algorithm)
        self._secret = decode_seed(seed)
        logger.debug(f"HOTP generator ready: digits={self._digits} algorithm={self._algorithm.value}")

    @property
    def secret(self) -> bytes:
        return self._secret

    @property
    def digits(self) -> int:
        return self._digits

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    def __repr__(self) -> str:
        return f"{type(self).__name__}(digits={self._digits}, algorithm={self._algorithm.value})"

    def at(self, counter: int) -> str:
        """Generate the code for ``counter``."""
        return _generate(self._secret, counter, self._digits, self._algorithm)

    def find_counter(self, otp: str, counter: int, look_ahead: int = 0) -> Optional[int]:
        """
        Return the first counter in ``counter..counter + look_ahead`` whose
        code matches ``otp``, or None.
        """
        if look_ahead < 0:
            raise ValueError("look_ahead must be zero or a positive integer")
        for candidate in range(counter, min(counter + look_ahead, MAX_COUNTER) + 1):
            if strings_equal(str(otp), self.at(candidate)):
                return candidate
        return None

    def verify(self, otp: str, counter: int, look_ahead: int = 0) -> bool:
        """Check ``otp`` against the code for ``counter`` (and the next ``look_ahead`` ones)."""
        return self.find_counter(otp, counter, look_ahead) is not None
