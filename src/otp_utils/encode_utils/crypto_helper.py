"""
HMAC helpers backed by the `cryptography` package.
"""

from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes, hmac


class HashAlgorithm(str, Enum):
    """Hash functions accepted for the OTP HMAC."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @classmethod
    def parse(cls, value: Union["HashAlgorithm", str]) -> "HashAlgorithm":
        """
        Normalize an algorithm given as enum member or name.

        Names are case-insensitive and may contain a dash (``"SHA-256"``).

        Raises:
            ValueError: If the name is not a supported algorithm.
        """
        if isinstance(value, cls):
            return value
        name = str(value).lower().replace("-", "").replace("_", "")
        try:
            return cls(name)
        except ValueError as exc:
            raise ValueError(f"Unsupported hash algorithm: {value}") from exc

    def hash(self) -> hashes.HashAlgorithm:
        return _HASHES[self]()

    @property
    def digest_size(self) -> int:
        return _HASHES[self].digest_size


_HASHES = {
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA512: hashes.SHA512,
}


class CryptoHelper:
    """Collection of cryptographic helper methods."""

    @staticmethod
    def calculate_hmac(
        key: bytes,
        message: bytes,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    ) -> bytes:
        """
        Compute an HMAC over a message.

        Args:
            key: Secret key bytes.
            message: Bytes to authenticate.
            algorithm: Hash function used by the HMAC (defaults to SHA-1).

        Returns:
            The raw HMAC digest.
        """
        mac = hmac.HMAC(bytes(key), HashAlgorithm.parse(algorithm).hash())
        mac.update(bytes(message))
        return mac.finalize()

    @staticmethod
    def calculate_hmac_hex(
        key: bytes,
        message: bytes,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    ) -> str:
        """
        Compute an HMAC over a message and return it as lowercase hex.
        """
        return CryptoHelper.calculate_hmac(key, message, algorithm).hex()
