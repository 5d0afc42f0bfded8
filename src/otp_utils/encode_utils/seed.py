"""
Secret seed decoding.

A seed is the textual or binary form in which an OTP secret is handed to us.
Decoding is all-or-nothing: a malformed seed raises `InvalidEncoding` and no
partial secret is ever produced.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Literal, Union

from .errors import InvalidEncoding

SeedKind = Literal["base64", "base32", "hex", "raw"]
SeedLike = Union["Seed", bytes, bytearray, memoryview]

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Seed:
    """Tagged secret seed: one of base64, base32, hex or raw bytes."""

    kind: SeedKind
    value: Union[str, bytes]

    def __repr__(self) -> str:
        return f"Seed(kind={self.kind!r}, value=<redacted>)"

    @classmethod
    def base64(cls, value: str) -> "Seed":
        return cls("base64", value)

    @classmethod
    def base32(cls, value: str) -> "Seed":
        return cls("base32", value)

    @classmethod
    def hex(cls, value: str) -> "Seed":
        return cls("hex", value)

    @classmethod
    def raw(cls, value: Union[bytes, bytearray, memoryview]) -> "Seed":
        return cls("raw", bytes(value))

    def data(self) -> bytes:
        """
        Decode the seed into secret bytes.

        Raises:
            InvalidEncoding: If the value is not valid for its encoding.
        """
        decoder = _DECODERS.get(self.kind)
        if decoder is None:
            raise ValueError(f"Unknown seed kind: {self.kind}")
        try:
            secret = decoder(self.value)
        except (ValueError, TypeError) as exc:
            raise InvalidEncoding(self.kind, self.value) from exc
        if not secret:
            raise InvalidEncoding(self.kind, self.value)
        return secret


def decode_seed(seed: SeedLike) -> bytes:
    """
    Decode a seed into secret bytes.

    Plain bytes-like values are accepted and treated as a raw seed.
    """
    if isinstance(seed, (bytes, bytearray, memoryview)):
        seed = Seed.raw(seed)
    if not isinstance(seed, Seed):
        raise TypeError(f"Expected Seed or bytes, got {type(seed).__name__}")
    return seed.data()


def _strip(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError("textual seed must be a str")
    return _WHITESPACE.sub("", value)


def _decode_raw(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        raise TypeError("raw seed must be bytes")
    return bytes(value)


def _decode_base32(value: str) -> bytes:
    text = _strip(value).upper()
    # Authenticator secrets are commonly shared without the trailing padding.
    missing_padding = len(text) % 8
    if missing_padding:
        text += "=" * (8 - missing_padding)
    return base64.b32decode(text)


def _decode_base64(value: str) -> bytes:
    return base64.b64decode(_strip(value), validate=True)


def _decode_hex(value: str) -> bytes:
    text = _strip(value)
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    if len(text) % 2:
        raise binascii.Error("odd-length hex string")
    return bytes.fromhex(text)


_DECODERS = {
    "raw": _decode_raw,
    "base32": _decode_base32,
    "base64": _decode_base64,
    "hex": _decode_hex,
}
