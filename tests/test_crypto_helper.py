"""Tests for CryptoHelper HMAC utilities."""

import pytest

from otp_utils.encode_utils.crypto_helper import CryptoHelper, HashAlgorithm

# RFC 4231 test case 1 / RFC 2202 test case 1
KEY = b"\x0b" * 20
MESSAGE = b"Hi There"


def test_calculate_hmac_known_values():
    assert (
        CryptoHelper.calculate_hmac_hex(KEY, MESSAGE, HashAlgorithm.SHA1)
        == "b617318655057264e28bc0b6fb378c8ef146be00"
    )
    assert (
        CryptoHelper.calculate_hmac_hex(KEY, MESSAGE, HashAlgorithm.SHA256)
        == "b0344c61d8db38535ca8afceaf0bf12b881dc200c9833da726e9376c2e32cff7"
    )
    assert CryptoHelper.calculate_hmac_hex(KEY, MESSAGE, "sha512") == (
        "87aa7cdea5ef619d4ff0b4241a1d6cb02379f4e2ce4ec2787ad0b30545e17cde"
        "daa833b7d6b8a702038b274eaea3f4e4be9d914eeb61f1702e696c203a126854"
    )


def test_calculate_hmac_digest_sizes_match_algorithm():
    for algorithm in HashAlgorithm:
        digest = CryptoHelper.calculate_hmac(b"key", b"message", algorithm)
        assert len(digest) == algorithm.digest_size
    assert [a.digest_size for a in HashAlgorithm] == [20, 32, 64]


def test_parse_accepts_names_and_members():
    assert HashAlgorithm.parse("SHA1") is HashAlgorithm.SHA1
    assert HashAlgorithm.parse("sha-256") is HashAlgorithm.SHA256
    assert HashAlgorithm.parse("SHA_512") is HashAlgorithm.SHA512
    assert HashAlgorithm.parse(HashAlgorithm.SHA256) is HashAlgorithm.SHA256


def test_parse_rejects_unknown_algorithm():
    with pytest.raises(ValueError, match="Unsupported hash algorithm"):
        HashAlgorithm.parse("md5")


def run():
    test_calculate_hmac_known_values()
    test_calculate_hmac_digest_sizes_match_algorithm()
    test_parse_accepts_names_and_members()
    test_parse_rejects_unknown_algorithm()
    print("test_crypto_helper: all checks passed.")


if __name__ == "__main__":
    run()
