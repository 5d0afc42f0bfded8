"""Tests for TOTP generation."""

from datetime import datetime, timezone

import pyotp
import pytest

from otp_utils.encode_utils.crypto_helper import HashAlgorithm
from otp_utils.encode_utils.errors import DigitsOutOfRange, InvalidTimeStep
from otp_utils.encode_utils.seed import Seed
from otp_utils.encode_utils.totp import TOTPGenerator, UnixTimestamp

SEED_SHA1 = b"12345678901234567890"
SEED_SHA256 = b"12345678901234567890123456789012"
SEED_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

# RFC 6238, Appendix B
RFC6238_VECTORS = {
    HashAlgorithm.SHA1: (
        SEED_SHA1,
        [
            (59, "94287082"),
            (1111111109, "07081804"),
            (1111111111, "14050471"),
            (1234567890, "89005924"),
            (2000000000, "69279037"),
            (20000000000, "65353130"),
        ],
    ),
    HashAlgorithm.SHA256: (
        SEED_SHA256,
        [
            (59, "46119246"),
            (1111111109, "68084774"),
            (1111111111, "67062674"),
            (1234567890, "91819424"),
            (2000000000, "90698825"),
            (20000000000, "77737706"),
        ],
    ),
    HashAlgorithm.SHA512: (
        SEED_SHA512,
        [
            (59, "90693936"),
            (1111111109, "25091201"),
            (1111111111, "99943326"),
            (1234567890, "93441116"),
            (2000000000, "38618901"),
            (20000000000, "47863826"),
        ],
    ),
}


def make_totp(algorithm=HashAlgorithm.SHA1, **kwargs):
    seed, _ = RFC6238_VECTORS[algorithm]
    kwargs.setdefault("digits", 8)
    return TOTPGenerator(Seed.raw(seed), algorithm=algorithm, **kwargs)


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
def test_at_matches_rfc6238_vectors(algorithm):
    totp = make_totp(algorithm)
    _, vectors = RFC6238_VECTORS[algorithm]
    for timestamp, expected in vectors:
        assert totp.at(timestamp) == expected, f"timestamp {timestamp}"


def test_now_uses_the_injected_time_source():
    expected = {HashAlgorithm.SHA1: "94287082", HashAlgorithm.SHA256: "46119246", HashAlgorithm.SHA512: "90693936"}
    for algorithm, code in expected.items():
        assert make_totp(algorithm, time_source=lambda: 59).now() == code


def test_instant_forms_agree():
    totp = make_totp()
    moment = datetime(2005, 3, 18, 1, 58, 29, tzinfo=timezone.utc)  # 1111111109
    assert totp.at(moment) == "07081804"
    assert totp.at(1111111109.9) == "07081804"
    assert totp.at(UnixTimestamp.seconds(1111111109)) == "07081804"
    assert totp.at(UnixTimestamp.milliseconds(1111111109000)) == "07081804"
    assert totp.at_unix(20000000000000, unit="milliseconds") == "65353130"
    assert totp.at_unix(59) == "94287082"


def test_counter_for_floors_without_rounding():
    totp = make_totp()
    assert totp.counter_for(0) == 0
    assert totp.counter_for(29.999) == 0
    assert totp.counter_for(30) == 1
    assert totp.counter_for(UnixTimestamp.milliseconds(59999)) == 1
    assert totp.counter_for(UnixTimestamp.milliseconds(60000)) == 2


def test_instants_before_epoch_are_rejected():
    with pytest.raises(ValueError):
        make_totp().at(-1)


@pytest.mark.parametrize("time_step", [0, -30])
def test_construction_rejects_non_positive_time_step(time_step):
    with pytest.raises(InvalidTimeStep):
        make_totp(time_step=time_step)


def test_construction_rejects_digits_out_of_range():
    with pytest.raises(DigitsOutOfRange):
        make_totp(digits=5)
    with pytest.raises(DigitsOutOfRange):
        make_totp(digits=9)


def test_seconds_remaining():
    totp = make_totp(time_source=lambda: 27.5)
    assert totp.seconds_remaining() == 2.5
    assert totp.seconds_remaining(30) == 30
    assert totp.seconds_remaining(59) == 1


def test_verify_with_window():
    totp = make_totp(time_source=lambda: 59)
    assert totp.verify("94287082") is True
    assert totp.match("94287082") == 0
    # "84755224" is the code of the previous step (counter 0)
    assert totp.verify("84755224") is False
    assert totp.match("84755224", valid_window=1) == -1
    assert totp.verify("12345678", valid_window=2) is False


def test_codes_agree_with_pyotp():
    secret = pyotp.random_base32()
    totp = TOTPGenerator(Seed.base32(secret), time_step=60)
    reference = pyotp.TOTP(secret, interval=60)
    for timestamp in (59, 60, 1700000000, 1700000059.5, 2000000000):
        assert totp.at(timestamp) == reference.at(timestamp)


def run():
    for algorithm in HashAlgorithm:
        test_at_matches_rfc6238_vectors(algorithm)
    test_now_uses_the_injected_time_source()
    test_instant_forms_agree()
    test_counter_for_floors_without_rounding()
    test_instants_before_epoch_are_rejected()
    test_construction_rejects_digits_out_of_range()
    test_seconds_remaining()
    test_verify_with_window()
    test_codes_agree_with_pyotp()
    print("test_totp: all checks passed.")


if __name__ == "__main__":
    run()
