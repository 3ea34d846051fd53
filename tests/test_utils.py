"""Tests for otpsecret.utils."""

import pytest

from otpsecret.errors import DecodeError, InvalidConfiguration, InvalidCounter
from otpsecret.utils import (
    decode_secret,
    encode_secret,
    format_otp,
    int_to_bytestring,
    normalize_secret,
    pad_otp,
    validate_digits,
    validate_start_time,
    validate_time_step,
)


# ── Base32 ────────────────────────────────────────────────────────────────────

def test_normalize_secret_uppercases_ascii() -> None:
    assert normalize_secret("jbswy3dp") == "JBSWY3DP"  # no padding needed here (len=8)


def test_normalize_secret_adds_padding() -> None:
    assert normalize_secret("jbswy3dpeh") == "JBSWY3DPEH======"


def test_normalize_secret_accepts_existing_padding() -> None:
    assert normalize_secret("JBSWY3DPEH======") == "JBSWY3DPEH======"


@pytest.mark.parametrize(
    "raw",
    [b"", b"\x00", b"\x00\x01\x02\x03\x04\x05\x06\x07\x08\x09", bytes(range(256))],
)
def test_decode_secret_roundtrip(raw: bytes) -> None:
    encoded = encode_secret(raw)
    assert "=" not in encoded
    assert decode_secret(encoded) == raw


def test_encode_secret_known_value() -> None:
    assert encode_secret(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.mark.parametrize("bad", ["!!!NOTBASE32!!!", "ABC1", "ABCD0EFG"])
def test_decode_secret_invalid_characters(bad: str) -> None:
    with pytest.raises(DecodeError):
        decode_secret(bad)


@pytest.mark.parametrize(
    "bad",
    [
        "\u017f" * 8,   # long s, upper-cases to S
        "\u0131" * 8,   # dotless i, upper-cases to I
        "JBSW-Y3DP",
        "JBSW Y3DP",
        " JBSWY3DP",
        "JBSWY3DP\n",
    ],
)
def test_decode_secret_rejects_chars_outside_alphabet(bad: str) -> None:
    with pytest.raises(DecodeError):
        decode_secret(bad)


@pytest.mark.parametrize(
    "bad",
    ["JBSWY3DP=", "JBSWY3DPEH=====", "JBSWY3DPEH=======", "JB=SWY3DP", "========"],
)
def test_decode_secret_rejects_bad_padding(bad: str) -> None:
    with pytest.raises(DecodeError):
        decode_secret(bad)


def test_decode_secret_malformed_length() -> None:
    # A single base32 character cannot encode a whole byte.
    with pytest.raises(DecodeError):
        decode_secret("A")


def test_decode_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        decode_secret("!!")


# ── Counter encoding ──────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "value,expected",
    [
        (1, bytes([0, 0, 0, 0, 0, 0, 0, 1])),
        (0x023523EC, bytes([0, 0, 0, 0, 0x02, 0x35, 0x23, 0xEC])),
        (0x27BC86AA, bytes([0, 0, 0, 0, 0x27, 0xBC, 0x86, 0xAA])),
        (0x0FEDCBA987654321, bytes([0x0F, 0xED, 0xCB, 0xA9, 0x87, 0x65, 0x43, 0x21])),
    ],
)
def test_int_to_bytestring_big_endian(value: int, expected: bytes) -> None:
    assert int_to_bytestring(value) == expected


def test_int_to_bytestring_max() -> None:
    assert int_to_bytestring(2**64 - 1) == b"\xff" * 8


@pytest.mark.parametrize("value", [-1, 2**64])
def test_int_to_bytestring_out_of_range(value: int) -> None:
    with pytest.raises(InvalidCounter):
        int_to_bytestring(value)


# ── Formatting ────────────────────────────────────────────────────────────────

def test_pad_otp() -> None:
    assert pad_otp(7081804, 8) == "07081804"
    assert pad_otp(0, 6) == "000000"


def test_format_otp_6_digits() -> None:
    assert format_otp("123456") == "123 456"


def test_format_otp_8_digits() -> None:
    assert format_otp("12345678") == "123 456 78"


# ── Validation ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("digits", [0, -1, True, 6.0])
def test_validate_digits_rejects(digits) -> None:
    with pytest.raises(InvalidConfiguration):
        validate_digits(digits)


def test_validate_digits_accepts_large() -> None:
    validate_digits(12)


@pytest.mark.parametrize("step", [0, -1, 1.5])
def test_validate_time_step_rejects(step) -> None:
    with pytest.raises(InvalidConfiguration):
        validate_time_step(step)


@pytest.mark.parametrize("start", [1.5, "0", True, None])
def test_validate_start_time_rejects(start) -> None:
    with pytest.raises(InvalidConfiguration):
        validate_start_time(start)


@pytest.mark.parametrize("start", [0, 59, -30])
def test_validate_start_time_accepts_integers(start: int) -> None:
    validate_start_time(start)
