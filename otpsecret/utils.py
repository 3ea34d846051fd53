"""
Utility helpers for otpsecret.
"""

import base64
import binascii
import re

from otpsecret.errors import DecodeError, InvalidConfiguration, InvalidCounter

COUNTER_SIZE = 8            # RFC 4226 moving factor is 8 bytes
_MAX_COUNTER = 2 ** (8 * COUNTER_SIZE) - 1


# ── Base32 ────────────────────────────────────────────────────────────────────

def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: uppercase, add padding.

    Only the RFC 4648 alphabet is accepted (lowercase ASCII letters are
    folded to uppercase). Padding on input is optional, but when present it
    must be the exact trailing ``=`` run that completes the final 8-character
    block.

    Args:
        secret: Raw user-supplied secret string.

    Returns:
        Uppercase base32 string with correct padding.

    Raises:
        DecodeError: If the string contains invalid base32 characters or
            malformed padding.
    """
    if not secret.isascii():
        raise DecodeError("Secret contains non-ASCII characters.")
    data = secret.rstrip("=")
    given_pad = len(secret) - len(data)
    # Base32 alphabet: A-Z and 2-7
    if not re.fullmatch(r"[A-Za-z2-7]*", data):
        raise DecodeError("Secret contains invalid base32 characters.")
    pad = (8 - len(data) % 8) % 8
    if given_pad and given_pad != pad:
        raise DecodeError("Secret has malformed base32 padding.")
    return data.upper() + "=" * pad


def decode_secret(secret: str) -> bytes:
    """
    Decode a base32-encoded secret string to raw bytes.

    Args:
        secret: Base32 secret, padding optional.

    Returns:
        Raw bytes.

    Raises:
        DecodeError: On invalid base32 input.
    """
    normalized = normalize_secret(secret)
    try:
        return base64.b32decode(normalized)
    except binascii.Error as exc:
        raise DecodeError(f"Invalid base32 secret: {exc}") from exc


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


# ── Counter encoding ──────────────────────────────────────────────────────────

def int_to_bytestring(value: int) -> bytes:
    """
    Encode ``value`` as the 8-byte big-endian moving factor fed to the HMAC.

    Raises:
        InvalidCounter: If ``value`` is negative or does not fit in 64 bits.
    """
    if value < 0:
        raise InvalidCounter(f"Counter must be non-negative, got {value}.")
    if value > _MAX_COUNTER:
        raise InvalidCounter(f"Counter {value} does not fit in {COUNTER_SIZE} bytes.")
    return value.to_bytes(COUNTER_SIZE, "big")


# ── Formatting ────────────────────────────────────────────────────────────────

def pad_otp(code: int, digits: int) -> str:
    """Return ``code`` as a string zero-padded to ``digits`` characters."""
    return str(code).zfill(digits)


def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        '123 456'

    Args:
        code:  Digit string.
        group: Digit grouping size.

    Returns:
        Spaced OTP string.
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
        raise InvalidConfiguration(f"Digits must be a positive integer, got {digits!r}.")


def validate_time_step(time_step: int) -> None:
    if isinstance(time_step, bool) or not isinstance(time_step, int) or time_step <= 0:
        raise InvalidConfiguration(
            f"Time step must be a positive number of seconds, got {time_step!r}."
        )


def validate_start_time(start_time: int) -> None:
    if isinstance(start_time, bool) or not isinstance(start_time, int):
        raise InvalidConfiguration(
            f"Start time must be an integer number of seconds, got {start_time!r}."
        )
