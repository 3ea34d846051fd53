"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import logging
from typing import Optional, Union

from otpsecret import crypto
from otpsecret.crypto import Algorithm
from otpsecret.errors import InvalidConfiguration, InvalidCounter
from otpsecret.utils import (
    COUNTER_SIZE,
    decode_secret,
    encode_secret,
    int_to_bytestring,
    pad_otp,
    validate_digits,
)

logger = logging.getLogger(__name__)


def dynamic_truncate(digest: bytes) -> int:
    """
    Dynamic truncation (RFC 4226 §5.3).

    The low nibble of the last digest byte selects a 4-byte window, whose
    top bit is cleared to give a 31-bit big-endian integer.
    """
    offset = digest[-1] & 0x0F
    return (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )


class Secret:
    """
    Shared HOTP key paired with the HMAC algorithm it is used with.

    The key is kept in a private buffer. It only leaves the object through
    :meth:`export_base32`; :meth:`wipe` (or leaving a ``with`` block) zeroes
    it in place.
    """

    def __init__(self, key: Union[bytes, bytearray], algorithm: Algorithm = Algorithm.SHA1) -> None:
        """
        Args:
            key:       Raw key bytes, stored verbatim.
            algorithm: HMAC algorithm used for every code of this secret.
        """
        self._algorithm = Algorithm(algorithm)
        self._key = bytearray(key)
        self._wiped = False

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def generate(cls, algorithm: Algorithm = Algorithm.SHA1) -> "Secret":
        """
        Create a secret from ``output_len(algorithm)`` random bytes.

        Raises:
            RandomSourceFailure: If the secure random source fails.
        """
        size = crypto.output_len(algorithm)
        secret = cls(crypto.random_bytes(size), algorithm)
        logger.debug("Generated %d-byte %s secret.", size, secret.algorithm.value)
        return secret

    @classmethod
    def from_base32(cls, text: str, algorithm: Algorithm = Algorithm.SHA1) -> "Secret":
        """
        Load an unpadded (or padded) base32 secret.

        The decoded length is not checked against the algorithm; any HMAC key
        length is valid.
        The intermediate decoded ``bytes`` object is immutable and cannot be
        wiped; only the copy held by the secret is.

        Raises:
            DecodeError: If ``text`` is not valid base32.
        """
        return cls(decode_secret(text), algorithm)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], algorithm: Algorithm = Algorithm.SHA1) -> "Secret":
        """Wrap caller-supplied raw key bytes."""
        return cls(data, algorithm)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def key_size(self) -> int:
        """Key length in bytes."""
        return len(self._key)

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{self.key_size} bytes"
        return f"<Secret {self._algorithm.value} ({state})>"

    # ── Public API ───────────────────────────────────────────────────────

    def export_base32(self) -> str:
        """Return the key as unpadded base32. The result is secret material."""
        self._check_usable()
        return encode_secret(self._key)

    def get_otp(self, counter: bytes, digits: int = 6) -> int:
        """
        Compute the HOTP value for an 8-byte big-endian ``counter``.

        Args:
            counter: 8-byte moving factor.
            digits:  Code length, at least 1 (6 or more recommended).

        Returns:
            Integer in ``[0, 10**digits)``.

        Raises:
            InvalidCounter:       If ``counter`` is not 8 bytes long.
            InvalidConfiguration: If ``digits`` < 1 or the secret was wiped.
        """
        self._check_usable()
        if len(counter) != COUNTER_SIZE:
            raise InvalidCounter(
                f"Counter must be {COUNTER_SIZE} bytes, got {len(counter)}."
            )
        validate_digits(digits)
        digest = crypto.keyed_hash(self._algorithm, self._key, counter)
        return dynamic_truncate(digest) % (10**digits)

    def at(self, count: int, digits: int = 6) -> int:
        """Compute the HOTP value for an integer counter."""
        return self.get_otp(int_to_bytestring(count), digits)

    def verify(self, code: str, count: int, digits: int = 6) -> bool:
        """Check ``code`` against the zero-padded code for ``count``."""
        expected = pad_otp(self.at(count, digits), digits)
        return crypto.constant_time_compare(str(code).strip(), expected)

    def wipe(self) -> None:
        """Overwrite the in-memory key with zeros. The secret is unusable afterwards."""
        crypto.wipe(self._key)
        self._wiped = True

    def __enter__(self) -> "Secret":
        return self

    def __exit__(self, *exc_info) -> None:
        self.wipe()

    def _check_usable(self) -> None:
        if self._wiped:
            raise InvalidConfiguration("Secret has been wiped.")


# ── Functional helpers ────────────────────────────────────────────────────────

def generate_hotp(
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret_bytes: Raw decoded secret bytes.
        counter:      Synchronisation counter value.
        digits:       Number of OTP digits.
        algorithm:    HMAC algorithm.

    Returns:
        Zero-padded OTP string.
    """
    with Secret(secret_bytes, algorithm) as secret:
        return pad_otp(secret.at(counter, digits), digits)


def validate_hotp(
    token: str,
    secret_bytes: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
    look_ahead: int = 10,
) -> Optional[int]:
    """
    Validate an HOTP token and return the synchronised counter value.

    Args:
        token:        Token to validate.
        secret_bytes: Raw secret bytes.
        counter:      Current counter.
        digits:       Expected OTP length.
        algorithm:    HMAC algorithm.
        look_ahead:   Max steps to search ahead for resync.

    Returns:
        The new counter value if valid, or None if invalid.
    """
    with Secret(secret_bytes, algorithm) as secret:
        for i in range(look_ahead + 1):
            if secret.verify(token, counter + i, digits):
                return counter + i + 1
    return None
