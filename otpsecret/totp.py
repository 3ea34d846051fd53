"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator with the default settings
(SHA1, 6 digits, 30-second step).
"""

import logging
import time
from typing import Optional

from otpsecret import crypto
from otpsecret.crypto import Algorithm
from otpsecret.hotp import Secret
from otpsecret.utils import (
    int_to_bytestring,
    pad_otp,
    validate_start_time,
    validate_time_step,
)

logger = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────────────────

DEFAULT_TIME_STEP = 30      # seconds, RFC 6238 recommendation
DEFAULT_START_TIME = 0      # T0, Unix epoch
DEFAULT_DIGITS = 6


class TimeCounter:
    """
    Derives the HOTP counter from the wall clock and generates TOTP codes.

    The instance owns its :class:`~otpsecret.hotp.Secret`; callers should not
    keep using the secret they handed over.
    """

    def __init__(
        self,
        secret: Secret,
        time_step: int = DEFAULT_TIME_STEP,
        start_time: int = DEFAULT_START_TIME,
    ) -> None:
        """
        Args:
            secret:     HOTP secret used for every code.
            time_step:  Seconds each code stays valid. Must be > 0.
            start_time: T0 offset in seconds, added to the clock before the
                        division by ``time_step``.

        Raises:
            InvalidConfiguration: If ``time_step`` is not a positive integer
                or ``start_time`` is not an integer.
        """
        validate_time_step(time_step)
        validate_start_time(start_time)
        self._secret = secret
        self._time_step = time_step
        self._start_time = start_time
        logger.debug(
            "TimeCounter configured: algorithm=%s step=%ds start=%d",
            secret.algorithm.value,
            time_step,
            self._start_time,
        )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def algorithm(self) -> Algorithm:
        return self._secret.algorithm

    @property
    def time_step(self) -> int:
        return self._time_step

    @property
    def start_time(self) -> int:
        return self._start_time

    def __repr__(self) -> str:
        return (
            f"<TimeCounter {self.algorithm.value} step={self._time_step}s "
            f"start={self._start_time}>"
        )

    # ── Time → counter ───────────────────────────────────────────────────

    def step_index(self, timestamp: Optional[float] = None) -> int:
        """
        Return ``(now + start_time) // time_step``.

        Args:
            timestamp: Override Unix timestamp (uses time.time() if None).
        """
        t = timestamp if timestamp is not None else time.time()
        return (int(t) + self._start_time) // self._time_step

    def remaining_seconds(self, timestamp: Optional[float] = None) -> int:
        """Return seconds until the current time step ends."""
        t = timestamp if timestamp is not None else time.time()
        return self._time_step - ((int(t) + self._start_time) % self._time_step)

    # ── Public API ───────────────────────────────────────────────────────

    def get_otp(
        self,
        digits: int = DEFAULT_DIGITS,
        offset: int = 0,
        timestamp: Optional[float] = None,
    ) -> int:
        """
        Generate the TOTP value for the current step shifted by ``offset``.

        Args:
            digits:    Code length, at least 1.
            offset:    0 for the current step, -1 for the previous, 1 for the
                       next, and so on.
            timestamp: Override Unix timestamp (uses time.time() if None).

        Returns:
            Integer in ``[0, 10**digits)``.

        Raises:
            InvalidCounter: If the shifted counter is negative.
        """
        counter = self.step_index(timestamp) + offset
        return self._secret.get_otp(int_to_bytestring(counter), digits)

    def now(self, digits: int = DEFAULT_DIGITS) -> str:
        """Return the current code as a zero-padded string."""
        return pad_otp(self.get_otp(digits), digits)

    def verify(
        self,
        code: str,
        digits: int = DEFAULT_DIGITS,
        window: int = 1,
        timestamp: Optional[float] = None,
    ) -> bool:
        """
        Validate ``code`` within ±``window`` time steps.

        Offsets that would move the counter below zero are skipped.

        Args:
            code:      Token to validate.
            digits:    Expected number of digits.
            window:    Allowed skew in steps (default 1).
            timestamp: Override Unix timestamp.

        Returns:
            True if the code matches any step in the window.
        """
        index = self.step_index(timestamp)
        candidate = str(code).strip()
        for offset in range(-window, window + 1):
            if index + offset < 0:
                continue
            value = self._secret.get_otp(int_to_bytestring(index + offset), digits)
            expected = pad_otp(value, digits)
            if crypto.constant_time_compare(candidate, expected):
                return True
        return False

    def wipe(self) -> None:
        """Wipe the owned secret."""
        self._secret.wipe()

    def __enter__(self) -> "TimeCounter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.wipe()


# ── Functional helpers ────────────────────────────────────────────────────────

def generate_totp(
    secret_bytes: bytes,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_TIME_STEP,
    algorithm: Algorithm = Algorithm.SHA1,
    timestamp: Optional[float] = None,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret_bytes: Raw (already base32-decoded) secret bytes.
        digits:       Number of digits in the OTP (default 6).
        period:       Time step in seconds (default 30).
        algorithm:    HMAC algorithm (default SHA1 for GA compatibility).
        timestamp:    Override Unix timestamp (uses time.time() if None).

    Returns:
        OTP string, zero-padded to ``digits`` characters.
    """
    with TimeCounter(Secret(secret_bytes, algorithm), time_step=period) as counter:
        return pad_otp(counter.get_otp(digits, timestamp=timestamp), digits)


def remaining_seconds(period: int = DEFAULT_TIME_STEP, timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    validate_time_step(period)
    t = timestamp if timestamp is not None else time.time()
    return period - (int(t) % period)


def validate_totp(
    token: str,
    secret_bytes: bytes,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_TIME_STEP,
    algorithm: Algorithm = Algorithm.SHA1,
    window: int = 1,
    timestamp: Optional[float] = None,
) -> bool:
    """
    Validate a TOTP token within ±``window`` time steps.

    Args:
        token:        Token to validate.
        secret_bytes: Raw secret bytes.
        digits:       Expected number of digits.
        period:       Time step in seconds.
        algorithm:    HMAC algorithm.
        window:       Allowed skew in steps (default 1).
        timestamp:    Override Unix timestamp.

    Returns:
        True if the token is valid within the window.
    """
    with TimeCounter(Secret(secret_bytes, algorithm), time_step=period) as counter:
        return counter.verify(token, digits=digits, window=window, timestamp=timestamp)
