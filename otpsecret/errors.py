"""
Exception types raised by otpsecret.

All errors derive from :class:`OTPError`. The value-related ones also derive
from ``ValueError`` so callers that already catch ``ValueError`` keep working.
"""


class OTPError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(OTPError, ValueError):
    """A base32 secret contains invalid characters or has a malformed length."""


class InvalidConfiguration(OTPError, ValueError):
    """A construction parameter is out of range, or the secret was wiped."""


class InvalidCounter(OTPError, ValueError):
    """A counter cannot be encoded as an unsigned 64-bit big-endian value."""


class RandomSourceFailure(OTPError, RuntimeError):
    """The operating system's secure random source is unavailable."""
