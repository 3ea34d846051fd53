"""
Cryptographic primitives for otpsecret.

Keyed hash  : HMAC-SHA1 / HMAC-SHA256 / HMAC-SHA512 (``cryptography``)
Randomness  : operating-system CSPRNG via :mod:`secrets`
"""

import hmac
import secrets
from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from otpsecret.errors import RandomSourceFailure


# ── Algorithms ────────────────────────────────────────────────────────────────

class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


# Single source of truth for both the default key size and the HMAC digest.
_ALG_MAP: dict[Algorithm, type[hashes.HashAlgorithm]] = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}

_unmapped = set(Algorithm) - set(_ALG_MAP)
if _unmapped:
    raise ImportError(f"No hash mapping for algorithms: {sorted(a.value for a in _unmapped)}")


def _hash_for(algorithm: Algorithm) -> type[hashes.HashAlgorithm]:
    try:
        return _ALG_MAP[Algorithm(algorithm)]
    except (KeyError, ValueError):
        raise ValueError(
            f"Unsupported algorithm '{algorithm}'. Supported: SHA1, SHA256, SHA512."
        ) from None


def output_len(algorithm: Algorithm) -> int:
    """Return the digest size in bytes of ``algorithm`` (20, 32 or 64)."""
    return _hash_for(algorithm).digest_size


# ── Keyed hash ────────────────────────────────────────────────────────────────

def keyed_hash(algorithm: Algorithm, key: bytes, message: bytes) -> bytes:
    """
    Compute ``HMAC(key, message)`` with the hash selected by ``algorithm``.

    Args:
        algorithm: HMAC algorithm.
        key:       Raw key bytes (any length). Passed through without copying.
        message:   Message to authenticate.

    Returns:
        Digest of ``output_len(algorithm)`` bytes.
    """
    mac = crypto_hmac.HMAC(key, _hash_for(algorithm)())
    mac.update(message)
    return mac.finalize()


# ── Randomness ────────────────────────────────────────────────────────────────

def random_bytes(n: int) -> bytes:
    """
    Return ``n`` bytes from the operating system's CSPRNG.

    Raises:
        RandomSourceFailure: If the entropy source is unavailable. There is
            no fallback to a weaker generator.
    """
    try:
        return secrets.token_bytes(n)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceFailure(f"Secure random source unavailable: {exc}") from exc


# ── Helpers ───────────────────────────────────────────────────────────────────

def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())


def wipe(buffer: bytearray) -> None:
    """Overwrite ``buffer`` with zeros in place (best-effort)."""
    buffer[:] = bytes(len(buffer))
