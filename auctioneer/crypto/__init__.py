"""
Cryptographic primitives for Auctioneer.

This module provides:
- Hashing (SHA-256)
- The sealed-bid commitment scheme
- Salt generation

Design Notes:
-------------
A sealed bid is committed as

    C = SHA-256(format_amount(amount) || salt)

hex-encoded, where `format_amount` is the canonical decimal string of the
amount. The same function is used on submit (by the bidder) and on reveal
(by the engine), so the amount rendering must be canonical: 42, 42.0 and
Decimal("42.00") all commit as "42".

The salt is what makes the commitment hiding. Bid amounts live in a small
space and are trivially brute-forced without it, so bidders should use
`generate_salt()` rather than a memorable string.
"""

import hashlib
import hmac
import math
import secrets
from decimal import Decimal
from numbers import Real
from typing import Optional, Tuple, Union


Amount = Union[int, float, Decimal]


# =============================================================================
# Constants
# =============================================================================

# Length of a hex-encoded SHA-256 digest
COMMITMENT_HEX_LENGTH = 64

# Default salt entropy in bytes
DEFAULT_SALT_BYTES = 16


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Used for: bid commitments, seeded tie-breaks.
    """
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 hash as a lowercase hex string."""
    return hashlib.sha256(data).hexdigest()


# =============================================================================
# Commitment Scheme
# =============================================================================


def format_amount(amount: Amount) -> str:
    """
    Render an amount as its canonical decimal string.

    Ints render exactly and Decimals use plain (non-exponent) notation.
    Floats render the way JavaScript's Number#toString does: shortest
    round-tripping digits, plain notation for 1e-6 <= |x| < 1e21 and
    exponent form (1e-7, 1.5e+21) outside it. Bidders committing from
    a browser therefore produce the same string for the same number.

    Raises:
        TypeError: If amount is not a number (bools are rejected)
        ValueError: If a float amount is infinite or NaN
    """
    if isinstance(amount, bool) or not isinstance(amount, (Real, Decimal)):
        raise TypeError(f"amount must be a number, got {type(amount).__name__}")

    if isinstance(amount, Decimal):
        if amount == amount.to_integral_value():
            return str(int(amount))
        return format(amount.normalize(), "f")

    if isinstance(amount, int):
        return str(amount)

    return _format_float(float(amount))


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"amount must be finite, got {value}")
    if value == 0:
        return "0"

    shortest = Decimal(repr(value)).normalize()
    sign, digits, exponent = shortest.as_tuple()
    # Position of the decimal point relative to the first significant digit
    point = len(digits) + exponent
    if -6 < point <= 21:
        return format(shortest, "f")

    mantissa = "".join(map(str, digits))
    if len(mantissa) > 1:
        mantissa = f"{mantissa[0]}.{mantissa[1:]}"
    return f"{'-' if sign else ''}{mantissa}e{point - 1:+d}"


def create_commitment(amount: Amount, salt: str) -> str:
    """
    Create a commitment for a sealed bid.

    Args:
        amount: Bid amount
        salt: Random blinding string

    Returns:
        Hex-encoded SHA-256 commitment
    """
    if not isinstance(salt, str):
        raise TypeError(f"salt must be str, got {type(salt).__name__}")
    return sha256_hex((format_amount(amount) + salt).encode("utf-8"))


def verify_commitment(commit_hash: str, amount: Amount, salt: str) -> bool:
    """
    Check that (amount, salt) opens commit_hash.

    Comparison is constant-time.
    """
    expected = create_commitment(amount, salt)
    return hmac.compare_digest(expected, commit_hash.lower())


def generate_salt(nbytes: int = DEFAULT_SALT_BYTES) -> str:
    """Generate a random hex salt."""
    return secrets.token_hex(nbytes)


def create_sealed_bid(amount: Amount, salt: Optional[str] = None) -> Tuple[str, str]:
    """
    Create a matching commitment and salt for a bidder.

    Args:
        amount: Bid amount
        salt: Blinding string; generated when omitted

    Returns:
        (commit_hash, salt) pair. Keep the salt secret until reveal.
    """
    if salt is None:
        salt = generate_salt()
    return create_commitment(amount, salt), salt


# =============================================================================
# Utilities
# =============================================================================


def is_commitment(value: str) -> bool:
    """Check that value looks like a hex-encoded SHA-256 digest."""
    if not isinstance(value, str) or len(value) != COMMITMENT_HEX_LENGTH:
        return False
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True


__all__ = [
    "Amount",
    "COMMITMENT_HEX_LENGTH",
    "DEFAULT_SALT_BYTES",
    "sha256",
    "sha256_hex",
    "format_amount",
    "create_commitment",
    "verify_commitment",
    "generate_salt",
    "create_sealed_bid",
    "is_commitment",
]
