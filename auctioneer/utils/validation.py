"""
Input Validation - Sanitization of caller-supplied auction inputs.

Engines receive already-authenticated calls, but the values themselves
still need checking before they touch auction state:
- Bidder and auction identifiers
- Prices and amounts (finite, non-negative numbers)
- Commitment hashes and salts
"""

import math
from decimal import Decimal
from numbers import Real
from typing import Any, Tuple

from auctioneer.crypto import COMMITMENT_HEX_LENGTH, is_commitment

# =============================================================================
# Constants
# =============================================================================

MAX_IDENTIFIER_LENGTH = 256
MAX_SALT_LENGTH = 1024


# =============================================================================
# Validation Functions
# =============================================================================


def validate_number(
    value: Any,
    name: str,
    allow_zero: bool = True,
) -> Tuple[bool, str]:
    """
    Validate a finite, non-negative number.

    Args:
        value: Value to validate
        name: Field name for error messages
        allow_zero: Whether zero is acceptable

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        return False, f"{name} must be a number, got {type(value).__name__}"

    if isinstance(value, Decimal):
        if not value.is_finite():
            return False, f"{name} must be finite, got {value}"
    elif not math.isfinite(value):
        return False, f"{name} must be finite, got {value}"

    if value < 0:
        return False, f"{name} must be >= 0, got {value}"

    if not allow_zero and value == 0:
        return False, f"{name} must be > 0, got {value}"

    return True, ""


def validate_amount(amount: Any) -> Tuple[bool, str]:
    """Validate a bid amount."""
    return validate_number(amount, "amount")


def validate_identifier(
    value: Any,
    name: str,
    max_length: int = MAX_IDENTIFIER_LENGTH,
) -> Tuple[bool, str]:
    """
    Validate a bidder or auction identifier.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum identifier length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if not value.strip():
        return False, f"{name} must not be empty"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    return True, ""


def validate_bidder_id(bidder_id: Any) -> Tuple[bool, str]:
    """Validate a bidder identifier."""
    return validate_identifier(bidder_id, "bidder_id")


def validate_commit_hash(value: Any) -> Tuple[bool, str]:
    """Validate a hex-encoded SHA-256 commitment."""
    if not isinstance(value, str):
        return False, f"commit_hash must be str, got {type(value).__name__}"

    if len(value) != COMMITMENT_HEX_LENGTH:
        return False, f"commit_hash must be {COMMITMENT_HEX_LENGTH} hex chars, got {len(value)}"

    if not is_commitment(value):
        return False, "commit_hash contains invalid hex characters"

    return True, ""


def validate_salt(salt: Any) -> Tuple[bool, str]:
    """Validate a reveal salt."""
    if not isinstance(salt, str):
        return False, f"salt must be str, got {type(salt).__name__}"

    if len(salt) > MAX_SALT_LENGTH:
        return False, f"salt exceeds max length {MAX_SALT_LENGTH}"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_number",
    "validate_amount",
    "validate_identifier",
    "validate_bidder_id",
    "validate_commit_hash",
    "validate_salt",
    "MAX_IDENTIFIER_LENGTH",
    "MAX_SALT_LENGTH",
]
