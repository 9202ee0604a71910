"""
Auction errors.

Every protocol violation is raised at the call that caused it and
leaves auction state unchanged. All are caller errors except
HashMismatchError, which operators should treat as a possible
bid-substitution attempt.
"""

from typing import Optional


class AuctionError(Exception):
    """Base class for auction protocol errors."""

    def __init__(self, message: str, bidder_id: Optional[str] = None):
        super().__init__(message)
        self.bidder_id = bidder_id


class PhaseError(AuctionError):
    """Operation invoked in the wrong lifecycle phase."""


class DuplicateBidError(AuctionError):
    """Bidder already has a sealed bid on file."""


class NotFoundError(AuctionError):
    """Reveal for a bidder with no sealed bid."""


class AlreadyRevealedError(AuctionError):
    """Reveal attempted twice for the same bidder."""


class HashMismatchError(AuctionError):
    """Revealed (amount, salt) does not open the stored commitment."""


class DeadlineExceededError(AuctionError):
    """Reveal attempted after the reveal deadline."""


class InvalidBidError(AuctionError, ValueError):
    """Malformed bidder id, commitment, amount or salt."""


class InvalidConfigurationError(AuctionError, ValueError):
    """Auction or library configuration is out of range."""


__all__ = [
    "AuctionError",
    "PhaseError",
    "DuplicateBidError",
    "NotFoundError",
    "AlreadyRevealedError",
    "HashMismatchError",
    "DeadlineExceededError",
    "InvalidBidError",
    "InvalidConfigurationError",
]
