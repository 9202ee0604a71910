"""
Auctioneer Auction Module.

This module provides the auction engines:
- Descending-price (Dutch) auction with timed price decay
- Sealed-bid second-price (Vickrey) auction with commit-reveal
- The error taxonomy shared by both
"""

from auctioneer.core.auction.errors import (
    AuctionError,
    PhaseError,
    DuplicateBidError,
    NotFoundError,
    AlreadyRevealedError,
    HashMismatchError,
    DeadlineExceededError,
    InvalidBidError,
    InvalidConfigurationError,
)

from auctioneer.core.auction.dutch import (
    DescendingPriceAuction,
    BidResult,
)

from auctioneer.core.auction.sealed_bid import (
    SealedBidAuction,
    SealedBid,
    WinnerResult,
    AuctionPhase,
    TieBreakPolicy,
    compute_tie_break,
)

__all__ = [
    # Errors
    "AuctionError",
    "PhaseError",
    "DuplicateBidError",
    "NotFoundError",
    "AlreadyRevealedError",
    "HashMismatchError",
    "DeadlineExceededError",
    "InvalidBidError",
    "InvalidConfigurationError",
    # Dutch
    "DescendingPriceAuction",
    "BidResult",
    # Sealed bid
    "SealedBidAuction",
    "SealedBid",
    "WinnerResult",
    "AuctionPhase",
    "TieBreakPolicy",
    "compute_tie_break",
]
