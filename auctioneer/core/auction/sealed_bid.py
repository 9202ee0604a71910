"""
Sealed-Bid Second-Price (Vickrey) Auction.

This module implements a two-phase auction mechanism:
1. Bidding Phase: Bidders submit hash commitments to their bids
2. Revealing Phase: Bidders reveal (amount, salt), verified against the commitment

The highest revealed bid wins and pays the second-highest revealed amount
(its own amount when it is the only reveal).

Benefits:
- Nobody, the engine included, learns a bid before the reveal phase
- A revealed bid cannot be swapped for a different amount
- Truthful bidding is a dominant strategy under the second-price rule

Commitment format: see auctioneer.crypto.create_commitment.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, IntEnum
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple, Union

from auctioneer.crypto import Amount, sha256, verify_commitment
from auctioneer.core.auction.errors import (
    AlreadyRevealedError,
    DeadlineExceededError,
    DuplicateBidError,
    HashMismatchError,
    InvalidBidError,
    InvalidConfigurationError,
    NotFoundError,
    PhaseError,
)
from auctioneer.core.events import BidEvent, BidObserver, notify_bid
from auctioneer.utils.logger import get_auction_logger
from auctioneer.utils.validation import (
    validate_amount,
    validate_bidder_id,
    validate_commit_hash,
    validate_number,
    validate_salt,
)


# =============================================================================
# Enums
# =============================================================================


class AuctionPhase(IntEnum):
    """Phase of a sealed-bid auction. Transitions once, BIDDING -> REVEALING."""
    BIDDING = 0     # Accepting commitments
    REVEALING = 1   # Accepting reveals until the deadline


class TieBreakPolicy(str, Enum):
    """How equal top amounts are ordered."""
    EARLIEST_BID = "earliest_bid"           # First sealed bid submitted wins
    LOWEST_BIDDER_ID = "lowest_bidder_id"   # Lexicographically smallest id wins
    SEEDED_HASH = "seeded_hash"             # Smallest SHA-256(seed || id) wins


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class SealedBid:
    """
    A bidder's record.

    Holds only the commitment until a matching reveal fills in
    revealed_amount and salt, which are never changed afterwards.
    """
    bidder_id: str
    commit_hash: str
    sequence: int
    submitted_at: float
    revealed_amount: Optional[Amount] = None
    salt: Optional[str] = None
    revealed_at: Optional[float] = None

    @property
    def is_revealed(self) -> bool:
        return self.revealed_amount is not None


@dataclass(frozen=True)
class WinnerResult:
    """Winner and clearing price. winner is None when nothing was revealed."""
    winner: Optional[str]
    price: Amount


# =============================================================================
# Sealed-Bid Auction
# =============================================================================


class SealedBidAuction:
    """
    A single commit-reveal second-price auction.

    All access to the bid mapping and the phase goes through one lock,
    so a submit or reveal racing with end_bidding_phase() observes
    either phase consistently.
    """

    def __init__(
        self,
        bidding_end_time: Union[float, datetime],
        reveal_duration: float,
        auction_id: Optional[str] = None,
        observer: Optional[BidObserver] = None,
        tie_break: Union[TieBreakPolicy, str] = TieBreakPolicy.EARLIEST_BID,
        tie_break_seed: bytes = b"",
        clock: Callable[[], float] = time.time,
    ):
        if isinstance(bidding_end_time, datetime):
            bidding_end_time = bidding_end_time.timestamp()

        for value, name in ((bidding_end_time, "bidding_end_time"), (reveal_duration, "reveal_duration")):
            valid, err = validate_number(value, name)
            if not valid:
                raise InvalidConfigurationError(err)

        try:
            tie_break = TieBreakPolicy(tie_break)
        except ValueError:
            raise InvalidConfigurationError(f"Unknown tie-break policy: {tie_break}") from None

        self.auction_id = auction_id
        self.observer = observer
        self.tie_break = tie_break
        self.tie_break_seed = tie_break_seed
        self._clock = clock
        self._logger = get_auction_logger("sealed_bid", self._label())

        self.bidding_end_time = float(bidding_end_time)
        self._reveal_deadline = self.bidding_end_time + reveal_duration

        self._phase = AuctionPhase.BIDDING
        self._bids: Dict[str, SealedBid] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Bidding Phase
    # =========================================================================

    def submit_sealed_bid(self, bidder_id: str, commit_hash: str) -> bool:
        """
        Store a bidder's commitment.

        Args:
            bidder_id: Bidder identifier
            commit_hash: Hex SHA-256 commitment to (amount, salt)

        Returns:
            True on success

        Raises:
            InvalidBidError: Malformed bidder id or commitment
            PhaseError: Bidding phase has ended
            DuplicateBidError: Bidder already submitted a sealed bid
        """
        for valid, err in (validate_bidder_id(bidder_id), validate_commit_hash(commit_hash)):
            if not valid:
                raise InvalidBidError(err, bidder_id=bidder_id if isinstance(bidder_id, str) else None)

        with self._lock:
            if self._phase != AuctionPhase.BIDDING:
                raise PhaseError("Bidding phase has ended", bidder_id=bidder_id)

            if bidder_id in self._bids:
                raise DuplicateBidError(f"Bidder {bidder_id} already submitted a bid", bidder_id=bidder_id)

            self._bids[bidder_id] = SealedBid(
                bidder_id=bidder_id,
                commit_hash=commit_hash.lower(),
                sequence=len(self._bids),
                submitted_at=self._clock(),
            )

        self._logger.debug(f"Received sealed bid from {bidder_id}")
        return True

    def end_bidding_phase(self) -> None:
        """Close bidding and open reveals. No effect if already revealing."""
        with self._lock:
            if self._phase == AuctionPhase.REVEALING:
                return
            self._phase = AuctionPhase.REVEALING
            bid_count = len(self._bids)

        self._logger.info(f"Entered reveal phase with {bid_count} sealed bids, "
                          f"reveal deadline {self._reveal_deadline}")

    # =========================================================================
    # Revealing Phase
    # =========================================================================

    def reveal_bid(self, bidder_id: str, amount: Amount, salt: str) -> bool:
        """
        Reveal a sealed bid.

        Args:
            bidder_id: Bidder identifier
            amount: Bid amount committed to
            salt: Salt used in the commitment

        Returns:
            True on success

        Raises:
            InvalidBidError: Malformed bidder id, amount or salt
            PhaseError: Still in bidding phase
            DeadlineExceededError: Reveal deadline has passed
            NotFoundError: Bidder never submitted a sealed bid
            AlreadyRevealedError: Bid was already revealed
            HashMismatchError: (amount, salt) does not match the commitment
        """
        checks = (validate_bidder_id(bidder_id), validate_amount(amount), validate_salt(salt))
        for valid, err in checks:
            if not valid:
                raise InvalidBidError(err, bidder_id=bidder_id if isinstance(bidder_id, str) else None)

        with self._lock:
            if self._phase == AuctionPhase.BIDDING:
                raise PhaseError("Still in bidding phase", bidder_id=bidder_id)

            now = self._clock()
            if now > self._reveal_deadline:
                raise DeadlineExceededError(
                    f"Reveal deadline {self._reveal_deadline} passed ({now})", bidder_id=bidder_id
                )

            bid = self._bids.get(bidder_id)
            if bid is None:
                raise NotFoundError(f"No sealed bid found for {bidder_id}", bidder_id=bidder_id)

            if bid.is_revealed:
                raise AlreadyRevealedError(f"Bid from {bidder_id} already revealed", bidder_id=bidder_id)

            if not verify_commitment(bid.commit_hash, amount, salt):
                self._logger.warning(f"Reveal mismatch for {bidder_id}: "
                                 f"possible bid substitution")
                raise HashMismatchError(
                    f"Reveal from {bidder_id} does not match commitment", bidder_id=bidder_id
                )

            bid.revealed_amount = amount
            bid.salt = salt
            bid.revealed_at = now

        self._logger.debug(f"Valid reveal from {bidder_id}: amount={amount}")
        notify_bid(self.observer, BidEvent(
            bidder_id=bidder_id,
            auction_id=self.auction_id,
            amount=amount,
            timestamp=now,
        ))
        return True

    # =========================================================================
    # Winner Determination
    # =========================================================================

    def determine_winner(self) -> WinnerResult:
        """
        Select the winner by the second-price rule.

        Pure read over revealed bids: the highest amount wins (ties
        ordered by self.tie_break) and pays the second-highest revealed
        amount, or its own amount if it is the only reveal.

        Returns:
            WinnerResult(winner, price); WinnerResult(None, 0) without reveals
        """
        ranked = self.rank_revealed_bids()
        if not ranked:
            return WinnerResult(winner=None, price=0)

        winner = ranked[0]
        price = ranked[1].revealed_amount if len(ranked) > 1 else winner.revealed_amount
        return WinnerResult(winner=winner.bidder_id, price=price)

    def rank_revealed_bids(self) -> List[SealedBid]:
        """Snapshots of the revealed bids, best first."""
        with self._lock:
            revealed = [replace(bid) for bid in self._bids.values() if bid.is_revealed]

        revealed.sort(key=self._sort_key)
        return revealed

    def _sort_key(self, bid: SealedBid) -> Tuple:
        if self.tie_break == TieBreakPolicy.LOWEST_BIDDER_ID:
            tie = bid.bidder_id
        elif self.tie_break == TieBreakPolicy.SEEDED_HASH:
            tie = compute_tie_break(self.tie_break_seed, bid.bidder_id)
        else:
            tie = bid.sequence
        return (-bid.revealed_amount, tie)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def phase(self) -> AuctionPhase:
        with self._lock:
            return self._phase

    @property
    def reveal_deadline(self) -> float:
        return self._reveal_deadline

    def get_bid(self, bidder_id: str) -> Optional[SealedBid]:
        """Snapshot of a bidder's record, if any."""
        with self._lock:
            bid = self._bids.get(bidder_id)
            return replace(bid) if bid is not None else None

    def has_bid(self, bidder_id: str) -> bool:
        with self._lock:
            return bidder_id in self._bids

    def get_bid_count(self) -> int:
        """Number of sealed bids received."""
        with self._lock:
            return len(self._bids)

    def get_reveal_count(self) -> int:
        """Number of bids revealed."""
        with self._lock:
            return sum(1 for bid in self._bids.values() if bid.is_revealed)

    def get_unrevealed_bidders(self) -> List[str]:
        """Bidders who committed but didn't reveal, in submission order."""
        with self._lock:
            return [bid.bidder_id for bid in self._bids.values() if not bid.is_revealed]

    def _label(self) -> str:
        return self.auction_id or hex(id(self))


# =============================================================================
# Helper Functions
# =============================================================================


def compute_tie_break(seed: bytes, bidder_id: str) -> bytes:
    """
    Deterministic tie-break value; smaller wins.

    Bidders cannot grind it as long as the seed is fixed by the auction
    house after bidding closes.
    """
    return sha256(seed + bidder_id.encode("utf-8"))


__all__ = [
    "SealedBidAuction",
    "SealedBid",
    "WinnerResult",
    "AuctionPhase",
    "TieBreakPolicy",
    "compute_tie_break",
]
