"""
Fraud Detection - Heuristic risk scoring of bid events.

Three independent detectors, each returning a score in [0, 1]:
- Rapid bidding: many bids by one user on one auction in a short window
- Price manipulation: large relative jump from the previous clearing price
- Shilling: the same bidder ids recurring in an auction's bidder list

The overall risk score is their mean. Scores are advisory only; the
engines never consult them.
"""

from collections import defaultdict
from dataclasses import dataclass, field
import time
from typing import Callable, Dict, List, Optional, Tuple

from auctioneer.crypto import Amount
from auctioneer.utils.logger import get_logger

logger = get_logger("risk")


# =============================================================================
# Constants
# =============================================================================

DEFAULT_ALERT_THRESHOLD = 0.7
DEFAULT_RAPID_BID_THRESHOLD = 3      # bids ...
DEFAULT_RAPID_BID_WINDOW = 5.0       # ... within this many seconds

RAPID_BID_SCORE = 0.6

# (relative jump above, score)
PRICE_JUMP_BANDS = ((0.5, 0.8), (0.25, 0.5))

# (repetition rate above, score)
SHILLING_BANDS = ((0.6, 0.85), (0.4, 0.6))


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class AuctionContext:
    """What the scorer needs to know about an auction."""
    last_price: Amount = 0
    bidder_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FraudAlert:
    user_id: str
    auction_id: str
    risk_score: float
    reason: str
    timestamp: float


@dataclass(frozen=True)
class BidRecord:
    amount: Amount
    timestamp: float


# =============================================================================
# Fraud Detection Service
# =============================================================================


class FraudDetectionService:
    """
    Scores bids against recent per-user history.

    History is kept per (user_id, auction_id) pair.
    """

    def __init__(
        self,
        alert_threshold: float = DEFAULT_ALERT_THRESHOLD,
        rapid_bid_threshold: int = DEFAULT_RAPID_BID_THRESHOLD,
        rapid_bid_window: float = DEFAULT_RAPID_BID_WINDOW,
        clock: Callable[[], float] = time.time,
    ):
        self.alert_threshold = alert_threshold
        self.rapid_bid_threshold = rapid_bid_threshold
        self.rapid_bid_window = rapid_bid_window
        self._clock = clock
        self._history: Dict[Tuple[str, str], List[BidRecord]] = defaultdict(list)

    def record_bid(
        self,
        user_id: str,
        auction_id: str,
        bid_amount: Amount,
        timestamp: Optional[float] = None,
    ) -> None:
        """Add a bid to the user's history for this auction."""
        when = self._clock() if timestamp is None else timestamp
        self._history[(user_id, auction_id)].append(BidRecord(amount=bid_amount, timestamp=when))

    def get_history(self, user_id: str, auction_id: str) -> List[BidRecord]:
        return list(self._history.get((user_id, auction_id), ()))

    # =========================================================================
    # Detectors
    # =========================================================================

    def detect_rapid_bidding(self, user_id: str, auction_id: str) -> float:
        """Score RAPID_BID_SCORE when the user bid too often in the window."""
        cutoff = self._clock() - self.rapid_bid_window
        history = self._history.get((user_id, auction_id), ())
        recent = [bid for bid in history if bid.timestamp > cutoff]

        if len(recent) >= self.rapid_bid_threshold:
            return RAPID_BID_SCORE
        return 0.0

    def detect_price_manipulation(self, current_price: Amount, previous_price: Amount) -> float:
        """
        Score the relative jump between two prices.

        No previous price (<= 0) means nothing to compare against.
        """
        if previous_price <= 0:
            return 0.0

        jump = abs(current_price - previous_price) / previous_price
        for threshold, score in PRICE_JUMP_BANDS:
            if jump > threshold:
                return score
        return 0.0

    def detect_bid_shilling(self, bidder_ids: List[str]) -> float:
        """Score how often the same bidders recur in a bidder list."""
        if not bidder_ids:
            return 0.0

        repetition_rate = 1 - len(set(bidder_ids)) / len(bidder_ids)
        for threshold, score in SHILLING_BANDS:
            if repetition_rate > threshold:
                return score
        return 0.0

    # =========================================================================
    # Scoring
    # =========================================================================

    def calculate_risk_score(
        self,
        user_id: str,
        auction_id: str,
        bid_amount: Amount,
        context: AuctionContext,
    ) -> float:
        """
        Overall risk of a bid, the mean of the three detectors capped at 1.0.

        Args:
            user_id: Bidder
            auction_id: Auction bid on
            bid_amount: Amount of the bid being scored
            context: Last clearing price and bidder list of the auction

        Returns:
            Risk score in [0, 1]
        """
        rapid = self.detect_rapid_bidding(user_id, auction_id)
        manipulation = self.detect_price_manipulation(bid_amount, context.last_price)
        shilling = self.detect_bid_shilling(context.bidder_ids + [user_id])

        return min((rapid + manipulation + shilling) / 3, 1.0)

    def generate_alert(self, user_id: str, auction_id: str, risk_score: float) -> Optional[FraudAlert]:
        """Build an alert if risk_score reaches the alert threshold."""
        if risk_score < self.alert_threshold:
            return None

        logger.debug(f"Risk {risk_score:.2f} for {user_id} on {auction_id} reached threshold "
                     f"{self.alert_threshold}")
        return FraudAlert(
            user_id=user_id,
            auction_id=auction_id,
            risk_score=risk_score,
            reason=risk_reason(risk_score),
            timestamp=self._clock(),
        )


def risk_reason(score: float) -> str:
    if score > 0.85:
        return "Critical fraud pattern detected"
    if score > 0.7:
        return "High fraud risk - suspicious bidding behavior"
    if score > 0.5:
        return "Medium fraud risk - unusual bid pattern"
    return "Low fraud risk"


__all__ = [
    "FraudDetectionService",
    "AuctionContext",
    "FraudAlert",
    "BidRecord",
    "risk_reason",
    "DEFAULT_ALERT_THRESHOLD",
    "DEFAULT_RAPID_BID_THRESHOLD",
    "DEFAULT_RAPID_BID_WINDOW",
]
