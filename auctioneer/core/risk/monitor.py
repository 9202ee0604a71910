"""
Risk Monitor - BidObserver that feeds engine events to the fraud detector.

Attach one monitor to any number of engines (each with its own
auction_id). Anonymous auctions are tracked under ANONYMOUS_AUCTION.
"""

from typing import Dict, List, Optional, Tuple

from auctioneer.core.events import BidEvent, PriceEvent
from auctioneer.core.risk.fraud_detection import (
    AuctionContext,
    FraudAlert,
    FraudDetectionService,
)
from auctioneer.utils.logger import get_logger

logger = get_logger("risk")

ANONYMOUS_AUCTION = "anonymous"


class RiskMonitor:
    """Scores every bid and price transition it is notified of."""

    def __init__(self, service: Optional[FraudDetectionService] = None):
        self.service = service or FraudDetectionService()
        self.alerts: List[FraudAlert] = []
        self._contexts: Dict[str, AuctionContext] = {}
        self._scores: Dict[Tuple[str, str], float] = {}
        self._price_scores: Dict[str, float] = {}

    def context_for(self, auction_id: Optional[str]) -> AuctionContext:
        key = auction_id or ANONYMOUS_AUCTION
        if key not in self._contexts:
            self._contexts[key] = AuctionContext()
        return self._contexts[key]

    def on_bid(self, event: BidEvent) -> float:
        """Score a bid, record it, and raise an alert if it looks fraudulent."""
        auction_id = event.auction_id or ANONYMOUS_AUCTION
        context = self.context_for(auction_id)

        score = self.service.calculate_risk_score(event.bidder_id, auction_id, event.amount, context)
        self.service.record_bid(event.bidder_id, auction_id, event.amount, event.timestamp)

        context.bidder_ids.append(event.bidder_id)
        context.last_price = event.amount
        self._scores[(event.bidder_id, auction_id)] = score

        alert = self.service.generate_alert(event.bidder_id, auction_id, score)
        if alert is not None:
            self.alerts.append(alert)
            logger.warning(f"Fraud alert for {alert.user_id}: {alert.reason} "
                           f"(score={alert.risk_score:.2f})", extra={"auction_id": auction_id})
        return score

    def on_price_change(self, event: PriceEvent) -> float:
        """Score a price transition for manipulation."""
        auction_id = event.auction_id or ANONYMOUS_AUCTION
        score = self.service.detect_price_manipulation(event.current_price, event.previous_price)
        self._price_scores[auction_id] = score
        if score > 0:
            logger.info(f"Price jump {event.previous_price} -> {event.current_price} "
                        f"(score={score:.2f})", extra={"auction_id": auction_id})
        return score

    def last_score(self, user_id: str, auction_id: Optional[str] = None) -> Optional[float]:
        """Score of the user's most recent bid on the auction."""
        return self._scores.get((user_id, auction_id or ANONYMOUS_AUCTION))

    def last_price_score(self, auction_id: Optional[str] = None) -> Optional[float]:
        return self._price_scores.get(auction_id or ANONYMOUS_AUCTION)


__all__ = [
    "RiskMonitor",
    "ANONYMOUS_AUCTION",
]
