"""
Auctioneer Risk Module.

Advisory fraud scoring of bid events:
- Heuristic detectors and alerting
- A BidObserver that wires engines to the detectors
"""

from auctioneer.core.risk.fraud_detection import (
    FraudDetectionService,
    AuctionContext,
    FraudAlert,
    BidRecord,
    risk_reason,
    DEFAULT_ALERT_THRESHOLD,
    DEFAULT_RAPID_BID_THRESHOLD,
    DEFAULT_RAPID_BID_WINDOW,
)

from auctioneer.core.risk.monitor import (
    RiskMonitor,
    ANONYMOUS_AUCTION,
)

__all__ = [
    "FraudDetectionService",
    "AuctionContext",
    "FraudAlert",
    "BidRecord",
    "risk_reason",
    "DEFAULT_ALERT_THRESHOLD",
    "DEFAULT_RAPID_BID_THRESHOLD",
    "DEFAULT_RAPID_BID_WINDOW",
    "RiskMonitor",
    "ANONYMOUS_AUCTION",
]
