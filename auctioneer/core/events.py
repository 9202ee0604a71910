"""
Bid and price events emitted by the auction engines.

Engines notify an optional BidObserver (e.g. the risk monitor) after
each accepted or revealed bid and after each price transition. The
observer is purely observational: whatever it returns or raises, the
auction outcome is unchanged.
"""

from dataclasses import dataclass, field
import time
from typing import Optional, Protocol, runtime_checkable

from auctioneer.crypto import Amount
from auctioneer.utils.logger import get_logger

logger = get_logger("events")


@dataclass(frozen=True)
class BidEvent:
    """A bid that an engine accepted (Dutch) or verified on reveal (Vickrey)."""
    bidder_id: str
    auction_id: Optional[str]
    amount: Amount
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class PriceEvent:
    """A change of the asking price of a descending auction."""
    auction_id: Optional[str]
    previous_price: Amount
    current_price: Amount
    timestamp: float = field(default_factory=time.time)


@runtime_checkable
class BidObserver(Protocol):
    """Receives engine notifications."""

    def on_bid(self, event: BidEvent) -> object:
        ...

    def on_price_change(self, event: PriceEvent) -> object:
        ...


def notify_bid(observer: Optional[BidObserver], event: BidEvent) -> None:
    """Deliver a bid event, isolating the engine from observer failures."""
    if observer is None:
        return
    try:
        observer.on_bid(event)
    except Exception:
        logger.exception(f"Observer failed on bid from {event.bidder_id} "
                         f"(auction {event.auction_id})")


def notify_price_change(observer: Optional[BidObserver], event: PriceEvent) -> None:
    """Deliver a price event, isolating the engine from observer failures."""
    if observer is None:
        return
    try:
        observer.on_price_change(event)
    except Exception:
        logger.exception(f"Observer failed on price change "
                         f"{event.previous_price} -> {event.current_price} "
                         f"(auction {event.auction_id})")


__all__ = [
    "BidEvent",
    "PriceEvent",
    "BidObserver",
    "notify_bid",
    "notify_price_change",
]
