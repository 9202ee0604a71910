"""
Descending-Price (Dutch) Auction.

The asking price starts high and decays on a fixed cadence:

    every decrement_interval seconds:
        current_price = max(current_price - price_decrement, reserve_price)

until either the reserve is reached (decay stops, the price stays pinned
at the reserve) or a bidder accepts the current price. The first
acceptance wins; every later one is rejected with BidResult(False, 0).

Concurrency:
- One daemon thread per instance drives the decay (at most one timer;
  a second start() raises PhaseError).
- tick() and accept_bid() run under the same lock, so a bid is always
  recorded at exactly the price that stops the decay.
"""

from dataclasses import dataclass
from decimal import Decimal
import threading
import time
from typing import Callable, Optional

from auctioneer.crypto import Amount
from auctioneer.core.auction.errors import (
    InvalidBidError,
    InvalidConfigurationError,
    PhaseError,
)
from auctioneer.core.events import (
    BidEvent,
    BidObserver,
    PriceEvent,
    notify_bid,
    notify_price_change,
)
from auctioneer.utils.logger import get_auction_logger
from auctioneer.utils.validation import validate_bidder_id, validate_number


@dataclass(frozen=True)
class BidResult:
    """Outcome of accept_bid. Callers must branch on `success`."""
    success: bool
    price: Amount


REJECTED = BidResult(success=False, price=0)


class DescendingPriceAuction:
    """
    A single Dutch auction.

    Owns one mutable price that only tick() lowers and one winner slot
    that only accept_bid() fills.
    """

    def __init__(
        self,
        starting_price: Amount,
        reserve_price: Amount,
        price_decrement: Amount,
        decrement_interval: Amount,
        auction_id: Optional[str] = None,
        observer: Optional[BidObserver] = None,
        clock: Callable[[], float] = time.time,
    ):
        _validate_configuration(starting_price, reserve_price, price_decrement, decrement_interval)

        self.starting_price = starting_price
        self.reserve_price = reserve_price
        self.price_decrement = price_decrement
        self.decrement_interval = float(decrement_interval)
        self.auction_id = auction_id
        self.observer = observer
        self._clock = clock
        self._logger = get_auction_logger("dutch", self._label())

        self._current_price: Amount = starting_price
        self._winner: Optional[str] = None
        self._running = False
        self._started = False
        self._stopped = False

        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """
        Start the decay timer.

        Raises:
            PhaseError: If the auction was already started, stopped or won
        """
        with self._lock:
            if self._started:
                raise PhaseError("Auction already started")
            if self._stopped:
                raise PhaseError("Auction has been stopped")
            if self._winner is not None:
                raise PhaseError("Auction already has a winner")

            self._started = True

            if self._current_price == self.reserve_price:
                self._logger.info(f"Starts at reserve {self.reserve_price}, no decay")
                return

            self._running = True
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._decay_loop,
                args=(self._stop_event,),
                name=f"dutch-auction-{self._label()}",
                daemon=True,
            )
            self._thread.start()

        self._logger.info(f"Started at {self.starting_price}, "
                          f"-{self.price_decrement} every {self.decrement_interval}s "
                          f"down to {self.reserve_price}")

    def stop(self) -> None:
        """Stop price decay. Idempotent."""
        with self._lock:
            was_running = self._running
            self._stopped = True
            thread = self._halt()

        if was_running:
            self._logger.info(f"Stopped at {self._current_price}")

        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _decay_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.decrement_interval):
            try:
                self.tick()
            except Exception:
                self._logger.exception("Decay step failed, stopping timer")
                with self._lock:
                    self._halt()
                return

    def _halt(self) -> Optional[threading.Thread]:
        """Stop decay; caller holds the lock. Returns the timer thread, if any."""
        self._running = False
        if self._stop_event is not None:
            self._stop_event.set()
            self._stop_event = None
        thread, self._thread = self._thread, None
        return thread

    # =========================================================================
    # Price Decay
    # =========================================================================

    def tick(self) -> Amount:
        """
        Apply one decrement step.

        No-op unless the auction is running. Stops the decay once the
        reserve is reached.

        Returns:
            The price after the step
        """
        with self._lock:
            if not self._running:
                return self._current_price

            previous = self._current_price
            current = max(previous - self.price_decrement, self.reserve_price)
            self._current_price = current

            event = None
            if current != previous:
                event = PriceEvent(
                    auction_id=self.auction_id,
                    previous_price=previous,
                    current_price=current,
                    timestamp=self._clock(),
                )

            reached_reserve = current == self.reserve_price
            if reached_reserve:
                self._halt()

        self._logger.debug(f"Price reduced to {current}")
        if reached_reserve:
            self._logger.info(f"Reached reserve {current}, decay stopped")

        if event is not None:
            notify_price_change(self.observer, event)
        return current

    # =========================================================================
    # Bidding
    # =========================================================================

    def accept_bid(self, bidder_id: str) -> BidResult:
        """
        Accept the current price on behalf of bidder_id.

        Only the first acceptance succeeds; it wins at the price current
        at that instant and stops the decay.

        Returns:
            BidResult(True, price) for the winner, BidResult(False, 0) otherwise

        Raises:
            InvalidBidError: If bidder_id is malformed
        """
        valid, err = validate_bidder_id(bidder_id)
        if not valid:
            raise InvalidBidError(err, bidder_id=None)

        with self._lock:
            if self._winner is not None:
                rejected = True
            else:
                rejected = False
                self._winner = bidder_id
                final_price = self._current_price
                self._halt()

        if rejected:
            self._logger.debug(f"Rejected bid from {bidder_id}: "
                               f"winner already {self._winner}")
            return REJECTED

        self._logger.info(f"Won by {bidder_id} at {final_price}")
        notify_bid(self.observer, BidEvent(
            bidder_id=bidder_id,
            auction_id=self.auction_id,
            amount=final_price,
            timestamp=self._clock(),
        ))
        return BidResult(success=True, price=final_price)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_price(self) -> Amount:
        """Current asking price."""
        with self._lock:
            return self._current_price

    def get_winner(self) -> Optional[str]:
        """Winning bidder, if any."""
        with self._lock:
            return self._winner

    @property
    def current_price(self) -> Amount:
        return self.get_current_price()

    @property
    def winner(self) -> Optional[str]:
        return self.get_winner()

    @property
    def is_running(self) -> bool:
        """Whether the decay timer is active."""
        with self._lock:
            return self._running

    def _label(self) -> str:
        return self.auction_id or hex(id(self))


def _validate_configuration(
    starting_price: Amount,
    reserve_price: Amount,
    price_decrement: Amount,
    decrement_interval: float,
) -> None:
    checks = [
        validate_number(starting_price, "starting_price"),
        validate_number(reserve_price, "reserve_price"),
        validate_number(price_decrement, "price_decrement", allow_zero=False),
        validate_number(decrement_interval, "decrement_interval", allow_zero=False),
    ]
    for valid, err in checks:
        if not valid:
            raise InvalidConfigurationError(err)

    prices = (starting_price, reserve_price, price_decrement)
    if any(isinstance(p, Decimal) for p in prices) and any(isinstance(p, float) for p in prices):
        raise InvalidConfigurationError("Cannot mix Decimal and float prices")

    if reserve_price > starting_price:
        raise InvalidConfigurationError(
            f"reserve_price ({reserve_price}) must be <= starting_price ({starting_price})"
        )


__all__ = [
    "DescendingPriceAuction",
    "BidResult",
]
