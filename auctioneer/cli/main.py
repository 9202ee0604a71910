"""
Auctioneer CLI - Command Line Interface for the auction engines

Main entry point for all CLI commands.
"""

import time
from typing import List, Tuple

import click

from auctioneer.utils.logger import setup_logging


def parse_bid(value: str) -> Tuple[str, float]:
    """Parse a NAME:AMOUNT bid option."""
    name, sep, amount = value.rpartition(":")
    if not sep or not name:
        raise click.BadParameter(f"expected NAME:AMOUNT, got {value!r}")
    try:
        parsed = float(amount)
    except ValueError:
        raise click.BadParameter(f"amount must be a number, got {amount!r}") from None
    if parsed < 0:
        raise click.BadParameter(f"amount must be >= 0, got {amount}")
    return name, parsed


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="Configuration .env file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """Auctioneer - Dutch and sealed-bid (Vickrey) auction engines"""
    import logging
    from auctioneer.core.auction import InvalidConfigurationError
    from auctioneer.core.config import load_config

    try:
        config = load_config(env_file)
    except InvalidConfigurationError as e:
        raise click.UsageError(str(e))

    level = logging.DEBUG if debug else config.logging_level
    setup_logging(level=level, log_dir=config.log_dir, log_to_file=config.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Commitment Command
# =============================================================================


@cli.command("commit")
@click.option("--amount", required=True, type=float, help="Bid amount")
@click.option("--salt", default=None, help="Salt (random if omitted)")
def commit(amount, salt):
    """Create a sealed-bid commitment"""
    from auctioneer.crypto import create_sealed_bid, format_amount

    commit_hash, salt = create_sealed_bid(amount, salt)

    click.echo(f"Amount: {format_amount(amount)}")
    click.echo(f"Salt:   {salt}")
    click.echo(f"Commit: {commit_hash}")
    click.echo("Keep the salt secret until the reveal phase.")


# =============================================================================
# Dutch Auction Command
# =============================================================================


@cli.command("dutch")
@click.option("--start", "starting_price", required=True, type=float, help="Starting price")
@click.option("--reserve", "reserve_price", required=True, type=float, help="Reserve price")
@click.option("--decrement", required=True, type=float, help="Price decrement per step")
@click.option("--interval", default=None, type=float, help="Seconds between decrements")
@click.option("--bidder", default=None, help="Bidder that accepts the price")
@click.option("--bid-after", default=None, type=float, help="Seconds to wait before the bid")
@click.pass_context
def dutch(ctx, starting_price, reserve_price, decrement, interval, bidder, bid_after):
    """Run a live descending-price auction"""
    from auctioneer.core.auction import DescendingPriceAuction, InvalidConfigurationError
    from auctioneer.crypto import format_amount

    config = ctx.obj["config"]
    interval = interval if interval is not None else config.decrement_interval

    try:
        auction = DescendingPriceAuction(
            starting_price=starting_price,
            reserve_price=reserve_price,
            price_decrement=decrement,
            decrement_interval=interval,
            auction_id="cli-dutch",
        )
    except InvalidConfigurationError as e:
        raise click.UsageError(str(e))

    click.echo(f"Dutch auction: {format_amount(starting_price)} -> {format_amount(reserve_price)}, "
               f"-{format_amount(decrement)} every {interval}s")
    auction.start()

    try:
        if bidder is None:
            while auction.is_running:
                time.sleep(interval / 4)
            click.echo(f"Reserve reached at {format_amount(auction.get_current_price())}, no bid placed")
            return

        if bid_after:
            time.sleep(bid_after)
        result = auction.accept_bid(bidder)
        if result.success:
            click.echo(f"Winner: {bidder} at {format_amount(result.price)}")
        else:
            click.echo(f"Bid from {bidder} rejected")
    finally:
        auction.stop()


# =============================================================================
# Sealed-Bid Auction Command
# =============================================================================


@cli.command("vickrey")
@click.option("--bid", "bids", multiple=True, required=True, help="Sealed bid as NAME:AMOUNT (repeatable)")
@click.option("--tie-break", default=None,
              type=click.Choice(["earliest_bid", "lowest_bidder_id", "seeded_hash"]),
              help="Tie-break policy for equal top bids")
@click.option("--seed", default="", help="Seed for the seeded_hash tie-break")
@click.pass_context
def vickrey(ctx, bids, tie_break, seed):
    """Run a full commit-reveal second-price round"""
    from auctioneer.core.auction import AuctionError, SealedBidAuction
    from auctioneer.core.risk import FraudDetectionService, RiskMonitor
    from auctioneer.crypto import create_sealed_bid, format_amount

    config = ctx.obj["config"]
    parsed: List[Tuple[str, float]] = [parse_bid(b) for b in bids]

    monitor = RiskMonitor(FraudDetectionService(
        alert_threshold=config.risk_alert_threshold,
        rapid_bid_threshold=config.rapid_bid_threshold,
        rapid_bid_window=config.rapid_bid_window,
    ))
    auction = SealedBidAuction(
        bidding_end_time=time.time(),
        reveal_duration=config.reveal_duration,
        auction_id="cli-vickrey",
        observer=monitor,
        tie_break=tie_break or config.tie_break,
        tie_break_seed=seed.encode("utf-8"),
    )

    click.echo("Bidding phase")
    openings = []
    for name, amount in parsed:
        commit_hash, salt = create_sealed_bid(amount)
        try:
            auction.submit_sealed_bid(name, commit_hash)
        except AuctionError as e:
            click.echo(f"  ✗ {name}: {e}")
            continue
        openings.append((name, amount, salt))
        click.echo(f"  ✓ {name} committed {commit_hash[:16]}...")

    auction.end_bidding_phase()

    click.echo("Reveal phase")
    for name, amount, salt in openings:
        try:
            auction.reveal_bid(name, amount, salt)
        except AuctionError as e:
            click.echo(f"  ✗ {name}: {e}")
            continue
        click.echo(f"  ✓ {name} revealed {format_amount(amount)}")

    result = auction.determine_winner()
    if result.winner is None:
        click.echo("No bids revealed, no winner")
    else:
        click.echo(f"Winner: {result.winner} pays {format_amount(result.price)}")

    if monitor.alerts:
        click.echo(f"Fraud alerts: {len(monitor.alerts)}")


if __name__ == "__main__":
    cli()
