"""
Centralized logging configuration for Auctioneer.

Provides colored console output and separate loggers for the
auction engines (dutch, sealed_bid), risk scoring and the CLI.

Every record carries an `auction_id` attribute ('-' when the message is
not about a single auction), so one log stream can interleave many
auctions and still be filtered per auction.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import colorlog


class AuctionIdFilter(logging.Filter):
    """Default the auction_id of records logged without one"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "auction_id"):
            record.auction_id = "-"
        return True


class AuctioneerLogger:
    """Centralized logger for Auctioneer components"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[Union[str, Path]] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Setup logging configuration.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for log files. If None, uses ./logs
            log_to_file: Whether to write logs to file
            force: Reconfigure even if already initialized
        """
        if cls._initialized and not force:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger("auctioneer")
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s %(auction_id)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        console_handler.setFormatter(console_formatter)
        console_handler.addFilter(AuctionIdFilter())
        root_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / "auctioneer.log")
            file_handler.setLevel(level)
            file_formatter = logging.Formatter(
                "%(asctime)s [%(name)s %(auction_id)s] %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            file_handler.addFilter(AuctionIdFilter())
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'dutch', 'sealed_bid', 'risk')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"auctioneer.{name}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return AuctioneerLogger.get_logger(name)


def get_auction_logger(name: str, auction_id: str) -> logging.LoggerAdapter:
    """
    Get a subsystem logger that tags every record with auction_id.

    Args:
        name: Subsystem name
        auction_id: Label of the auction instance

    Returns:
        LoggerAdapter over auctioneer.<name>
    """
    return logging.LoggerAdapter(get_logger(name), {"auction_id": auction_id})


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration, replacing any earlier setup"""
    AuctioneerLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file, force=True)
