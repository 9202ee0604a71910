"""
Configuration parameters for Auctioneer.

Defines engine defaults, risk-scoring thresholds and logging options.
Values can be overridden through AUCTIONEER_* environment variables,
either exported or listed in a .env file.
"""

from dataclasses import dataclass, fields
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import dotenv_values

from auctioneer.core.auction.errors import InvalidConfigurationError
from auctioneer.core.auction.sealed_bid import TieBreakPolicy

ENV_PREFIX = "AUCTIONEER_"


@dataclass
class AuctionConfig:
    """Library-wide configuration parameters"""

    # Dutch auction
    decrement_interval: float = 1.0  # Seconds between price decrements

    # Sealed-bid auction
    reveal_duration: float = 3600.0  # Seconds after bidding end to reveal
    tie_break: str = TieBreakPolicy.EARLIEST_BID.value

    # Risk scoring
    risk_alert_threshold: float = 0.7
    rapid_bid_threshold: int = 3  # Bids ...
    rapid_bid_window: float = 5.0  # ... within this many seconds

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    def __post_init__(self):
        """Validate values"""
        if self.decrement_interval <= 0:
            raise InvalidConfigurationError("decrement_interval must be > 0")
        if self.reveal_duration < 0:
            raise InvalidConfigurationError("reveal_duration must be >= 0")
        if not 0 <= self.risk_alert_threshold <= 1:
            raise InvalidConfigurationError("risk_alert_threshold must be in [0, 1]")
        if self.rapid_bid_threshold < 1:
            raise InvalidConfigurationError("rapid_bid_threshold must be >= 1")
        if self.rapid_bid_window <= 0:
            raise InvalidConfigurationError("rapid_bid_window must be > 0")
        try:
            TieBreakPolicy(self.tie_break)
        except ValueError:
            raise InvalidConfigurationError(f"Unknown tie-break policy: {self.tie_break}") from None
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidConfigurationError(f"Unknown log level: {self.log_level}")
        self.log_dir = Path(self.log_dir)

    @property
    def tie_break_policy(self) -> TieBreakPolicy:
        return TieBreakPolicy(self.tie_break)

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


_PARSERS = {
    float: float,
    int: int,
    bool: _parse_bool,
    str: str,
    Path: Path,
}


def load_config(
    env_file: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> AuctionConfig:
    """
    Load configuration from a .env file and the environment.

    Process environment wins over the file. Unknown AUCTIONEER_*
    variables are ignored.

    Args:
        env_file: Path to a .env file (default: ./.env if present)
        environ: Environment mapping (default: os.environ)

    Returns:
        AuctionConfig instance

    Raises:
        InvalidConfigurationError: If a value cannot be parsed or is out of range
    """
    path = Path(env_file) if env_file else Path(".env")
    values: Dict[str, Any] = {}
    if path.is_file():
        values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    values.update(os.environ if environ is None else environ)

    overrides: Dict[str, Any] = {}
    for f in fields(AuctionConfig):
        raw = values.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        parser = _PARSERS[f.type]
        try:
            overrides[f.name] = parser(raw)
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid {ENV_PREFIX}{f.name.upper()}: {e}") from e

    return AuctionConfig(**overrides)
