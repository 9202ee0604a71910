"""
Tests for the command line interface.
"""

import time

import pytest
from click.testing import CliRunner

from auctioneer.cli.main import cli
from auctioneer.crypto import create_commitment
from auctioneer.utils.logger import setup_logging


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Rebind log handlers to the real stdout after each invocation."""
    yield
    setup_logging()


def invoke(runner, args, env=None):
    with runner.isolated_filesystem():
        return runner.invoke(cli, args, env=env or {})


class TestCommit:
    def test_commit_with_salt(self, runner):
        result = invoke(runner, ["commit", "--amount", "42", "--salt", "abc"])

        assert result.exit_code == 0
        assert f"Commit: {create_commitment(42, 'abc')}" in result.output
        assert "Amount: 42" in result.output

    def test_commit_generates_salt(self, runner):
        result = invoke(runner, ["commit", "--amount", "10"])

        assert result.exit_code == 0
        assert "Salt:" in result.output


class TestVickrey:
    def test_second_price_round(self, runner):
        result = invoke(runner, ["vickrey", "--bid", "A:100", "--bid", "B:80", "--bid", "C:60"])

        assert result.exit_code == 0
        assert "Winner: A pays 80" in result.output

    def test_duplicate_bidder_reported(self, runner):
        result = invoke(runner, ["vickrey", "--bid", "A:100", "--bid", "A:120"])

        assert result.exit_code == 0
        assert "already submitted" in result.output
        assert "Winner: A pays 100" in result.output

    def test_tie_break_option(self, runner):
        result = invoke(runner, ["vickrey", "--bid", "zed:5", "--bid", "amy:5",
                                 "--tie-break", "lowest_bidder_id"])

        assert result.exit_code == 0
        assert "Winner: amy pays 5" in result.output

    def test_failed_reveal_reported(self, runner, monkeypatch):
        """A reveal past the deadline is reported, not raised."""
        real_time = time.time
        # Bidding closed ten seconds ago with no reveal window
        monkeypatch.setattr(time, "time", lambda: real_time() - 10)
        result = invoke(runner, ["vickrey", "--bid", "A:100", "--bid", "B:80"],
                        env={"AUCTIONEER_REVEAL_DURATION": "0"})

        assert result.exit_code == 0
        assert "Reveal deadline" in result.output
        assert "No bids revealed, no winner" in result.output

    @pytest.mark.parametrize("bid", ["A", "A:lots", ":5", "A:-1"])
    def test_malformed_bid(self, runner, bid):
        result = invoke(runner, ["vickrey", "--bid", bid])
        assert result.exit_code != 0


class TestDutch:
    def test_runs_to_reserve(self, runner):
        result = invoke(runner, ["dutch", "--start", "100", "--reserve", "50",
                                 "--decrement", "10", "--interval", "0.01"])

        assert result.exit_code == 0
        assert "Reserve reached at 50" in result.output

    def test_immediate_bid(self, runner):
        result = invoke(runner, ["dutch", "--start", "100", "--reserve", "50",
                                 "--decrement", "10", "--interval", "60", "--bidder", "alice"])

        assert result.exit_code == 0
        assert "Winner: alice at 100" in result.output

    def test_invalid_configuration(self, runner):
        result = invoke(runner, ["dutch", "--start", "50", "--reserve", "100", "--decrement", "10"])

        assert result.exit_code != 0
        assert "reserve_price" in result.output

    def test_invalid_environment(self, runner):
        result = invoke(runner, ["dutch", "--start", "100", "--reserve", "50", "--decrement", "10"],
                        env={"AUCTIONEER_DECREMENT_INTERVAL": "soon"})

        assert result.exit_code != 0
