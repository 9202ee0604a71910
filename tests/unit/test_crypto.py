"""
Tests for the commitment scheme.

Tests verify:
1. Canonical amount rendering
2. Commitment determinism and hiding inputs
3. Verification of openings
"""

import hashlib
from decimal import Decimal

import pytest

from auctioneer.crypto import (
    COMMITMENT_HEX_LENGTH,
    create_commitment,
    create_sealed_bid,
    format_amount,
    generate_salt,
    is_commitment,
    sha256,
    sha256_hex,
    verify_commitment,
)


class TestFormatAmount:
    """Tests for canonical decimal strings."""

    @pytest.mark.parametrize("amount,expected", [
        (42, "42"),
        (42.0, "42"),
        (Decimal("42"), "42"),
        (Decimal("42.00"), "42"),
        (Decimal("1E+2"), "100"),
        (42.5, "42.5"),
        (0.1, "0.1"),
        (Decimal("0.50"), "0.5"),
        (0, "0"),
    ])
    def test_format(self, amount, expected):
        assert format_amount(amount) == expected

    @pytest.mark.parametrize("amount,expected", [
        (0.000001, "0.000001"),
        (0.0000015, "0.0000015"),
        (1e-7, "1e-7"),
        (1.5e-7, "1.5e-7"),
        (123456.789, "123456.789"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.5e21, "1.5e+21"),
    ])
    def test_float_matches_number_to_string(self, amount, expected):
        """Small and huge floats render as a JavaScript client would."""
        assert format_amount(amount) == expected

    @pytest.mark.parametrize("amount", [float("inf"), float("nan")])
    def test_rejects_non_finite_floats(self, amount):
        with pytest.raises(ValueError):
            format_amount(amount)

    @pytest.mark.parametrize("amount", ["42", None, True, [42]])
    def test_rejects_non_numbers(self, amount):
        with pytest.raises(TypeError):
            format_amount(amount)


class TestCommitment:
    """Tests for commitment creation and verification."""

    def test_matches_sha256_of_concatenation(self):
        """hash("42abc")."""
        expected = hashlib.sha256(b"42abc").hexdigest()
        assert create_commitment(42, "abc") == expected

    def test_deterministic(self):
        assert create_commitment(100, "salt") == create_commitment(100, "salt")

    def test_different_salt(self):
        assert create_commitment(100, "salt-a") != create_commitment(100, "salt-b")

    def test_different_amount(self):
        assert create_commitment(100, "salt") != create_commitment(101, "salt")

    def test_verify(self):
        commit_hash = create_commitment(42, "abc")
        assert verify_commitment(commit_hash, 42, "abc")
        assert verify_commitment(commit_hash.upper(), 42, "abc")
        assert not verify_commitment(commit_hash, 43, "abc")
        assert not verify_commitment(commit_hash, 42, "abd")

    def test_salt_must_be_string(self):
        with pytest.raises(TypeError):
            create_commitment(42, 123)

    def test_create_sealed_bid_pair(self):
        """Generated salt opens the generated commitment."""
        commit_hash, salt = create_sealed_bid(250)
        assert verify_commitment(commit_hash, 250, salt)

    def test_create_sealed_bid_with_salt(self):
        commit_hash, salt = create_sealed_bid(42, "abc")
        assert salt == "abc"
        assert commit_hash == create_commitment(42, "abc")


class TestUtilities:
    """Tests for hashing helpers."""

    def test_generate_salt_unique(self):
        salts = {generate_salt() for _ in range(50)}
        assert len(salts) == 50
        assert all(len(s) == 32 for s in salts)

    def test_sha256(self):
        assert sha256(b"x") == hashlib.sha256(b"x").digest()
        assert sha256_hex(b"x") == hashlib.sha256(b"x").hexdigest()

    def test_is_commitment(self):
        assert is_commitment(create_commitment(1, "s"))
        assert not is_commitment("ab" * 31)
        assert not is_commitment("g" * COMMITMENT_HEX_LENGTH)
        assert not is_commitment(None)
