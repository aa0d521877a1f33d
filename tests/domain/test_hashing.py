"""Tests for the stable layout hash."""

from __future__ import annotations

import pytest

from rememberme.domain.hashing import (
    HASH_MODULUS,
    jitter_key,
    polynomial_hash,
    signed_jitter,
    unit_interval,
    utf16_code_units,
)


class TestPolynomialHash:
    def test_known_values(self) -> None:
        assert polynomial_hash("") == 0
        assert polynomial_hash("a") == 97
        assert polynomial_hash("ab") == 97 * 31 + 98

    def test_matches_java_string_hash(self) -> None:
        # "hello".hashCode() is positive, so it equals the unsigned value.
        assert polynomial_hash("hello") == 99162322

    def test_wraps_to_32_bits(self) -> None:
        assert 0 <= polynomial_hash("x" * 500) < HASH_MODULUS

    def test_astral_characters_use_surrogate_pairs(self) -> None:
        assert utf16_code_units("😀") == [0xD83D, 0xDE00]
        assert polynomial_hash("😀") == 0xD83D * 31 + 0xDE00


class TestJitter:
    def test_key_format(self) -> None:
        assert jitter_key("c-1", "radius") == "c-1:radius"

    def test_deterministic(self) -> None:
        assert unit_interval("c-1", "radius") == unit_interval("c-1", "radius")

    def test_salts_are_independent_channels(self) -> None:
        assert unit_interval("c-1", "radius") != unit_interval("c-1", "rotation")

    @pytest.mark.parametrize("contact_id", ["a", "c-42", "5f0e9a", "Zoë", ""])
    def test_bounded(self, contact_id: str) -> None:
        assert 0.0 <= unit_interval(contact_id, "radius") <= 1.0
        assert -15.0 <= signed_jitter(contact_id, "rotation", 15.0) <= 15.0

    def test_zero_bound(self) -> None:
        assert signed_jitter("c-1", "radius", 0.0) == 0.0
