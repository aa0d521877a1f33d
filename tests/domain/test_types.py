"""Tests for domain enums."""

from __future__ import annotations

from rememberme.domain.types import RING_ORDER, HealthBucket, MergeAction, Ring


class TestEnums:
    def test_values_serialize_as_strings(self) -> None:
        assert str(HealthBucket.DYING) == "dying"
        assert f"{Ring.MEDIUM}" == "medium"
        assert MergeAction("union") is MergeAction.UNION

    def test_ring_order_is_inner_to_outer(self) -> None:
        assert RING_ORDER == (Ring.HIGH, Ring.MEDIUM, Ring.LOW)
