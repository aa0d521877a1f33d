"""Tests for the radial garden layout."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from rememberme.domain.contacts import ContactSummary
from rememberme.domain.health import HealthThresholds
from rememberme.domain.layout import (
    DEFAULT_LAYOUT,
    LayoutConfig,
    RingBand,
    layout,
    leaf_scale,
    ring_guides,
)
from rememberme.domain.types import HealthBucket, Ring

AS_OF = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
RADIUS = 400.0


def _contact(contact_id: str, days: int | None, **kwargs: object) -> ContactSummary:
    last = None if days is None else AS_OF - timedelta(days=days)
    return ContactSummary(id=contact_id, name=f"Contact {contact_id}", last_interaction_date=last, **kwargs)


def _garden(n: int) -> list[ContactSummary]:
    # Spread recency across all three rings, with a few never contacted.
    return [_contact(f"c{i}", None if i % 11 == 0 else (i * 7) % 120) for i in range(n)]


class TestLayoutBasics:
    def test_empty_input(self) -> None:
        assert layout([], RADIUS, as_of=AS_OF) == []

    def test_single_contact(self) -> None:
        (leaf,) = layout([_contact("solo", 3)], RADIUS, as_of=AS_OF)
        assert leaf.normalized_position == 0.0
        assert leaf.ring is Ring.HIGH
        assert leaf.bucket is HealthBucket.HEALTHY
        assert math.isfinite(leaf.x) and math.isfinite(leaf.y)

    def test_one_leaf_per_contact(self) -> None:
        contacts = _garden(30)
        leaves = layout(contacts, RADIUS, as_of=AS_OF)
        assert sorted(leaf.id for leaf in leaves) == sorted(c.id for c in contacts)

    def test_deterministic(self) -> None:
        contacts = _garden(40)
        assert layout(contacts, RADIUS, as_of=AS_OF) == layout(contacts, RADIUS, as_of=AS_OF)

    def test_input_order_does_not_matter(self) -> None:
        contacts = _garden(25)
        forward = {leaf.id: leaf for leaf in layout(contacts, RADIUS, as_of=AS_OF)}
        backward = {leaf.id: leaf for leaf in layout(contacts[::-1], RADIUS, as_of=AS_OF)}
        assert forward == backward

    def test_zero_radius_collapses_to_center(self) -> None:
        leaves = layout(_garden(5), 0.0, as_of=AS_OF, center=(10.0, 20.0))
        assert all((leaf.x, leaf.y) == (10.0, 20.0) for leaf in leaves)


class TestRingGeometry:
    def test_rings_never_overlap(self) -> None:
        leaves = layout(_garden(120), RADIUS, as_of=AS_OF)
        by_ring = {ring: [leaf.radius for leaf in leaves if leaf.ring is ring] for ring in Ring}
        assert all(by_ring.values())
        assert max(by_ring[Ring.HIGH]) < min(by_ring[Ring.MEDIUM])
        assert max(by_ring[Ring.MEDIUM]) < min(by_ring[Ring.LOW])

    def test_radius_stays_within_jittered_band(self) -> None:
        for leaf in layout(_garden(60), RADIUS, as_of=AS_OF):
            band = DEFAULT_LAYOUT.band(leaf.ring)
            slack = band.width * DEFAULT_LAYOUT.radius_jitter * RADIUS
            assert band.inner * RADIUS - slack <= leaf.radius <= band.outer * RADIUS + slack

    def test_coordinates_match_radius(self) -> None:
        for leaf in layout(_garden(20), RADIUS, as_of=AS_OF):
            assert math.hypot(leaf.x, leaf.y) == pytest.approx(abs(leaf.radius))

    def test_center_offset(self) -> None:
        contacts = _garden(15)
        origin = layout(contacts, RADIUS, as_of=AS_OF)
        shifted = layout(contacts, RADIUS, as_of=AS_OF, center=(250.0, -40.0))
        for a, b in zip(origin, shifted, strict=True):
            assert b.x == pytest.approx(a.x + 250.0)
            assert b.y == pytest.approx(a.y - 40.0)
            assert b.rotation_degrees == pytest.approx(a.rotation_degrees)

    def test_rotation_points_outward_within_jitter(self) -> None:
        for leaf in layout(_garden(20), RADIUS, as_of=AS_OF):
            outward = math.degrees(math.atan2(leaf.y, leaf.x))
            delta = (leaf.rotation_degrees - outward + 180.0) % 360.0 - 180.0
            assert abs(delta) <= DEFAULT_LAYOUT.rotation_jitter_degrees + 1e-9

    def test_ring_guides_scale_with_radius(self) -> None:
        guides = ring_guides(100.0)
        assert [g.ring for g in guides] == [Ring.HIGH, Ring.MEDIUM, Ring.LOW]
        assert guides[0].inner_radius == pytest.approx(7.0)
        assert guides[0].outer_radius == pytest.approx(18.0)
        assert guides[2].mid_radius == pytest.approx(42.5)


class TestRecencyOrdering:
    def test_more_recent_sits_closer_to_inner_edge(self) -> None:
        leaves = layout(_garden(80), RADIUS, as_of=AS_OF)
        for ring in Ring:
            members = [leaf for leaf in leaves if leaf.ring is ring]
            for a in members:
                for b in members:
                    if (
                        a.days_since_contact is not None
                        and b.days_since_contact is not None
                        and a.days_since_contact < b.days_since_contact
                    ):
                        assert a.normalized_position <= b.normalized_position

    def test_never_contacted_sort_last(self) -> None:
        contacts = [_contact("old", 300), _contact("never", None), _contact("older", 400)]
        leaves = layout(contacts, RADIUS, as_of=AS_OF)
        assert [leaf.id for leaf in leaves] == ["old", "older", "never"]
        assert leaves[-1].normalized_position == 1.0

    def test_future_dated_contact_is_low_and_dormant(self) -> None:
        (leaf,) = layout([_contact("future", -5)], RADIUS, as_of=AS_OF)
        assert leaf.ring is Ring.LOW
        assert leaf.bucket is HealthBucket.DORMANT
        assert leaf.days_since_contact == -5


class TestScaleAndConfig:
    def test_scale_shrinks_above_one_hundred(self) -> None:
        assert leaf_scale(100) == 1.0
        assert leaf_scale(101) == 0.75
        leaves = layout(_garden(101), RADIUS, as_of=AS_OF)
        assert {leaf.scale for leaf in leaves} == {0.75}

    def test_cadence_moves_ring(self) -> None:
        (leaf,) = layout([_contact("weekly", 100, target_frequency_days=7)], RADIUS, as_of=AS_OF)
        assert leaf.ring is Ring.HIGH

    def test_custom_health_thresholds(self) -> None:
        (leaf,) = layout(
            [_contact("c", 60)], RADIUS, as_of=AS_OF, health=HealthThresholds(dying_max_days=45)
        )
        assert leaf.bucket is HealthBucket.DORMANT

    def test_overlapping_bands_rejected(self) -> None:
        with pytest.raises(ValidationError, match="overlap"):
            LayoutConfig(high=RingBand(inner=0.07, outer=0.30))

    def test_jitter_can_cause_overlap(self) -> None:
        with pytest.raises(ValidationError):
            LayoutConfig(radius_jitter=0.5)

    def test_band_bounds_validated(self) -> None:
        with pytest.raises(ValidationError):
            RingBand(inner=0.5, outer=0.4)
