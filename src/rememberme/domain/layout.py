"""Radial garden layout — contacts as leaves on three concentric rings.

Placement is a golden-angle spiral (phyllotaxis) per ring:

1. Ring-classify every contact (:func:`classify_ring`).
2. Sort each ring by recency; never-contacted rows sort last.
3. Spread the ring across its radius band, inner edge = most recent.
4. Offset each ring's starting angle by the angular extent used by the
   rings inside it, so spokes never line up across rings.

Jitter on radius and rotation is keyed on the contact id through
:mod:`rememberme.domain.hashing`, so the same snapshot always renders the
same garden. Pure functions, no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel, Field, model_validator

from rememberme.domain.contacts import ContactSummary
from rememberme.domain.hashing import signed_jitter
from rememberme.domain.health import (
    DEFAULT_HEALTH,
    DEFAULT_RINGS,
    HealthThresholds,
    RingThresholds,
    classify_health,
    classify_ring,
)
from rememberme.domain.types import RING_ORDER, HealthBucket, Ring

GOLDEN_ANGLE_DEGREES = 137.5

RADIUS_SALT = "radius"
ROTATION_SALT = "rotation"


class RingBand(BaseModel):
    """Radius band of one ring, as fractions of the canvas radius."""

    model_config = {"frozen": True}

    inner: float
    outer: float

    @property
    def width(self) -> float:
        return self.outer - self.inner

    @model_validator(mode="after")
    def _ordered(self) -> RingBand:
        if not 0.0 <= self.inner < self.outer <= 1.0:
            msg = f"ring band must satisfy 0 <= inner < outer <= 1, got {self.inner}..{self.outer}"
            raise ValueError(msg)
        return self


class LayoutConfig(BaseModel):
    """Tuning knobs for the radial layout. Presentation choices only."""

    model_config = {"frozen": True}

    canvas_radius: float = 400.0
    high: RingBand = Field(default_factory=lambda: RingBand(inner=0.07, outer=0.18))
    medium: RingBand = Field(default_factory=lambda: RingBand(inner=0.23, outer=0.34))
    low: RingBand = Field(default_factory=lambda: RingBand(inner=0.38, outer=0.47))
    radius_jitter: float = Field(default=0.15, ge=0.0, le=0.5)
    rotation_jitter_degrees: float = Field(default=15.0, ge=0.0)
    golden_angle_degrees: float = GOLDEN_ANGLE_DEGREES
    dense_threshold: int = 100
    base_scale: float = 1.0
    dense_scale: float = 0.75

    def band(self, ring: Ring) -> RingBand:
        return {Ring.HIGH: self.high, Ring.MEDIUM: self.medium, Ring.LOW: self.low}[ring]

    @model_validator(mode="after")
    def _bands_never_overlap(self) -> LayoutConfig:
        # Compare the jittered extents, not just the nominal bands.
        for inner_ring, outer_ring in zip(RING_ORDER, RING_ORDER[1:], strict=False):
            a, b = self.band(inner_ring), self.band(outer_ring)
            a_max = a.outer + a.width * self.radius_jitter
            b_min = b.inner - b.width * self.radius_jitter
            if a_max >= b_min:
                msg = (
                    f"{inner_ring} and {outer_ring} ring bands overlap once "
                    f"radius jitter is applied ({a_max:.4f} >= {b_min:.4f})"
                )
                raise ValueError(msg)
        return self


DEFAULT_LAYOUT = LayoutConfig()


class LeafPosition(BaseModel):
    """Render coordinates for one contact. Transient, recomputed per call."""

    model_config = {"frozen": True}

    id: str
    name: str
    x: float
    y: float
    rotation_degrees: float
    scale: float
    bucket: HealthBucket
    ring: Ring
    radius: float
    normalized_position: float
    days_since_contact: int | None = None


class RingGuide(BaseModel):
    """Background circle for one ring band."""

    model_config = {"frozen": True}

    ring: Ring
    inner_radius: float
    outer_radius: float
    mid_radius: float


def leaf_scale(count: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    """Leaf scale for a garden of *count* contacts (smaller when crowded)."""
    if count > config.dense_threshold:
        return config.dense_scale
    return config.base_scale


def _recency_key(days: int | None, contact_id: str) -> tuple[int, int, str]:
    # Never contacted and malformed (future-dated) rows are "oldest".
    if days is None or days < 0:
        return (1, 0, contact_id)
    return (0, days, contact_id)


def ring_guides(
    canvas_radius: float,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[RingGuide]:
    """Absolute radii of each ring band, innermost first."""
    radius = max(0.0, canvas_radius)
    guides: list[RingGuide] = []
    for ring in RING_ORDER:
        band = config.band(ring)
        inner = band.inner * radius
        outer = band.outer * radius
        guides.append(
            RingGuide(ring=ring, inner_radius=inner, outer_radius=outer, mid_radius=(inner + outer) / 2)
        )
    return guides


def layout(
    contacts: Sequence[ContactSummary],
    canvas_radius: float,
    *,
    as_of: datetime | None = None,
    center: tuple[float, float] = (0.0, 0.0),
    config: LayoutConfig = DEFAULT_LAYOUT,
    rings: RingThresholds = DEFAULT_RINGS,
    health: HealthThresholds = DEFAULT_HEALTH,
) -> list[LeafPosition]:
    """Place every contact on the radial garden.

    Args:
        contacts: Snapshot of the user's contacts.
        canvas_radius: Radius of the drawing area; bands scale with it.
        as_of: Reference time for recency (default: now, UTC). Pass a fixed
            value for reproducible output.
        center: Canvas centre the coordinates are offset by.
        config: Band, jitter and scale tuning.
        rings: Ring classification thresholds.
        health: Health bucket thresholds.

    Returns:
        One :class:`LeafPosition` per contact, grouped ring by ring.
    """
    if not contacts:
        return []

    reference = as_of or datetime.now(UTC)
    radius_scale = max(0.0, canvas_radius)
    golden = math.radians(config.golden_angle_degrees)
    scale = leaf_scale(len(contacts), config)
    cx, cy = center

    grouped: dict[Ring, list[tuple[ContactSummary, int | None]]] = {r: [] for r in RING_ORDER}
    for contact in contacts:
        days = contact.days_since_contact(reference)
        ring = classify_ring(days, contact.target_frequency_days, contact.importance, rings)
        grouped[ring].append((contact, days))

    positions: list[LeafPosition] = []
    ring_start_offset = 0.0
    for ring in RING_ORDER:
        members = sorted(grouped[ring], key=lambda pair: _recency_key(pair[1], pair[0].id))
        band = config.band(ring)
        r_min = band.inner * radius_scale
        r_max = band.outer * radius_scale
        width = r_max - r_min
        n = len(members)

        for i, (contact, days) in enumerate(members):
            normalized = i / max(1, n - 1)
            base_radius = r_min + width * normalized
            radius = base_radius + signed_jitter(contact.id, RADIUS_SALT, width * config.radius_jitter)
            angle = i * golden + ring_start_offset
            x = cx + math.cos(angle) * radius
            y = cy + math.sin(angle) * radius
            rotation = math.degrees(math.atan2(y - cy, x - cx)) + signed_jitter(
                contact.id, ROTATION_SALT, config.rotation_jitter_degrees
            )
            positions.append(
                LeafPosition(
                    id=contact.id,
                    name=contact.name,
                    x=x,
                    y=y,
                    rotation_degrees=rotation,
                    scale=scale,
                    bucket=classify_health(days, contact.cadence_days, health),
                    ring=ring,
                    radius=radius,
                    normalized_position=normalized,
                    days_since_contact=days,
                )
            )

        ring_start_offset += n * golden

    return positions
