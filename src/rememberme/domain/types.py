"""Classification enums shared across the garden and dedup layers."""

from __future__ import annotations

from enum import StrEnum


class HealthBucket(StrEnum):
    """Four-state relationship freshness used for leaf colour."""

    HEALTHY = "healthy"
    WARNING = "warning"
    DYING = "dying"
    DORMANT = "dormant"


class Ring(StrEnum):
    """Three concentric layout bands, innermost first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Importance(StrEnum):
    """Relationship tier set by the user on a contact."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CadenceStatus(StrEnum):
    """Cadence-relative status (contacted within the target window or not)."""

    NURTURED = "nurtured"
    DRIFTING = "drifting"
    NEGLECTED = "neglected"


class MergeAction(StrEnum):
    """Per-field decision in a merge plan."""

    KEEP = "keep"
    ADOPT = "adopt"
    APPEND = "append"
    UNION = "union"


RING_ORDER: tuple[Ring, ...] = (Ring.HIGH, Ring.MEDIUM, Ring.LOW)
