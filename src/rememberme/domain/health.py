"""Relationship health and ring classification.

Two deliberately separate schemes coexist:

- :func:`classify_health`: four buckets (healthy, warning, dying, dormant)
  from recency alone. Drives leaf colour.
- :func:`classify_ring`: three rings (high, medium, low) from cadence or
  recency. Drives leaf placement in the garden layout.

Both fail open: malformed input (negative days) lands in the least urgent
bucket instead of raising, since the result only feeds a visualization.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field, model_validator

from rememberme.domain.contacts import DEFAULT_TARGET_DAYS
from rememberme.domain.types import CadenceStatus, HealthBucket, Importance, Ring

# --- Thresholds ----------------------------------------------------------


class HealthThresholds(BaseModel):
    """Inclusive upper bounds (in days) for each health bucket."""

    model_config = {"frozen": True}

    healthy_max_days: int = 7
    warning_max_days: int = 21
    # The tree view uses 90; the radial map historically used 45.
    dying_max_days: int = 90
    default_target_days: int = DEFAULT_TARGET_DAYS
    drifting_factor: float = 1.2

    @model_validator(mode="after")
    def _ordered(self) -> HealthThresholds:
        if not 0 <= self.healthy_max_days < self.warning_max_days < self.dying_max_days:
            msg = "health thresholds must satisfy healthy < warning < dying"
            raise ValueError(msg)
        return self


class RingThresholds(BaseModel):
    """Inclusive upper bounds (in days) for the high and medium rings."""

    model_config = {"frozen": True}

    high_max_days: int = 14
    medium_max_days: int = 45
    importance_cadence: dict[Importance, int] = Field(
        default_factory=lambda: {
            Importance.HIGH: 14,
            Importance.MEDIUM: 30,
            Importance.LOW: 90,
        }
    )

    @model_validator(mode="after")
    def _ordered(self) -> RingThresholds:
        if not 0 <= self.high_max_days < self.medium_max_days:
            msg = "ring thresholds must satisfy high < medium"
            raise ValueError(msg)
        return self


DEFAULT_HEALTH = HealthThresholds()
DEFAULT_RINGS = RingThresholds()

# --- Display metadata ----------------------------------------------------

HEALTH_COLORS: dict[HealthBucket, str] = {
    HealthBucket.HEALTHY: "#22c55e",
    HealthBucket.WARNING: "#fbbf24",
    HealthBucket.DYING: "#f97316",
    HealthBucket.DORMANT: "#78350f",
}

HEALTH_LABELS: dict[HealthBucket, str] = {
    HealthBucket.HEALTHY: "Healthy",
    HealthBucket.WARNING: "Needs Attention",
    HealthBucket.DYING: "At Risk",
    HealthBucket.DORMANT: "Dormant",
}

HEALTH_GRADIENTS: dict[HealthBucket, tuple[str, str]] = {
    HealthBucket.HEALTHY: ("#4ade80", "#16a34a"),
    HealthBucket.WARNING: ("#fcd34d", "#d97706"),
    HealthBucket.DYING: ("#fbbf24", "#ea580c"),
    HealthBucket.DORMANT: ("#a8a29e", "#78350f"),
}

# Weighted contribution of each bucket to the 0-100 garden score.
HEALTH_WEIGHTS: dict[HealthBucket, int] = {
    HealthBucket.HEALTHY: 100,
    HealthBucket.WARNING: 60,
    HealthBucket.DYING: 30,
    HealthBucket.DORMANT: 0,
}


# --- Classifiers ---------------------------------------------------------


def classify_health(
    days_since_contact: int | None,
    target_frequency_days: int = DEFAULT_TARGET_DAYS,
    thresholds: HealthThresholds = DEFAULT_HEALTH,
) -> HealthBucket:
    """Map days since last contact to a four-state health bucket.

    *target_frequency_days* is accepted for call-site symmetry with
    :func:`classify_cadence` but does not move the bucket boundaries.
    """
    if days_since_contact is None or days_since_contact < 0:
        return HealthBucket.DORMANT
    if days_since_contact <= thresholds.healthy_max_days:
        return HealthBucket.HEALTHY
    if days_since_contact <= thresholds.warning_max_days:
        return HealthBucket.WARNING
    if days_since_contact <= thresholds.dying_max_days:
        return HealthBucket.DYING
    return HealthBucket.DORMANT


def effective_cadence(
    target_frequency_days: int | None,
    importance: Importance | None,
    thresholds: RingThresholds = DEFAULT_RINGS,
) -> int | None:
    """Explicit cadence, else the cadence implied by importance, else None."""
    if target_frequency_days is not None and target_frequency_days > 0:
        return target_frequency_days
    if importance is not None:
        return thresholds.importance_cadence.get(importance)
    return None


def classify_ring(
    days_since_contact: int | None,
    target_frequency_days: int | None = None,
    importance: Importance | None = None,
    thresholds: RingThresholds = DEFAULT_RINGS,
) -> Ring:
    """Assign one of the three layout rings.

    A contact is high if its cadence is at most two weeks or it was reached
    within two weeks; medium for the same test at 45 days; low otherwise.
    """
    if days_since_contact is not None and days_since_contact < 0:
        return Ring.LOW

    cadence = effective_cadence(target_frequency_days, importance, thresholds)

    def within(limit: int) -> bool:
        if cadence is not None and cadence <= limit:
            return True
        return days_since_contact is not None and days_since_contact <= limit

    if within(thresholds.high_max_days):
        return Ring.HIGH
    if within(thresholds.medium_max_days):
        return Ring.MEDIUM
    return Ring.LOW


def classify_cadence(
    days_since_contact: int | None,
    target_frequency_days: int | None = None,
    thresholds: HealthThresholds = DEFAULT_HEALTH,
) -> CadenceStatus:
    """Status relative to the contact's own cadence (nurtured/drifting/neglected)."""
    if days_since_contact is None or days_since_contact < 0:
        return CadenceStatus.NEGLECTED
    target = target_frequency_days or thresholds.default_target_days
    if days_since_contact <= target:
        return CadenceStatus.NURTURED
    if days_since_contact <= target * thresholds.drifting_factor:
        return CadenceStatus.DRIFTING
    return CadenceStatus.NEGLECTED


# --- Aggregates ----------------------------------------------------------


class GardenStats(BaseModel):
    """Bucket counts and the weighted 0-100 garden health score."""

    model_config = {"frozen": True}

    total: int = 0
    healthy: int = 0
    warning: int = 0
    dying: int = 0
    dormant: int = 0
    health_score: int = 0


def garden_stats(buckets: Iterable[HealthBucket]) -> GardenStats:
    """Count buckets and compute the weighted health score."""
    counts = dict.fromkeys(HealthBucket, 0)
    for bucket in buckets:
        counts[bucket] += 1
    total = sum(counts.values())
    if total == 0:
        return GardenStats()
    weighted = sum(HEALTH_WEIGHTS[b] * n for b, n in counts.items())
    # Round half up, matching how the score is shown elsewhere in the app.
    score = int(weighted / total + 0.5)
    return GardenStats(
        total=total,
        healthy=counts[HealthBucket.HEALTHY],
        warning=counts[HealthBucket.WARNING],
        dying=counts[HealthBucket.DYING],
        dormant=counts[HealthBucket.DORMANT],
        health_score=score,
    )


def health_message(score: int) -> str:
    """One-line encouragement for a garden health score."""
    if score >= 90:
        return "Your garden is thriving!"
    if score >= 70:
        return "Your garden is healthy! Keep it up!"
    if score >= 50:
        return "Some relationships need attention"
    if score >= 30:
        return "Your garden needs care!"
    return "Time to water your relationships!"


def format_relative_time(days: int | None) -> str:
    """Human phrasing for days since last contact."""
    if days is None:
        return "Never contacted"
    if days < 0:
        return "Unknown"
    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    brackets = (
        (14, "Last week"),
        (21, "2 weeks ago"),
        (28, "3 weeks ago"),
        (60, "About a month ago"),
        (90, "2-3 months ago"),
        (180, "3-6 months ago"),
        (365, "6-12 months ago"),
    )
    for limit, phrase in brackets:
        if days < limit:
            return phrase
    return "Over a year ago"
