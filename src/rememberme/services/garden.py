"""GardenService — relationship health and the radial garden layout."""

from __future__ import annotations

from datetime import datetime

from rememberme.domain.health import (
    HEALTH_COLORS,
    HEALTH_GRADIENTS,
    HEALTH_LABELS,
    classify_cadence,
    classify_health,
    classify_ring,
    format_relative_time,
    garden_stats,
    health_message,
)
from rememberme.domain.layout import layout, ring_guides
from rememberme.domain.types import RING_ORDER
from rememberme.services.base import BaseService
from rememberme.services.result import ServiceResult
from rememberme.services.telemetry import trace_span, traced


class GardenService(BaseService):
    """Read-only views over the snapshot: layout, per-contact health, score."""

    @traced
    def layout(
        self,
        *,
        canvas_radius: float | None = None,
        as_of: datetime | None = None,
        center: tuple[float, float] = (0.0, 0.0),
    ) -> ServiceResult:
        """Compute leaf positions for every contact."""
        op = "garden_layout"
        records, failed = self._snapshot(op)
        if failed:
            return failed

        cfg = self._settings.layout
        radius = cfg.canvas_radius if canvas_radius is None else canvas_radius
        with trace_span("layout") as span:
            leaves = layout(
                records,
                radius,
                as_of=self._reference_time(as_of),
                center=center,
                config=cfg,
                rings=self._settings.rings,
                health=self._settings.health,
            )
            if span:
                span.annotate("leaves", len(leaves))

        ring_counts = dict.fromkeys(RING_ORDER, 0)
        for leaf in leaves:
            ring_counts[leaf.ring] += 1

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "canvas_radius": radius,
                "center": list(center),
                "count": len(leaves),
                "rings": {str(r): n for r, n in ring_counts.items()},
                "guides": [g.model_dump(mode="json") for g in ring_guides(radius, cfg)],
                "items": [leaf.model_dump(mode="json") for leaf in leaves],
            },
            warnings=self._snapshot_warnings,
        )

    @traced
    def health(self, *, as_of: datetime | None = None) -> ServiceResult:
        """Per-contact bucket, ring and cadence status, most neglected first."""
        op = "garden_health"
        records, failed = self._snapshot(op)
        if failed:
            return failed

        reference = self._reference_time(as_of)
        items = []
        for record in records:
            days = record.days_since_contact(reference)
            bucket = classify_health(days, record.cadence_days, self._settings.health)
            items.append(
                {
                    "id": record.id,
                    "name": record.name,
                    "days_since_contact": days,
                    "last_contact": format_relative_time(days),
                    "bucket": str(bucket),
                    "label": HEALTH_LABELS[bucket],
                    "color": HEALTH_COLORS[bucket],
                    "gradient": list(HEALTH_GRADIENTS[bucket]),
                    "cadence": str(
                        classify_cadence(days, record.target_frequency_days, self._settings.health)
                    ),
                    "ring": str(
                        classify_ring(
                            days,
                            record.target_frequency_days,
                            record.importance,
                            self._settings.rings,
                        )
                    ),
                }
            )

        # Never-contacted and future-dated rows sort after everything else.
        items.sort(
            key=lambda i: (
                i["days_since_contact"] is None or i["days_since_contact"] < 0,
                -(i["days_since_contact"] or 0),
                i["id"],
            )
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": items},
            warnings=self._snapshot_warnings,
        )

    @traced
    def stats(self, *, as_of: datetime | None = None) -> ServiceResult:
        """Bucket counts and the 0-100 garden health score."""
        op = "garden_stats"
        records, failed = self._snapshot(op)
        if failed:
            return failed

        reference = self._reference_time(as_of)
        stats = garden_stats(
            classify_health(r.days_since_contact(reference), r.cadence_days, self._settings.health)
            for r in records
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={**stats.model_dump(), "message": health_message(stats.health_score)},
            warnings=self._snapshot_warnings,
        )

    def rings(self, *, canvas_radius: float | None = None) -> ServiceResult:
        """Ring band guides for the canvas; needs no snapshot."""
        cfg = self._settings.layout
        radius = cfg.canvas_radius if canvas_radius is None else canvas_radius
        return ServiceResult(
            ok=True,
            op="ring_guides",
            data={
                "canvas_radius": radius,
                "items": [g.model_dump(mode="json") for g in ring_guides(radius, cfg)],
            },
        )
