"""DedupeService — duplicate detection and merge planning.

Both operations are advisory. Executing a merge (rewriting the keeper,
moving interactions, deleting the duplicate) is the contact store's job.
"""

from __future__ import annotations

from typing import Any

from rememberme.domain.contacts import ContactRecord
from rememberme.domain.duplicates import DuplicateGroup, find_duplicates
from rememberme.domain.merge import apply_merge, plan_merge
from rememberme.services.base import BaseService
from rememberme.services.result import ServiceResult
from rememberme.services.telemetry import trace_span, traced


def _member(record: ContactRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "email": record.email,
        "phone": record.phone,
        "filled_fields": record.filled_field_count(),
        "interaction_count": record.interaction_count,
    }


def _group(group: DuplicateGroup) -> dict[str, Any]:
    return {
        "group_id": group.group_id,
        "score": round(group.score, 4),
        "reasons": group.reasons,
        "keeper": _member(group.keeper),
        "duplicates": [_member(d) for d in group.duplicates],
    }


class DedupeService(BaseService):
    """Find likely duplicates and preview how a pair would merge."""

    @traced
    def scan(self) -> ServiceResult:
        op = "find_duplicates"
        records, failed = self._snapshot(op)
        if failed:
            return failed

        with trace_span("find_duplicates") as span:
            groups = find_duplicates(records, self._settings.dedupe)
            if span:
                span.annotate("records", len(records))
                span.annotate("groups", len(groups))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(groups),
                "records_scanned": len(records),
                "items": [_group(g) for g in groups],
            },
            warnings=self._snapshot_warnings,
        )

    @traced
    def plan(self, keeper_id: str, duplicate_id: str, *, swap: bool = False) -> ServiceResult:
        """Field-by-field merge plan; ``swap`` exchanges keeper and duplicate."""
        op = "plan_merge"
        if swap:
            keeper_id, duplicate_id = duplicate_id, keeper_id
        if keeper_id == duplicate_id:
            return ServiceResult.failure(
                op, "SAME_RECORD", f"Cannot merge {keeper_id} into itself", id=keeper_id
            )

        _, failed = self._snapshot(op)
        if failed:
            return failed

        keeper = self._store.get(keeper_id)
        duplicate = self._store.get(duplicate_id)
        if keeper is None or duplicate is None:
            missing = [cid for cid, rec in ((keeper_id, keeper), (duplicate_id, duplicate)) if rec is None]
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No contact with id: {', '.join(missing)}", missing=missing
            )

        plan = plan_merge(keeper, duplicate)
        preview = apply_merge(plan, keeper)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "keeper_id": plan.keeper_id,
                "keeper_name": keeper.name,
                "duplicate_id": plan.duplicate_id,
                "duplicate_name": duplicate.name,
                "decisions": [d.model_dump(mode="json") for d in plan.decisions],
                "changes": [d.field for d in plan.changes],
                "preview": preview.model_dump(mode="json"),
            },
            warnings=self._snapshot_warnings,
        )
