"""Merge planning for a keeper/duplicate pair.

Computes *what* a merge would do, field by field. Executing it (writing the
keeper, moving interactions, deleting the duplicate) belongs to the contact
store. The plan is non-destructive by construction:

- a non-empty keeper value is never replaced,
- empty keeper fields adopt the duplicate's value,
- free-text fields are appended under a delimiter,
- list fields gain the duplicate's missing items.

Either record can be passed as keeper, which is how the review UI swaps
merge direction.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from rememberme.domain.contacts import MERGEABLE_FIELDS, ContactRecord
from rememberme.domain.types import MergeAction

FREE_TEXT_FIELDS: frozenset[str] = frozenset({"notes", "family_notes", "relationship_summary"})
LIST_FIELDS: frozenset[str] = frozenset({"interests"})


def merge_delimiter(duplicate_name: str) -> str:
    return f"--- merged from {duplicate_name} ---"


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


class FieldDecision(BaseModel):
    """Merge outcome for a single field."""

    model_config = {"frozen": True}

    field: str
    action: MergeAction
    keeper_value: Any = None
    duplicate_value: Any = None
    result: Any = None


class MergePlan(BaseModel):
    """Full field-level plan for folding *duplicate* into *keeper*."""

    model_config = {"frozen": True}

    keeper_id: str
    duplicate_id: str
    decisions: list[FieldDecision]

    def decision(self, field: str) -> FieldDecision:
        for d in self.decisions:
            if d.field == field:
                return d
        raise KeyError(field)

    @property
    def changes(self) -> list[FieldDecision]:
        """Decisions that alter the keeper."""
        return [d for d in self.decisions if d.action is not MergeAction.KEEP]

    def merged_values(self) -> dict[str, Any]:
        """Resulting value of every planned field."""
        return {d.field: d.result for d in self.decisions}


def _append_text(keeper_text: str, duplicate_text: str, duplicate_name: str) -> str:
    return f"{keeper_text}\n\n{merge_delimiter(duplicate_name)}\n{duplicate_text}"


def _union(keeper_items: list[str], duplicate_items: list[str]) -> list[str]:
    seen = {item.lower() for item in keeper_items}
    merged = list(keeper_items)
    for item in duplicate_items:
        if item.lower() not in seen:
            seen.add(item.lower())
            merged.append(item)
    return merged


def _decide(field: str, keeper: ContactRecord, duplicate: ContactRecord) -> FieldDecision:
    kv = getattr(keeper, field)
    dv = getattr(duplicate, field)

    def decided(action: MergeAction, result: Any) -> FieldDecision:
        return FieldDecision(
            field=field, action=action, keeper_value=kv, duplicate_value=dv, result=result
        )

    if _is_empty(dv):
        return decided(MergeAction.KEEP, kv)
    if _is_empty(kv):
        return decided(MergeAction.ADOPT, dv)
    if field in FREE_TEXT_FIELDS:
        if dv.strip() in kv:
            return decided(MergeAction.KEEP, kv)
        return decided(MergeAction.APPEND, _append_text(kv, dv, duplicate.name))
    if field in LIST_FIELDS:
        merged = _union(kv, dv)
        if merged == kv:
            return decided(MergeAction.KEEP, kv)
        return decided(MergeAction.UNION, merged)
    return decided(MergeAction.KEEP, kv)


def plan_merge(keeper: ContactRecord, duplicate: ContactRecord) -> MergePlan:
    """Plan folding *duplicate* into *keeper* without losing keeper data."""
    decisions = [_decide(f, keeper, duplicate) for f in MERGEABLE_FIELDS]
    return MergePlan(keeper_id=keeper.id, duplicate_id=duplicate.id, decisions=decisions)


def apply_merge(plan: MergePlan, keeper: ContactRecord) -> ContactRecord:
    """Preview the keeper as it would look after the merge. Pure; no storage."""
    if plan.keeper_id != keeper.id:
        msg = f"plan is for keeper {plan.keeper_id!r}, got {keeper.id!r}"
        raise ValueError(msg)
    return keeper.model_copy(update={d.field: d.result for d in plan.changes})
