"""Duplicate contact detection.

Advisory only: groups are surfaced for a human to confirm, and nothing in
here merges or deletes. Under-matching is preferred to a false merge.

Signals, strongest first:

- ``email``: identical normalized email (score 1.0)
- ``phone``: identical last 10 digits of the phone number (score 1.0)
- ``name:NN%``: Levenshtein similarity of normalized names at or above
  the threshold (score = similarity)
- ``first_name`` / ``last_initial``: same first name where one record
  lacks a last name, or only has its initial (fixed scores)

Matching pairs become edges of an undirected graph and each connected
component of two or more records is one :class:`DuplicateGroup`, so
A~B (email) and B~C (phone) put A, B and C together.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

import networkx as nx
from pydantic import BaseModel, Field
from rapidfuzz.distance import Levenshtein

from rememberme.domain.contacts import ContactRecord

_NON_DIGIT = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")

EMAIL_REASON = "email"
PHONE_REASON = "phone"
FIRST_NAME_REASON = "first_name"
LAST_INITIAL_REASON = "last_initial"


class DuplicateRules(BaseModel):
    """Thresholds for the duplicate detector."""

    model_config = {"frozen": True}

    name_threshold: float = Field(default=0.85, gt=0.0, le=1.0)
    phone_match_digits: int = Field(default=10, ge=1)
    min_phone_digits: int = Field(default=7, ge=1)
    first_name_heuristics: bool = True
    first_name_only_score: float = 0.85
    last_initial_score: float = 0.88


DEFAULT_RULES = DuplicateRules()


class DuplicateGroup(BaseModel):
    """One cluster of likely-duplicate records from a single detection run."""

    model_config = {"frozen": True}

    group_id: str
    keeper: ContactRecord
    duplicates: list[ContactRecord]
    score: float
    reasons: list[str]

    @property
    def members(self) -> list[ContactRecord]:
        return [self.keeper, *self.duplicates]


@dataclass(frozen=True)
class PairMatch:
    """Why two records look like the same person."""

    score: float
    reasons: tuple[str, ...] = field(default_factory=tuple)


# --- Normalization -------------------------------------------------------


def normalize_email(email: str | None) -> str | None:
    """Trim and lowercase; empty becomes ``None``."""
    if not email:
        return None
    value = email.strip().lower()
    return value or None


def normalize_phone(phone: str | None, rules: DuplicateRules = DEFAULT_RULES) -> str | None:
    """Digits only, trailing ``phone_match_digits`` kept.

    Comparing the tail tolerates country-code prefixes (``+1``, ``001``).
    Numbers shorter than ``min_phone_digits`` are ignored as too weak.

    Examples:
        >>> normalize_phone("+1 (555) 010-2030")
        '5550102030'
        >>> normalize_phone("555-0102") is None
        False
        >>> normalize_phone("12-34") is None
        True
    """
    if not phone:
        return None
    digits = _NON_DIGIT.sub("", phone)
    if len(digits) < rules.min_phone_digits:
        return None
    return digits[-rules.phone_match_digits :]


def normalize_name(name: str | None) -> str:
    """NFKC, lowercase, and collapse internal whitespace."""
    if not name:
        return ""
    text = unicodedata.normalize("NFKC", name).lower()
    return _WHITESPACE.sub(" ", text).strip()


def name_similarity(a: str, b: str) -> float:
    """``1 - edit_distance / max(len)`` for two normalized names, 0 if either is empty."""
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


def _name_parts(record: ContactRecord) -> tuple[str, str, int]:
    """Return ``(first, last, token_count)`` with fallbacks from the display name."""
    tokens = normalize_name(record.name).split(" ")
    first = normalize_name(record.first_name) or tokens[0]
    last = normalize_name(record.last_name)
    if not last and len(tokens) > 1:
        last = tokens[-1]
    return first, last.rstrip("."), len(tokens)


# --- Pair matching -------------------------------------------------------


@dataclass(frozen=True)
class _Keys:
    email: str | None
    phone: str | None
    name: str


def _keys(record: ContactRecord, rules: DuplicateRules) -> _Keys:
    return _Keys(
        email=normalize_email(record.email),
        phone=normalize_phone(record.phone, rules),
        name=normalize_name(record.name),
    )


def _first_name_match(
    a: ContactRecord, b: ContactRecord, rules: DuplicateRules
) -> tuple[float, str] | None:
    first_a, last_a, count_a = _name_parts(a)
    first_b, last_b, count_b = _name_parts(b)
    if not first_a or first_a != first_b:
        return None
    if (count_a == 1) != (count_b == 1):
        return rules.first_name_only_score, FIRST_NAME_REASON
    if last_a and last_b and last_a != last_b:
        short, full = sorted((last_a, last_b), key=len)
        if len(short) == 1 and full.startswith(short):
            return rules.last_initial_score, LAST_INITIAL_REASON
    return None


def _match(
    a: ContactRecord,
    b: ContactRecord,
    ka: _Keys,
    kb: _Keys,
    rules: DuplicateRules,
) -> PairMatch | None:
    score = 0.0
    reasons: list[str] = []

    if ka.email and ka.email == kb.email:
        score = 1.0
        reasons.append(EMAIL_REASON)
    if ka.phone and ka.phone == kb.phone:
        score = 1.0
        reasons.append(PHONE_REASON)

    similarity = name_similarity(ka.name, kb.name)
    if similarity >= rules.name_threshold:
        score = max(score, similarity)
        reasons.append(f"name:{round(similarity * 100)}%")

    if not reasons and rules.first_name_heuristics:
        heuristic = _first_name_match(a, b, rules)
        if heuristic is not None:
            score, reason = heuristic
            reasons.append(reason)

    if not reasons:
        return None
    return PairMatch(score=score, reasons=tuple(reasons))


def match_pair(
    a: ContactRecord,
    b: ContactRecord,
    rules: DuplicateRules = DEFAULT_RULES,
) -> PairMatch | None:
    """Compare two records; ``None`` when no signal fires."""
    return _match(a, b, _keys(a, rules), _keys(b, rules), rules)


# --- Grouping ------------------------------------------------------------

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


def keeper_priority(record: ContactRecord) -> tuple[int, int, bool, datetime, str]:
    """Sort key: best keeper first.

    Most filled fields, then most interactions, then oldest record, then
    smallest id. Only a suggestion; the merge step can swap roles.
    """
    return (
        -record.filled_field_count(),
        -record.interaction_count,
        record.created_at is None,
        record.created_at or _FAR_FUTURE,
        record.id,
    )


def find_duplicates(
    records: Sequence[ContactRecord],
    rules: DuplicateRules = DEFAULT_RULES,
) -> list[DuplicateGroup]:
    """Group likely-duplicate records from one snapshot.

    Returns groups ordered by descending score, then keeper id. Records that
    match nothing are not reported.
    """
    keys = [_keys(r, rules) for r in records]
    graph: nx.Graph = nx.Graph()
    graph.add_nodes_from(range(len(records)))

    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            if records[i].id == records[j].id:
                continue
            pair = _match(records[i], records[j], keys[i], keys[j], rules)
            if pair is not None:
                graph.add_edge(i, j, score=pair.score, reasons=pair.reasons)

    groups: list[DuplicateGroup] = []
    for component in nx.connected_components(graph):
        if len(component) < 2:
            continue
        members = sorted((records[i] for i in component), key=keeper_priority)
        edges = sorted(
            graph.subgraph(component).edges(data=True),
            key=lambda e: (min(e[0], e[1]), max(e[0], e[1])),
        )

        score = max(data["score"] for _, _, data in edges)
        reasons: list[str] = []
        for _, _, data in edges:
            for reason in data["reasons"]:
                if reason not in reasons:
                    reasons.append(reason)

        keeper = members[0]
        groups.append(
            DuplicateGroup(
                group_id=f"group-{keeper.id}",
                keeper=keeper,
                duplicates=members[1:],
                score=score,
                reasons=reasons,
            )
        )

    groups.sort(key=lambda g: (-g.score, g.keeper.id))
    return groups
