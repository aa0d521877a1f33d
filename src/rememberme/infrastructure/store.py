"""ContactStore — read-only access to an exported contact snapshot.

The contact database itself is an external service; the CLI works on an
export of one user's ``persons`` rows. Supported shapes:

- JSON list of row objects
- JSON object wrapping the list under ``contacts`` or ``data``
  (the latter is what a hosted-database REST response looks like)
- CSV with a header row

Loading is lazy and happens once per invocation. A row that fails
validation is skipped with a warning and never blocks the rest.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rememberme.domain.contacts import ContactRecord

logger = logging.getLogger(__name__)

_WRAPPER_KEYS = ("contacts", "data")


class SnapshotError(Exception):
    """The snapshot file is missing or unreadable as a whole."""

    def __init__(self, code: str, message: str, path: Path) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.path = path


@dataclass
class Snapshot:
    """Validated rows plus the reasons any rows were dropped."""

    records: list[ContactRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "row"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _read_rows(path: Path) -> list[Any]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"{path} is not UTF-8 encoded: {exc}"
        raise SnapshotError("SNAPSHOT_INVALID", msg, path) from exc
    if path.suffix.lower() == ".csv":
        return list(csv.DictReader(io.StringIO(text, newline="")))

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError("SNAPSHOT_INVALID", f"Invalid JSON in {path}: {exc}", path) from exc

    if isinstance(payload, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
        raise SnapshotError(
            "SNAPSHOT_INVALID",
            f"{path} has no contact list under 'contacts' or 'data'",
            path,
        )
    if not isinstance(payload, list):
        raise SnapshotError("SNAPSHOT_INVALID", f"{path} is not a list of contacts", path)
    return payload


def parse_rows(rows: list[Any]) -> Snapshot:
    """Validate raw rows; invalid or repeated ids are skipped with a warning."""
    snapshot = Snapshot()
    seen: set[str] = set()
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            snapshot.warnings.append(f"Row {index} skipped: not an object")
            continue
        try:
            record = ContactRecord.model_validate(row)
        except ValidationError as exc:
            snapshot.warnings.append(f"Row {index} skipped: {_describe(exc)}")
            continue
        if record.id in seen:
            snapshot.warnings.append(f"Row {index} skipped: duplicate id {record.id!r}")
            continue
        seen.add(record.id)
        snapshot.records.append(record)
    return snapshot


class ContactStore:
    """Lazy loader for one snapshot file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._snapshot: Snapshot | None = None
        self._by_id: dict[str, ContactRecord] = {}

    def _load(self) -> Snapshot:
        if self._snapshot is None:
            if not self.path.is_file():
                raise SnapshotError(
                    "SNAPSHOT_NOT_FOUND", f"Contact snapshot not found: {self.path}", self.path
                )
            snapshot = parse_rows(_read_rows(self.path))
            logger.debug(
                "Loaded %d contacts from %s (%d skipped)",
                len(snapshot.records),
                self.path,
                len(snapshot.warnings),
            )
            self._snapshot = snapshot
            self._by_id = {r.id: r for r in snapshot.records}
        return self._snapshot

    @property
    def records(self) -> list[ContactRecord]:
        """All valid rows (raises :class:`SnapshotError` if unreadable)."""
        return self._load().records

    @property
    def warnings(self) -> list[str]:
        return self._load().warnings

    def get(self, contact_id: str) -> ContactRecord | None:
        self._load()
        return self._by_id.get(contact_id)
