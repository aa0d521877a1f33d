"""Shared pytest fixtures for rememberme tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rememberme.config.settings import RememberSettings
from rememberme.infrastructure.store import ContactStore
from rememberme.services.telemetry import disable_telemetry

AS_OF = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def days_ago(days: int) -> str:
    """ISO timestamp *days* before :data:`AS_OF`."""
    return (AS_OF - timedelta(days=days)).isoformat()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """No ambient config or telemetry leaks between tests."""
    monkeypatch.delenv("REMEMBERME_CONFIG", raising=False)
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_snapshot(tmp_path: Path) -> Callable[..., Path]:
    """Write contact rows to a JSON snapshot in ``tmp_path``."""

    def _write(rows: list[Any] | dict[str, Any], name: str = "contacts.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(rows), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def garden_rows() -> list[dict[str, Any]]:
    """Three contacts at 5, 40 and 200 days plus one never contacted."""
    return [
        {"id": "a", "name": "Ada Lovelace", "lastInteractionDate": days_ago(5)},
        {"id": "b", "name": "Grace Hopper", "lastInteractionDate": days_ago(40)},
        {"id": "c", "name": "Alan Turing", "lastInteractionDate": days_ago(200)},
        {"id": "d", "name": "Edsger Dijkstra"},
    ]


@pytest.fixture
def duplicate_rows() -> list[dict[str, Any]]:
    """Two duplicate clusters and one unrelated contact."""
    return [
        {"id": "x1", "name": "Maria Garcia", "email": "maria@example.com"},
        {
            "id": "x2",
            "name": "M. Garcia",
            "email": " Maria@Example.com ",
            "phone": "+1 (555) 010-2030",
            "company": "Acme",
        },
        {"id": "x3", "name": "Mari G", "phone": "555.010.2030"},
        {"id": "y1", "name": "Jonathan Smith", "notes": "Met at PyCon"},
        {"id": "y2", "name": "Jonathon Smith", "notes": "Likes chess"},
        {"id": "z1", "name": "Ursula Le Guin"},
    ]


@pytest.fixture
def settings(tmp_path: Path) -> RememberSettings:
    return RememberSettings.from_cli(root=tmp_path)


@pytest.fixture
def make_store(
    write_snapshot: Callable[..., Path],
) -> Callable[[list[Any]], ContactStore]:
    """Snapshot the given rows and open a store on them."""

    def _make(rows: list[Any]) -> ContactStore:
        return ContactStore(write_snapshot(rows))

    return _make
