"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import pytest

from rememberme.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="garden_stats", data={"total": 3})
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("plan_merge", "NOT_FOUND", "No contact", missing=["x"])
        assert result.ok is False
        assert result.error == ServiceError(
            code="NOT_FOUND", message="No contact", detail={"missing": ["x"]}
        )

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="x")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="x", data={"items": [{"id": "1"}]}, warnings=["w"])
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result
