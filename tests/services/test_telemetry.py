"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rememberme.config.settings import RememberSettings
from rememberme.infrastructure.store import ContactStore
from rememberme.services.garden import GardenService
from rememberme.services.result import ServiceResult
from rememberme.services.telemetry import (
    Span,
    enable_telemetry,
    trace_span,
    traced,
)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_to_dict_nests_children(self) -> None:
        root = Span(name="root")
        child = Span(name="child")
        child.annotate("n", 3)
        child.end()
        root.children.append(child)
        root.end()
        data = root.to_dict()
        assert data["name"] == "root"
        assert data["children"][0]["annotations"] == {"n": 3}


class TestDisabled:
    def test_trace_span_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_traced_leaves_meta_alone(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="x")

        assert op().meta is None


class TestEnabled:
    def test_traced_injects_span_tree(self) -> None:
        enable_telemetry()

        @traced
        def op() -> ServiceResult:
            with trace_span("inner") as span:
                assert span is not None
                span.annotate("k", "v")
            return ServiceResult(ok=True, op="x", meta={"existing": 1})

        result = op()
        assert result.meta is not None
        assert result.meta["existing"] == 1
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("op")
        assert tree["children"][0]["name"] == "inner"
        assert tree["children"][0]["annotations"] == {"k": "v"}

    def test_trace_span_outside_traced_is_none(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None

    def test_service_method(
        self,
        make_store: Callable[[list[Any]], ContactStore],
        garden_rows: list[dict[str, Any]],
        settings: RememberSettings,
    ) -> None:
        enable_telemetry()
        result = GardenService(make_store(garden_rows), settings).layout()
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "GardenService.layout"
        assert tree["children"][0]["annotations"] == {"leaves": 4}
