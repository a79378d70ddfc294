from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from transitcharts.observability.metrics import (
    CHART_ERRORS,
    EXPORTS,
    RENDER_DURATION,
    ensure_metrics_registered,
    record_error,
    record_export,
    time_render,
)


def _sample(registry: CollectorRegistry, metric: str, labels: dict[str, str]) -> float:
    return registry.get_sample_value(metric, labels) or 0.0


def test_metrics_register_once() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    ensure_metrics_registered(registry)
    names = {metric.name for metric in registry.collect()}
    assert {"transitcharts_render_duration_seconds", "transitcharts_exports", "transitcharts_chart_errors"} <= names


def test_time_render_observes_even_on_error() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    name = f"{RENDER_DURATION._name}_count"  # type: ignore[attr-defined]
    before = _sample(registry, name, {"kind": "pie"})

    with time_render("pie"):
        pass
    with pytest.raises(RuntimeError):
        with time_render("pie"):
            raise RuntimeError("boom")

    assert _sample(registry, name, {"kind": "pie"}) == before + 2


def test_counters() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    exports = f"{EXPORTS._name}_total"  # type: ignore[attr-defined]
    errors = f"{CHART_ERRORS._name}_total"  # type: ignore[attr-defined]
    before_export = _sample(registry, exports, {"format": "svg", "outcome": "written"})
    before_error = _sample(registry, errors, {"component": "export", "error": "PermissionError"})
    before_named = _sample(registry, errors, {"component": "layout", "error": "empty"})

    record_export("svg", "written")
    record_error("export", PermissionError("denied"))
    record_error("layout", "empty")

    assert _sample(registry, exports, {"format": "svg", "outcome": "written"}) == before_export + 1
    assert _sample(registry, errors, {"component": "export", "error": "PermissionError"}) == before_error + 1
    assert _sample(registry, errors, {"component": "layout", "error": "empty"}) == before_named + 1
