"""Prometheus metrics emitted by the chart engine."""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "CHART_ERRORS",
    "EXPORTS",
    "RENDER_DURATION",
    "ensure_metrics_registered",
    "record_error",
    "record_export",
    "time_render",
]


RENDER_DURATION = Histogram(
    "transitcharts_render_duration_seconds",
    "Time spent deriving geometry and composing a chart scene.",
    ("kind",),
    registry=None,
)

EXPORTS = Counter(
    "transitcharts_exports_total",
    "Chart exports grouped by file format and outcome.",
    ("format", "outcome"),
    registry=None,
)

CHART_ERRORS = Counter(
    "transitcharts_chart_errors_total",
    "Failures recovered or reported by chart components.",
    ("component", "error"),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield RENDER_DURATION
    yield EXPORTS
    yield CHART_ERRORS


def ensure_metrics_registered(registry: CollectorRegistry | None = None) -> None:
    """Attach the engine metrics to ``registry`` (the default one when omitted)."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Already registered under this name.
            continue


@contextmanager
def time_render(kind: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        RENDER_DURATION.labels(kind=kind).observe(time.perf_counter() - start)


def record_export(fmt: str, outcome: str) -> None:
    EXPORTS.labels(format=fmt, outcome=outcome).inc()


def record_error(component: str, error: BaseException | str) -> None:
    name = error if isinstance(error, str) else type(error).__name__
    CHART_ERRORS.labels(component=component, error=name).inc()
