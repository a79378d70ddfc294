"""Runtime observability primitives for chart components."""

from __future__ import annotations

from .metrics import (
    CHART_ERRORS,
    EXPORTS,
    RENDER_DURATION,
    ensure_metrics_registered,
    record_error,
    record_export,
    time_render,
)

__all__ = [
    "CHART_ERRORS",
    "EXPORTS",
    "RENDER_DURATION",
    "ensure_metrics_registered",
    "record_error",
    "record_export",
    "time_render",
]
