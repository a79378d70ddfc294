"""Geometry derivation for every chart kind."""

from __future__ import annotations

import logging
from typing import Optional

from ..model import Dimensions
from ..viz.theme import DEFAULT_THEME, VizTheme
from .area import AreaLayout, AreaPoint, layout_area, x_tick_indexes
from .bar import BarGeometry, BarLayout, layout_bars, order_points
from .base import ChartGeometry, ChartKind, compute_margins, polar
from .labels import PieLabel, resolve_collisions
from .pie import PieLayout, SliceGeometry, arc_path, layout_pie
from .regression import LinearFit, fit_line, pearson
from .scatter import (
    QUADRANTS,
    PointGeometry,
    ScatterLayout,
    TrendLine,
    classify_quadrant,
    filter_points,
    jitter,
    layout_scatter,
    quadrant_counts,
)

LOG = logging.getLogger(__name__)

__all__ = [
    "AreaLayout",
    "AreaPoint",
    "BarGeometry",
    "BarLayout",
    "ChartGeometry",
    "ChartKind",
    "LinearFit",
    "PieLabel",
    "PieLayout",
    "PointGeometry",
    "QUADRANTS",
    "ScatterLayout",
    "SliceGeometry",
    "TrendLine",
    "arc_path",
    "build_geometry",
    "classify_quadrant",
    "compute_margins",
    "filter_points",
    "fit_line",
    "jitter",
    "order_points",
    "pearson",
    "polar",
    "quadrant_counts",
    "resolve_collisions",
    "x_tick_indexes",
]


def build_geometry(
    options,
    dimensions: Dimensions,
    settings=None,
    theme: Optional[VizTheme] = None,
) -> ChartGeometry:
    """Derive the full geometry for ``options`` drawn at ``dimensions``.

    Pure function of its inputs; identical arguments always produce equal
    geometry.
    """

    kind = ChartKind(options.kind)
    locale = settings.locale if settings is not None else "pt_BR"
    theme = theme or DEFAULT_THEME
    if kind is ChartKind.BAR:
        geometry = layout_bars(options, dimensions)
    elif kind is ChartKind.PIE:
        geometry = layout_pie(options, dimensions, theme.palette("pie"), locale)
    elif kind is ChartKind.SCATTER:
        palette = theme.palettes.get("category", ())
        geometry = layout_scatter(options, dimensions, palette)
    else:
        geometry = layout_area(options, dimensions, locale)
    if geometry.empty:
        LOG.debug("%s chart has nothing to draw", kind.value)
    return geometry
