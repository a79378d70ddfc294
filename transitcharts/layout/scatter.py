"""Scatter and bubble geometry with quadrant analysis.

Each point plots two metrics of a record (for instance average speed
against occupancy).  Points are classified into four quadrants around the
dataset means, optionally sized by a third metric and overlaid with a
least-squares trend line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..model import DataPoint, Dimensions
from ..scales import (
    LinearScale,
    OrdinalColorScale,
    make_linear_scale,
    make_sqrt_scale,
    padded_extent,
)
from .base import ChartGeometry, ChartKind, compute_margins
from .regression import LinearFit, fit_line

LOG = logging.getLogger(__name__)

QUADRANTS: Tuple[str, ...] = ("top_right", "top_left", "bottom_left", "bottom_right")

QUADRANT_TITLES: Dict[str, str] = {
    "top_right": "best",
    "top_left": "slow and crowded",
    "bottom_left": "optimisation targets",
    "bottom_right": "fast and empty",
}

JITTER_SEED_STEP = 0.1
AXIS_TICKS = 6

__all__ = [
    "PointGeometry",
    "QUADRANTS",
    "QUADRANT_TITLES",
    "ScatterLayout",
    "TrendLine",
    "classify_quadrant",
    "filter_points",
    "jitter",
    "layout_scatter",
    "quadrant_counts",
]


@dataclass(frozen=True)
class PointGeometry:
    index: int
    point: DataPoint
    x_value: float
    y_value: float
    weight: Optional[float]
    cx: float
    cy: float
    radius: float
    quadrant: str
    category: Optional[str] = None
    fill: Optional[str] = None

    def distance(self, px: float, py: float) -> float:
        return math.hypot(px - self.cx, py - self.cy)


@dataclass(frozen=True)
class TrendLine:
    fit: LinearFit
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def correlation(self) -> float:
        return self.fit.correlation

    def caption(self) -> str:
        return f"r = {self.fit.correlation:.3f}"


@dataclass(frozen=True)
class ScatterLayout:
    points: Tuple[PointGeometry, ...]
    x_scale: LinearScale
    y_scale: LinearScale
    mean_x: float
    mean_y: float
    mean_position: Tuple[float, float]
    color_mode: str
    categories: Tuple[str, ...] = ()
    trend: Optional[TrendLine] = None
    show_quadrants: bool = True

    @property
    def primitives(self) -> Tuple[PointGeometry, ...]:
        return self.points

    def x_ticks(self, count: int = AXIS_TICKS) -> List[float]:
        return self.x_scale.ticks(count)

    def y_ticks(self, count: int = AXIS_TICKS) -> List[float]:
        return self.y_scale.ticks(count)


def jitter(index: int, ratio: float) -> Tuple[float, float]:
    """Deterministic offset for the ``index``-th point, in data units."""

    seed = index * JITTER_SEED_STEP
    return math.sin(seed) * 0.5 * ratio, math.cos(seed) * 0.5 * ratio


def classify_quadrant(x: float, y: float, mean_x: float, mean_y: float) -> str:
    """Quadrant of ``(x, y)``; a value equal to the mean counts as low."""

    vertical = "top" if y > mean_y else "bottom"
    horizontal = "right" if x > mean_x else "left"
    return f"{vertical}_{horizontal}"


def _metrics(points: Sequence[DataPoint], options) -> Tuple[List[float], List[float]]:
    xs = [point.metric(options.x_field) for point in points]
    ys = [point.metric(options.y_field) for point in points]
    return xs, ys


def _means(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    if not xs:
        return 0.0, 0.0
    return math.fsum(xs) / len(xs), math.fsum(ys) / len(ys)


def quadrant_counts(points: Sequence[DataPoint], options) -> Dict[str, int]:
    xs, ys = _metrics(points, options)
    mean_x, mean_y = _means(xs, ys)
    counts = {name: 0 for name in QUADRANTS}
    for x, y in zip(xs, ys):
        counts[classify_quadrant(x, y, mean_x, mean_y)] += 1
    return counts


def filter_points(
    points: Sequence[DataPoint],
    options,
    quadrant: Optional[str] = None,
    top: int = 0,
) -> Tuple[DataPoint, ...]:
    """Restrict ``points`` to one quadrant and/or the ``top`` heaviest records.

    Quadrants are evaluated against the means of the full input.  Weight
    is ``options.weight_field`` when configured, otherwise ``value``.
    """

    if quadrant is not None and quadrant not in QUADRANTS:
        raise ValueError(f"unknown quadrant {quadrant!r}")
    selected = list(points)
    if quadrant is not None:
        xs, ys = _metrics(points, options)
        mean_x, mean_y = _means(xs, ys)
        selected = [
            point
            for point, x, y in zip(points, xs, ys)
            if classify_quadrant(x, y, mean_x, mean_y) == quadrant
        ]
    if top > 0:
        field = options.weight_field or "value"
        selected = sorted(selected, key=lambda point: point.metric(field), reverse=True)[:top]
    return tuple(selected)


def layout_scatter(options, dimensions: Dimensions, palette: Sequence[str] = ()) -> ChartGeometry:
    scatter_opts = options.scatter
    margins = compute_margins(
        ChartKind.SCATTER,
        x_axis_label=options.x_axis_label,
        y_axis_label=options.y_axis_label,
    )
    plot_w, plot_h = margins.bounds(dimensions)
    points = options.data
    if not points:
        return ChartGeometry(ChartKind.SCATTER, dimensions, margins, plot_w, plot_h)

    xs, ys = _metrics(points, scatter_opts)
    mean_x, mean_y = _means(xs, ys)
    x_lo, x_hi = padded_extent(xs)
    y_lo, y_hi = padded_extent(ys)
    x_scale = make_linear_scale(x_lo, x_hi, 0.0, plot_w)
    y_scale = make_linear_scale(y_lo, y_hi, plot_h, 0.0)

    weights: Optional[List[float]] = None
    radius_of = None
    if scatter_opts.weight_field:
        weights = [point.metric(scatter_opts.weight_field) for point in points]
        radius_of = make_sqrt_scale((min(weights), max(weights)), scatter_opts.radius_range)

    categories: Tuple[str, ...] = ()
    color_of = None
    if scatter_opts.color_mode == "category":
        labels = [point.label(scatter_opts.category_field) or "" for point in points]
        categories = tuple(sorted(set(labels)))
        color_of = OrdinalColorScale(categories, tuple(palette)) if palette else OrdinalColorScale(categories)

    geometries = []
    for index, (point, x, y) in enumerate(zip(points, xs, ys)):
        dx, dy = jitter(index, scatter_opts.jitter_ratio)
        weight = weights[index] if weights is not None else None
        category = point.label(scatter_opts.category_field) if scatter_opts.category_field else None
        geometries.append(
            PointGeometry(
                index=index,
                point=point,
                x_value=x,
                y_value=y,
                weight=weight,
                cx=x_scale(x + dx),
                cy=y_scale(y + dy),
                radius=radius_of(weight) if radius_of is not None else scatter_opts.default_radius,
                quadrant=classify_quadrant(x, y, mean_x, mean_y),
                category=category,
                fill=color_of(category or "") if color_of is not None else None,
            )
        )

    trend = None
    if scatter_opts.show_trend_line:
        fit = fit_line(xs, ys)
        if fit is not None:
            lo, hi = min(xs), max(xs)
            trend = TrendLine(
                fit=fit,
                x1=x_scale(lo),
                y1=y_scale(fit.predict(lo)),
                x2=x_scale(hi),
                y2=y_scale(fit.predict(hi)),
            )
        else:
            LOG.debug("trend line skipped: %d points without x variance", len(xs))

    layout = ScatterLayout(
        points=tuple(geometries),
        x_scale=x_scale,
        y_scale=y_scale,
        mean_x=mean_x,
        mean_y=mean_y,
        mean_position=(x_scale(mean_x), y_scale(mean_y)),
        color_mode=scatter_opts.color_mode,
        categories=categories,
        trend=trend,
        show_quadrants=scatter_opts.show_quadrants and scatter_opts.color_mode == "quadrant",
    )
    return ChartGeometry(ChartKind.SCATTER, dimensions, margins, plot_w, plot_h, layout)
