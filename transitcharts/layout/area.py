"""Area/line geometry for time series sampled at regular periods."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..formatting import format_month_short
from ..model import DataPoint, Dimensions
from ..scales import LinearScale, headroom_domain, make_linear_scale
from .base import ChartGeometry, ChartKind, compute_margins
from .curves import area_path, flatten, line_path

GRID_TICKS = 6

__all__ = ["AreaLayout", "AreaPoint", "layout_area", "x_tick_indexes"]


@dataclass(frozen=True)
class AreaPoint:
    index: int
    point: DataPoint
    cx: float
    cy: float
    label: Optional[str] = None


@dataclass(frozen=True)
class AreaLayout:
    points: Tuple[AreaPoint, ...]
    x_scale: LinearScale
    y_scale: LinearScale
    baseline: float
    line_path: str
    area_path: str
    outline: Tuple[Tuple[float, float], ...]
    grid_ticks: Tuple[float, ...]
    x_ticks: Tuple[Tuple[int, str], ...]

    @property
    def primitives(self) -> Tuple[AreaPoint, ...]:
        return self.points

    def index_at(self, px: float) -> int:
        """Nearest sample index for a plot-area x pixel."""

        raw = self.x_scale.invert(px)
        index = int(math.floor(raw + 0.5))
        return max(0, min(len(self.points) - 1, index))


def x_tick_indexes(count: int, max_ticks: int = 10) -> List[int]:
    """Evenly spread indexes, at most ``max_ticks`` of them, always including 0."""

    if count <= 0:
        return []
    if count <= max_ticks:
        return list(range(count))
    stride = math.ceil(count / max_ticks)
    return list(range(0, count, stride))


def layout_area(options, dimensions: Dimensions, locale: str = "pt_BR") -> ChartGeometry:
    area_opts = options.area
    margins = compute_margins(
        ChartKind.AREA,
        rotate_labels=options.rotate_labels,
        x_axis_label=options.x_axis_label,
        y_axis_label=options.y_axis_label,
    )
    plot_w, plot_h = margins.bounds(dimensions)
    data = options.data
    if not data:
        return ChartGeometry(ChartKind.AREA, dimensions, margins, plot_w, plot_h)

    values = [point.value for point in data]
    x_scale = make_linear_scale(0, len(data) - 1, 0.0, plot_w)
    lo, hi = headroom_domain(values)
    y_scale = make_linear_scale(lo, hi, plot_h, 0.0)
    baseline = y_scale(0.0)

    points = tuple(
        AreaPoint(
            index=index,
            point=point,
            cx=x_scale(index),
            cy=y_scale(point.value),
            label=point.label(area_opts.label_field),
        )
        for index, point in enumerate(data)
    )
    coords = [(p.cx, p.cy) for p in points]
    ticks = []
    for index in x_tick_indexes(len(points), area_opts.max_x_ticks):
        label = points[index].label
        ticks.append((index, format_month_short(label, locale) if label else str(index + 1)))

    layout = AreaLayout(
        points=points,
        x_scale=x_scale,
        y_scale=y_scale,
        baseline=baseline,
        line_path=line_path(coords, area_opts.curve_tension),
        area_path=area_path(coords, baseline, area_opts.curve_tension),
        outline=tuple(flatten(coords, area_opts.curve_tension)),
        grid_ticks=tuple(y_scale.ticks(GRID_TICKS)),
        x_ticks=tuple(ticks),
    )
    return ChartGeometry(ChartKind.AREA, dimensions, margins, plot_w, plot_h, layout)
