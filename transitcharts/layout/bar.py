"""Bar chart geometry for vertical rankings and horizontal comparisons."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..model import DataPoint, Dimensions
from ..scales import (
    BandScale,
    LinearScale,
    SequentialColorScale,
    headroom_domain,
    make_band_scale,
    make_linear_scale,
)
from .base import ChartGeometry, ChartKind, compute_margins

LOG = logging.getLogger(__name__)

GRID_TICKS = 5
VALUE_LABEL_LIFT = 8.0
VALUE_LABEL_GAP = 5.0

__all__ = ["BarGeometry", "BarLayout", "layout_bars", "order_points"]


@dataclass(frozen=True)
class BarGeometry:
    """One rectangle in plot coordinates plus the anchor of its value label."""

    index: int
    source_index: int
    point: DataPoint
    x: float
    y: float
    width: float
    height: float
    label_x: float
    label_y: float
    role: str = "default"
    fill: Optional[str] = None

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


@dataclass(frozen=True)
class BarLayout:
    orientation: str
    bars: Tuple[BarGeometry, ...]
    category_scale: BandScale
    value_scale: LinearScale
    baseline: float
    grid_ticks: Tuple[float, ...]
    mean: Optional[float] = None
    mean_position: Optional[float] = None

    @property
    def primitives(self) -> Tuple[BarGeometry, ...]:
        return self.bars

    @property
    def horizontal(self) -> bool:
        return self.orientation == "horizontal"


def order_points(
    points: Sequence[DataPoint],
    preserve_order: bool = False,
    limit: Optional[int] = None,
) -> List[Tuple[int, DataPoint]]:
    """Pair each record with its input index, ordered for display.

    Records are sorted by descending value unless ``preserve_order`` is set;
    ties keep their input order.  ``limit`` keeps the first N afterwards.
    """

    indexed = list(enumerate(points))
    if not preserve_order:
        indexed.sort(key=lambda item: item[1].value, reverse=True)
    if limit is not None:
        indexed = indexed[:limit]
    return indexed


def _role(point: DataPoint, selected: Optional[str]) -> str:
    if selected is not None and point.name == selected:
        return "selected"
    if point.is_highlighted:
        return "highlighted"
    return "default"


def layout_bars(options, dimensions: Dimensions) -> ChartGeometry:
    bar_opts = options.bar
    horizontal = bar_opts.orientation == "horizontal"
    margins = compute_margins(
        ChartKind.BAR,
        rotate_labels=options.rotate_labels,
        x_axis_label=options.x_axis_label,
        y_axis_label=options.y_axis_label,
        horizontal=horizontal,
    )
    plot_w, plot_h = margins.bounds(dimensions)
    ordered = order_points(options.data, options.preserve_order, bar_opts.limit)
    if not ordered:
        return ChartGeometry(ChartKind.BAR, dimensions, margins, plot_w, plot_h)

    names = [point.name for _, point in ordered]
    values = [point.value for _, point in ordered]
    padding = bar_opts.band_padding()
    domain = headroom_domain(values)

    if horizontal:
        bands = make_band_scale(names, (0.0, plot_h), padding)
        scale = make_linear_scale(domain[0], domain[1], 0.0, plot_w)
        baseline = scale(0.0)
        colors = SequentialColorScale((max(values), 0.0))
        mean = math.fsum(values) / len(values)
        bars = []
        for position, (source, point) in enumerate(ordered):
            end = scale(point.value)
            left = min(baseline, end)
            width = max(0.0, end - baseline)
            top = bands.at(position)
            bars.append(
                BarGeometry(
                    index=position,
                    source_index=source,
                    point=point,
                    x=left,
                    y=top,
                    width=width,
                    height=bands.bandwidth(),
                    label_x=left + width + VALUE_LABEL_GAP,
                    label_y=top + bands.bandwidth() / 2.0,
                    role=_role(point, bar_opts.selected),
                    fill=colors(point.value),
                )
            )
        layout = BarLayout(
            orientation="horizontal",
            bars=tuple(bars),
            category_scale=bands,
            value_scale=scale,
            baseline=baseline,
            grid_ticks=tuple(scale.ticks(GRID_TICKS)),
            mean=mean,
            mean_position=scale(mean),
        )
    else:
        bands = make_band_scale(names, (0.0, plot_w), padding)
        scale = make_linear_scale(domain[0], domain[1], plot_h, 0.0)
        baseline = scale(0.0)
        bars = []
        for position, (source, point) in enumerate(ordered):
            top = scale(point.value)
            height = max(0.0, baseline - top)
            y = min(top, baseline)
            left = bands.at(position)
            bars.append(
                BarGeometry(
                    index=position,
                    source_index=source,
                    point=point,
                    x=left,
                    y=y,
                    width=bands.bandwidth(),
                    height=height,
                    label_x=left + bands.bandwidth() / 2.0,
                    label_y=y - VALUE_LABEL_LIFT,
                    role=_role(point, bar_opts.selected),
                )
            )
        layout = BarLayout(
            orientation="vertical",
            bars=tuple(bars),
            category_scale=bands,
            value_scale=scale,
            baseline=baseline,
            grid_ticks=tuple(scale.ticks(GRID_TICKS)),
        )
    LOG.debug("bar layout: %d bars (%s) in %.0fx%.0f", len(layout.bars), layout.orientation, plot_w, plot_h)
    return ChartGeometry(ChartKind.BAR, dimensions, margins, plot_w, plot_h, layout)
