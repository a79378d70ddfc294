"""Pie and donut slice geometry.

Angles are measured clockwise from twelve o'clock, matching the usual SVG
arc convention: a point at angle ``a`` and radius ``r`` sits at
``(r * sin(a), -r * cos(a))`` relative to the centre.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from ..model import DataPoint, Dimensions
from ..viz.svg import fmt
from .base import ChartGeometry, ChartKind, compute_margins, polar
from .labels import PieLabel, place_labels

LOG = logging.getLogger(__name__)

TAU = 2.0 * math.pi
_FULL_TURN_EPSILON = 1e-9

__all__ = ["PieLayout", "SliceGeometry", "arc_path", "layout_pie", "polar"]


def _pt(point: Tuple[float, float]) -> str:
    return f"{fmt(point[0])},{fmt(point[1])}"


def arc_path(start: float, end: float, inner: float, outer: float) -> str:
    """SVG path for an annular sector centred on the origin."""

    sweep = end - start
    if outer <= 0:
        return ""
    r = fmt(outer)
    if sweep >= TAU - _FULL_TURN_EPSILON:
        # A single arc cannot close on itself; draw two half circles.
        path = f"M0,{fmt(-outer)}A{r},{r},0,1,1,0,{r}A{r},{r},0,1,1,0,{fmt(-outer)}Z"
        if inner > 0:
            ri = fmt(inner)
            path += f"M0,{fmt(-inner)}A{ri},{ri},0,1,0,0,{ri}A{ri},{ri},0,1,0,0,{fmt(-inner)}Z"
        return path
    large = 1 if sweep > math.pi else 0
    head = f"M{_pt(polar(outer, start))}A{r},{r},0,{large},1,{_pt(polar(outer, end))}"
    if inner > 0:
        ri = fmt(inner)
        return head + f"L{_pt(polar(inner, end))}A{ri},{ri},0,{large},0,{_pt(polar(inner, start))}Z"
    return head + "L0,0Z"


@dataclass(frozen=True)
class SliceGeometry:
    index: int
    point: DataPoint
    start_angle: float
    end_angle: float
    inner_radius: float
    outer_radius: float
    centroid: Tuple[float, float]
    percentage: float
    fill: str
    path: str

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2.0

    def path_with_radius(self, outer: float) -> str:
        return arc_path(self.start_angle, self.end_angle, self.inner_radius, outer)

    def contains(self, dx: float, dy: float, growth: float = 0.0) -> bool:
        """Whether the centre-relative point ``(dx, dy)`` falls in the slice.

        ``growth`` widens the outer edge for a slice drawn enlarged on hover.
        """

        if self.end_angle <= self.start_angle:
            return False
        distance = math.hypot(dx, dy)
        if distance < self.inner_radius or distance > self.outer_radius + growth:
            return False
        angle = math.atan2(dx, -dy) % TAU
        return self.start_angle <= angle < self.end_angle


@dataclass(frozen=True)
class PieLayout:
    center: Tuple[float, float]
    radius: float
    inner_radius: float
    total: float
    slices: Tuple[SliceGeometry, ...]
    labels: Tuple[PieLabel, ...]

    @property
    def primitives(self) -> Tuple[SliceGeometry, ...]:
        return self.slices


def layout_pie(options, dimensions: Dimensions, palette: Tuple[str, ...], locale: str = "pt_BR") -> ChartGeometry:
    margins = compute_margins(ChartKind.PIE)
    plot_w, plot_h = margins.bounds(dimensions)
    points = options.data
    weights = [max(0.0, point.value) for point in points]
    total = math.fsum(weights)
    if not points or total <= 0:
        if points:
            LOG.debug("pie total %.3f is not positive; rendering empty state", total)
        return ChartGeometry(ChartKind.PIE, dimensions, margins, plot_w, plot_h)

    pie_opts = options.pie
    radius = max(0.0, min(plot_w, plot_h) / 2.0)
    inner = pie_opts.donut_ratio * radius
    slices = []
    running = 0.0
    start = 0.0
    for index, (point, weight) in enumerate(zip(points, weights)):
        running += weight
        # End angles follow the cumulative weight and stay within a full turn.
        end = TAU if index == len(points) - 1 else min(TAU, TAU * running / total)
        end = max(start, end)
        mid = (start + end) / 2.0
        slices.append(
            SliceGeometry(
                index=index,
                point=point,
                start_angle=start,
                end_angle=end,
                inner_radius=inner,
                outer_radius=radius,
                centroid=polar((inner + radius) / 2.0, mid),
                percentage=weight / total * 100.0,
                fill=palette[index % len(palette)],
                path=arc_path(start, end, inner, radius),
            )
        )
        start = end
    labels = place_labels(slices, radius, pie_opts, locale)
    layout = PieLayout(
        center=(plot_w / 2.0, plot_h / 2.0),
        radius=radius,
        inner_radius=inner,
        total=total,
        slices=tuple(slices),
        labels=labels,
    )
    return ChartGeometry(ChartKind.PIE, dimensions, margins, plot_w, plot_h, layout)
