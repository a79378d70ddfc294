"""Cardinal spline paths for line and area charts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..viz.svg import fmt

Point = Tuple[float, float]

__all__ = ["CubicSegment", "area_path", "cardinal_segments", "flatten", "line_path"]


@dataclass(frozen=True)
class CubicSegment:
    start: Point
    control1: Point
    control2: Point
    end: Point

    def at(self, t: float) -> Point:
        u = 1.0 - t
        a = u * u * u
        b = 3 * u * u * t
        c = 3 * u * t * t
        d = t * t * t
        return (
            a * self.start[0] + b * self.control1[0] + c * self.control2[0] + d * self.end[0],
            a * self.start[1] + b * self.control1[1] + c * self.control2[1] + d * self.end[1],
        )


def cardinal_segments(points: Sequence[Point], tension: float = 0.0) -> List[CubicSegment]:
    """Cubic segments of a cardinal spline through ``points``.

    The first and last segments mirror their missing neighbour, so the
    curve starts and ends with zero-length control arms.
    """

    n = len(points)
    if n < 2:
        return []
    k = (1.0 - tension) / 6.0
    segments: List[CubicSegment] = []
    for i in range(n - 1):
        p1 = points[i]
        p2 = points[i + 1]
        p0 = points[i - 1] if i > 0 else p2
        p3 = points[i + 2] if i + 2 < n else p1
        c1 = (p1[0] + k * (p2[0] - p0[0]), p1[1] + k * (p2[1] - p0[1]))
        c2 = (p2[0] + k * (p1[0] - p3[0]), p2[1] + k * (p1[1] - p3[1]))
        segments.append(CubicSegment(p1, c1, c2, p2))
    return segments


def _pt(point: Point) -> str:
    return f"{fmt(point[0])},{fmt(point[1])}"


def line_path(points: Sequence[Point], tension: float = 0.0) -> str:
    if not points:
        return ""
    head = f"M{_pt(points[0])}"
    if len(points) == 1:
        return head + "Z"
    if len(points) == 2:
        return head + f"L{_pt(points[1])}"
    body = "".join(
        f"C{_pt(seg.control1)},{_pt(seg.control2)},{_pt(seg.end)}"
        for seg in cardinal_segments(points, tension)
    )
    return head + body


def area_path(points: Sequence[Point], baseline: float, tension: float = 0.0) -> str:
    """Line path closed down to ``baseline``."""

    if not points:
        return ""
    top = line_path(points, tension)
    if len(points) == 1:
        top = top[:-1]
    first_x = points[0][0]
    last_x = points[-1][0]
    return f"{top}L{fmt(last_x)},{fmt(baseline)}L{fmt(first_x)},{fmt(baseline)}Z"


def flatten(points: Sequence[Point], tension: float = 0.0, steps: int = 16) -> List[Point]:
    """Polyline approximation of the spline, used by the raster backend."""

    if len(points) < 3:
        return list(points)
    out: List[Point] = [points[0]]
    for seg in cardinal_segments(points, tension):
        out.extend(seg.at(i / steps) for i in range(1, steps + 1))
    return out
