"""Shared layout types: chart kinds, margins and the geometry container."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from ..model import Dimensions, Margins

__all__ = [
    "ChartGeometry",
    "ChartKind",
    "compute_margins",
    "polar",
]


class ChartKind(str, Enum):
    """Tagged variant naming the chart family."""

    BAR = "bar"
    PIE = "pie"
    AREA = "area"
    SCATTER = "scatter"


_BASE = Margins(top=30, right=30, bottom=40, left=50)
_HORIZONTAL_BASE = Margins(top=30, right=60, bottom=40, left=200)
_PIE = Margins(top=30, right=80, bottom=30, left=80)

ROTATED_LABEL_EXTRA = 60.0
AXIS_TITLE_EXTRA = 30.0


def polar(radius: float, angle: float) -> Tuple[float, float]:
    """Point at ``angle`` (clockwise from twelve o'clock) on a circle about the origin."""

    return radius * math.sin(angle), -radius * math.cos(angle)


def compute_margins(
    kind: ChartKind,
    *,
    rotate_labels: bool = False,
    x_axis_label: Optional[str] = None,
    y_axis_label: Optional[str] = None,
    horizontal: bool = False,
) -> Margins:
    """Margins for the enabled optional elements.

    Rotated category labels and an x-axis title each add bottom space; a
    y-axis title adds left space.  Pie charts have no axes.
    """

    if kind is ChartKind.PIE:
        return _PIE
    base = _HORIZONTAL_BASE if horizontal else _BASE
    bottom = base.bottom
    left = base.left
    if rotate_labels and not horizontal:
        bottom += ROTATED_LABEL_EXTRA
    if x_axis_label:
        bottom += AXIS_TITLE_EXTRA
    if y_axis_label:
        left += AXIS_TITLE_EXTRA
    return Margins(top=base.top, right=base.right, bottom=bottom, left=left)


@dataclass(frozen=True)
class ChartGeometry:
    """Everything derived from ``(data, dimensions, options)``.

    ``layout`` is the kind-specific payload (``BarLayout``, ``PieLayout``,
    ``ScatterLayout`` or ``AreaLayout``); it is ``None`` for the empty
    state.
    """

    kind: ChartKind
    dimensions: Dimensions
    margins: Margins
    plot_width: float
    plot_height: float
    layout: Any = None

    @property
    def empty(self) -> bool:
        return self.layout is None

    @property
    def primitives(self) -> Tuple[Any, ...]:
        if self.layout is None:
            return ()
        return self.layout.primitives

    def to_plot(self, x: float, y: float) -> Tuple[float, float]:
        """Convert surface coordinates into plot-area coordinates."""

        return x - self.margins.left, y - self.margins.top
