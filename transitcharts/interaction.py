"""Hover state, hit testing and tooltip placement.

A chart holds exactly one :class:`HoverState` at a time.  Every pointer
event produces a new immutable state that replaces the previous one in a
single assignment, so readers never observe a half-updated hover.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from .formatting import format_full, format_month_long, format_percentage
from .layout import ChartGeometry, ChartKind
from .layout.scatter import QUADRANT_TITLES
from .model import Dimensions

LOG = logging.getLogger(__name__)

Pointer = Tuple[float, float]
Listener = Callable[["HoverState"], None]

TOOLTIP_BASELINE = 18.0
TOOLTIP_LINE_HEIGHT = 16.0
TOOLTIP_PADDING = 10.0

__all__ = [
    "HoverController",
    "HoverState",
    "Tooltip",
    "build_tooltip",
    "hit_test",
    "place_tooltip",
    "tooltip_for",
    "tooltip_height",
]


@dataclass(frozen=True)
class HoverState:
    """Which primitive is hovered and where the pointer is."""

    index: Optional[int] = None
    pointer: Optional[Pointer] = None

    @classmethod
    def idle(cls) -> "HoverState":
        return cls()

    @property
    def active(self) -> bool:
        return self.index is not None


class HoverController:
    """Owns the current :class:`HoverState` and notifies subscribers."""

    def __init__(self) -> None:
        self._state = HoverState.idle()
        self._listeners: List[Listener] = []
        # Export workers read the state from other threads.
        self._lock = threading.Lock()

    @property
    def state(self) -> HoverState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def enter(self, index: int, pointer: Optional[Pointer] = None) -> HoverState:
        return self._set(HoverState(index, pointer))

    def move(self, pointer: Pointer) -> HoverState:
        if not self._state.active:
            return self._state
        return self._set(replace(self._state, pointer=pointer))

    def leave(self, index: Optional[int] = None) -> HoverState:
        """Clear the hover; a leave for a primitive no longer hovered is ignored."""

        if index is not None and index != self._state.index:
            return self._state
        return self._set(HoverState.idle())

    def reset(self) -> HoverState:
        return self._set(HoverState.idle())

    def _set(self, state: HoverState) -> HoverState:
        with self._lock:
            if state == self._state:
                return state
            self._state = state
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state)
        return state


def hit_test(
    geometry: ChartGeometry,
    x: float,
    y: float,
    hovered: Optional[int] = None,
    growth: float = 0.0,
) -> Optional[int]:
    """Return the index of the primitive under surface point ``(x, y)``.

    For pies the slice at ``hovered`` is tested with its outer radius grown by
    ``growth``, matching how the hovered slice is drawn.
    """

    if geometry.empty:
        return None
    px, py = geometry.to_plot(x, y)
    layout = geometry.layout
    if geometry.kind is ChartKind.BAR:
        for bar in layout.bars:
            if bar.contains(px, py):
                return bar.index
        return None
    if geometry.kind is ChartKind.PIE:
        cx, cy = layout.center
        for piece in layout.slices:
            if piece.contains(px - cx, py - cy, growth if piece.index == hovered else 0.0):
                return piece.index
        return None
    if geometry.kind is ChartKind.SCATTER:
        for point in reversed(layout.points):
            if point.distance(px, py) <= point.radius:
                return point.index
        return None
    if 0 <= px <= geometry.plot_width and 0 <= py <= geometry.plot_height:
        return layout.index_at(px)
    return None


def place_tooltip(
    pointer: Pointer,
    surface: Dimensions,
    size: Dimensions,
    offset: float = 10.0,
    lift: float = 80.0,
    min_top: float = 10.0,
) -> Tuple[float, float]:
    """Top-left corner of a tooltip box kept inside the surface horizontally."""

    x, y = pointer
    left = max(0.0, min(x + offset, surface.width - size.width))
    top = max(y - lift, min_top)
    return left, top


@dataclass(frozen=True)
class Tooltip:
    title: str
    rows: Tuple[Tuple[str, str], ...] = ()
    subtitle: Optional[str] = None
    left: float = 0.0
    top: float = 0.0
    width: float = 200.0
    height: float = 80.0
    index: Optional[int] = field(default=None, compare=False)

    def lines(self) -> List[str]:
        out = [self.title]
        if self.subtitle:
            out.append(self.subtitle)
        out.extend(f"{label}: {value}" for label, value in self.rows)
        return out


def tooltip_height(line_count: int, minimum: float = 0.0) -> float:
    """Box height that fits ``line_count`` text lines, never below ``minimum``."""

    needed = TOOLTIP_BASELINE + max(0, line_count - 1) * TOOLTIP_LINE_HEIGHT + TOOLTIP_PADDING
    return max(minimum, needed)


def tooltip_for(geometry: ChartGeometry, index: Optional[int], options, locale: str = "pt_BR") -> Optional[Tooltip]:
    """Tooltip content for the primitive at ``index``, if it exists."""

    if index is None or geometry.empty:
        return None
    primitives = geometry.primitives
    if not 0 <= index < len(primitives):
        return None
    primitive = primitives[index]
    point = primitive.point
    value = format_full(point.value, locale)

    if geometry.kind is ChartKind.PIE:
        subtitle = f"ID: {point.id}" if point.id is not None else None
        return Tooltip(
            title=point.display_name(),
            subtitle=subtitle,
            rows=(
                (options.value_label, value),
                ("Share", format_percentage(max(0.0, point.value), geometry.layout.total, locale)),
            ),
            index=index,
        )
    if geometry.kind is ChartKind.BAR:
        return Tooltip(
            title=point.display_name(),
            rows=((options.item_label, point.name), (options.value_label, value)),
            index=index,
        )
    if geometry.kind is ChartKind.AREA:
        label = primitive.label
        title = format_month_long(label, locale) if label else f"Period {index + 1}"
        return Tooltip(title=title, rows=((options.value_label, value),), index=index)

    scatter = options.scatter
    rows = [
        (options.x_axis_label or scatter.x_field, format_full(primitive.x_value, locale, 2)),
        (options.y_axis_label or scatter.y_field, format_full(primitive.y_value, locale, 2)),
    ]
    if primitive.weight is not None:
        rows.append((scatter.weight_field, format_full(primitive.weight, locale)))
    if scatter.color_mode == "category":
        rows.append(("Category", primitive.category or "-"))
    else:
        rows.append(("Quadrant", QUADRANT_TITLES[primitive.quadrant]))
    return Tooltip(title=point.display_name(), rows=tuple(rows), index=index)


def build_tooltip(
    geometry: ChartGeometry,
    hover: HoverState,
    options,
    cfg=None,
    locale: str = "pt_BR",
) -> Optional[Tooltip]:
    """Content and placement of the tooltip for ``hover``, or ``None`` when idle."""

    if not hover.active or hover.pointer is None:
        return None
    tip = tooltip_for(geometry, hover.index, options, locale)
    if tip is None:
        return None
    width = cfg.width if cfg is not None else tip.width
    height = tooltip_height(len(tip.lines()), cfg.height if cfg is not None else tip.height)
    left, top = place_tooltip(
        hover.pointer,
        geometry.dimensions,
        Dimensions(width, height),
        offset=cfg.offset if cfg is not None else 10.0,
        lift=cfg.lift if cfg is not None else 80.0,
        min_top=cfg.min_top if cfg is not None else 10.0,
    )
    return replace(tip, left=left, top=top, width=width, height=height)
