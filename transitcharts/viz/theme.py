"""Theme tokens for the dashboard chart family."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, MutableMapping, Optional, Tuple

__all__ = ["DARK_THEME", "DEFAULT_THEME", "ThemeManager", "VizTheme", "default_manager"]


@dataclass(frozen=True)
class VizTheme:
    """Colours, fonts, sizes and palettes used when drawing a chart."""

    identifier: str
    name: str
    colors: Mapping[str, str] = field(default_factory=dict)
    fonts: Mapping[str, str] = field(default_factory=dict)
    sizes: Mapping[str, float] = field(default_factory=dict)
    palettes: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def color(self, role: str, default: str = "#000000") -> str:
        return self.colors.get(role, default)

    def font(self, role: str, default: str = "sans-serif") -> str:
        return self.fonts.get(role, default)

    def size(self, token: str, default: float = 12.0) -> float:
        return self.sizes.get(token, default)

    def palette(self, name: str) -> Tuple[str, ...]:
        try:
            return tuple(self.palettes[name])
        except KeyError as exc:
            raise KeyError(f"Theme '{self.identifier}' has no palette '{name}'") from exc


class ThemeManager:
    """Registry of :class:`VizTheme` instances keyed by identifier."""

    def __init__(self, themes: Optional[Iterable[VizTheme]] = None) -> None:
        self._themes: MutableMapping[str, VizTheme] = {}
        for theme in themes or ():
            self.register(theme)

    def register(self, theme: VizTheme) -> None:
        if theme.identifier in self._themes:
            raise ValueError(f"Theme '{theme.identifier}' already registered")
        self._themes[theme.identifier] = theme

    def get(self, identifier: str) -> VizTheme:
        try:
            return self._themes[identifier]
        except KeyError as exc:
            raise KeyError(f"Unknown theme '{identifier}'") from exc


DEFAULT_THEME = VizTheme(
    identifier="transit-light",
    name="Transit Dashboard Light",
    colors={
        "background": "#ffffff",
        "foreground": "#374151",
        "muted": "#6b7280",
        "grid": "#e2e8f0",
        "placeholder": "#6b7280",
        "bar": "#3b82f6",
        "bar_hover": "#f97316",
        "bar_selected": "#ef4444",
        "bar_highlighted": "#6366f1",
        "area": "#1976d2",
        "trend": "#ef4444",
        "slice_stroke": "#ffffff",
        "tooltip_fill": "#ffffff",
        "tooltip_border": "#e5e7eb",
        "quadrant_top_right": "#22c55e",
        "quadrant_top_left": "#f59e0b",
        "quadrant_bottom_left": "#ef4444",
        "quadrant_bottom_right": "#3b82f6",
    },
    fonts={
        "label": "Inter, 'Helvetica Neue', Arial, sans-serif",
    },
    sizes={
        "tick": 11.0,
        "label": 12.0,
        "axis_title": 14.0,
        "bar_value": 12.0,
        "placeholder": 14.0,
    },
    palettes={
        "pie": (
            "#6366f1",
            "#8b5cf6",
            "#06b6d4",
            "#10b981",
            "#f59e0b",
            "#ef4444",
            "#ec4899",
            "#84cc16",
            "#f97316",
            "#6d28d9",
            "#059669",
            "#dc2626",
        ),
    },
)


DARK_THEME = replace(
    DEFAULT_THEME,
    identifier="transit-dark",
    name="Transit Dashboard Dark",
    colors={
        **DEFAULT_THEME.colors,
        "background": "#111827",
        "foreground": "#e5e7eb",
        "muted": "#9ca3af",
        "grid": "#374151",
        "placeholder": "#9ca3af",
        "slice_stroke": "#111827",
        "tooltip_fill": "#1f2937",
        "tooltip_border": "#4b5563",
    },
)


def default_manager() -> ThemeManager:
    return ThemeManager([DEFAULT_THEME, DARK_THEME])
