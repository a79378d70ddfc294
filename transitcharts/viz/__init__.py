"""Vector scene graph and theme tokens."""

from .svg import SvgDocument, SvgElement
from .theme import DARK_THEME, DEFAULT_THEME, ThemeManager, VizTheme, default_manager

__all__ = [
    "DARK_THEME",
    "DEFAULT_THEME",
    "SvgDocument",
    "SvgElement",
    "ThemeManager",
    "VizTheme",
    "default_manager",
]
