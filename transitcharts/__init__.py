"""2D chart rendering engine for the transit operations dashboard."""

from __future__ import annotations

from .chart import Chart
from .config import ChartOptions, EngineSettings, load_settings, save_settings
from .export import ExportDisabledError, ExportPipeline, export_filename
from .interaction import HoverController, HoverState, Tooltip, hit_test, place_tooltip
from .layout import ChartGeometry, ChartKind, build_geometry
from .model import ChartDataError, DataPoint, Dimensions, Margins, coerce_points
from .render import ChartShell, RasterBackend, SurfaceUnavailableError
from .responsive import ResizableContainer, ResponsiveSizer

__version__ = "0.1.0"

__all__ = [
    "Chart",
    "ChartDataError",
    "ChartGeometry",
    "ChartKind",
    "ChartOptions",
    "ChartShell",
    "DataPoint",
    "Dimensions",
    "EngineSettings",
    "ExportDisabledError",
    "ExportPipeline",
    "HoverController",
    "HoverState",
    "Margins",
    "RasterBackend",
    "ResizableContainer",
    "ResponsiveSizer",
    "SurfaceUnavailableError",
    "Tooltip",
    "build_geometry",
    "coerce_points",
    "export_filename",
    "hit_test",
    "load_settings",
    "place_tooltip",
    "save_settings",
    "__version__",
]
