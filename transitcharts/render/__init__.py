"""Rendering backends: SVG scenes and Pillow rasters."""

from .raster import RasterBackend, SurfaceUnavailableError
from .shell import PLACEHOLDER_TEXT, ChartShell

__all__ = ["ChartShell", "PLACEHOLDER_TEXT", "RasterBackend", "SurfaceUnavailableError"]
