"""Pillow backend rasterising chart geometry into PNG bytes."""

from __future__ import annotations

import logging
import math
from io import BytesIO
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from ..formatting import format_full, truncate_label
from ..layout import ChartGeometry, ChartKind, polar
from ..viz.theme import DEFAULT_THEME, VizTheme
from .shell import PLACEHOLDER_TEXT

LOG = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
ARC_STEPS_PER_RADIAN = 24

__all__ = ["RasterBackend", "SurfaceUnavailableError"]


class SurfaceUnavailableError(RuntimeError):
    """Raised when no drawing surface can be created for a raster render."""


def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size=size)
    except OSError:  # pragma: no cover - font availability varies
        return ImageFont.load_default()


def _measure(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont) -> Tuple[float, float]:
    if not text:
        return 0.0, 0.0
    bbox = draw.textbbox((0, 0), text, font=font)
    return float(bbox[2] - bbox[0]), float(bbox[3] - bbox[1])


def _blend(color: str, alpha: float, background: RGB) -> RGB:
    """Flatten ``color`` at ``alpha`` onto an opaque ``background``."""

    rgb = ImageColor.getrgb(color)[:3]
    return tuple(int(round(c * alpha + b * (1.0 - alpha))) for c, b in zip(rgb, background))  # type: ignore[return-value]


def _arc_points(start: float, end: float, radius: float, cx: float, cy: float) -> List[Tuple[float, float]]:
    steps = max(2, int(math.ceil((end - start) * ARC_STEPS_PER_RADIAN)))
    points = []
    for step in range(steps + 1):
        x, y = polar(radius, start + (end - start) * step / steps)
        points.append((cx + x, cy + y))
    return points


class RasterBackend:
    """Draw a :class:`ChartGeometry` with Pillow.

    Produces the static view of a chart: no hover emphasis, no tooltip and
    no export control, always over an opaque background.
    """

    def __init__(self, theme: Optional[VizTheme] = None, locale: str = "pt_BR") -> None:
        self.theme = theme or DEFAULT_THEME
        self.locale = locale

    def surface(self, width: float, height: float, background: str = "white") -> Image.Image:
        w, h = int(round(width)), int(round(height))
        if w < 1 or h < 1:
            raise SurfaceUnavailableError(f"cannot allocate a {w}x{h} surface")
        try:
            return Image.new("RGB", (w, h), background)
        except (ValueError, MemoryError, OSError) as exc:
            raise SurfaceUnavailableError(str(exc)) from exc

    def render(self, geometry: ChartGeometry, options, background: str = "white") -> bytes:
        image = self.draw(geometry, options, background)
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def draw(self, geometry: ChartGeometry, options, background: str = "white") -> Image.Image:
        dims = geometry.dimensions
        image = self.surface(dims.width, dims.height, background)
        draw = ImageDraw.Draw(image)
        bg = ImageColor.getrgb(background)[:3]
        if geometry.empty:
            font = _font(int(self.theme.size("placeholder")))
            tw, th = _measure(draw, PLACEHOLDER_TEXT, font)
            draw.text(((dims.width - tw) / 2, (dims.height - th) / 2), PLACEHOLDER_TEXT, fill=self.theme.color("placeholder"), font=font)
            return image
        ox, oy = geometry.margins.left, geometry.margins.top
        if geometry.kind is ChartKind.BAR:
            self._bars(image, draw, geometry, options, ox, oy)
        elif geometry.kind is ChartKind.PIE:
            self._pie(draw, geometry, ox, oy)
        elif geometry.kind is ChartKind.SCATTER:
            self._scatter(draw, geometry, ox, oy, bg)
        else:
            self._area(image, draw, geometry, options, ox, oy, bg)
        self._axis_titles(image, draw, geometry, options, ox, oy)
        return image

    # ------------------------------------------------------------------
    # Primitives

    def _text(self, draw, xy, text: str, size: float, anchor: str = "start", color: Optional[str] = None, middle: bool = False) -> None:
        font = _font(int(size))
        tw, th = _measure(draw, text, font)
        x, y = xy
        if anchor == "middle":
            x -= tw / 2
        elif anchor == "end":
            x -= tw
        if middle:
            y -= th / 2
        draw.text((x, y), text, fill=color or self.theme.color("foreground"), font=font)

    def _rotated_text(self, image: Image.Image, xy, text: str, size: float, angle: float) -> None:
        """Paste ``text`` rotated by ``angle`` degrees, its end anchored at ``xy``."""

        font = _font(int(size))
        scratch = ImageDraw.Draw(image)
        tw, th = _measure(scratch, text, font)
        if tw <= 0:
            return
        tile = Image.new("RGBA", (int(tw) + 4, int(th) + 6), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((2, 0), text, fill=self.theme.color("foreground"), font=font)
        turned = tile.rotate(angle, expand=True, resample=Image.Resampling.BICUBIC)
        x, y = xy
        image.paste(turned, (int(x - turned.width), int(y)), turned)

    def _dashed_line(self, draw, start, end, color, dash: float = 3.0, width: int = 1) -> None:
        (x1, y1), (x2, y2) = start, end
        length = math.hypot(x2 - x1, y2 - y1)
        if length == 0:
            return
        dx, dy = (x2 - x1) / length, (y2 - y1) / length
        pos = 0.0
        while pos < length:
            stop = min(length, pos + dash)
            draw.line((x1 + dx * pos, y1 + dy * pos, x1 + dx * stop, y1 + dy * stop), fill=color, width=width)
            pos += dash * 2

    def _grid(self, draw, geometry: ChartGeometry, ticks: Iterable[float], scale, ox: float, oy: float, vertical: bool = False) -> None:
        color = self.theme.color("grid")
        tick_size = self.theme.size("tick")
        for tick in ticks:
            pos = scale(tick)
            if vertical:
                start, end = (ox + pos, oy), (ox + pos, oy + geometry.plot_height)
                label_xy, anchor, middle = (ox + pos, oy + geometry.plot_height + 8), "middle", False
            else:
                start, end = (ox, oy + pos), (ox + geometry.plot_width, oy + pos)
                label_xy, anchor, middle = (ox - 8, oy + pos), "end", True
            if tick == 0:
                draw.line((*start, *end), fill=color, width=1)
            else:
                self._dashed_line(draw, start, end, color)
            self._text(draw, label_xy, format_full(tick, self.locale), tick_size, anchor, middle=middle)

    def _axis_titles(self, image, draw, geometry: ChartGeometry, options, ox: float, oy: float) -> None:
        if geometry.kind is ChartKind.PIE:
            return
        size = self.theme.size("axis_title")
        if options.x_axis_label:
            self._text(
                draw,
                (ox + geometry.plot_width / 2, oy + geometry.plot_height + geometry.margins.bottom - 24),
                options.x_axis_label,
                size,
                "middle",
            )
        if options.y_axis_label:
            font = _font(int(size))
            tw, th = _measure(draw, options.y_axis_label, font)
            tile = Image.new("RGBA", (int(tw) + 4, int(th) + 6), (0, 0, 0, 0))
            ImageDraw.Draw(tile).text((2, 0), options.y_axis_label, fill=self.theme.color("foreground"), font=font)
            turned = tile.rotate(90, expand=True)
            x = int(ox - geometry.margins.left + 4)
            y = int(oy + geometry.plot_height / 2 - turned.height / 2)
            image.paste(turned, (x, y), turned)

    # ------------------------------------------------------------------
    # Kinds

    def _bar_fill(self, bar) -> str:
        if bar.role == "selected":
            return self.theme.color("bar_selected")
        if bar.role == "highlighted":
            return self.theme.color("bar_highlighted")
        return bar.fill or self.theme.color("bar")

    def _bars(self, image, draw, geometry: ChartGeometry, options, ox: float, oy: float) -> None:
        layout = geometry.layout
        tick_size = self.theme.size("tick")
        self._grid(draw, geometry, layout.grid_ticks, layout.value_scale, ox, oy, vertical=layout.horizontal)
        for bar in layout.bars:
            if layout.horizontal:
                self._text(draw, (ox - 8, oy + bar.y + bar.height / 2), truncate_label(bar.point.name, 30), tick_size, "end", middle=True)
            elif options.rotate_labels:
                self._rotated_text(image, (ox + bar.x + bar.width / 2, oy + geometry.plot_height + 6), bar.point.name, tick_size, 45)
            else:
                self._text(draw, (ox + bar.x + bar.width / 2, oy + geometry.plot_height + 6), bar.point.name, tick_size, "middle")
            if bar.width > 0 and bar.height > 0:
                draw.rectangle(
                    (ox + bar.x, oy + bar.y, ox + bar.x + bar.width, oy + bar.y + bar.height),
                    fill=self._bar_fill(bar),
                )
            value = format_full(bar.point.value, self.locale)
            anchor = "start" if layout.horizontal else "middle"
            self._text(draw, (ox + bar.label_x, oy + bar.label_y), value, self.theme.size("bar_value"), anchor, middle=True)
        if layout.mean_position is not None:
            x = ox + layout.mean_position
            self._dashed_line(draw, (x, oy), (x, oy + geometry.plot_height), self.theme.color("trend"), dash=5.0, width=2)

    def _pie(self, draw, geometry: ChartGeometry, ox: float, oy: float) -> None:
        layout = geometry.layout
        cx, cy = ox + layout.center[0], oy + layout.center[1]
        for piece in layout.slices:
            if piece.end_angle <= piece.start_angle:
                continue
            outline = _arc_points(piece.start_angle, piece.end_angle, piece.outer_radius, cx, cy)
            if piece.inner_radius > 0:
                outline += _arc_points(piece.start_angle, piece.end_angle, piece.inner_radius, cx, cy)[::-1]
            else:
                outline.append((cx, cy))
            draw.polygon(outline, fill=piece.fill, outline=self.theme.color("slice_stroke"))
        muted = self.theme.color("muted")
        size = self.theme.size("label")
        for label in layout.labels:
            points = [label.anchor, label.inflexion, (label.x, label.y)]
            draw.line([(cx + x, cy + y) for x, y in points], fill=muted, width=1)
            self._text(draw, (cx + label.text_x, cy + label.y), label.text, size, label.text_anchor, middle=True)

    def _scatter(self, draw, geometry: ChartGeometry, ox: float, oy: float, bg: RGB) -> None:
        layout = geometry.layout
        width, height = geometry.plot_width, geometry.plot_height
        mx, my = layout.mean_position
        if layout.show_quadrants:
            regions = {
                "top_left": (0, 0, mx, my),
                "top_right": (mx, 0, width, my),
                "bottom_left": (0, my, mx, height),
                "bottom_right": (mx, my, width, height),
            }
            for name, (x1, y1, x2, y2) in regions.items():
                if x2 > x1 and y2 > y1:
                    fill = _blend(self.theme.color(f"quadrant_{name}"), 0.05, bg)
                    draw.rectangle((ox + x1, oy + y1, ox + x2, oy + y2), fill=fill)
        self._grid(draw, geometry, layout.y_ticks(), layout.y_scale, ox, oy)
        for tick in layout.x_ticks():
            self._text(draw, (ox + layout.x_scale(tick), oy + height + 8), format_full(tick, self.locale), self.theme.size("tick"), "middle")
        muted = self.theme.color("muted")
        self._dashed_line(draw, (ox + mx, oy), (ox + mx, oy + height), muted, dash=5.0)
        self._dashed_line(draw, (ox, oy + my), (ox + width, oy + my), muted, dash=5.0)
        for point in layout.points:
            color = point.fill or self.theme.color(f"quadrant_{point.quadrant}")
            x, y, r = ox + point.cx, oy + point.cy, point.radius
            draw.ellipse((x - r, y - r, x + r, y + r), fill=_blend(color, 0.6, bg), outline=self.theme.color("slice_stroke"))
        if layout.trend is not None:
            trend = layout.trend
            self._dashed_line(draw, (ox + trend.x1, oy + trend.y1), (ox + trend.x2, oy + trend.y2), self.theme.color("trend"), dash=6.0, width=2)
            self._text(draw, (ox + width - 4, oy + 4), trend.caption(), self.theme.size("label"), "end", color=self.theme.color("trend"))

    def _area(self, image, draw, geometry: ChartGeometry, options, ox: float, oy: float, bg: RGB) -> None:
        layout = geometry.layout
        self._grid(draw, geometry, layout.grid_ticks, layout.y_scale, ox, oy)
        tick_size = self.theme.size("tick")
        for index, text in layout.x_ticks:
            x, y = ox + layout.x_scale(index), oy + geometry.plot_height + 6
            if options.rotate_labels:
                self._rotated_text(image, (x, y), text, tick_size, 45)
            else:
                self._text(draw, (x, y), text, tick_size, "middle")
        color = self.theme.color("area")
        outline: Sequence[Tuple[float, float]] = [(ox + x, oy + y) for x, y in layout.outline]
        base = oy + layout.baseline
        if len(outline) >= 2:
            polygon = list(outline) + [(outline[-1][0], base), (outline[0][0], base)]
            draw.polygon(polygon, fill=_blend(color, 0.2, bg))
            draw.line(list(outline), fill=color, width=2, joint="curve")
        elif outline:
            x, y = outline[0]
            draw.ellipse((x - 3, y - 3, x + 3, y + 3), fill=color)
