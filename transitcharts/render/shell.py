"""SVG scene composition for every chart kind.

The shell turns a :class:`~transitcharts.layout.ChartGeometry` plus the
current hover into an :class:`~transitcharts.viz.svg.SvgDocument`.  It never
computes positions of its own beyond axis decorations; everything data
driven comes from the geometry.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..formatting import format_full, truncate_label
from ..interaction import TOOLTIP_BASELINE, TOOLTIP_LINE_HEIGHT, TOOLTIP_PADDING, HoverState, Tooltip
from ..layout import ChartGeometry, ChartKind
from ..viz.svg import SvgDocument, SvgElement, fmt
from ..viz.theme import DEFAULT_THEME, VizTheme

LOG = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No data to display"
DIMMED_OPACITY = 0.3
GRID_DASH = "3,3"
EXPORT_BUTTON_SIZE = 28.0

__all__ = ["ChartShell", "PLACEHOLDER_TEXT"]


class ChartShell:
    """Compose SVG scenes from chart geometry."""

    def __init__(self, theme: Optional[VizTheme] = None, locale: str = "pt_BR") -> None:
        self.theme = theme or DEFAULT_THEME
        self.locale = locale

    # ------------------------------------------------------------------
    # Entry point

    def render(
        self,
        geometry: ChartGeometry,
        options,
        hover: Optional[HoverState] = None,
        tooltip: Optional[Tooltip] = None,
        include_tooltip: bool = True,
        include_controls: bool = True,
        background: Optional[str] = None,
    ) -> SvgDocument:
        hover = hover or HoverState.idle()
        dims = geometry.dimensions
        doc = SvgDocument(
            dims.width,
            dims.height,
            background=background or self.theme.color("background"),
            metadata={"kind": geometry.kind.value, "title": options.chart_title},
        )
        if geometry.empty:
            self._placeholder(doc, geometry)
        else:
            margins = geometry.margins
            plot = doc.group(class_="plot", transform=f"translate({fmt(margins.left)},{fmt(margins.top)})")
            if geometry.kind is ChartKind.BAR:
                self._bars(plot, geometry, options, hover)
            elif geometry.kind is ChartKind.PIE:
                self._pie(plot, geometry, options, hover)
            elif geometry.kind is ChartKind.SCATTER:
                self._scatter(plot, geometry, options, hover)
            else:
                self._area(plot, geometry, options, hover)
            self._axis_titles(plot, geometry, options)
        if include_controls and options.show_export_button:
            self._export_button(doc)
        if include_tooltip and tooltip is not None:
            self._tooltip(doc, tooltip)
        return doc

    # ------------------------------------------------------------------
    # Shared decorations

    def _placeholder(self, doc: SvgDocument, geometry: ChartGeometry) -> None:
        dims = geometry.dimensions
        doc.root.child(
            "text",
            PLACEHOLDER_TEXT,
            class_="placeholder",
            x=dims.width / 2.0,
            y=dims.height / 2.0,
            text_anchor="middle",
            dominant_baseline="middle",
            fill=self.theme.color("placeholder"),
            font_size=self.theme.size("placeholder"),
            font_family=self.theme.font("label"),
        )

    def _tick_text(self, parent: SvgElement, text: str, **attrs: object) -> SvgElement:
        return parent.child(
            "text",
            text,
            fill=self.theme.color("foreground"),
            font_size=self.theme.size("tick"),
            font_family=self.theme.font("label"),
            **attrs,
        )

    def _horizontal_grid(self, parent: SvgElement, geometry: ChartGeometry, ticks, scale) -> None:
        grid = parent.child("g", class_="grid")
        axis = parent.child("g", class_="axis axis-y")
        for tick in ticks:
            y = scale(tick)
            grid.child(
                "line",
                x1=0.0,
                x2=float(geometry.plot_width),
                y1=y,
                y2=y,
                stroke=self.theme.color("grid"),
                stroke_dasharray=None if tick == 0 else GRID_DASH,
            )
            self._tick_text(axis, format_full(tick, self.locale), x=-8.0, y=y, text_anchor="end", dominant_baseline="middle")

    def _vertical_grid(self, parent: SvgElement, geometry: ChartGeometry, ticks, scale) -> None:
        grid = parent.child("g", class_="grid")
        axis = parent.child("g", class_="axis axis-x")
        for tick in ticks:
            x = scale(tick)
            grid.child(
                "line",
                x1=x,
                x2=x,
                y1=0.0,
                y2=float(geometry.plot_height),
                stroke=self.theme.color("grid"),
                stroke_dasharray=None if tick == 0 else GRID_DASH,
            )
            self._tick_text(axis, format_full(tick, self.locale), x=x, y=geometry.plot_height + 16.0, text_anchor="middle")

    def _axis_titles(self, plot: SvgElement, geometry: ChartGeometry, options) -> None:
        if geometry.kind is ChartKind.PIE:
            return
        margins = geometry.margins
        attrs = dict(
            fill=self.theme.color("foreground"),
            font_size=self.theme.size("axis_title"),
            font_family=self.theme.font("label"),
            text_anchor="middle",
        )
        if options.x_axis_label:
            plot.child(
                "text",
                options.x_axis_label,
                class_="axis-title axis-title-x",
                x=geometry.plot_width / 2.0,
                y=geometry.plot_height + margins.bottom - 10.0,
                **attrs,
            )
        if options.y_axis_label:
            x = -margins.left + 16.0
            y = geometry.plot_height / 2.0
            plot.child(
                "text",
                options.y_axis_label,
                class_="axis-title axis-title-y",
                x=x,
                y=y,
                transform=f"rotate(-90,{fmt(x)},{fmt(y)})",
                **attrs,
            )

    def _export_button(self, doc: SvgDocument) -> None:
        size = EXPORT_BUTTON_SIZE
        x = doc.width - size - 6.0
        button = doc.group(class_="export-button", transform=f"translate({fmt(x)},6)")
        button.child("rect", width=size, height=size, rx=4, fill=self.theme.color("tooltip_fill"), stroke=self.theme.color("tooltip_border"))
        # Download arrow
        button.child("path", d="M14,7V17M9,12L14,17L19,12M8,21H20", fill="none", stroke=self.theme.color("muted"), stroke_width=2)

    def _tooltip(self, doc: SvgDocument, tooltip: Tooltip) -> None:
        box = doc.group(class_="tooltip", transform=f"translate({fmt(tooltip.left)},{fmt(tooltip.top)})")
        box.child(
            "rect",
            width=float(tooltip.width),
            height=float(tooltip.height),
            rx=6,
            fill=self.theme.color("tooltip_fill"),
            stroke=self.theme.color("tooltip_border"),
        )
        for row, line in enumerate(tooltip.lines()):
            box.child(
                "text",
                line,
                x=TOOLTIP_PADDING,
                y=TOOLTIP_BASELINE + row * TOOLTIP_LINE_HEIGHT,
                fill=self.theme.color("foreground"),
                font_size=self.theme.size("label"),
                font_weight="600" if row == 0 else None,
                font_family=self.theme.font("label"),
            )

    def _opacity(self, hover: HoverState, index: int) -> Optional[float]:
        if hover.active and hover.index != index:
            return DIMMED_OPACITY
        return None

    # ------------------------------------------------------------------
    # Kinds

    def _bar_fill(self, bar, hover: HoverState) -> str:
        if hover.index == bar.index:
            return self.theme.color("bar_hover")
        if bar.role == "selected":
            return self.theme.color("bar_selected")
        if bar.role == "highlighted":
            return self.theme.color("bar_highlighted")
        return bar.fill or self.theme.color("bar")

    def _bars(self, plot: SvgElement, geometry: ChartGeometry, options, hover: HoverState) -> None:
        layout = geometry.layout
        if layout.horizontal:
            self._vertical_grid(plot, geometry, layout.grid_ticks, layout.value_scale)
            labels = plot.child("g", class_="axis axis-y")
            for bar in layout.bars:
                self._tick_text(
                    labels,
                    truncate_label(bar.point.name, 30),
                    x=-8.0,
                    y=bar.y + bar.height / 2.0,
                    text_anchor="end",
                    dominant_baseline="middle",
                )
        else:
            self._horizontal_grid(plot, geometry, layout.grid_ticks, layout.value_scale)
            labels = plot.child("g", class_="axis axis-x")
            for bar in layout.bars:
                x = bar.x + bar.width / 2.0
                y = geometry.plot_height + 16.0
                if options.rotate_labels:
                    self._tick_text(labels, bar.point.name, x=x, y=y, text_anchor="end", transform=f"rotate(-45,{fmt(x)},{fmt(y)})")
                else:
                    self._tick_text(labels, bar.point.name, x=x, y=y, text_anchor="middle")

        group = plot.child("g", class_="bars")
        for bar in layout.bars:
            group.child(
                "rect",
                class_=f"bar bar-{bar.role}" + (" bar-hover" if hover.index == bar.index else ""),
                data_index=bar.index,
                x=bar.x,
                y=bar.y,
                width=bar.width,
                height=bar.height,
                rx=3,
                fill=self._bar_fill(bar, hover),
                opacity=self._opacity(hover, bar.index),
            )
            group.child(
                "text",
                format_full(bar.point.value, self.locale),
                class_="bar-value",
                x=bar.label_x,
                y=bar.label_y,
                text_anchor="start" if layout.horizontal else "middle",
                dominant_baseline="middle" if layout.horizontal else None,
                fill=self.theme.color("foreground"),
                font_size=self.theme.size("bar_value"),
                font_family=self.theme.font("label"),
            )

        if layout.mean_position is not None:
            mean = plot.child("g", class_="mean-line")
            mean.child(
                "line",
                x1=layout.mean_position,
                x2=layout.mean_position,
                y1=0.0,
                y2=float(geometry.plot_height),
                stroke=self.theme.color("trend"),
                stroke_dasharray="5,5",
                stroke_width=1.5,
            )
            mean.child(
                "text",
                f"Mean: {format_full(layout.mean, self.locale, 1)}",
                x=layout.mean_position + 4.0,
                y=-6.0,
                fill=self.theme.color("trend"),
                font_size=self.theme.size("tick"),
                font_family=self.theme.font("label"),
            )

    def _pie(self, plot: SvgElement, geometry: ChartGeometry, options, hover: HoverState) -> None:
        layout = geometry.layout
        cx, cy = layout.center
        group = plot.child("g", class_="pie", transform=f"translate({fmt(cx)},{fmt(cy)})")
        growth = options.pie.hover_growth
        for piece in layout.slices:
            hovered = hover.index == piece.index
            group.child(
                "path",
                class_="slice" + (" slice-hover" if hovered else ""),
                data_index=piece.index,
                d=piece.path_with_radius(piece.outer_radius + growth) if hovered else piece.path,
                fill=piece.fill,
                stroke=self.theme.color("slice_stroke"),
                stroke_width=2,
                opacity=self._opacity(hover, piece.index),
            )
        labels = group.child("g", class_="labels")
        for label in layout.labels:
            points = [label.anchor, label.inflexion, (label.x, label.y)]
            labels.child(
                "polyline",
                class_="leader",
                points=" ".join(f"{fmt(x)},{fmt(y)}" for x, y in points),
                fill="none",
                stroke=self.theme.color("muted"),
                stroke_width=1,
            )
            labels.child(
                "text",
                label.text,
                class_=f"label label-{label.side}",
                x=label.text_x,
                y=label.y,
                text_anchor=label.text_anchor,
                dominant_baseline="middle",
                fill=self.theme.color("foreground"),
                font_size=self.theme.size("label"),
                font_family=self.theme.font("label"),
            )

    def _scatter(self, plot: SvgElement, geometry: ChartGeometry, options, hover: HoverState) -> None:
        layout = geometry.layout
        width, height = float(geometry.plot_width), float(geometry.plot_height)
        mx, my = layout.mean_position
        if layout.show_quadrants:
            backgrounds = plot.child("g", class_="quadrants")
            regions = {
                "top_left": (0.0, 0.0, mx, my),
                "top_right": (mx, 0.0, width - mx, my),
                "bottom_left": (0.0, my, mx, height - my),
                "bottom_right": (mx, my, width - mx, height - my),
            }
            for name, (x, y, w, h) in regions.items():
                backgrounds.child(
                    "rect",
                    class_=f"quadrant quadrant-{name.replace('_', '-')}",
                    x=x,
                    y=y,
                    width=max(0.0, w),
                    height=max(0.0, h),
                    fill=self.theme.color(f"quadrant_{name}"),
                    fill_opacity=0.05,
                )
        self._horizontal_grid(plot, geometry, layout.y_ticks(), layout.y_scale)
        axis = plot.child("g", class_="axis axis-x")
        for tick in layout.x_ticks():
            self._tick_text(axis, format_full(tick, self.locale), x=layout.x_scale(tick), y=height + 16.0, text_anchor="middle")

        means = plot.child("g", class_="mean-lines")
        for x1, y1, x2, y2 in ((mx, 0.0, mx, height), (0.0, my, width, my)):
            means.child("line", x1=x1, y1=y1, x2=x2, y2=y2, stroke=self.theme.color("muted"), stroke_dasharray="5,5")

        dots = plot.child("g", class_="points")
        for point in layout.points:
            hovered = hover.index == point.index
            if hover.active:
                fill_opacity = 0.7 if hovered else DIMMED_OPACITY
            else:
                fill_opacity = 0.6
            dots.child(
                "circle",
                class_="point" + (" point-hover" if hovered else ""),
                data_index=point.index,
                cx=point.cx,
                cy=point.cy,
                r=point.radius * 1.1 if hovered else float(point.radius),
                fill=point.fill or self.theme.color(f"quadrant_{point.quadrant}"),
                fill_opacity=fill_opacity,
                stroke=self.theme.color("slice_stroke"),
                stroke_width=1,
            )

        if layout.trend is not None:
            trend = plot.child("g", class_="trend")
            trend.child(
                "line",
                x1=layout.trend.x1,
                y1=layout.trend.y1,
                x2=layout.trend.x2,
                y2=layout.trend.y2,
                stroke=self.theme.color("trend"),
                stroke_width=2,
                stroke_dasharray="6,4",
            )
            trend.child(
                "text",
                layout.trend.caption(),
                x=width - 4.0,
                y=14.0,
                text_anchor="end",
                fill=self.theme.color("trend"),
                font_size=self.theme.size("label"),
                font_family=self.theme.font("label"),
            )

    def _area(self, plot: SvgElement, geometry: ChartGeometry, options, hover: HoverState) -> None:
        layout = geometry.layout
        height = float(geometry.plot_height)
        self._horizontal_grid(plot, geometry, layout.grid_ticks, layout.y_scale)
        axis = plot.child("g", class_="axis axis-x")
        for index, text in layout.x_ticks:
            x = layout.x_scale(index)
            y = height + 16.0
            if options.rotate_labels:
                self._tick_text(axis, text, x=x, y=y, text_anchor="end", transform=f"rotate(-45,{fmt(x)},{fmt(y)})")
            else:
                self._tick_text(axis, text, x=x, y=y, text_anchor="middle")

        color = self.theme.color("area")
        plot.child("path", class_="area", d=layout.area_path, fill=color, fill_opacity=0.2, stroke="none")
        plot.child("path", class_="line", d=layout.line_path, fill="none", stroke=color, stroke_width=2)
        plot.child(
            "rect",
            class_="hit-region",
            x=0,
            y=0,
            width=float(geometry.plot_width),
            height=height,
            fill="transparent",
        )
        if hover.active and 0 <= hover.index < len(layout.points):
            point = layout.points[hover.index]
            guide = plot.child("g", class_="hover-guide")
            guide.child("line", x1=point.cx, x2=point.cx, y1=0.0, y2=height, stroke=self.theme.color("muted"), stroke_dasharray=GRID_DASH)
            guide.child("circle", cx=point.cx, cy=point.cy, r=5, fill=color, stroke=self.theme.color("slice_stroke"), stroke_width=2)
