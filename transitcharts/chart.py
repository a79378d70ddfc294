"""One mounted chart instance: options, size, hover and rendering."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from .config.settings import ChartOptions, EngineSettings
from .export import ExportDisabledError, ExportPipeline, ExportSnapshot
from .interaction import HoverController, HoverState, Tooltip, build_tooltip, hit_test
from .layout import ChartGeometry, ChartKind, build_geometry
from .model import ChartDataError, DataPoint, Dimensions
from .observability import record_error, time_render
from .render import ChartShell, RasterBackend
from .responsive import Container, ResponsiveSizer, fit_dimensions
from .viz.svg import SvgDocument
from .viz.theme import DEFAULT_THEME, VizTheme, default_manager

LOG = logging.getLogger(__name__)

__all__ = ["Chart"]

SELECTABLE = (ChartKind.BAR, ChartKind.SCATTER)


def _resolve_theme(identifier: str) -> VizTheme:
    try:
        return default_manager().get(identifier)
    except KeyError:
        LOG.warning("unknown theme %r; falling back to %s", identifier, DEFAULT_THEME.identifier)
        return DEFAULT_THEME


class Chart:
    """Tie options, container size, hover state and backends together.

    Geometry is re-derived synchronously whenever the data, the options or
    the dimensions change.  Interaction on an unmounted chart is ignored.
    """

    def __init__(
        self,
        options: Union[ChartOptions, Mapping[str, Any]],
        settings: Optional[EngineSettings] = None,
        container: Optional[Container] = None,
        theme: Optional[VizTheme] = None,
        exporter: Optional[ExportPipeline] = None,
    ) -> None:
        if not isinstance(options, ChartOptions):
            options = ChartOptions.model_validate(options)
        self._options = options
        self.settings = settings or EngineSettings()
        self.theme = theme or _resolve_theme(self.settings.theme)
        self._container = container
        self._exporter = exporter
        self._owns_exporter = False
        self._shell = ChartShell(self.theme, self.settings.locale)
        self._hover = HoverController()
        self._sizer: Optional[ResponsiveSizer] = None
        # Guards geometry and options against export worker threads.
        self._lock = threading.RLock()
        self._mounted = False
        self._generation = 0
        self._dimensions = fit_dimensions(0, 0, self._sizing())
        self._geometry: Optional[ChartGeometry] = None

    # ------------------------------------------------------------------
    # Lifecycle

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> "Chart":
        with self._lock:
            if self._mounted:
                return self
            self._mounted = True
            if self._container is not None:
                self._sizer = ResponsiveSizer(self._container, self._on_resize, self._sizing())
                self._sizer.attach()
            self._rebuild()
        LOG.debug("mounted %s chart at %.0fx%.0f", self._options.kind, self._dimensions.width, self._dimensions.height)
        return self

    def unmount(self) -> None:
        with self._lock:
            if not self._mounted:
                return
            if self._sizer is not None:
                self._sizer.detach()
                self._sizer = None
            self._hover.reset()
            self._mounted = False
            self._generation += 1

    def close(self) -> None:
        self.unmount()
        if self._owns_exporter and self._exporter is not None:
            self._exporter.close()
            self._exporter = None

    def __enter__(self) -> "Chart":
        return self.mount()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State

    @property
    def options(self) -> ChartOptions:
        return self._options

    @property
    def dimensions(self) -> Dimensions:
        return self._dimensions

    @property
    def hover(self) -> HoverState:
        return self._hover.state

    @property
    def hover_controller(self) -> HoverController:
        return self._hover

    @property
    def geometry(self) -> ChartGeometry:
        with self._lock:
            if self._geometry is None:
                self._rebuild()
            return self._geometry  # type: ignore[return-value]

    def _sizing(self):
        return self.settings.sizing_for(self._options.kind)

    def _rebuild(self) -> None:
        try:
            self._geometry = build_geometry(self._options, self._dimensions, self.settings, self.theme)
        except ChartDataError as exc:
            record_error("layout", exc)
            LOG.warning("cannot lay out %s chart: %s", self._options.kind, exc)
            raise

    def _on_resize(self, dimensions: Dimensions) -> None:
        with self._lock:
            self._dimensions = dimensions
            if self._mounted:
                self._rebuild()

    def update(self, **changes: Any) -> ChartOptions:
        """Apply option changes; new data clears the hover."""

        with self._lock:
            previous = self._options
            self._options = previous.evolve(**changes)
            if self._options.kind != previous.kind:
                self._dimensions = fit_dimensions(self._dimensions.width, self._dimensions.height, self._sizing())
                if self._sizer is not None:
                    self._sizer.detach()
                    self._sizer = ResponsiveSizer(self._container, self._on_resize, self._sizing())
                    self._sizer.attach()
            if self._options.data != previous.data or self._options.kind != previous.kind:
                self._hover.reset()
            self._geometry = None
            if self._mounted:
                self._rebuild()
            return self._options

    def resize(self, width: float, height: float) -> Dimensions:
        if not self._mounted:
            return self._dimensions
        self._on_resize(fit_dimensions(width, height, self._sizing()))
        return self._dimensions

    # ------------------------------------------------------------------
    # Interaction

    def pointer_move(self, x: float, y: float) -> HoverState:
        if not self._mounted:
            return self._hover.state
        index = hit_test(self.geometry, x, y, self._hover.state.index, self._options.pie.hover_growth)
        if index is None:
            return self._hover.reset()
        if index != self._hover.state.index:
            return self._hover.enter(index, (x, y))
        return self._hover.move((x, y))

    def pointer_leave(self) -> HoverState:
        if not self._mounted:
            return self._hover.state
        return self._hover.reset()

    def primitive_enter(self, index: int, x: float, y: float) -> HoverState:
        if not self._mounted or not 0 <= index < len(self.geometry.primitives):
            return self._hover.state
        return self._hover.enter(index, (x, y))

    def primitive_leave(self, index: int) -> HoverState:
        if not self._mounted:
            return self._hover.state
        return self._hover.leave(index)

    def click(self, x: float, y: float) -> Optional[DataPoint]:
        """Select the bar or scatter point under ``(x, y)``."""

        if not self._mounted:
            return None
        geometry = self.geometry
        if geometry.kind not in SELECTABLE:
            return None
        index = hit_test(geometry, x, y)
        if index is None:
            return None
        point = geometry.primitives[index].point
        if geometry.kind is ChartKind.BAR:
            self.update(bar={"selected": point.name})
        callback = self._options.on_select
        if callback is not None:
            callback(point)
        return point

    def tooltip(self) -> Optional[Tooltip]:
        return build_tooltip(
            self.geometry,
            self._hover.state,
            self._options,
            self.settings.tooltip,
            self.settings.locale,
        )

    # ------------------------------------------------------------------
    # Rendering

    def render_document(self, include_tooltip: bool = True) -> SvgDocument:
        with self._lock:
            geometry = self.geometry
            hover = self._hover.state
            with time_render(geometry.kind.value):
                return self._shell.render(
                    geometry,
                    self._options,
                    hover,
                    tooltip=self.tooltip() if include_tooltip else None,
                    include_tooltip=include_tooltip,
                )

    def render_svg(self, include_tooltip: bool = True) -> str:
        return self.render_document(include_tooltip).to_string()

    def render_png(self) -> bytes:
        backend = RasterBackend(self.theme, self.settings.locale)
        with time_render(self._options.kind):
            return backend.render(self.geometry, self._options, self.settings.export.background)

    def snapshot(self) -> ExportSnapshot:
        """Freeze the current geometry and static SVG for an export job."""

        with self._lock:
            geometry = self.geometry
            background = self.settings.export.background
            document = self._shell.render(
                geometry,
                self._options,
                HoverState.idle(),
                include_tooltip=False,
                include_controls=False,
                background=background,
            )
            return ExportSnapshot(
                geometry=geometry,
                options=self._options,
                svg=document.to_string(),
                theme=self.theme,
                background=background,
                locale=self.settings.locale,
            )

    def _pipeline(self) -> ExportPipeline:
        if self._exporter is None:
            cfg = self.settings.export
            self._exporter = ExportPipeline(cfg.resolved_directory(), max_workers=cfg.max_workers)
            self._owns_exporter = True
        return self._exporter

    def export(
        self,
        fmt: str = "png",
        on_done: Optional[Callable[[Optional[Path]], None]] = None,
    ) -> Optional["Future[Optional[Path]]"]:
        """Start a background export; ``None`` when the chart is not mounted."""

        if not self._options.show_export_button:
            raise ExportDisabledError("export is disabled for this chart")
        if not self._mounted:
            LOG.debug("export requested on an unmounted chart; ignoring")
            return None
        snapshot = self.snapshot()
        generation = self._generation
        callback = None
        if on_done is not None:

            def callback(path: Optional[Path]) -> None:
                if generation != self._generation or not self._mounted:
                    LOG.debug("dropping export callback for an unmounted chart")
                    return
                on_done(path)

        return self._pipeline().submit(snapshot, self._options.chart_title, fmt, callback)
