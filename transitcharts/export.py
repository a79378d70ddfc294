"""Background export of chart snapshots to SVG and PNG files."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .layout import ChartGeometry
from .observability import record_error, record_export
from .render.raster import RasterBackend, SurfaceUnavailableError
from .viz.theme import DEFAULT_THEME, VizTheme

LOG = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("png", "svg")

__all__ = [
    "ExportDisabledError",
    "ExportPipeline",
    "ExportSnapshot",
    "SUPPORTED_FORMATS",
    "export_filename",
]


class ExportDisabledError(RuntimeError):
    """Raised when exporting a chart whose export control is switched off."""


_UNSAFE = re.compile(r"[\s\\/]+")


def export_filename(title: str, fmt: str = "png") -> str:
    """File name for an export: ``"Linhas por Bairro"`` -> ``linhas_por_bairro.png``."""

    stem = _UNSAFE.sub("_", title.strip(" \t\n/\\")).lower() or "chart"
    return f"{stem}.{fmt.lower()}"


@dataclass(frozen=True)
class ExportSnapshot:
    """Everything an export job needs, captured at request time."""

    geometry: ChartGeometry
    options: object
    svg: str
    theme: VizTheme = DEFAULT_THEME
    background: str = "white"
    locale: str = "pt_BR"


ExportCallback = Callable[[Optional[Path]], None]


class ExportPipeline:
    """Run single-shot exports on a worker pool.

    Each job writes to its own temporary file in the target directory and
    renames it into place, so readers never see a partial export.
    """

    def __init__(
        self,
        directory: Path | str,
        executor: Optional[Executor] = None,
        max_workers: int = 2,
    ) -> None:
        self.directory = Path(directory)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="transitcharts-export"
        )

    def submit(
        self,
        snapshot: ExportSnapshot,
        title: str,
        fmt: str = "png",
        on_done: Optional[ExportCallback] = None,
    ) -> "Future[Optional[Path]]":
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format {fmt!r}: expected 'svg' or 'png'")
        target = self.directory / export_filename(title, fmt)
        future = self._executor.submit(self._run, snapshot, target, fmt)
        if on_done is not None:
            future.add_done_callback(lambda done: self._deliver(done, on_done))
        return future

    def _deliver(self, future: "Future[Optional[Path]]", on_done: ExportCallback) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            LOG.error("export failed: %s", error)
            return
        on_done(future.result())

    def _payload(self, snapshot: ExportSnapshot, fmt: str) -> bytes:
        if fmt == "svg":
            return snapshot.svg.encode("utf-8")
        backend = RasterBackend(snapshot.theme, snapshot.locale)
        return backend.render(snapshot.geometry, snapshot.options, snapshot.background)

    def _run(self, snapshot: ExportSnapshot, target: Path, fmt: str) -> Optional[Path]:
        try:
            payload = self._payload(snapshot, fmt)
        except SurfaceUnavailableError as exc:
            LOG.debug("export of %s aborted: %s", target.name, exc)
            record_export(fmt, "aborted")
            return None
        temp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(prefix=f".{target.stem}-", suffix=".part", dir=target.parent)
            with os.fdopen(handle, "wb") as stream:
                stream.write(payload)
            os.replace(temp_name, target)
        except OSError as exc:
            record_export(fmt, "failed")
            record_error("export", exc)
            raise
        finally:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
        record_export(fmt, "written")
        LOG.info("exported %s (%d bytes)", target, len(payload))
        return target

    def close(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ExportPipeline":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
