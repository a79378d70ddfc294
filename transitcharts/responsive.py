"""Container measurement and resize propagation."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

from .config.settings import SizingCfg
from .model import Dimensions

LOG = logging.getLogger(__name__)

ResizeCallback = Callable[[Dimensions], None]

__all__ = ["Container", "ResizableContainer", "ResponsiveSizer", "fit_dimensions"]


@runtime_checkable
class Container(Protocol):
    """Anything that can report its content box and notify on resize."""

    def content_box(self) -> Tuple[float, float]:
        ...

    def observe(self, callback: Callable[[], None]) -> object:
        ...

    def unobserve(self, token: object) -> None:
        ...


class ResizableContainer:
    """In-process container whose size is set explicitly."""

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self._box = (float(width), float(height))
        self._observers: Dict[int, Callable[[], None]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def content_box(self) -> Tuple[float, float]:
        return self._box

    def observe(self, callback: Callable[[], None]) -> int:
        token = next(self._tokens)
        with self._lock:
            self._observers[token] = callback
        return token

    def unobserve(self, token: object) -> None:
        with self._lock:
            self._observers.pop(token, None)  # type: ignore[arg-type]

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def resize(self, width: float, height: float) -> None:
        self._box = (float(width), float(height))
        with self._lock:
            callbacks = list(self._observers.values())
        for callback in callbacks:
            callback()


def fit_dimensions(width: float, height: float, sizing: SizingCfg) -> Dimensions:
    """Apply the sizing rules to a raw content box.

    The width never drops below ``min_width``.  A missing height falls back
    to ``default_height``; an aspect ratio derives the height from the
    width, capped at ``max_height``.
    """

    fitted_width = max(sizing.min_width, float(width or 0.0))
    if sizing.aspect_ratio is not None:
        fitted_height = fitted_width * sizing.aspect_ratio
        if sizing.max_height is not None:
            fitted_height = min(sizing.max_height, fitted_height)
    else:
        fitted_height = float(height) if height and height > 0 else sizing.default_height
        if sizing.max_height is not None:
            fitted_height = min(sizing.max_height, fitted_height)
    return Dimensions(fitted_width, max(sizing.min_height, fitted_height))


class ResponsiveSizer:
    """Keeps a chart's :class:`Dimensions` in step with its container."""

    def __init__(
        self,
        container: Container,
        on_resize: ResizeCallback,
        sizing: Optional[SizingCfg] = None,
    ) -> None:
        self._container = container
        self._on_resize = on_resize
        self._sizing = sizing or SizingCfg()
        self._token: Optional[object] = None
        self._dimensions: Optional[Dimensions] = None

    @property
    def attached(self) -> bool:
        return self._token is not None

    @property
    def dimensions(self) -> Optional[Dimensions]:
        return self._dimensions

    def attach(self) -> Dimensions:
        if self._token is None:
            self._token = self._container.observe(self._handle)
        return self.measure()

    def detach(self) -> None:
        if self._token is not None:
            self._container.unobserve(self._token)
            self._token = None

    def measure(self) -> Dimensions:
        width, height = self._container.content_box()
        dimensions = fit_dimensions(width, height, self._sizing)
        if dimensions != self._dimensions:
            self._dimensions = dimensions
            LOG.debug("container measured at %.0fx%.0f", dimensions.width, dimensions.height)
            self._on_resize(dimensions)
        return dimensions

    def _handle(self) -> None:
        if self._token is None:
            return
        self.measure()

    def __enter__(self) -> "ResponsiveSizer":
        self.attach()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.detach()
