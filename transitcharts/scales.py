"""Scale primitives mapping data domains onto pixel ranges.

Every scale is a small immutable object.  Degenerate domains (``min ==
max``) never divide by zero: continuous scales collapse onto the midpoint
of their range so a single-point dataset still renders somewhere sensible.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

__all__ = [
    "BandScale",
    "CATEGORY10",
    "LinearScale",
    "OrdinalColorScale",
    "RDYLBU",
    "SequentialColorScale",
    "SqrtScale",
    "headroom_domain",
    "make_band_scale",
    "make_linear_scale",
    "make_sqrt_scale",
    "padded_extent",
    "tick_values",
]


CATEGORY10: Tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

# Red -> yellow -> blue diverging ramp (ColorBrewer RdYlBu, 11 classes).
RDYLBU: Tuple[str, ...] = (
    "#a50026",
    "#d73027",
    "#f46d43",
    "#fdae61",
    "#fee090",
    "#ffffbf",
    "#e0f3f8",
    "#abd9e9",
    "#74add1",
    "#4575b4",
    "#313695",
)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _tick_step(start: float, stop: float, count: int) -> float:
    raw = abs(stop - start) / max(1, count)
    power = math.floor(math.log10(raw))
    base = 10.0 ** power
    error = raw / base
    if error >= _E10:
        base *= 10
    elif error >= _E5:
        base *= 5
    elif error >= _E2:
        base *= 2
    return base


def tick_values(start: float, stop: float, count: int = 10) -> List[float]:
    """Return human friendly tick values covering ``[start, stop]``."""

    if count <= 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    step = _tick_step(lo, hi, count)
    first = math.ceil(lo / step - 1e-9)
    last = math.floor(hi / step + 1e-9)
    # Multiply the integer index rather than accumulating the step to keep
    # values like 0.3 free of drift.
    ticks = [_clean(i * step) for i in range(first, last + 1)]
    return ticks[::-1] if reverse else ticks


def _clean(value: float) -> float:
    rounded = round(value, 12)
    return 0.0 if rounded == 0 else rounded


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear mapping from ``domain`` onto ``range``."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    @property
    def degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return (r0 + r1) / 2.0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1 or r0 == r1:
            return d0
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        return tick_values(self.domain[0], self.domain[1], count)


def make_linear_scale(
    domain_min: float,
    domain_max: float,
    range_min: float,
    range_max: float,
) -> LinearScale:
    return LinearScale((float(domain_min), float(domain_max)), (float(range_min), float(range_max)))


def _sqrt_signed(value: float) -> float:
    return math.copysign(math.sqrt(abs(value)), value)


@dataclass(frozen=True)
class SqrtScale:
    """Square-root scale so that circle *area* tracks the value."""

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        t0 = _sqrt_signed(self.domain[0])
        t1 = _sqrt_signed(self.domain[1])
        r0, r1 = self.range
        if t0 == t1:
            return (r0 + r1) / 2.0
        return r0 + (_sqrt_signed(value) - t0) / (t1 - t0) * (r1 - r0)


def make_sqrt_scale(domain: Tuple[float, float], range_: Tuple[float, float]) -> SqrtScale:
    return SqrtScale((float(domain[0]), float(domain[1])), (float(range_[0]), float(range_[1])))


@dataclass(frozen=True)
class BandScale:
    """Discrete scale giving each category an equal band.

    ``padding`` is used for both the gaps between bands and the outer
    gaps, and bands are centred within the range.
    """

    categories: Tuple[str, ...]
    range: Tuple[float, float]
    padding: float = 0.0
    _step: float = field(init=False, repr=False, compare=False)
    _start: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding < 1.0:
            raise ValueError(f"band padding must be in [0, 1), got {self.padding}")
        r0, r1 = self.range
        n = len(self.categories)
        span = r1 - r0
        step = span / max(1.0, n - self.padding + 2 * self.padding)
        start = r0 + (span - step * (n - self.padding)) * 0.5
        object.__setattr__(self, "_step", step)
        object.__setattr__(self, "_start", start)

    def step(self) -> float:
        return self._step

    def bandwidth(self) -> float:
        return self._step * (1.0 - self.padding)

    def at(self, index: int) -> float:
        return self._start + self._step * index

    def __call__(self, category: str) -> Optional[float]:
        try:
            return self.at(self.categories.index(category))
        except ValueError:
            return None

    def invert(self, pixel: float) -> Optional[int]:
        """Return the index of the band containing ``pixel``, if any."""

        if not self.categories or self._step == 0:
            return None
        index = math.floor((pixel - self._start) / self._step)
        if index < 0 or index >= len(self.categories):
            return None
        offset = pixel - self.at(index)
        return index if 0 <= offset <= self.bandwidth() else None


def make_band_scale(
    categories: Sequence[str],
    range_: Tuple[float, float],
    padding: float = 0.0,
) -> BandScale:
    return BandScale(tuple(categories), (float(range_[0]), float(range_[1])), float(padding))


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _rgb_to_hex(rgb: Iterable[float]) -> str:
    return "#" + "".join(f"{max(0, min(255, int(round(c)))):02x}" for c in rgb)


def interpolate_stops(stops: Sequence[str], t: float) -> str:
    """Piecewise-linear interpolation across colour ``stops`` at ``t`` in [0, 1]."""

    if not stops:
        raise ValueError("at least one colour stop is required")
    if len(stops) == 1:
        return stops[0]
    t = min(1.0, max(0.0, t))
    position = t * (len(stops) - 1)
    lower = min(int(math.floor(position)), len(stops) - 2)
    frac = position - lower
    a = _hex_to_rgb(stops[lower])
    b = _hex_to_rgb(stops[lower + 1])
    return _rgb_to_hex(ca + (cb - ca) * frac for ca, cb in zip(a, b))


@dataclass(frozen=True)
class SequentialColorScale:
    """Map a numeric domain onto a colour ramp."""

    domain: Tuple[float, float]
    stops: Tuple[str, ...] = RDYLBU

    def __call__(self, value: float) -> str:
        d0, d1 = self.domain
        t = 0.5 if d0 == d1 else (value - d0) / (d1 - d0)
        return interpolate_stops(self.stops, t)


@dataclass(frozen=True)
class OrdinalColorScale:
    categories: Tuple[str, ...]
    scheme: Tuple[str, ...] = CATEGORY10

    def __call__(self, category: str) -> str:
        try:
            index = self.categories.index(category)
        except ValueError:
            index = len(self.categories)
        return self.scheme[index % len(self.scheme)]


def headroom_domain(values: Sequence[float], ratio: float = 0.1) -> Tuple[float, float]:
    """Domain ``(0, max * (1 + ratio))`` for value axes anchored at zero."""

    top = max(values) if values else 0.0
    return 0.0, max(0.0, top) * (1.0 + ratio)


def padded_extent(
    values: Sequence[float],
    ratio: float = 0.1,
    clamp_zero: bool = True,
) -> Tuple[float, float]:
    """Observed extent expanded by ``ratio`` of its span on both ends."""

    if not values:
        return 0.0, 0.0
    lo, hi = min(values), max(values)
    pad = (hi - lo) * ratio
    lower = lo - pad
    if clamp_zero:
        lower = max(0.0, lower)
    return lower, hi + pad
