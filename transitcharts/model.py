"""Core data records consumed by the chart engine.

Records arrive from the REST layer as plain mappings.  They are coerced
into immutable :class:`DataPoint` instances once, at the option boundary,
so every downstream layout function can rely on a finite ``value`` and a
string ``name``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

__all__ = [
    "ChartDataError",
    "DataPoint",
    "Dimensions",
    "Margins",
    "coerce_points",
]


class ChartDataError(ValueError):
    """Raised when an input record cannot be plotted."""


_RESERVED_KEYS = {
    "name",
    "value",
    "id",
    "fullName",
    "full_name",
    "isHighlighted",
    "is_highlighted",
}


@dataclass(frozen=True)
class DataPoint:
    """One observation to plot.

    ``extras`` keeps every field that is not part of the minimal shape,
    e.g. the two metrics of a scatter point or the ISO date label of an
    area chart sample.
    """

    name: str
    value: float
    id: Optional[Union[int, str]] = None
    full_name: Optional[str] = None
    is_highlighted: bool = False
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.extras, MappingProxyType):
            object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    def metric(self, name: str) -> float:
        """Return the numeric field ``name`` (``"value"`` reads :attr:`value`)."""

        if name == "value":
            return self.value
        if name not in self.extras:
            raise ChartDataError(f"record {self.name!r} has no metric {name!r}")
        return _finite(self.extras[name], f"{self.name!r}.{name}")

    def label(self, name: str) -> Optional[str]:
        raw = self.extras.get(name)
        return None if raw is None else str(raw)

    def display_name(self) -> str:
        return self.full_name or self.name


@dataclass(frozen=True)
class Dimensions:
    """Pixel size of the drawing surface."""

    width: float
    height: float


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float

    def bounds(self, dimensions: Dimensions) -> Tuple[float, float]:
        """Inner plot width and height, never negative."""

        width = max(0.0, dimensions.width - self.left - self.right)
        height = max(0.0, dimensions.height - self.top - self.bottom)
        return width, height


def _finite(raw: object, where: str) -> float:
    if isinstance(raw, bool):
        raise ChartDataError(f"{where}: boolean is not a numeric value")
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{where}: {raw!r} is not numeric") from exc
    if not math.isfinite(value):
        raise ChartDataError(f"{where}: value must be finite, got {raw!r}")
    return value


def _coerce_one(index: int, record: object) -> DataPoint:
    if isinstance(record, DataPoint):
        return record
    if not isinstance(record, Mapping):
        raise ChartDataError(f"record #{index} must be a mapping, got {type(record).__name__}")
    if record.get("name") is None:
        raise ChartDataError(f"record #{index} is missing 'name'")
    if "value" not in record:
        raise ChartDataError(f"record #{index} is missing 'value'")
    full_name = record.get("fullName", record.get("full_name"))
    highlighted = record.get("isHighlighted", record.get("is_highlighted", False))
    extras = {str(key): val for key, val in record.items() if key not in _RESERVED_KEYS}
    return DataPoint(
        name=str(record["name"]),
        value=_finite(record["value"], f"record #{index} value"),
        id=record.get("id"),
        full_name=str(full_name) if full_name else None,
        is_highlighted=bool(highlighted),
        extras=extras,
    )


def coerce_points(records: Iterable[object] | None) -> Tuple[DataPoint, ...]:
    """Convert REST records (mappings) or DataPoints into a tuple of DataPoints."""

    if records is None:
        return ()
    return tuple(_coerce_one(idx, record) for idx, record in enumerate(records))
