"""Configuration models for chart instances and the rendering engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..model import DataPoint, coerce_points

LOG = logging.getLogger(__name__)

CONFIG_FILENAME = "settings.yaml"
CURRENT_SETTINGS_SCHEMA_VERSION = 1

ChartKindName = Literal["bar", "pie", "area", "scatter"]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _OptionsModel(BaseModel):
    """Base for option models accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# -------------------- Per-kind chart options --------------------


class BarOptions(_OptionsModel):
    """Bar chart geometry controls."""

    orientation: Literal["vertical", "horizontal"] = "vertical"
    padding: Optional[float] = None
    limit: Optional[int] = Field(default=None, ge=1)
    selected: Optional[str] = None

    @field_validator("padding")
    @classmethod
    def _check_padding(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 0.0 <= value < 1.0:
            raise ValueError("bar padding must be in [0, 1)")
        return value

    def band_padding(self) -> float:
        if self.padding is not None:
            return self.padding
        return 0.3 if self.orientation == "vertical" else 0.2


class PieOptions(_OptionsModel):
    """Pie and donut controls."""

    donut_ratio: float = Field(default=0.0, ge=0.0, lt=1.0)
    max_label_length: int = Field(default=20, ge=1)
    min_label_spacing: float = Field(default=14.0, ge=0.0)
    inflexion_padding: float = 15.0
    label_offset: float = 30.0
    hover_growth: float = 5.0


class ScatterOptions(_OptionsModel):
    """Scatter and bubble controls."""

    x_field: str = "x"
    y_field: str = "y"
    weight_field: Optional[str] = None
    category_field: Optional[str] = None
    color_mode: Literal["quadrant", "category"] = "quadrant"
    jitter_ratio: float = Field(default=0.015, ge=0.0)
    radius_range: Tuple[float, float] = (4.0, 30.0)
    default_radius: float = 4.0
    show_trend_line: bool = True
    show_quadrants: bool = True

    @model_validator(mode="after")
    def _category_needs_field(self) -> "ScatterOptions":
        if self.color_mode == "category" and not self.category_field:
            raise ValueError("color_mode='category' requires category_field")
        return self


class AreaOptions(_OptionsModel):
    """Area/line controls."""

    label_field: str = "label"
    curve_tension: float = Field(default=0.0, ge=0.0, le=1.0)
    max_x_ticks: int = Field(default=10, ge=1)


class ChartOptions(_OptionsModel):
    """Configuration object for one chart instance."""

    model_config = ConfigDict(
        alias_generator=_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    kind: ChartKindName = "bar"
    data: Tuple[DataPoint, ...] = ()
    value_label: str = "Value"
    item_label: str = "Item"
    x_axis_label: Optional[str] = None
    y_axis_label: Optional[str] = None
    rotate_labels: bool = False
    preserve_order: bool = False
    show_export_button: bool = False
    chart_title: str = "chart"
    on_select: Optional[Callable[[DataPoint], Any]] = Field(default=None, exclude=True)
    bar: BarOptions = Field(default_factory=BarOptions)
    pie: PieOptions = Field(default_factory=PieOptions)
    scatter: ScatterOptions = Field(default_factory=ScatterOptions)
    area: AreaOptions = Field(default_factory=AreaOptions)

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: object) -> Tuple[DataPoint, ...]:
        if isinstance(value, (str, bytes)):
            raise TypeError("data must be a sequence of records")
        return coerce_points(value)  # type: ignore[arg-type]

    @field_validator("x_axis_label", "y_axis_label", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def evolve(self, **changes: Any) -> "ChartOptions":
        """Return a validated copy with ``changes`` applied.

        Keys may use either the field name or its camelCase alias; nested
        option sections accept mappings that are merged over the current
        section.
        """

        fields = type(self).model_fields
        by_alias = {info.alias or name: name for name, info in fields.items()}
        values = {name: getattr(self, name) for name in fields}
        for key, value in changes.items():
            name = by_alias.get(key, key)
            if name not in fields:
                raise TypeError(f"unknown chart option {key!r}")
            current = values[name]
            if isinstance(current, BaseModel) and isinstance(value, dict):
                value = type(current).model_validate({**current.model_dump(), **value})
            values[name] = value
        return type(self)(**values)


# -------------------- Engine settings --------------------


class SizingCfg(BaseModel):
    """Responsive sizing limits."""

    min_width: float = Field(default=400.0, ge=1.0)
    min_height: float = Field(default=200.0, ge=1.0)
    default_height: float = Field(default=400.0, ge=1.0)
    aspect_ratio: Optional[float] = Field(default=None, gt=0.0)
    max_height: Optional[float] = Field(default=None, gt=0.0)


class TooltipCfg(BaseModel):
    """Tooltip box size and pointer offsets."""

    width: float = 200.0
    height: float = 80.0
    offset: float = 10.0
    lift: float = 80.0
    min_top: float = 10.0


class ExportCfg(BaseModel):
    """Raster export controls."""

    directory: Optional[str] = None
    max_workers: int = Field(default=2, ge=1)
    background: str = "white"

    def resolved_directory(self) -> Path:
        if self.directory:
            return Path(self.directory).expanduser()
        return get_config_home() / "exports"


class LoggingCfg(BaseModel):
    level: str = "INFO"


class EngineSettings(BaseModel):
    """Top-level engine settings persisted as YAML."""

    schema_version: int = Field(default=CURRENT_SETTINGS_SCHEMA_VERSION, ge=1)
    theme: str = "transit-light"
    locale: Literal["pt_BR", "en_US"] = "pt_BR"
    sizing: SizingCfg = Field(default_factory=SizingCfg)
    tooltip: TooltipCfg = Field(default_factory=TooltipCfg)
    export: ExportCfg = Field(default_factory=ExportCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)

    def sizing_for(self, kind: str) -> SizingCfg:
        """Sizing rules for ``kind``; scatter plots keep a 4:3 box up to 600px."""

        if kind == "scatter" and self.sizing.aspect_ratio is None:
            return self.sizing.model_copy(update={"aspect_ratio": 0.75, "max_height": 600.0})
        return self.sizing


# -------------------- Persistence helpers --------------------


def get_config_home() -> Path:
    """Return the directory holding engine settings and default exports."""

    return Path(os.environ.get("TRANSITCHARTS_HOME", str(Path.home() / ".transitcharts")))


def config_path() -> Path:
    return get_config_home() / CONFIG_FILENAME


def default_settings() -> EngineSettings:
    return EngineSettings()


def save_settings(settings: EngineSettings, path: Optional[Path] = None) -> Path:
    """Persist ``settings`` to ``path`` (or the default location) as YAML."""

    target = Path(path) if path else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(settings.model_dump(), handle, sort_keys=False, allow_unicode=True)
    return target


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Load settings from YAML; a missing file yields defaults without writing."""

    source = Path(path) if path else config_path()
    if not source.exists():
        LOG.debug("settings file %s not found; using defaults", source)
        return default_settings()
    with source.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        LOG.warning("ignoring malformed settings file %s", source)
        raw = {}
    return EngineSettings(**raw)
