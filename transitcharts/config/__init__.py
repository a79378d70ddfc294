"""Chart options and engine settings."""

from .settings import (
    AreaOptions,
    BarOptions,
    ChartOptions,
    EngineSettings,
    ExportCfg,
    LoggingCfg,
    PieOptions,
    ScatterOptions,
    SizingCfg,
    TooltipCfg,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "AreaOptions",
    "BarOptions",
    "ChartOptions",
    "EngineSettings",
    "ExportCfg",
    "LoggingCfg",
    "PieOptions",
    "ScatterOptions",
    "SizingCfg",
    "TooltipCfg",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
