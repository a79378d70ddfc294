from __future__ import annotations

from pathlib import Path

import pytest

from transitcharts.config.settings import ChartOptions, EngineSettings
from transitcharts.model import Dimensions

try:
    from hypothesis import settings as _hypothesis_settings
except ImportError:  # pragma: no cover - hypothesis optional
    _hypothesis_settings = None
else:
    _hypothesis_settings.register_profile("transitcharts", deadline=None, max_examples=60)
    _hypothesis_settings.load_profile("transitcharts")


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep settings and default exports out of the real home directory."""

    home = tmp_path / "transitcharts-home"
    monkeypatch.setenv("TRANSITCHARTS_HOME", str(home))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return home


@pytest.fixture
def dims() -> Dimensions:
    return Dimensions(800.0, 400.0)


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def bar_records() -> list[dict]:
    return [
        {"name": "A", "value": 3},
        {"name": "B", "value": 10},
        {"name": "C", "value": 7},
    ]


@pytest.fixture
def line_records() -> list[dict]:
    return [
        {"name": "Linha 100", "value": 120, "id": 100, "fullName": "Linha 100 - Centro / Terminal Norte"},
        {"name": "Linha 200", "value": 80, "id": 200},
        {"name": "Linha 300", "value": 40, "id": 300},
        {"name": "Linha 400", "value": 20, "id": 400},
    ]


@pytest.fixture
def scatter_records() -> list[dict]:
    return [
        {"name": "L1", "value": 1, "speed": 30.0, "occupancy": 80.0, "trips": 120, "company": "Norte"},
        {"name": "L2", "value": 1, "speed": 12.0, "occupancy": 90.0, "trips": 60, "company": "Sul"},
        {"name": "L3", "value": 1, "speed": 10.0, "occupancy": 20.0, "trips": 30, "company": "Norte"},
        {"name": "L4", "value": 1, "speed": 28.0, "occupancy": 25.0, "trips": 90, "company": "Leste"},
    ]


@pytest.fixture
def monthly_records() -> list[dict]:
    return [
        {"name": f"2024-{month:02d}", "value": value, "label": f"2024-{month:02d}-01"}
        for month, value in zip(range(1, 7), (100, 140, 90, 160, 150, 180))
    ]


@pytest.fixture
def scatter_options(scatter_records) -> ChartOptions:
    return ChartOptions(
        kind="scatter",
        data=scatter_records,
        x_axis_label="Speed",
        y_axis_label="Occupancy",
        scatter={"x_field": "speed", "y_field": "occupancy", "weight_field": "trips"},
    )
