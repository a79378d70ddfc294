from __future__ import annotations

import math

import pytest

from transitcharts.model import ChartDataError, DataPoint, Dimensions, Margins, coerce_points


def test_coerce_points_reads_rest_records() -> None:
    points = coerce_points(
        [
            {"name": "Linha 1", "value": "12.5", "id": 7, "fullName": "Linha 1 - Centro", "isHighlighted": True, "speed": 21},
            DataPoint("Linha 2", 3.0),
        ]
    )

    first, second = points
    assert first.name == "Linha 1"
    assert first.value == 12.5
    assert first.id == 7
    assert first.full_name == "Linha 1 - Centro"
    assert first.is_highlighted is True
    assert first.extras == {"speed": 21}
    assert second == DataPoint("Linha 2", 3.0)


def test_coerce_points_accepts_snake_case_keys() -> None:
    (point,) = coerce_points([{"name": 10, "value": 1, "full_name": "Ten", "is_highlighted": 1}])
    assert point.name == "10"
    assert point.display_name() == "Ten"
    assert point.is_highlighted is True


@pytest.mark.parametrize(
    "record",
    [
        {"value": 1},
        {"name": "x"},
        {"name": "x", "value": "abc"},
        {"name": "x", "value": math.nan},
        {"name": "x", "value": math.inf},
        {"name": "x", "value": True},
        ["not", "a", "mapping"],
    ],
)
def test_coerce_points_rejects_unplottable_records(record) -> None:
    with pytest.raises(ChartDataError):
        coerce_points([record])


def test_chart_data_error_is_value_error() -> None:
    assert issubclass(ChartDataError, ValueError)


def test_coerce_points_none_is_empty() -> None:
    assert coerce_points(None) == ()


def test_metric_lookup() -> None:
    point = DataPoint("L", 4.0, extras={"speed": "18.5", "company": "Norte"})
    assert point.metric("value") == 4.0
    assert point.metric("speed") == 18.5
    assert point.label("company") == "Norte"
    assert point.label("missing") is None
    with pytest.raises(ChartDataError):
        point.metric("occupancy")
    with pytest.raises(ChartDataError):
        point.metric("company")


def test_data_point_extras_are_read_only() -> None:
    source = {"speed": 1}
    point = DataPoint("L", 1.0, extras=source)
    source["speed"] = 99
    assert point.extras["speed"] == 1
    with pytest.raises(TypeError):
        point.extras["speed"] = 2  # type: ignore[index]


def test_margin_bounds_never_negative() -> None:
    margins = Margins(top=30, right=30, bottom=40, left=50)
    assert margins.bounds(Dimensions(800, 400)) == (720, 330)
    assert margins.bounds(Dimensions(10, 10)) == (0.0, 0.0)
