from __future__ import annotations

import math

import pytest

from transitcharts.config.settings import ChartOptions, ScatterOptions
from transitcharts.layout import build_geometry, classify_quadrant, filter_points, jitter, quadrant_counts
from transitcharts.layout.regression import fit_line, pearson
from transitcharts.model import Dimensions, coerce_points


def test_quadrants_around_means(scatter_options, dims) -> None:
    geometry = build_geometry(scatter_options, dims)
    layout = geometry.layout

    assert layout.mean_x == pytest.approx(20.0)
    assert layout.mean_y == pytest.approx(53.75)
    assert [p.quadrant for p in layout.points] == ["top_right", "top_left", "bottom_left", "bottom_right"]
    assert layout.show_quadrants


def test_mean_ties_count_as_low() -> None:
    assert classify_quadrant(5, 5, 5, 5) == "bottom_left"
    assert classify_quadrant(5.0001, 5, 5, 5) == "bottom_right"
    assert classify_quadrant(5, 5.0001, 5, 5) == "top_left"


def test_bubble_radius_uses_sqrt_scale(scatter_options, dims) -> None:
    points = build_geometry(scatter_options, dims).layout.points
    by_name = {p.point.name: p for p in points}
    assert by_name["L3"].radius == pytest.approx(4.0)
    assert by_name["L1"].radius == pytest.approx(30.0)
    assert 4.0 < by_name["L2"].radius < by_name["L4"].radius < 30.0


def test_default_radius_without_weight(scatter_records, dims) -> None:
    options = ChartOptions(kind="scatter", data=scatter_records, scatter={"x_field": "speed", "y_field": "occupancy"})
    assert {p.radius for p in build_geometry(options, dims).primitives} == {4.0}


def test_jitter_is_deterministic() -> None:
    assert jitter(0, 0.015) == pytest.approx((0.0, 0.0075))
    dx, dy = jitter(10, 0.02)
    assert dx == pytest.approx(math.sin(1.0) * 0.01)
    assert dy == pytest.approx(math.cos(1.0) * 0.01)


def test_points_are_repeatable_and_within_plot(scatter_options, dims) -> None:
    first = build_geometry(scatter_options, dims)
    second = build_geometry(scatter_options, dims)
    assert first == second
    for point in first.primitives:
        assert 0 <= point.cx <= first.plot_width
        assert 0 <= point.cy <= first.plot_height


def test_trend_line(scatter_options, dims) -> None:
    trend = build_geometry(scatter_options, dims).layout.trend
    assert trend is not None
    assert -1.0 <= trend.correlation <= 1.0
    assert trend.caption().startswith("r = ")
    assert len(trend.caption().split(".")[-1]) == 3


def test_no_trend_line_for_single_point(dims) -> None:
    options = ChartOptions(kind="scatter", data=[{"name": "a", "value": 1, "x": 3, "y": 4}])
    layout = build_geometry(options, dims).layout
    assert layout.trend is None
    (point,) = layout.points
    assert point.cx == pytest.approx(build_geometry(options, dims).plot_width / 2)


def test_no_trend_line_without_x_variance(dims) -> None:
    data = [{"name": str(i), "value": 1, "x": 2, "y": i} for i in range(4)]
    assert build_geometry(ChartOptions(kind="scatter", data=data), dims).layout.trend is None


def test_trend_line_can_be_disabled(scatter_records, dims) -> None:
    options = ChartOptions(
        kind="scatter",
        data=scatter_records,
        scatter={"x_field": "speed", "y_field": "occupancy", "show_trend_line": False},
    )
    assert build_geometry(options, dims).layout.trend is None


def test_category_colouring(scatter_records, dims) -> None:
    options = ChartOptions(
        kind="scatter",
        data=scatter_records,
        scatter={"x_field": "speed", "y_field": "occupancy", "color_mode": "category", "category_field": "company"},
    )
    layout = build_geometry(options, dims).layout
    assert layout.categories == ("Leste", "Norte", "Sul")
    fills = {p.category: p.fill for p in layout.points}
    assert len(set(fills.values())) == 3
    assert not layout.show_quadrants


def test_missing_metric_raises(dims) -> None:
    from transitcharts.model import ChartDataError

    options = ChartOptions(kind="scatter", data=[{"name": "a", "value": 1, "x": 1}])
    with pytest.raises(ChartDataError):
        build_geometry(options, dims)


def test_filters(scatter_records) -> None:
    points = coerce_points(scatter_records)
    opts = ScatterOptions(x_field="speed", y_field="occupancy", weight_field="trips")

    assert quadrant_counts(points, opts) == {"top_right": 1, "top_left": 1, "bottom_left": 1, "bottom_right": 1}
    assert [p.name for p in filter_points(points, opts, quadrant="top_left")] == ["L2"]
    assert [p.name for p in filter_points(points, opts, top=2)] == ["L1", "L4"]
    assert len(filter_points(points, opts)) == 4
    with pytest.raises(ValueError):
        filter_points(points, opts, quadrant="middle")


def test_regression_helpers() -> None:
    fit = fit_line([0, 1, 2, 3], [1, 3, 5, 7])
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(1.0)
    assert fit.correlation == pytest.approx(1.0)
    assert fit_line([1], [1]) is None
    assert pearson([1, 2, 3], [5, 5, 5]) == 0.0
    assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)
    with pytest.raises(ValueError):
        fit_line([1, 2], [1])


def test_empty_scatter(dims) -> None:
    assert build_geometry(ChartOptions(kind="scatter"), Dimensions(600, 450)).empty
