from __future__ import annotations

import pytest

from transitcharts.config.settings import ChartOptions
from transitcharts.layout import ChartKind, build_geometry, compute_margins, order_points
from transitcharts.model import DataPoint, Dimensions, Margins


def _names(geometry) -> list[str]:
    return [bar.point.name for bar in geometry.primitives]


def test_bars_sorted_descending_by_default(bar_records, dims) -> None:
    geometry = build_geometry(ChartOptions(data=bar_records), dims)
    assert _names(geometry) == ["B", "C", "A"]
    assert [bar.source_index for bar in geometry.primitives] == [1, 2, 0]


def test_preserve_order_keeps_input_order(bar_records, dims) -> None:
    geometry = build_geometry(ChartOptions(data=bar_records, preserve_order=True), dims)
    assert _names(geometry) == ["A", "B", "C"]


def test_ties_keep_input_order() -> None:
    points = [DataPoint("x", 1), DataPoint("y", 2), DataPoint("z", 1)]
    assert [p.name for _, p in order_points(points)] == ["y", "x", "z"]


def test_limit_keeps_top_n(line_records, dims) -> None:
    geometry = build_geometry(ChartOptions(data=line_records, bar={"limit": 2}), dims)
    assert _names(geometry) == ["Linha 100", "Linha 200"]


def test_vertical_bar_geometry(bar_records, dims) -> None:
    geometry = build_geometry(ChartOptions(data=bar_records), dims)
    layout = geometry.layout

    assert geometry.margins == Margins(top=30, right=30, bottom=40, left=50)
    assert (geometry.plot_width, geometry.plot_height) == (720, 330)
    assert layout.value_scale.domain == (0.0, pytest.approx(11.0))
    assert layout.category_scale.padding == 0.3
    tallest = geometry.primitives[0]
    assert tallest.height == pytest.approx(330 / 1.1)
    assert tallest.y + tallest.height == pytest.approx(layout.baseline)
    assert tallest.label_y == pytest.approx(tallest.y - 8)
    assert tallest.label_x == pytest.approx(tallest.x + tallest.width / 2)
    assert all(bar.height >= 0 for bar in geometry.primitives)
    assert layout.grid_ticks[0] == 0


def test_negative_values_clamp_to_zero_height(dims) -> None:
    geometry = build_geometry(ChartOptions(data=[{"name": "a", "value": -5}, {"name": "b", "value": 5}]), dims)
    negative = [bar for bar in geometry.primitives if bar.point.name == "a"][0]
    assert negative.height == 0


def test_all_zero_values_do_not_divide_by_zero(dims) -> None:
    geometry = build_geometry(ChartOptions(data=[{"name": "a", "value": 0}]), dims)
    (bar,) = geometry.primitives
    assert bar.height == 0


def test_roles_for_selection_and_highlight(dims) -> None:
    data = [{"name": "a", "value": 3}, {"name": "b", "value": 2, "isHighlighted": True}, {"name": "c", "value": 1}]
    geometry = build_geometry(ChartOptions(data=data, bar={"selected": "c"}), dims)
    assert [bar.role for bar in geometry.primitives] == ["default", "highlighted", "selected"]


def test_horizontal_bars(line_records, dims) -> None:
    options = ChartOptions(data=line_records, bar={"orientation": "horizontal"})
    geometry = build_geometry(options, dims)
    layout = geometry.layout

    assert geometry.margins.left == 200
    assert geometry.margins.right == 60
    assert layout.horizontal
    assert layout.category_scale.padding == 0.2
    first, *_, last = geometry.primitives
    assert first.width > last.width
    assert first.x == pytest.approx(0)
    assert first.fill != last.fill
    assert layout.mean == pytest.approx(65.0)
    assert layout.mean_position == pytest.approx(layout.value_scale(65.0))


def test_empty_bar_chart(dims) -> None:
    geometry = build_geometry(ChartOptions(kind="bar"), dims)
    assert geometry.empty
    assert geometry.primitives == ()


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({}, Margins(30, 30, 40, 50)),
        ({"rotate_labels": True}, Margins(30, 30, 100, 50)),
        ({"x_axis_label": "Linhas"}, Margins(30, 30, 70, 50)),
        ({"y_axis_label": "Passageiros"}, Margins(30, 30, 40, 80)),
        ({"rotate_labels": True, "x_axis_label": "L", "y_axis_label": "P"}, Margins(30, 30, 130, 80)),
        ({"horizontal": True}, Margins(30, 60, 40, 200)),
    ],
)
def test_compute_margins(kwargs, expected) -> None:
    assert compute_margins(ChartKind.BAR, **kwargs) == expected


def test_pie_margins_ignore_axis_flags() -> None:
    assert compute_margins(ChartKind.PIE, rotate_labels=True, x_axis_label="x") == Margins(30, 80, 30, 80)


def test_layout_is_pure(bar_records) -> None:
    options = ChartOptions(data=bar_records)
    size = Dimensions(640, 360)
    assert build_geometry(options, size) == build_geometry(options, size)
