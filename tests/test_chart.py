from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from transitcharts import Chart
from transitcharts.config.settings import EngineSettings
from transitcharts.export import ExportDisabledError, ExportPipeline
from transitcharts.interaction import HoverState
from transitcharts.model import ChartDataError, Dimensions
from transitcharts.render import PLACEHOLDER_TEXT
from transitcharts.responsive import ResizableContainer

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _centre_of(chart: Chart, index: int) -> tuple[float, float]:
    geometry = chart.geometry
    bar = geometry.primitives[index]
    return (
        geometry.margins.left + bar.x + bar.width / 2,
        geometry.margins.top + bar.y + bar.height / 2,
    )


def _settings(tmp_path: Path) -> EngineSettings:
    return EngineSettings(export={"directory": str(tmp_path / "exports")})


def test_mount_tracks_container(bar_records) -> None:
    container = ResizableContainer(800, 400)
    chart = Chart({"data": bar_records}, container=container)

    chart.mount()
    assert chart.mounted
    assert container.observer_count == 1
    assert chart.dimensions == Dimensions(800, 400)

    container.resize(1000, 500)
    assert chart.dimensions == Dimensions(1000, 500)
    assert chart.geometry.dimensions == Dimensions(1000, 500)

    chart.unmount()
    assert container.observer_count == 0
    container.resize(640, 480)
    assert chart.dimensions == Dimensions(1000, 500)


def test_defaults_without_container(bar_records) -> None:
    with Chart({"data": bar_records}) as chart:
        assert chart.dimensions == Dimensions(400, 400)
        assert chart.resize(0, 0) == Dimensions(400, 400)
        assert chart.resize(900, 300) == Dimensions(900, 300)
    assert chart.resize(1200, 600) == Dimensions(900, 300)


def test_scatter_keeps_aspect_ratio(scatter_records) -> None:
    container = ResizableContainer(800, 100)
    with Chart({"kind": "scatter", "data": scatter_records, "scatter": {"xField": "speed", "yField": "occupancy"}}, container=container) as chart:
        assert chart.dimensions == Dimensions(800, 600)


def test_kind_change_refits_dimensions(bar_records) -> None:
    container = ResizableContainer(800, 400)
    with Chart({"data": bar_records}, container=container) as chart:
        chart.update(kind="scatter", scatter={"x_field": "value", "y_field": "value"})
        assert chart.dimensions == Dimensions(800, 600)
        container.resize(1000, 400)
        assert chart.dimensions == Dimensions(1000, 600)
        assert container.observer_count == 1


def test_pointer_hover_and_leave(bar_records) -> None:
    with Chart({"data": bar_records}, container=ResizableContainer(800, 400)) as chart:
        x, y = _centre_of(chart, 0)
        assert chart.pointer_move(x, y) == HoverState(0, (x, y))
        assert chart.pointer_move(x + 1, y).pointer == (x + 1, y)
        assert chart.tooltip().title == "B"
        assert not chart.pointer_move(1, 1).active
        chart.pointer_move(x, y)
        assert not chart.pointer_leave().active


def test_pie_hover_survives_grown_edge(line_records) -> None:
    with Chart({"kind": "pie", "data": line_records}, container=ResizableContainer(800, 400)) as chart:
        geometry = chart.geometry
        cx = geometry.margins.left + geometry.layout.center[0]
        cy = geometry.margins.top + geometry.layout.center[1]
        edge = cx + geometry.layout.radius + 3
        assert chart.pointer_move(cx + 50, cy).index == 0
        assert chart.pointer_move(edge, cy).index == 0
        chart.pointer_leave()
        assert not chart.pointer_move(edge, cy).active


def test_primitive_events(bar_records) -> None:
    with Chart({"data": bar_records}) as chart:
        assert chart.primitive_enter(2, 10, 10).index == 2
        assert chart.primitive_leave(1).index == 2
        assert not chart.primitive_leave(2).active
        assert not chart.primitive_enter(7, 10, 10).active


def test_unmounted_chart_ignores_interaction(bar_records) -> None:
    chart = Chart({"data": bar_records})
    assert chart.pointer_move(100, 100) == HoverState.idle()
    assert chart.primitive_enter(0, 1, 1) == HoverState.idle()
    assert chart.click(100, 100) is None


def test_new_data_clears_hover(bar_records) -> None:
    with Chart({"data": bar_records}) as chart:
        chart.primitive_enter(0, 5, 5)
        chart.update(value_label="Passengers")
        assert chart.hover.index == 0
        chart.update(data=bar_records[:2])
        assert not chart.hover.active
        assert len(chart.geometry.primitives) == 2


def test_click_selects_bar(bar_records) -> None:
    picked = []
    with Chart({"data": bar_records, "onSelect": picked.append}, container=ResizableContainer(800, 400)) as chart:
        point = chart.click(*_centre_of(chart, 1))
        assert point.name == "C"
        assert picked == [point]
        assert chart.options.bar.selected == "C"
        assert chart.geometry.primitives[1].role == "selected"
        assert chart.click(1, 1) is None


def test_click_ignored_for_pie(line_records) -> None:
    picked = []
    with Chart({"kind": "pie", "data": line_records, "onSelect": picked.append}) as chart:
        cx, cy = chart.geometry.layout.center
        margins = chart.geometry.margins
        assert chart.click(margins.left + cx + 20, margins.top + cy) is None
    assert picked == []


def test_render_svg_states(bar_records) -> None:
    with Chart({"data": []}) as chart:
        assert PLACEHOLDER_TEXT in chart.render_svg()

    with Chart({"data": bar_records, "showExportButton": True}, container=ResizableContainer(800, 400)) as chart:
        chart.pointer_move(*_centre_of(chart, 0))
        svg = chart.render_svg()
        assert 'class="tooltip"' in svg
        assert 'class="export-button"' in svg
        assert 'class="tooltip"' not in chart.render_svg(include_tooltip=False)
        assert chart.render_svg() == svg


def test_render_png(line_records) -> None:
    for kind in ("bar", "pie", "area"):
        with Chart({"kind": kind, "data": line_records}) as chart:
            assert chart.render_png().startswith(PNG_SIGNATURE)


def test_snapshot_is_static(bar_records) -> None:
    with Chart({"data": bar_records, "showExportButton": True}) as chart:
        chart.primitive_enter(0, 5, 5)
        snapshot = chart.snapshot()
    assert 'class="tooltip"' not in snapshot.svg
    assert 'class="export-button"' not in snapshot.svg
    assert 'class="background"' in snapshot.svg


def test_export_requires_button(bar_records, tmp_path: Path) -> None:
    with Chart({"data": bar_records}, settings=_settings(tmp_path)) as chart:
        with pytest.raises(ExportDisabledError):
            chart.export()


def test_export_on_unmounted_chart_is_noop(bar_records, tmp_path: Path) -> None:
    chart = Chart({"data": bar_records, "showExportButton": True}, settings=_settings(tmp_path))
    assert chart.export() is None
    assert not (tmp_path / "exports").exists()


def test_export_writes_file(bar_records, tmp_path: Path) -> None:
    done = []
    delivered = threading.Event()

    def on_done(path):
        done.append(path)
        delivered.set()

    with Chart({"data": bar_records, "showExportButton": True, "chartTitle": "Linhas por Bairro"}, settings=_settings(tmp_path)) as chart:
        target = chart.export("svg", on_done).result(timeout=30)
        assert delivered.wait(10)
    assert target == tmp_path / "exports" / "linhas_por_bairro.svg"
    assert "<svg" in target.read_text(encoding="utf-8")
    assert done == [target]


def test_late_export_callback_is_dropped(bar_records, tmp_path: Path) -> None:
    gate = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1)
    pipeline = ExportPipeline(tmp_path, executor=executor)
    done = []
    try:
        executor.submit(gate.wait, 10)
        chart = Chart({"data": bar_records, "showExportButton": True}, exporter=pipeline).mount()
        future = chart.export("png", done.append)
        chart.unmount()
        gate.set()
        assert future.result(timeout=30).exists()
    finally:
        executor.shutdown(wait=True)
    assert done == []


def test_layout_errors_propagate(caplog) -> None:
    chart = Chart({"kind": "scatter", "data": [{"name": "a", "value": 1}]})
    with caplog.at_level(logging.WARNING, logger="transitcharts.chart"):
        with pytest.raises(ChartDataError):
            chart.mount()
    assert "cannot lay out" in caplog.text


def test_unknown_theme_falls_back(bar_records, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="transitcharts.chart"):
        chart = Chart({"data": bar_records}, settings=EngineSettings(theme="neon"))
    assert chart.theme.identifier == "transit-light"
    assert "unknown theme" in caplog.text
