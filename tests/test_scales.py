from __future__ import annotations

import pytest

from transitcharts.scales import (
    RDYLBU,
    OrdinalColorScale,
    SequentialColorScale,
    headroom_domain,
    interpolate_stops,
    make_band_scale,
    make_linear_scale,
    make_sqrt_scale,
    padded_extent,
    tick_values,
)


def test_linear_scale_maps_and_inverts() -> None:
    scale = make_linear_scale(0, 100, 300, 0)
    assert scale(0) == 300
    assert scale(50) == 150
    assert scale(100) == 0
    assert scale.invert(150) == 50


def test_linear_scale_degenerate_domain_uses_midpoint() -> None:
    scale = make_linear_scale(5, 5, 0, 200)
    assert scale.degenerate
    assert scale(5) == 100
    assert scale(1000) == 100
    assert scale.invert(42) == 5


def test_tick_values_use_nice_steps() -> None:
    assert tick_values(0, 10, 5) == [0, 2, 4, 6, 8, 10]
    assert tick_values(0, 1, 5) == [0, 0.2, 0.4, 0.6, 0.8, 1.0]
    assert tick_values(0, 110, 6) == [0, 20, 40, 60, 80, 100]
    assert tick_values(3, 3, 5) == [3.0]
    assert tick_values(10, 0, 5) == [10, 8, 6, 4, 2, 0]


def test_linear_ticks_delegate_to_tick_values() -> None:
    assert make_linear_scale(0, 50, 0, 1).ticks(5) == [0, 10, 20, 30, 40, 50]


def test_sqrt_scale_tracks_area() -> None:
    scale = make_sqrt_scale((0, 100), (0, 10))
    assert scale(0) == 0
    assert scale(25) == pytest.approx(5)
    assert scale(100) == pytest.approx(10)
    assert make_sqrt_scale((4, 4), (4, 30))(4) == 17


def test_band_scale_geometry() -> None:
    bands = make_band_scale(["a", "b", "c"], (0, 330), 0.1)
    step = 330 / 3.1
    assert bands.step() == pytest.approx(step)
    assert bands.bandwidth() == pytest.approx(step * 0.9)
    assert bands("a") == pytest.approx(step * 0.1)
    assert bands("b") == pytest.approx(bands("a") + step)
    assert bands("zzz") is None


def test_band_scale_invert() -> None:
    bands = make_band_scale(["a", "b"], (0, 200), 0.0)
    assert bands.invert(10) == 0
    assert bands.invert(150) == 1
    assert bands.invert(-1) is None
    assert bands.invert(250) is None
    padded = make_band_scale(["a", "b"], (0, 200), 0.5)
    gap = padded.at(0) + padded.bandwidth() + 1
    assert padded.invert(gap) is None


@pytest.mark.parametrize("padding", [-0.1, 1.0, 1.5])
def test_band_scale_rejects_bad_padding(padding) -> None:
    with pytest.raises(ValueError):
        make_band_scale(["a"], (0, 100), padding)


def test_band_scale_with_no_categories() -> None:
    bands = make_band_scale([], (0, 100), 0.3)
    assert bands.invert(50) is None


def test_sequential_scale_reversed_domain_makes_high_values_red() -> None:
    scale = SequentialColorScale((100.0, 0.0))
    assert scale(100) == RDYLBU[0]
    assert scale(0) == RDYLBU[-1]
    assert SequentialColorScale((3.0, 3.0))(3) == RDYLBU[5]


def test_interpolate_stops_midpoint() -> None:
    assert interpolate_stops(["#000000", "#ffffff"], 0.5) == "#808080"
    assert interpolate_stops(["#123456"], 0.9) == "#123456"
    with pytest.raises(ValueError):
        interpolate_stops([], 0.5)


def test_ordinal_scale_cycles_scheme() -> None:
    scale = OrdinalColorScale(("a", "b"), ("#111111", "#222222"))
    assert scale("a") == "#111111"
    assert scale("b") == "#222222"
    assert scale("unknown") == "#111111"


def test_domain_helpers() -> None:
    assert headroom_domain([10, 50]) == (0.0, pytest.approx(55.0))
    assert headroom_domain([]) == (0.0, 0.0)
    assert headroom_domain([-5, -1]) == (0.0, 0.0)
    assert padded_extent([10, 20]) == (9.0, 21.0)
    assert padded_extent([0.5, 10.5]) == (0.0, 11.5)
    assert padded_extent([-10, 10], clamp_zero=False) == (-12.0, 12.0)
