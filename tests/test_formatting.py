from __future__ import annotations

import pytest

from transitcharts.formatting import (
    format_compact,
    format_full,
    format_month_long,
    format_month_short,
    format_percentage,
    truncate_label,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1234567.891, "1.234.567,891"),
        (12.5, "12,5"),
        (1000, "1.000"),
        (0, "0"),
        (-0.0001, "0"),
        (-2500.25, "-2.500,25"),
    ],
)
def test_format_full_pt_br(value, expected) -> None:
    assert format_full(value) == expected


def test_format_full_en_us() -> None:
    assert format_full(1234.5, "en_US") == "1,234.5"


def test_format_compact() -> None:
    assert format_compact(1_250_000) == "1,2M"
    assert format_compact(3_400) == "3,4K"
    assert format_compact(999) == "999"
    assert format_compact(-3_400, "en_US") == "-3.4K"


def test_format_percentage() -> None:
    assert format_percentage(1, 3) == "33,3%"
    assert format_percentage(5, 0) == "0,0%"
    assert format_percentage(1, 8, "en_US") == "12.5%"


def test_truncate_label() -> None:
    assert truncate_label("Terminal Central Norte Sul") == "Terminal Central Nor..."
    assert truncate_label("Curto") == "Curto"
    assert truncate_label("x" * 20) == "x" * 20


def test_month_labels() -> None:
    assert format_month_short("2024-06-01") == "jun/2024"
    assert format_month_long("2024-03-15T00:00:00") == "Março/2024"
    assert format_month_long("2024-03-15", "en_US") == "March/2024"
    assert format_month_short("semana 12") == "semana 12"
