"""Number, date and label formatting shared by axes, labels and tooltips."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Tuple

__all__ = [
    "format_compact",
    "format_full",
    "format_month_long",
    "format_month_short",
    "format_percentage",
    "truncate_label",
]

_SEPARATORS: Dict[str, Tuple[str, str]] = {
    # locale -> (thousands, decimal)
    "pt_BR": (".", ","),
    "en_US": (",", "."),
}

_MONTHS_SHORT: Dict[str, Tuple[str, ...]] = {
    "pt_BR": ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"),
    "en_US": ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
}

_MONTHS_LONG: Dict[str, Tuple[str, ...]] = {
    "pt_BR": (
        "Janeiro",
        "Fevereiro",
        "Março",
        "Abril",
        "Maio",
        "Junho",
        "Julho",
        "Agosto",
        "Setembro",
        "Outubro",
        "Novembro",
        "Dezembro",
    ),
    "en_US": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
}


def _separators(locale: str) -> Tuple[str, str]:
    return _SEPARATORS.get(locale, _SEPARATORS["en_US"])


def format_full(value: float, locale: str = "pt_BR", max_decimals: int = 3) -> str:
    """Grouped number with up to ``max_decimals`` fraction digits (``12.345,5``)."""

    thousands, decimal = _separators(locale)
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text.replace(",", "\0").replace(".", decimal).replace("\0", thousands)


def format_compact(value: float, locale: str = "pt_BR") -> str:
    """Short form used in pie labels: ``1,2M``, ``3,4K`` or the full value."""

    _, decimal = _separators(locale)
    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"{value / 1_000_000:.1f}M".replace(".", decimal)
    if magnitude >= 1_000:
        return f"{value / 1_000:.1f}K".replace(".", decimal)
    return format_full(value, locale)


def format_percentage(part: float, total: float, locale: str = "pt_BR") -> str:
    """Share of ``total`` with one decimal in the locale's notation (``33,3%``)."""

    _, decimal = _separators(locale)
    share = part / total * 100 if total > 0 else 0.0
    return f"{share:.1f}%".replace(".", decimal)


def truncate_label(text: str, budget: int = 20) -> str:
    if len(text) > budget:
        return f"{text[:budget]}..."
    return text


def _parse_iso(label: str) -> Optional[date]:
    try:
        return date.fromisoformat(label[:10])
    except ValueError:
        return None


def format_month_short(label: str, locale: str = "pt_BR") -> str:
    """``"2024-06-01"`` -> ``"jun/2024"``; unparseable labels pass through."""

    parsed = _parse_iso(label)
    if parsed is None:
        return label
    months = _MONTHS_SHORT.get(locale, _MONTHS_SHORT["en_US"])
    return f"{months[parsed.month - 1]}/{parsed.year}"


def format_month_long(label: str, locale: str = "pt_BR") -> str:
    parsed = _parse_iso(label)
    if parsed is None:
        return label
    months = _MONTHS_LONG.get(locale, _MONTHS_LONG["en_US"])
    return f"{months[parsed.month - 1]}/{parsed.year}"
