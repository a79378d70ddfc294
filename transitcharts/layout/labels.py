"""Leader-line labels for pie slices."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from ..formatting import format_compact, truncate_label
from .base import polar

TEXT_NUDGE = 2.0

__all__ = ["PieLabel", "label_text", "place_labels", "resolve_collisions"]


@dataclass(frozen=True)
class PieLabel:
    """Label for one slice, in centre-relative coordinates.

    The leader line runs ``anchor -> inflexion -> (x, y)``; the text starts
    at ``text_x`` on the same baseline.
    """

    index: int
    side: str
    text: str
    anchor: Tuple[float, float]
    inflexion: Tuple[float, float]
    x: float
    y: float
    text_x: float
    text_anchor: str


def label_text(name: str, value: float, max_length: int = 20, locale: str = "pt_BR") -> str:
    return f"{truncate_label(name, max_length)} ({format_compact(value, locale)})"


def place_labels(slices: Sequence, radius: float, options, locale: str = "pt_BR") -> Tuple[PieLabel, ...]:
    labels: List[PieLabel] = []
    for piece in slices:
        mid = piece.mid_angle
        inflexion = polar(radius + options.inflexion_padding, mid)
        side = "right" if inflexion[0] > 0 else "left"
        direction = 1.0 if side == "right" else -1.0
        end_x = inflexion[0] + direction * options.label_offset
        labels.append(
            PieLabel(
                index=piece.index,
                side=side,
                text=label_text(piece.point.name, piece.point.value, options.max_label_length, locale),
                anchor=polar(radius, mid),
                inflexion=inflexion,
                x=end_x,
                y=inflexion[1],
                text_x=end_x + direction * TEXT_NUDGE,
                text_anchor="start" if side == "right" else "end",
            )
        )
    return tuple(resolve_collisions(labels, options.min_label_spacing))


def resolve_collisions(labels: Sequence[PieLabel], min_spacing: float) -> List[PieLabel]:
    """Push labels down so neighbours on the same side keep ``min_spacing``.

    Each side is swept once from top to bottom; labels on opposite sides
    are never compared.  The result keeps the input order.
    """

    adjusted: Dict[int, PieLabel] = {}
    for side in ("left", "right"):
        column = sorted(
            (pos for pos, label in enumerate(labels) if label.side == side),
            key=lambda pos: (labels[pos].y, pos),
        )
        previous = None
        for pos in column:
            label = labels[pos]
            if previous is not None and label.y - previous < min_spacing:
                label = replace(label, y=previous + min_spacing)
            adjusted[pos] = label
            previous = label.y
    return [adjusted[pos] for pos in range(len(labels))]
