"""Ordinary least squares trend line with Pearson correlation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

__all__ = ["LinearFit", "fit_line", "pearson"]


@dataclass(frozen=True)
class LinearFit:
    slope: float
    intercept: float
    correlation: float
    count: int

    def predict(self, x: float) -> float:
        return self.intercept + self.slope * x


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson's r; zero when either series has no variance."""

    n = len(xs)
    if n != len(ys):
        raise ValueError("series must have the same length")
    if n < 2:
        return 0.0
    sum_x = math.fsum(xs)
    sum_y = math.fsum(ys)
    sum_xy = math.fsum(x * y for x, y in zip(xs, ys))
    sum_xx = math.fsum(x * x for x in xs)
    sum_yy = math.fsum(y * y for y in ys)
    numerator = n * sum_xy - sum_x * sum_y
    var_x = n * sum_xx - sum_x * sum_x
    var_y = n * sum_yy - sum_y * sum_y
    if var_x <= 0 or var_y <= 0:
        return 0.0
    r = numerator / math.sqrt(var_x * var_y)
    return max(-1.0, min(1.0, r))


def fit_line(xs: Sequence[float], ys: Sequence[float]) -> Optional[LinearFit]:
    """Least-squares fit of ``y = intercept + slope * x``.

    Returns ``None`` for fewer than two points or when every ``x`` is the
    same (the slope is undefined).
    """

    n = len(xs)
    if n != len(ys):
        raise ValueError("series must have the same length")
    if n < 2:
        return None
    sum_x = math.fsum(xs)
    sum_y = math.fsum(ys)
    sum_xy = math.fsum(x * y for x, y in zip(xs, ys))
    sum_xx = math.fsum(x * x for x in xs)
    denominator = n * sum_xx - sum_x * sum_x
    if denominator <= 0 or math.isclose(denominator, 0.0, abs_tol=1e-12 * max(1.0, n * sum_xx)):
        return None
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return LinearFit(slope=slope, intercept=intercept, correlation=pearson(xs, ys), count=n)
