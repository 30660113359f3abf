"""Normalized (Pearson) correlation over a pair of sliding windows."""

from __future__ import annotations

import math

from .errors import ArgumentError, NumericalError
from .ring import SlidingWindow


def windowed_correlation(wa: SlidingWindow, wb: SlidingWindow) -> float:
    """Pearson coefficient over the most recent ``min(count_a, count_b)`` samples.

    Each window contributes its own newest ``L`` samples, so the pair is only
    time-aligned when both windows are pushed in lock-step.
    """

    if wa is None or wb is None:
        raise ArgumentError("both windows are required")
    if wa.capacity == 0 or wb.capacity == 0:
        raise ArgumentError("window has been released")
    if wa.count == 0 or wb.count == 0:
        raise NumericalError("window is empty")

    size = min(wa.count, wb.count)
    if size == 0:
        raise NumericalError("effective window length is zero")

    x = wa.latest(size)
    y = wb.latest(size)
    dx = x - x.sum() / size
    dy = y - y.sum() / size

    sxx = float((dx * dx).sum())
    syy = float((dy * dy).sum())
    if sxx <= 0.0 or syy <= 0.0:
        raise NumericalError("zero variance in window, cannot normalize")

    denom = math.sqrt(sxx * syy)
    if denom == 0.0:
        raise NumericalError("zero denominator")
    return float((dx * dy).sum()) / denom
