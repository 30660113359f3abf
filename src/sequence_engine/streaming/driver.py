"""Drivers that feed samples through stream states and sliding windows."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Tuple

from ..correlation import windowed_correlation
from ..errors import NumericalError
from ..models.params import OperatorParams
from ..ring import SlidingWindow
from .state import StreamState


def stream_iter(params: OperatorParams, samples: Iterable[float]) -> Iterator[float]:
    """Lazily run ``samples`` through a fresh stream state.

    Deferred output (front-padding zeros) is drained before the first sample
    and after every sample, so output is yielded as soon as it exists. The
    state is disposed when the input ends or an error propagates.
    """

    state = StreamState(params)
    try:
        yield from state.drain()
        for x in samples:
            y = state.push(x)
            if y is not None:
                yield y
            yield from state.drain()
        yield from state.drain()
    finally:
        state.dispose()


def stream_sequence(params: OperatorParams, samples: Iterable[float]) -> List[float]:
    """Stream a finite sequence and collect every emitted sample."""
    return list(stream_iter(params, samples))


def rolling_correlation(pairs: Iterable[Tuple[float, float]], window: int) -> Iterator[float]:
    """Push ``(a, b)`` pairs in lock-step and yield the coefficient after each push.

    Undefined coefficients (flat window) are reported as ``nan``.
    """

    wa = SlidingWindow(window)
    wb = SlidingWindow(window)
    try:
        for a, b in pairs:
            wa.push(a)
            wb.push(b)
            try:
                yield windowed_correlation(wa, wb)
            except NumericalError:
                yield math.nan
    finally:
        wa.release()
        wb.release()
