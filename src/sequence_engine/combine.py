"""Two-sequence combinations: point-wise arithmetic, convolution, correlation.

Convolution and correlation use numpy's direct-sum ``convolve`` and
``correlate``; no FFT is involved.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from .buffers import SequenceBuffer, SequenceLike, as_buffer, prepare_output
from .errors import ArgumentError
from .operators import CombineOp, parse_combine_op

logger = logging.getLogger(__name__)


def _pair(a: SequenceLike, b: SequenceLike) -> tuple[np.ndarray, np.ndarray]:
    return as_buffer(a, "a").values, as_buffer(b, "b").values


def _write(out: SequenceBuffer | None, result: np.ndarray) -> SequenceBuffer:
    dst = prepare_output(out, result.size)
    dst.data[: result.size] = result
    return dst


def add(a: SequenceLike, b: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Element-wise sum over the shorter length; the longer tail is dropped."""
    x, y = _pair(a, b)
    n = min(x.size, y.size)
    return _write(out, x[:n] + y[:n])


def mul(a: SequenceLike, b: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Element-wise product over the shorter length; the longer tail is dropped."""
    x, y = _pair(a, b)
    n = min(x.size, y.size)
    return _write(out, x[:n] * y[:n])


def conv_linear(a: SequenceLike, b: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Full linear convolution, length ``la + lb - 1`` (empty if either input is).

    ``y[n] = sum_k a[k] * b[n - k]`` for ``max(0, n - lb + 1) <= k <= min(n, la - 1)``.
    """
    x, y = _pair(a, b)
    if x.size == 0 or y.size == 0:
        return _write(out, np.zeros(0, dtype=np.float64))
    return _write(out, np.convolve(x, y, mode="full"))


def conv_circular(a: SequenceLike, b: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """N-point circular convolution; both inputs must share a non-zero length N.

    The full linear convolution is folded modulo N: sample ``N + i`` of the
    linear result wraps onto sample ``i``.
    """
    x, y = _pair(a, b)
    if x.size == 0 or y.size == 0:
        raise ArgumentError("circular convolution requires non-empty inputs")
    if x.size != y.size:
        raise ArgumentError(f"input lengths must match (got {x.size} and {y.size})")

    size = x.size
    full = np.convolve(x, y, mode="full")
    result = full[:size].copy()
    result[: size - 1] += full[size:]
    return _write(out, result)


def corr_cross(a: SequenceLike, b: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Full cross-correlation, length ``la + lb - 1`` (empty if either input is).

    Output index ``n`` holds lag ``n - (lb - 1)``, so zero lag sits at ``lb - 1``:
    ``y[n] = sum_k a[k + lag] * b[k]`` over every ``k`` with both indices valid.
    The shift is applied to ``a``, not ``b`` as in the ``a[k] * b[k + lag]``
    form; that form mirrors the output and would turn
    ``corr_cross([1, 2, 3], [0, 1, 0])`` into ``[0, 3, 2, 1, 0]`` instead of
    ``[0, 1, 2, 3, 0]``. This is the ``numpy.correlate(a, b, "full")`` convention.
    """
    x, y = _pair(a, b)
    if x.size == 0 or y.size == 0:
        return _write(out, np.zeros(0, dtype=np.float64))
    return _write(out, np.correlate(x, y, mode="full"))


_DISPATCH: Dict[CombineOp, Callable[..., SequenceBuffer]] = {
    CombineOp.ADD: add,
    CombineOp.MUL: mul,
    CombineOp.CONV_LINEAR: conv_linear,
    CombineOp.CONV_CIRCULAR: conv_circular,
    CombineOp.CORR_CROSS: corr_cross,
}


def combine_sequences(
    op: str | CombineOp,
    a: SequenceLike,
    b: SequenceLike,
    out: SequenceBuffer | None = None,
) -> SequenceBuffer:
    """Dispatch a two-sequence combination by name or ``CombineOp``."""
    operator = parse_combine_op(op)
    result = _DISPATCH[operator](a, b, out)
    logger.debug("combine %s -> %d samples", operator.value, len(result))
    return result
