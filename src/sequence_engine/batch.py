"""Whole-sequence transforms.

Every operator reads a fully materialized sequence and writes a fresh output
buffer (or reuses ``out`` when its length already matches). The logical
``start`` of the source is ignored; outputs start at index 0.
"""

from __future__ import annotations

import logging
import numbers
from typing import Callable, Dict

import numpy as np

from .buffers import SequenceBuffer, SequenceLike, as_buffer, prepare_output
from .errors import ArgumentError
from .models.params import OperatorParams
from .operators import Operator

logger = logging.getLogger(__name__)


def _count(value: int, name: str) -> int:
    if not isinstance(value, numbers.Integral) or isinstance(value, bool) or value < 0:
        raise ArgumentError(f"{name} must be a non-negative integer (got {value!r})")
    return int(value)


def _factor(value: int, name: str = "factor") -> int:
    factor = _count(value, name)
    if factor == 0:
        raise ArgumentError(f"{name} must be > 0")
    return factor


def _write(out: SequenceBuffer | None, result: np.ndarray) -> SequenceBuffer:
    dst = prepare_output(out, result.size)
    dst.data[: result.size] = result
    return dst


def pad_front(src: SequenceLike, zeros: int, out: SequenceBuffer | None = None) -> SequenceBuffer:
    x = as_buffer(src, "src").values
    zeros = _count(zeros, "zeros")
    result = np.concatenate([np.zeros(zeros, dtype=np.float64), x])
    return _write(out, result)


def pad_back(src: SequenceLike, zeros: int, out: SequenceBuffer | None = None) -> SequenceBuffer:
    x = as_buffer(src, "src").values
    zeros = _count(zeros, "zeros")
    result = np.concatenate([x, np.zeros(zeros, dtype=np.float64)])
    return _write(out, result)


def delay(src: SequenceLike, d: int, fill: float = 0.0, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """``y[i] = fill`` for ``i < d``, else ``x[i - d]``; length is preserved."""
    x = as_buffer(src, "src").values
    d = _count(d, "delay")
    n = x.size
    result = np.full(n, float(fill), dtype=np.float64)
    if d < n:
        result[d:] = x[: n - d]
    return _write(out, result)


def advance(src: SequenceLike, a: int, fill: float = 0.0, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """``y[i] = x[i + a]`` while in range, else ``fill``; length is preserved."""
    x = as_buffer(src, "src").values
    a = _count(a, "advance")
    n = x.size
    result = np.full(n, float(fill), dtype=np.float64)
    if a < n:
        result[: n - a] = x[a:]
    return _write(out, result)


def reverse(src: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    x = as_buffer(src, "src").values
    return _write(out, x[::-1].copy())


def upsample(src: SequenceLike, factor: int, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Zero insertion: ``y[i * factor] = x[i]``, every other slot is 0."""
    x = as_buffer(src, "src").values
    factor = _factor(factor)
    result = np.zeros(x.size * factor, dtype=np.float64)
    result[::factor] = x
    return _write(out, result)


def downsample(src: SequenceLike, factor: int, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Keep ``x[i * factor]`` for ``i < len // factor``; an incomplete tail group is dropped."""
    x = as_buffer(src, "src").values
    factor = _factor(factor)
    n_out = x.size // factor
    result = x[: n_out * factor : factor].copy()
    return _write(out, result)


def diff(src: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    x = as_buffer(src, "src").values
    result = np.empty(x.size, dtype=np.float64)
    if x.size:
        result[0] = x[0]
        result[1:] = x[1:] - x[:-1]
    return _write(out, result)


def cumsum(src: SequenceLike, out: SequenceBuffer | None = None) -> SequenceBuffer:
    """Running accumulation, left to right."""
    x = as_buffer(src, "src").values
    result = np.empty(x.size, dtype=np.float64)
    acc = 0.0
    for i, value in enumerate(x):
        acc += float(value)
        result[i] = acc
    return _write(out, result)


_DISPATCH: Dict[Operator, Callable[[SequenceBuffer, OperatorParams, SequenceBuffer | None], SequenceBuffer]] = {
    Operator.PAD_FRONT: lambda x, p, out: pad_front(x, p.main, out),
    Operator.PAD_BACK: lambda x, p, out: pad_back(x, p.main, out),
    Operator.DELAY: lambda x, p, out: delay(x, p.main, p.fill, out),
    Operator.ADVANCE: lambda x, p, out: advance(x, p.main, p.fill, out),
    Operator.REVERSE: lambda x, p, out: reverse(x, out),
    Operator.UPSAMPLE: lambda x, p, out: upsample(x, p.main, out),
    Operator.DOWNSAMPLE: lambda x, p, out: downsample(x, p.main, out),
    Operator.DIFF: lambda x, p, out: diff(x, out),
    Operator.CUMSUM: lambda x, p, out: cumsum(x, out),
}


def apply_transform(
    src: SequenceLike,
    params: OperatorParams,
    out: SequenceBuffer | None = None,
) -> SequenceBuffer:
    """Run the transform named by ``params.op`` over a finite sequence."""

    if params is None:
        raise ArgumentError("params must not be None")
    buf = as_buffer(src, "src")
    result = _DISPATCH[params.op](buf, params, out)
    logger.debug("batch %s: %d -> %d samples", params.op.value, len(buf), len(result))
    return result
