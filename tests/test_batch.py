from __future__ import annotations

import numpy as np
import pytest

from sequence_engine import batch
from sequence_engine.buffers import SequenceBuffer
from sequence_engine.errors import ArgumentError
from sequence_engine.models import make_params
from sequence_engine.operators import Operator

SAMPLES = [1.5, -2.0, 3.25, 0.0, 4.0, -1.0, 2.5]


def test_reverse_twice_is_identity() -> None:
    once = batch.reverse(SAMPLES)
    assert once.tolist() == SAMPLES[::-1]
    assert batch.reverse(once).tolist() == SAMPLES


def test_diff_and_cumsum_are_inverses() -> None:
    ints = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
    assert batch.diff(batch.cumsum(ints)).tolist() == ints
    assert batch.cumsum(batch.diff(ints)).tolist() == ints


def test_pad_front_and_back() -> None:
    front = batch.pad_front(SAMPLES, 3)
    assert len(front) == len(SAMPLES) + 3
    assert front.tolist()[:3] == [0.0, 0.0, 0.0]
    assert front.tolist()[3:] == SAMPLES

    back = batch.pad_back([1.0, 2.0], 2)
    assert back.tolist() == [1.0, 2.0, 0.0, 0.0]


def test_delay_and_advance_fill() -> None:
    assert batch.delay([1.0, 2.0, 3.0, 4.0], 2, fill=-1.0).tolist() == [-1.0, -1.0, 1.0, 2.0]
    assert batch.advance([1.0, 2.0, 3.0, 4.0], 1, fill=9.0).tolist() == [2.0, 3.0, 4.0, 9.0]
    assert batch.delay([1.0, 2.0], 5, fill=0.5).tolist() == [0.5, 0.5]
    assert batch.advance([1.0, 2.0], 0).tolist() == [1.0, 2.0]


@pytest.mark.parametrize("factor", [1, 2, 3])
def test_downsample_undoes_upsample(factor: int) -> None:
    up = batch.upsample(SAMPLES, factor)
    assert len(up) == len(SAMPLES) * factor
    assert batch.downsample(up, factor).tolist() == SAMPLES


def test_upsample_inserts_zeros() -> None:
    assert batch.upsample([1.0, 2.0], 3).tolist() == [1.0, 0.0, 0.0, 2.0, 0.0, 0.0]


def test_downsample_drops_incomplete_tail() -> None:
    assert batch.downsample([1.0, 2.0, 3.0, 4.0, 5.0], 2).tolist() == [1.0, 3.0]


def test_zero_factor_is_rejected() -> None:
    with pytest.raises(ArgumentError):
        batch.upsample(SAMPLES, 0)
    with pytest.raises(ArgumentError):
        batch.downsample(SAMPLES, 0)
    with pytest.raises(ArgumentError):
        batch.pad_front(SAMPLES, -1)


def test_empty_input_produces_empty_output() -> None:
    for op in (batch.reverse, batch.diff, batch.cumsum):
        assert op([]).tolist() == []
    assert batch.pad_front([], 2).tolist() == [0.0, 0.0]


def test_source_start_is_ignored() -> None:
    src = SequenceBuffer.from_values([1.0, 2.0], start=-5)
    result = batch.reverse(src)
    assert result.start == 0
    assert result.tolist() == [2.0, 1.0]


def test_output_buffer_is_reused_when_length_matches() -> None:
    out = SequenceBuffer.fixed(len(SAMPLES))
    storage = out.data
    result = batch.cumsum(SAMPLES, out=out)

    assert result is out
    assert out.data is storage
    assert out.tolist() == np.cumsum(SAMPLES).tolist()


def test_output_may_alias_source() -> None:
    buf = SequenceBuffer.from_values([1.0, 2.0, 3.0])
    batch.reverse(buf, out=buf)
    assert buf.tolist() == [3.0, 2.0, 1.0]


def test_apply_transform_dispatches_by_operator() -> None:
    params = make_params(Operator.DELAY, 1, 7.0)
    assert batch.apply_transform([1.0, 2.0], params).tolist() == [7.0, 1.0]

    params = make_params("upsample", 2)
    assert batch.apply_transform([1.0], params).tolist() == [1.0, 0.0]


def test_make_params_enforces_contract() -> None:
    with pytest.raises(ArgumentError):
        make_params("downsample", 0)
    with pytest.raises(ArgumentError):
        make_params("pad-front", -1)
    with pytest.raises(ArgumentError):
        make_params("delay", 1.5)
    with pytest.raises(ArgumentError):
        make_params("rotate")
    assert make_params("reverse").main == 0
