from __future__ import annotations

import itertools

import pytest

from sequence_engine import batch, streaming
from sequence_engine.errors import ArgumentError, StateError, UnsupportedOperationError
from sequence_engine.models import make_params
from sequence_engine.streaming import StreamState, StreamStatus, stream_iter, stream_sequence

SAMPLES = [0.5, -1.0, 2.0, 3.5, -4.25, 1.0, 0.0, 6.0, -2.5, 1.25, 7.0, -3.0]

EQUIVALENT_CASES = [
    ("pad-front", 0, 0.0),
    ("pad-front", 4, 0.0),
    ("delay", 0, 0.0),
    ("delay", 3, -1.5),
    ("delay", 20, 2.0),
    ("upsample", 1, 0.0),
    ("upsample", 3, 0.0),
    ("downsample", 1, 0.0),
    ("downsample", 3, 0.0),
    ("downsample", 4, 0.0),
    ("diff", 0, 0.0),
    ("cumsum", 0, 0.0),
]


@pytest.mark.parametrize("op,main,fill", EQUIVALENT_CASES)
def test_stream_matches_batch(op: str, main: int, fill: float) -> None:
    params = make_params(op, main, fill)
    assert stream_sequence(params, SAMPLES) == batch.apply_transform(SAMPLES, params).tolist()


def test_downsample_stream_emits_partial_tail_group() -> None:
    params = make_params("downsample", 2)
    samples = [1.0, 2.0, 3.0, 4.0, 5.0]

    assert batch.apply_transform(samples, params).tolist() == [1.0, 3.0]
    assert stream_sequence(params, samples) == [1.0, 3.0, 5.0]


def test_pad_front_requires_flush_before_input() -> None:
    state = streaming.init("pad-front", 2)

    with pytest.raises(StateError):
        streaming.step(state, True, 1.0)

    assert streaming.step(state, False) == (0.0, True)
    assert streaming.step(state, False) == (0.0, True)
    assert streaming.step(state, False) == (0.0, False)
    assert streaming.step(state, True, 5.0) == (5.0, True)


def test_upsample_rejects_input_while_zeros_pending() -> None:
    state = streaming.init("upsample", 3)
    assert state.push(2.0) == 2.0
    with pytest.raises(StateError):
        state.push(1.0)
    assert list(state.drain()) == [0.0, 0.0]
    assert state.push(1.0) == 1.0


def test_delay_emits_fill_first() -> None:
    state = streaming.init("delay", 2, 9.0)
    outputs = [state.push(x) for x in (1.0, 2.0, 3.0, 4.0)]
    assert outputs == [9.0, 9.0, 1.0, 2.0]
    assert state.flush() is None


def test_diff_and_cumsum_flush_do_nothing() -> None:
    for op in ("diff", "cumsum"):
        state = streaming.init(op)
        assert streaming.step(state, False) == (0.0, False)
        assert streaming.step(state, True, 3.0) == (3.0, True)


@pytest.mark.parametrize("op", ["pad-back", "advance", "reverse"])
def test_non_causal_operators_cannot_stream(op: str) -> None:
    with pytest.raises(UnsupportedOperationError):
        streaming.init(op, 1)


def test_dispose_is_idempotent_and_final() -> None:
    state = streaming.init("delay", 3)
    ring = state.variant.ring
    streaming.dispose(state)
    streaming.dispose(state)

    assert state.status is StreamStatus.DISPOSED
    assert ring.capacity == 0
    with pytest.raises(StateError):
        streaming.step(state, True, 1.0)


def test_dispose_right_after_init() -> None:
    state = StreamState(make_params("cumsum"))
    assert state.active
    state.dispose()
    assert not state.active


def test_step_rejects_missing_state() -> None:
    with pytest.raises(ArgumentError):
        streaming.step(None, True, 1.0)
    streaming.dispose(None)


def test_stream_iter_is_lazy_over_unbounded_input() -> None:
    params = make_params("cumsum")
    running = stream_iter(params, itertools.count(1))
    assert list(itertools.islice(running, 5)) == [1.0, 3.0, 6.0, 10.0, 15.0]
    running.close()


def test_stream_iter_emits_front_padding_before_input() -> None:
    params = make_params("pad-front", 2)
    assert list(stream_iter(params, [])) == [0.0, 0.0]
