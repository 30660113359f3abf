"""Per-operator causal state machines for sample-at-a-time processing.

A stream is driven by ``step(has_input, x)``: a real input sample, or a flush
request (``has_input=False``) that drains deferred output such as the zeros
of front padding or upsampling. Each step emits at most one sample.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Tuple, Union

from ..capability import online_capable
from ..errors import ArgumentError, StateError, UnsupportedOperationError
from ..models.params import OperatorParams, make_params
from ..operators import Operator
from ..ring import RingBuffer

logger = logging.getLogger(__name__)


class StreamStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DISPOSED = "disposed"


@dataclass
class PadFrontState:
    remaining: int


@dataclass
class DelayState:
    # None when the delay is zero (pass-through).
    ring: RingBuffer | None


@dataclass
class UpsampleState:
    factor: int
    remaining: int = 0


@dataclass
class DownsampleState:
    factor: int
    counter: int = 0


@dataclass
class DiffState:
    has_last: bool = False
    last: float = 0.0


@dataclass
class CumsumState:
    acc: float = 0.0


StreamVariant = Union[PadFrontState, DelayState, UpsampleState, DownsampleState, DiffState, CumsumState]


def _build_variant(params: OperatorParams) -> StreamVariant:
    op = params.op
    if op is Operator.PAD_FRONT:
        return PadFrontState(remaining=params.main)
    if op is Operator.DELAY:
        ring = RingBuffer.filled(params.main, params.fill) if params.main > 0 else None
        return DelayState(ring=ring)
    if op is Operator.UPSAMPLE:
        return UpsampleState(factor=params.main)
    if op is Operator.DOWNSAMPLE:
        return DownsampleState(factor=params.main)
    if op is Operator.DIFF:
        return DiffState()
    if op is Operator.CUMSUM:
        return CumsumState()
    raise UnsupportedOperationError(f"{op.value} has no streaming realization")


@dataclass
class StreamState:
    """Streaming state for one operator instance.

    Active immediately after construction; ``dispose`` is the only terminal
    transition and is safe to repeat.
    """

    params: OperatorParams
    status: StreamStatus = field(default=StreamStatus.UNINITIALIZED, init=False)
    variant: StreamVariant | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if not online_capable(self.params.op, assume_unbounded_input=True):
            raise UnsupportedOperationError(
                f"{self.params.op.value} is not realizable online for unbounded input"
            )
        self.variant = _build_variant(self.params)
        self.status = StreamStatus.ACTIVE
        logger.debug("stream %s initialized (main=%d)", self.params.op.value, self.params.main)

    @property
    def op(self) -> Operator:
        return self.params.op

    @property
    def active(self) -> bool:
        return self.status is StreamStatus.ACTIVE

    def step(self, has_input: bool, x: float = 0.0) -> float | None:
        """Advance one step; return the emitted sample or ``None``."""

        if not self.active or self.variant is None:
            raise StateError(f"stream is not active (status={self.status.value})")
        if has_input:
            try:
                x = float(x)
            except (TypeError, ValueError) as exc:
                raise ArgumentError(f"input sample must be numeric (got {x!r})") from exc

        state = self.variant
        if isinstance(state, PadFrontState):
            if state.remaining > 0:
                if has_input:
                    raise StateError("input not allowed while front-padding zeros are pending")
                state.remaining -= 1
                return 0.0
            return x if has_input else None

        if isinstance(state, DelayState):
            if not has_input:
                return None
            if state.ring is None:
                return x
            return state.ring.push(x)

        if isinstance(state, UpsampleState):
            if state.remaining > 0:
                if has_input:
                    raise StateError("input not allowed while upsample zeros are pending")
                state.remaining -= 1
                return 0.0
            if not has_input:
                return None
            if state.factor > 1:
                state.remaining = state.factor - 1
            return x

        if isinstance(state, DownsampleState):
            if not has_input:
                return None
            emit = state.counter % state.factor == 0
            state.counter += 1
            return x if emit else None

        if isinstance(state, DiffState):
            if not has_input:
                return None
            y = x - state.last if state.has_last else x
            state.last = x
            state.has_last = True
            return y

        if isinstance(state, CumsumState):
            if not has_input:
                return None
            state.acc += x
            return state.acc

        raise UnsupportedOperationError(f"no step rule for {type(state).__name__}")

    def push(self, x: float) -> float | None:
        return self.step(True, x)

    def flush(self) -> float | None:
        return self.step(False)

    def drain(self) -> Iterator[float]:
        """Flush until a step produces no output."""
        while True:
            y = self.flush()
            if y is None:
                return
            yield y

    def dispose(self) -> None:
        if isinstance(self.variant, DelayState) and self.variant.ring is not None:
            self.variant.ring.release()
        self.variant = None
        self.status = StreamStatus.DISPOSED


def init(op: str | Operator | OperatorParams, main: int = 0, fill: float = 0.0) -> StreamState:
    """Construct an active stream; non-causal operators raise UnsupportedOperationError."""

    params = op if isinstance(op, OperatorParams) else make_params(op, main, fill)
    return StreamState(params)


def step(state: StreamState | None, has_input: bool, x: float = 0.0) -> Tuple[float, bool]:
    """Functional form of ``StreamState.step`` returning ``(y, has_output)``."""

    if state is None:
        raise ArgumentError("state must not be None")
    y = state.step(has_input, x)
    if y is None:
        return 0.0, False
    return y, True


def dispose(state: StreamState | None) -> None:
    if state is not None:
        state.dispose()
