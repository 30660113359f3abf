from .driver import rolling_correlation, stream_iter, stream_sequence
from .state import (
    CumsumState,
    DelayState,
    DiffState,
    DownsampleState,
    PadFrontState,
    StreamState,
    StreamStatus,
    UpsampleState,
    dispose,
    init,
    step,
)

__all__ = [
    "StreamState",
    "StreamStatus",
    "PadFrontState",
    "DelayState",
    "UpsampleState",
    "DownsampleState",
    "DiffState",
    "CumsumState",
    "init",
    "step",
    "dispose",
    "stream_iter",
    "stream_sequence",
    "rolling_correlation",
]
