"""Discrete-sequence transform engine: batch and streaming operators."""

from importlib import metadata

try:
    __version__ = metadata.version("sequence-engine")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
    __version__ = "0.1.0"

from .batch import (
    advance,
    apply_transform,
    cumsum,
    delay,
    diff,
    downsample,
    pad_back,
    pad_front,
    reverse,
    upsample,
)
from .buffers import SequenceBuffer
from .capability import capability_report, online_capable
from .combine import add, combine_sequences, conv_circular, conv_linear, corr_cross, mul
from .config import load_job_config, validate_job, validate_job_file
from .correlation import windowed_correlation
from .errors import (
    AllocationError,
    ArgumentError,
    NumericalError,
    SequenceEngineError,
    SequenceIndexError,
    StateError,
    UnsupportedOperationError,
)
from .models import JobConfig, OperatorParams, make_params
from .operators import CombineOp, Operator
from .pipeline import run_combine, run_corr_window, run_job, run_transform
from .ring import RingBuffer, SlidingWindow
from .service import create_app
from .streaming import StreamState, rolling_correlation, stream_iter, stream_sequence

__all__ = [
    "SequenceBuffer",
    "RingBuffer",
    "SlidingWindow",
    "Operator",
    "CombineOp",
    "OperatorParams",
    "JobConfig",
    "make_params",
    "pad_front",
    "pad_back",
    "delay",
    "advance",
    "reverse",
    "upsample",
    "downsample",
    "diff",
    "cumsum",
    "apply_transform",
    "add",
    "mul",
    "conv_linear",
    "conv_circular",
    "corr_cross",
    "combine_sequences",
    "online_capable",
    "capability_report",
    "StreamState",
    "stream_iter",
    "stream_sequence",
    "rolling_correlation",
    "windowed_correlation",
    "load_job_config",
    "validate_job",
    "validate_job_file",
    "run_transform",
    "run_combine",
    "run_corr_window",
    "run_job",
    "create_app",
    "SequenceEngineError",
    "ArgumentError",
    "SequenceIndexError",
    "AllocationError",
    "StateError",
    "UnsupportedOperationError",
    "NumericalError",
    "__version__",
]
