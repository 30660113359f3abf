"""Mode dispatch and result records shared by the CLI, job runner and service."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Tuple

from .batch import apply_transform
from .capability import online_capable
from .combine import combine_sequences
from .config import load_job_config, validate_job
from .errors import ArgumentError, UnsupportedOperationError
from .logging_utils import log_event, timed_event
from .models.job import JobConfig
from .models.params import OperatorParams
from .operators import parse_combine_op
from .samples import ingest_samples
from .streaming.driver import rolling_correlation, stream_sequence

Mode = Literal["finite", "stream"]
logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    operator: str
    mode: str
    online: bool
    main: int
    fill: float
    input_length: int
    values: List[float] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "operator": self.operator,
            "mode": self.mode,
            "online": self.online,
            "main": self.main,
            "fill": self.fill,
            "input_length": self.input_length,
            "length": len(self.values),
            "values": self.values,
        }


@dataclass
class CombineResult:
    operator: str
    a_length: int
    b_length: int
    values: List[float] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "operator": self.operator,
            "a_length": self.a_length,
            "b_length": self.b_length,
            "length": len(self.values),
            "values": self.values,
        }


def run_transform(params: OperatorParams, samples: Iterable[float], mode: Mode = "finite") -> TransformResult:
    """Run one transform in the requested mode.

    ``finite`` materializes the samples and uses the batch operator; the
    reported ``online`` flag is the finite-input answer of the classifier.
    ``stream`` requires a causal operator and feeds the samples one at a time
    through a stream state.
    """

    samples = [float(x) for x in samples]
    op = params.op
    if mode == "finite":
        online = online_capable(op, assume_unbounded_input=False)
        with timed_event(logger, "transform_complete", operator=op.value, input_length=len(samples)) as event:
            values = apply_transform(samples, params).tolist()
            event["output_length"] = len(values)
    elif mode == "stream":
        online = online_capable(op, assume_unbounded_input=True)
        if not online:
            logger.warning("operator %s rejected for streaming", op.value)
            raise UnsupportedOperationError(f"{op.value} is not realizable online for unbounded input")
        with timed_event(logger, "stream_complete", operator=op.value, input_length=len(samples)) as event:
            values = stream_sequence(params, samples)
            event["output_length"] = len(values)
    else:
        raise ArgumentError(f"unknown mode '{mode}' (expected 'finite' or 'stream')")

    return TransformResult(
        operator=op.value,
        mode=mode,
        online=online,
        main=params.main,
        fill=params.fill,
        input_length=len(samples),
        values=values,
    )


def run_combine(op: str, a: Iterable[float], b: Iterable[float]) -> CombineResult:
    operator = parse_combine_op(op)
    a_values = [float(x) for x in a]
    b_values = [float(x) for x in b]
    values = combine_sequences(operator, a_values, b_values).tolist()
    log_event(
        logger,
        "combine_complete",
        operator=operator.value,
        a_length=len(a_values),
        b_length=len(b_values),
        output_length=len(values),
    )
    return CombineResult(operator=operator.value, a_length=len(a_values), b_length=len(b_values), values=values)


def run_corr_window(pairs: Iterable[Tuple[float, float]], window: int) -> List[float]:
    """Rolling Pearson coefficients; undefined points are ``nan``."""

    coefficients = list(rolling_correlation(pairs, window))
    log_event(
        logger,
        "correlation_complete",
        window=window,
        pairs=len(coefficients),
        undefined=sum(1 for c in coefficients if math.isnan(c)),
    )
    return coefficients


def job_samples(job: JobConfig) -> List[float]:
    if job.samples is not None:
        return list(job.samples)
    return ingest_samples(job.input, job.value_column)


def run_job(job: JobConfig) -> TransformResult:
    return run_transform(job.params(), job_samples(job), job.mode)


def run_job_file(path: str | Path) -> Dict[str, Any]:
    """Validate and execute a job file, returning the validation and the result."""

    config = load_job_config(path)
    validation = validate_job(config)
    if validation.errors:
        raise ArgumentError("; ".join(validation.errors))
    job = JobConfig.model_validate(validation.normalized)
    result = run_job(job)
    return {"validation": validation.as_dict(), "result": result.as_dict()}
