"""Operator enumerations and their parameter contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from .errors import ArgumentError


class Operator(str, Enum):
    """Single-sequence transforms."""

    PAD_FRONT = "pad-front"
    PAD_BACK = "pad-back"
    DELAY = "delay"
    ADVANCE = "advance"
    REVERSE = "reverse"
    UPSAMPLE = "upsample"
    DOWNSAMPLE = "downsample"
    DIFF = "diff"
    CUMSUM = "cumsum"


class CombineOp(str, Enum):
    """Two-sequence combinations."""

    ADD = "add"
    MUL = "mul"
    CONV_LINEAR = "conv-linear"
    CONV_CIRCULAR = "conv-circular"
    CORR_CROSS = "corr-cross"


@dataclass(frozen=True)
class ParameterContract:
    """Which parameters an operator reads and the domain of ``main``."""

    operator: Operator
    main_name: str | None
    min_main: int = 0
    uses_fill: bool = False
    description: str = ""

    @property
    def uses_main(self) -> bool:
        return self.main_name is not None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "operator": self.operator.value,
            "main": self.main_name,
            "min_main": self.min_main if self.uses_main else None,
            "uses_fill": self.uses_fill,
            "description": self.description,
        }


OPERATOR_CONTRACTS: Mapping[Operator, ParameterContract] = {
    Operator.PAD_FRONT: ParameterContract(Operator.PAD_FRONT, "zeros", description="prepend zeros"),
    Operator.PAD_BACK: ParameterContract(Operator.PAD_BACK, "zeros", description="append zeros"),
    Operator.DELAY: ParameterContract(
        Operator.DELAY, "delay", uses_fill=True, description="y[n] = x[n-d], fill before the start"
    ),
    Operator.ADVANCE: ParameterContract(
        Operator.ADVANCE, "advance", uses_fill=True, description="y[n] = x[n+a], fill past the end"
    ),
    Operator.REVERSE: ParameterContract(Operator.REVERSE, None, description="y[n] = x[N-1-n]"),
    Operator.UPSAMPLE: ParameterContract(
        Operator.UPSAMPLE, "factor", min_main=1, description="insert factor-1 zeros after each sample"
    ),
    Operator.DOWNSAMPLE: ParameterContract(
        Operator.DOWNSAMPLE, "factor", min_main=1, description="keep every factor-th sample"
    ),
    Operator.DIFF: ParameterContract(Operator.DIFF, None, description="first difference, x[-1] = 0"),
    Operator.CUMSUM: ParameterContract(Operator.CUMSUM, None, description="running sum"),
}


def parse_operator(name: str | Operator) -> Operator:
    if isinstance(name, Operator):
        return name
    try:
        return Operator(str(name).strip().lower())
    except ValueError as exc:
        raise ArgumentError(
            f"Unknown operator '{name}'. Available: {sorted(op.value for op in Operator)}"
        ) from exc


def parse_combine_op(name: str | CombineOp) -> CombineOp:
    if isinstance(name, CombineOp):
        return name
    try:
        return CombineOp(str(name).strip().lower())
    except ValueError as exc:
        raise ArgumentError(
            f"Unknown combination '{name}'. Available: {sorted(op.value for op in CombineOp)}"
        ) from exc


def describe_operator(op: str | Operator) -> Dict[str, Any]:
    return OPERATOR_CONTRACTS[parse_operator(op)].as_dict()
