"""Immutable operator parameter set."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import ArgumentError
from ..operators import OPERATOR_CONTRACTS, Operator, parse_operator


class OperatorParams(BaseModel):
    """Operator tag plus its ``main`` count/factor and ``fill`` value."""

    model_config = ConfigDict(frozen=True)

    op: Operator
    main: int = Field(0, ge=0, description="pad count, delay/advance amount or resample factor")
    fill: float = Field(0.0, description="value used by delay/advance at out-of-range positions")

    @model_validator(mode="after")
    def _check_main_domain(self) -> "OperatorParams":
        contract = OPERATOR_CONTRACTS[self.op]
        if contract.uses_main and self.main < contract.min_main:
            raise ValueError(f"{self.op.value} {contract.main_name} must be >= {contract.min_main}")
        return self


def make_params(op: str | Operator, main: int = 0, fill: float = 0.0) -> OperatorParams:
    """Build parameters, raising ArgumentError for anything outside the contract."""

    operator = parse_operator(op)
    try:
        as_int = int(main)
        fill_value = float(fill)
    except (TypeError, ValueError) as exc:
        raise ArgumentError(f"invalid parameters for {operator.value}: main={main!r} fill={fill!r}") from exc
    if isinstance(main, bool) or as_int != main:
        raise ArgumentError(f"main parameter must be an integer (got {main!r})")
    try:
        return OperatorParams(op=operator, main=as_int, fill=fill_value)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise ArgumentError(f"invalid parameters for {operator.value}: {messages}") from exc
