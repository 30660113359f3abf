"""Job definition loaded from YAML/JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..operators import Operator
from .params import OperatorParams, make_params


class JobConfig(BaseModel):
    """A single transform run: operator, parameters, mode and its samples."""

    model_config = ConfigDict(extra="allow")

    operator: Operator
    main: int = Field(0, ge=0)
    fill: float = 0.0
    mode: Literal["finite", "stream"] = "finite"
    samples: Optional[List[float]] = None
    input: Optional[Path] = None
    value_column: Optional[str] = None

    @model_validator(mode="after")
    def _needs_source(self) -> "JobConfig":
        if self.samples is None and self.input is None:
            raise ValueError("job requires either 'samples' or 'input'")
        return self

    def params(self) -> OperatorParams:
        return make_params(self.operator, self.main, self.fill)
