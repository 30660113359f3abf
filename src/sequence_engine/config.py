"""Loading and validation of transform job files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from .errors import SequenceEngineError
from .models.job import JobConfig
from .operators import OPERATOR_CONTRACTS, parse_operator

JOB_DEFAULTS: Dict[str, Any] = {"main": 0, "fill": 0.0, "mode": "finite"}


@dataclass
class ValidationResult:
    operator: str | None
    errors: list[str]
    warnings: list[str]
    normalized: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_dict(self) -> Dict[str, Any]:
        return {
            "operator": self.operator,
            "errors": self.errors,
            "warnings": self.warnings,
            "normalized": self.normalized,
        }


def _apply_defaults(config: Mapping[str, Any]) -> Dict[str, Any]:
    normalized = dict(config)
    for key, value in JOB_DEFAULTS.items():
        normalized.setdefault(key, value)
    return normalized


def _format_pydantic(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()))
        messages.append(f"{where}: {err['msg']}" if where else err["msg"])
    return messages


def validate_job(config: Mapping[str, Any]) -> ValidationResult:
    """Validate a job mapping without mutating it.

    Errors cover anything that would stop the job from running: an unknown
    operator, a bad parameter, or a missing sample source. Parameters the
    operator ignores and unrecognised keys are reported as warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []
    normalized = _apply_defaults(config)

    operator_name = normalized.get("operator")
    contract = None
    if operator_name is None:
        errors.append("Missing required field 'operator'")
    else:
        try:
            op = parse_operator(str(operator_name))
        except SequenceEngineError as exc:
            errors.append(str(exc))
        else:
            normalized["operator"] = op.value
            contract = OPERATOR_CONTRACTS[op]

    if contract is not None:
        if not contract.uses_main and "main" in config and config["main"] not in (0, None):
            warnings.append(f"Field 'main' is ignored by operator '{contract.operator.value}'")
        if not contract.uses_fill and "fill" in config and config["fill"] not in (0, 0.0, None):
            warnings.append(f"Field 'fill' is ignored by operator '{contract.operator.value}'")

    known = set(JobConfig.model_fields)
    for key in sorted(set(normalized) - known):
        warnings.append(f"Unknown field '{key}' is ignored")

    if not errors:
        try:
            job = JobConfig.model_validate(normalized)
            job.params()
        except ValidationError as exc:
            errors.extend(_format_pydantic(exc))
        except SequenceEngineError as exc:
            errors.append(str(exc))

    return ValidationResult(
        operator=normalized.get("operator") if contract is not None else None,
        errors=errors,
        warnings=warnings,
        normalized=normalized,
    )


def load_job_config(path: str | Path) -> Dict[str, Any]:
    """Load a job definition from YAML or JSON."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        loaded = json.loads(text)
    else:
        loaded = yaml.safe_load(text)
    if not isinstance(loaded, dict):
        raise ValueError(f"Job file must contain a mapping: {path}")

    source = loaded.get("input")
    if source and not Path(source).is_absolute():
        loaded["input"] = str(path.parent / source)
    return loaded


def validate_job_file(path: str | Path) -> ValidationResult:
    """Load and validate a job file."""
    return validate_job(load_job_config(path))
