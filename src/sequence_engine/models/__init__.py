"""Pydantic models for operator parameters and job definitions."""

from .job import JobConfig
from .params import OperatorParams, make_params

__all__ = ["OperatorParams", "JobConfig", "make_params"]
