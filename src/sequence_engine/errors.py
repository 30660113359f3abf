"""Error hierarchy shared by the batch, streaming and correlation layers."""

from __future__ import annotations


class SequenceEngineError(Exception):
    """Base class for every error raised by the engine."""

    kind: str = "error"

    def as_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "detail": str(self)}


class ArgumentError(SequenceEngineError, ValueError):
    """Invalid input: missing sequence, bad factor, mismatched lengths."""

    kind = "argument"


class SequenceIndexError(ArgumentError, IndexError):
    """Logical or window index outside the populated range."""

    kind = "index"


class AllocationError(SequenceEngineError, MemoryError):
    """Storage for a buffer could not be obtained."""

    kind = "allocation"


class StateError(SequenceEngineError):
    """A streaming step broke the operator's input/flush discipline."""

    kind = "state"


class UnsupportedOperationError(SequenceEngineError):
    """The operator has no bounded-memory causal realization."""

    kind = "unsupported"


class NumericalError(SequenceEngineError, ArithmeticError):
    """A statistic is undefined for the given data (e.g. zero variance)."""

    kind = "numerical"
