"""Owned float64 sample buffers with an optional logical start index."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Sequence, Union

import numpy as np

from .errors import AllocationError, ArgumentError, SequenceIndexError

INITIAL_CAPACITY = 8


def allocate_samples(capacity: int) -> np.ndarray:
    try:
        return np.zeros(capacity, dtype=np.float64)
    except (MemoryError, ValueError) as exc:
        raise AllocationError(f"cannot allocate {capacity} samples") from exc


class SequenceBuffer:
    """Fixed-length or growable sequence of float64 samples.

    Logical index ``i`` addresses physical offset ``i - start``; ``start`` may be
    negative so that sequences such as ``x[-2], x[-1], x[0]`` keep their
    indices. Operators ignore ``start`` and produce buffers starting at 0.
    """

    def __init__(self, length: int = 0, *, start: int = 0, expandable: bool = False) -> None:
        if length < 0:
            raise ArgumentError("length must be non-negative")
        capacity = int(length)
        if expandable and capacity < INITIAL_CAPACITY:
            capacity = INITIAL_CAPACITY
        self.start = int(start)
        self.length = int(length)
        self.capacity = capacity
        self.expandable = bool(expandable)
        self.data = allocate_samples(capacity)

    @classmethod
    def fixed(cls, length: int, *, start: int = 0) -> "SequenceBuffer":
        return cls(length, start=start, expandable=False)

    @classmethod
    def growable(cls, *, start: int = 0) -> "SequenceBuffer":
        return cls(0, start=start, expandable=True)

    @classmethod
    def from_values(
        cls,
        values: Iterable[float] | np.ndarray,
        *,
        start: int = 0,
        expandable: bool = False,
    ) -> "SequenceBuffer":
        arr = np.asarray(list(values) if not isinstance(values, np.ndarray) else values, dtype=np.float64)
        if arr.ndim != 1:
            raise ArgumentError(f"expected a one-dimensional sequence (got shape {arr.shape})")
        buf = cls(arr.size, start=start, expandable=expandable)
        buf.data[: arr.size] = arr
        return buf

    @property
    def values(self) -> np.ndarray:
        """View of the populated samples."""
        return self.data[: self.length]

    @property
    def end(self) -> int:
        """Logical index one past the last sample."""
        return self.start + self.length

    def _offset(self, index: int) -> int:
        offset = int(index) - self.start
        if offset < 0 or offset >= self.length:
            raise SequenceIndexError(
                f"logical index {index} is out of range [{self.start}, {self.end - 1}]"
            )
        return offset

    def get(self, index: int) -> float:
        return float(self.data[self._offset(index)])

    def set(self, index: int, value: float) -> None:
        self.data[self._offset(index)] = float(value)

    def append(self, value: float) -> None:
        if self.length >= self.capacity:
            if not self.expandable:
                raise ArgumentError("sequence is fixed-length; cannot append")
            new_capacity = self.capacity * 2 if self.capacity > 0 else INITIAL_CAPACITY
            grown = allocate_samples(new_capacity)
            grown[: self.length] = self.data[: self.length]
            self.data = grown
            self.capacity = new_capacity
        self.data[self.length] = float(value)
        self.length += 1

    def extend(self, values: Iterable[float]) -> None:
        for value in values:
            self.append(value)

    def copy(self) -> "SequenceBuffer":
        clone = SequenceBuffer(self.length, start=self.start, expandable=self.expandable)
        clone.data[: self.length] = self.values
        return clone

    def release(self) -> None:
        """Drop storage and zero every field; the buffer must be re-initialized."""
        self.data = np.zeros(0, dtype=np.float64)
        self.start = 0
        self.length = 0
        self.capacity = 0
        self.expandable = False

    def resize(self, length: int) -> None:
        """Re-initialize for ``length`` samples; storage is kept when the length already matches."""
        if length < 0:
            raise ArgumentError("length must be non-negative")
        if self.length == length and self.capacity >= length:
            return
        self.data = allocate_samples(length)
        self.length = int(length)
        self.capacity = int(length)
        self.expandable = False

    def tolist(self) -> list[float]:
        return self.values.tolist()

    def summary(self) -> Mapping[str, Any]:
        return {
            "start": self.start,
            "length": self.length,
            "expandable": self.expandable,
            "indices": list(range(self.start, self.end)),
            "values": self.tolist(),
        }

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[float]:
        return iter(self.tolist())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceBuffer):
            return self.start == other.start and np.array_equal(self.values, other.values)
        return NotImplemented

    def __repr__(self) -> str:
        return f"SequenceBuffer(start={self.start}, values={self.tolist()!r})"


SequenceLike = Union[SequenceBuffer, Sequence[float], np.ndarray]


def as_buffer(value: SequenceLike | None, name: str = "sequence") -> SequenceBuffer:
    """Coerce lists and arrays to a SequenceBuffer; ``None`` is an argument error."""

    if value is None:
        raise ArgumentError(f"{name} must not be None")
    if isinstance(value, SequenceBuffer):
        return value
    try:
        return SequenceBuffer.from_values(value)
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ArgumentError):
            raise
        raise ArgumentError(f"{name} must be a sequence of numbers") from exc


def prepare_output(out: SequenceBuffer | None, length: int) -> SequenceBuffer:
    """Return a zero-start output buffer of ``length`` samples.

    An existing buffer whose length already matches keeps its storage.
    """

    if out is None:
        return SequenceBuffer.fixed(length)
    out.resize(length)
    out.start = 0
    return out
