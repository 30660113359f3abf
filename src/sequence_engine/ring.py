"""Fixed-capacity circular buffers."""

from __future__ import annotations

from typing import Iterable, List

import numpy as np

from .buffers import allocate_samples
from .errors import ArgumentError, SequenceIndexError


class RingBuffer:
    """Circular buffer of float64 samples with FIFO eviction.

    Logical position ``i`` in ``[0, count)`` lives at ``(start + i) % capacity``.
    Once full, each push overwrites the oldest sample and returns it.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ArgumentError("capacity must be greater than zero")
        self.capacity = int(capacity)
        self.start = 0
        self.count = 0
        self.buf = allocate_samples(self.capacity)

    @classmethod
    def filled(cls, capacity: int, value: float) -> "RingBuffer":
        ring = cls(capacity)
        ring.buf.fill(float(value))
        ring.count = ring.capacity
        return ring

    @property
    def full(self) -> bool:
        return self.count == self.capacity

    def push(self, x: float) -> float | None:
        """Store ``x``; return the evicted sample when the buffer was full."""
        if self.capacity == 0:
            raise ArgumentError("ring buffer has been released")
        if self.count < self.capacity:
            self.buf[(self.start + self.count) % self.capacity] = x
            self.count += 1
            return None
        evicted = float(self.buf[self.start])
        self.buf[self.start] = x
        self.start = (self.start + 1) % self.capacity
        return evicted

    def get(self, i: int) -> float:
        if i < 0 or i >= self.count:
            raise SequenceIndexError(f"index out of range (i={i}, count={self.count})")
        return float(self.buf[(self.start + i) % self.capacity])

    def to_array(self) -> np.ndarray:
        """Samples oldest first."""
        if self.count == 0:
            return np.zeros(0, dtype=np.float64)
        idx = (self.start + np.arange(self.count)) % self.capacity
        return self.buf[idx]

    def release(self) -> None:
        self.buf = np.zeros(0, dtype=np.float64)
        self.capacity = 0
        self.start = 0
        self.count = 0

    def __len__(self) -> int:
        return self.count


class SlidingWindow(RingBuffer):
    """Window over the most recent ``capacity`` samples of a stream."""

    def push(self, x: float) -> None:  # type: ignore[override]
        super().push(float(x))

    def extend(self, samples: Iterable[float]) -> None:
        for x in samples:
            self.push(x)

    def latest(self, n: int) -> np.ndarray:
        """The most recent ``n`` samples, oldest first."""
        if n < 0 or n > self.count:
            raise SequenceIndexError(f"cannot take {n} samples from a window holding {self.count}")
        return self.to_array()[self.count - n :]

    def tolist(self) -> List[float]:
        return self.to_array().tolist()
