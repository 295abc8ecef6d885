"""Fixed-capacity trailing window with a median query."""
from __future__ import annotations

from typing import List

import numpy as np

from .numeric_guard import is_finite


class MedianWindow:
    """Circular buffer of the most recent values.

    Values are overwritten oldest-first.  The median is recomputed from a
    sorted copy of the current contents on every query, an even count
    averaging the two middle values.
    """

    def __init__(self, capacity: int):
        if int(capacity) < 1:
            raise ValueError("capacity must be strictly positive")
        self.capacity = int(capacity)
        self._buffer = np.zeros(self.capacity, dtype=float)
        self._cursor = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def push(self, value: float) -> bool:
        """Store ``value``; non-finite values are rejected and ``False`` returned."""

        if not is_finite(value):
            return False
        self._buffer[self._cursor] = float(value)
        self._cursor = (self._cursor + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)
        return True

    def values(self) -> List[float]:
        """Return the stored values, oldest first."""

        if self._count < self.capacity:
            return self._buffer[: self._count].tolist()
        return np.concatenate((self._buffer[self._cursor :], self._buffer[: self._cursor])).tolist()

    def median(self, default: float = float("nan")) -> float:
        if self._count == 0:
            return float(default)
        ordered = sorted(self._buffer[: self._count].tolist())
        mid = self._count // 2
        if self._count % 2:
            return float(ordered[mid])
        return 0.5 * (ordered[mid - 1] + ordered[mid])

    def reset(self) -> None:
        self._buffer.fill(0.0)
        self._cursor = 0
        self._count = 0


__all__ = ["MedianWindow"]
