"""Small fixed-size histories reused across calls.

Both containers are allocated once at configuration time and only mutated
in place afterwards.
"""
from __future__ import annotations

import numpy as np


class TwoTapHistory:
    """Depth-2 history for a vector of filter outputs.

    ``prev1`` holds the previous step, ``prev2`` the one before.  Callers read
    both slots first and then call :meth:`advance` exactly once per step.
    """

    def __init__(self, size: int):
        self.prev1 = np.zeros(int(size), dtype=float)
        self.prev2 = np.zeros(int(size), dtype=float)

    def advance(self, current: np.ndarray) -> None:
        self.prev2[:] = self.prev1
        self.prev1[:] = current

    def reset(self) -> None:
        self.prev1.fill(0.0)
        self.prev2.fill(0.0)


class SampleWindow:
    """Sliding window over the last ``capacity`` scalar samples.

    ``window[0]`` is the newest sample, ``window[k]`` the sample ``k`` steps
    back.  Slots that were never written read as ``fill``.
    """

    def __init__(self, capacity: int, fill: float = 0.0):
        if int(capacity) < 1:
            raise ValueError("capacity must be strictly positive")
        self.capacity = int(capacity)
        self.fill = float(fill)
        self._data = np.full(self.capacity, self.fill, dtype=float)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, lag: int) -> float:
        if lag < 0 or lag >= self.capacity:
            raise IndexError(f"lag {lag} outside window of {self.capacity}")
        return float(self._data[self.capacity - 1 - lag])

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def push(self, value: float) -> None:
        self._data[:-1] = self._data[1:]
        self._data[-1] = float(value)
        self._count = min(self._count + 1, self.capacity)

    def oldest_first(self) -> np.ndarray:
        """Copy of the filled part of the window, oldest sample first."""

        return self._data[self.capacity - self._count :].copy()

    def newest_first(self) -> np.ndarray:
        """Copy of the filled part of the window, newest sample first."""

        return self._data[self.capacity - self._count :][::-1].copy()

    def reset(self) -> None:
        self._data.fill(self.fill)
        self._count = 0


__all__ = ["TwoTapHistory", "SampleWindow"]
