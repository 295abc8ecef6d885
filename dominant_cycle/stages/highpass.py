"""One-pole high-pass filter followed by a 6-tap symmetric FIR smoother."""
from __future__ import annotations

import math

import numpy as np

from ..history import SampleWindow
from ..numeric_guard import is_bounded

# [1, 2, 3, 3, 2, 1] / 12, newest tap first
SMOOTHING_TAPS = np.array([1.0, 2.0, 3.0, 3.0, 2.0, 1.0]) / 12.0


def highpass_alpha(cutoff_period: float) -> float:
    """Return ``(1 - sin θ) / cos θ`` for ``θ = 2π / cutoff_period``."""

    if cutoff_period <= 4.0:
        raise ValueError("cutoff_period must be larger than 4 samples")
    theta = 2.0 * math.pi / float(cutoff_period)
    return (1.0 - math.sin(theta)) / math.cos(theta)


class HighPassSmoother:
    """Detrend a price stream and smooth the resulting oscillation.

    ``update`` returns the raw high-pass value until five earlier high-pass
    samples exist, the FIR-smoothed value afterwards.  The coefficient is
    derived once from ``cutoff_period`` and never changes.

    A high-pass value that is not finite or beyond ``MAX_MAGNITUDE`` clears
    the history and yields 0.0; ``restarted`` is true for that call only.
    """

    def __init__(self, cutoff_period: float = 40.0):
        self.cutoff_period = float(cutoff_period)
        self.alpha = highpass_alpha(self.cutoff_period)
        self._hp = SampleWindow(len(SMOOTHING_TAPS))
        self._price_prev: float | None = None
        self.restarted = False

    def update(self, price: float) -> float:
        price_prev = price if self._price_prev is None else self._price_prev
        hp_prev = self._hp[0] if len(self._hp) else 0.0
        hp = 0.5 * (self.alpha + 1.0) * (price - price_prev) + self.alpha * hp_prev
        self._price_prev = price
        self.restarted = not is_bounded(hp)
        if self.restarted:
            self._hp.reset()
            return 0.0
        self._hp.push(hp)
        if self._hp.is_full:
            return float(np.dot(SMOOTHING_TAPS, self._hp.newest_first()))
        return hp

    def reset(self) -> None:
        self._hp.reset()
        self._price_prev = None
        self.restarted = False


__all__ = ["SMOOTHING_TAPS", "highpass_alpha", "HighPassSmoother"]
