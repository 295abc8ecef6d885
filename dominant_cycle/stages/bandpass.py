"""Bank of resonant two-pole band-pass filters, one per candidate period.

Each hypothesis ``N`` owns an in-phase (real) and a quadrature (imaginary)
filter.  Both share the detrended input; the quadrature drive is its rate of
change scaled by ``N / 2π`` so that every hypothesis sees a unit-amplitude
quadrature component at its own centre period.

Slots are stored as numpy arrays indexed by ``N - min_period``; the per-period
``β`` table is computed once at construction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..history import SampleWindow, TwoTapHistory
from ..numeric_guard import TINY, all_bounded


@dataclass(frozen=True)
class BandwidthSchedule:
    """Bandwidth parameter ``δ`` decaying linearly with the step index.

    ``δ(step) = max(floor, start - rate * step)``.  A constant bandwidth is
    expressed with ``start == floor``.
    """

    start: float = 0.5
    rate: float = 0.015
    floor: float = 0.15

    def delta(self, step: int) -> float:
        return max(self.floor, self.start - self.rate * float(step))

    @classmethod
    def constant(cls, delta: float) -> "BandwidthSchedule":
        return cls(start=delta, rate=0.0, floor=delta)


def bandpass_alpha(periods: np.ndarray, delta: float) -> np.ndarray:
    """Pole parameter ``α = γ - sqrt(γ² - 1)`` with ``γ = 1/cos(720·δ/N °)``.

    Evaluated as ``1 / (γ + sqrt(γ² - 1))`` to avoid cancellation; a cosine
    at or below zero yields ``α = 0`` (widest band).  Result clamped to [0, 1].
    """

    cosine = np.cos(np.deg2rad(720.0 * float(delta) / periods))
    safe = cosine > TINY
    gamma = np.where(safe, 1.0 / np.where(safe, cosine, 1.0), np.inf)
    root = np.sqrt(np.maximum(gamma * gamma - 1.0, 0.0))
    alpha = np.where(np.isfinite(gamma), 1.0 / (gamma + root), 0.0)
    return np.clip(alpha, 0.0, 1.0)


class BandpassBank:
    """Independent band-pass filters over the integer periods ``[min_period, max_period]``."""

    def __init__(self, min_period: int, max_period: int):
        if min_period < 3 or max_period <= min_period:
            raise ValueError("BandpassBank needs 3 <= min_period < max_period")
        self.periods = np.arange(int(min_period), int(max_period) + 1, dtype=float)
        self.beta = np.cos(2.0 * np.pi / self.periods)
        self.quadrature_scale = self.periods / (2.0 * np.pi)
        self.real = TwoTapHistory(self.periods.size)
        self.imag = TwoTapHistory(self.periods.size)
        self._inputs = SampleWindow(4)
        self.restarted = False

    @property
    def size(self) -> int:
        return int(self.periods.size)

    def observe(self, signal: float) -> None:
        """Record ``signal`` in the input history without running the filters."""

        self._inputs.push(signal)

    def update(self, signal: float, delta: float) -> Tuple[np.ndarray, np.ndarray]:
        """Advance every filter by one step and return ``(real, imag)`` outputs.

        Outputs that are not finite or beyond ``MAX_MAGNITUDE`` clear every
        history; zeros are returned and ``restarted`` is set for that call.
        """

        self._inputs.push(signal)
        x0, x1, x2, x3 = (self._inputs[lag] for lag in range(4))
        alpha = bandpass_alpha(self.periods, delta)
        gain = 0.5 * (1.0 - alpha)
        feedback = self.beta * (1.0 + alpha)

        real_drive = x0 - x2
        imag_drive = self.quadrature_scale * ((x0 - x1) - (x2 - x3))
        real = gain * real_drive + feedback * self.real.prev1 - alpha * self.real.prev2
        imag = gain * imag_drive + feedback * self.imag.prev1 - alpha * self.imag.prev2

        if not (all_bounded(real) and all_bounded(imag)):
            self.reset()
            self.restarted = True
            return np.zeros(self.size), np.zeros(self.size)
        self.restarted = False
        self.real.advance(real)
        self.imag.advance(imag)
        return real, imag

    @staticmethod
    def amplitude(real: np.ndarray, imag: np.ndarray) -> np.ndarray:
        return real * real + imag * imag

    def reset(self) -> None:
        self.real.reset()
        self.imag.reset()
        self._inputs.reset()
        self.restarted = False


__all__ = ["BandwidthSchedule", "bandpass_alpha", "BandpassBank"]
