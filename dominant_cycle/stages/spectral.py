"""Centre-of-gravity period extraction from a per-period power profile.

A scoring strategy turns the raw profile into weights plus a mask of the
periods clearing its significance threshold; :func:`center_of_gravity` then
averages the periods with those weights.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..numeric_guard import ENERGY_FLOOR, TINY, safe_log10


def center_of_gravity(periods: np.ndarray, weights: np.ndarray, mask: np.ndarray) -> Optional[float]:
    """Return ``Σ N·w / Σ w`` over the masked periods, ``None`` if degenerate."""

    if not np.any(mask):
        return None
    w = weights[mask]
    denominator = float(np.sum(w))
    if not np.isfinite(denominator) or abs(denominator) <= TINY:
        return None
    numerator = float(np.sum(periods[mask] * w))
    period = numerator / denominator
    return period if np.isfinite(period) else None


@dataclass(frozen=True)
class DecibelScoring:
    """Decibel score relative to the strongest hypothesis of the step.

    ``dB = -10·log10(0.01 / (1 - 0.99·A/Amax))`` capped at ``ceiling``; a
    hypothesis contributes ``ceiling - dB`` when ``dB <= threshold``.
    """

    threshold: float = 3.0
    ceiling: float = 20.0

    def decibels(self, power: np.ndarray, max_power: float) -> np.ndarray:
        db = np.full(power.shape, self.ceiling, dtype=float)
        if not np.isfinite(max_power) or max_power <= ENERGY_FLOOR:
            return db
        ratio = power / max_power
        valid = np.isfinite(ratio) & (ratio > 0.0)
        ratio = np.clip(np.where(valid, ratio, 0.0), 0.0, 1.0)
        # 1 - 0.99*ratio >= 0.01 for ratio in [0, 1]
        db_valid = -10.0 * safe_log10(0.01 / (1.0 - 0.99 * ratio))
        db = np.where(valid, np.minimum(db_valid, self.ceiling), self.ceiling)
        return db

    def weights(self, power: np.ndarray, max_power: float) -> Tuple[np.ndarray, np.ndarray]:
        db = self.decibels(power, max_power)
        return self.ceiling - db, db <= self.threshold


@dataclass(frozen=True)
class NormalizedPowerScoring:
    """Power normalised by a running maximum; weight is the normalised power."""

    threshold: float = 0.5

    def normalize(self, power: np.ndarray, max_power: float) -> np.ndarray:
        if not np.isfinite(max_power) or max_power <= ENERGY_FLOOR:
            return np.zeros(power.shape, dtype=float)
        normalized = power / max_power
        return np.where(np.isfinite(normalized), normalized, 0.0)

    def weights(self, power: np.ndarray, max_power: float) -> Tuple[np.ndarray, np.ndarray]:
        normalized = self.normalize(power, max_power)
        return normalized, normalized >= self.threshold


class ARSpectrum:
    """Power response of an autoregressive model at fixed integer periods.

    ``power(P) = gain / |1 - Σ c_m·e^{-i2πm/P}|²`` for ``m = 1..order``.  The
    cosine and sine tables are built once for the given periods and order.
    """

    def __init__(self, periods: np.ndarray, order: int):
        self.periods = np.asarray(periods, dtype=float)
        self.order = int(order)
        lags = np.arange(1, self.order + 1, dtype=float)
        phase = 2.0 * np.pi * np.outer(1.0 / self.periods, lags)
        self._cos = np.cos(phase)
        self._sin = np.sin(phase)

    def denominator(self, coefficients: np.ndarray) -> np.ndarray:
        if coefficients.shape != (self.order,):
            raise IndexError(
                f"expected {self.order} coefficients, got shape {coefficients.shape}"
            )
        real = self._cos @ coefficients
        imag = self._sin @ coefficients
        return (1.0 - real) * (1.0 - real) + imag * imag

    def power(self, coefficients: np.ndarray, gain: float) -> np.ndarray:
        return float(gain) / np.maximum(self.denominator(coefficients), TINY)


__all__ = ["center_of_gravity", "DecibelScoring", "NormalizedPowerScoring", "ARSpectrum"]
