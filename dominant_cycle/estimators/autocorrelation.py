"""Autocorrelation periodogram dominant cycle.

For every lag the estimator computes a Pearson correlation between the most
recent window and the window shifted by that lag.  The correlation sequence
is projected on cosine and sine bases for every candidate period; the squared
magnitude of the projection is smoothed per period, normalised by a decaying
running maximum and turned into a period by centre of gravity.

The cosine/sine tables are computed once at configuration time.  State kept
from one call to the next is the smoothed power per period and the running
maximum (plus the sample history and detrending filter).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..base import CycleEstimator
from ..config import MAX_LENGTH_LIMIT, MAX_PERIOD_LIMIT, check_bounds, check_length, check_range, resolve_default
from ..diagnostics import DiagnosticKind
from ..history import SampleWindow
from ..numeric_guard import ENERGY_FLOOR, TINY, is_bounded
from ..stages.highpass import HighPassSmoother
from ..stages.spectral import NormalizedPowerScoring, center_of_gravity

# Lags below this carry mostly noise and are left out of the projection.
FIRST_PROJECTED_LAG = 3


@dataclass(slots=True)
class AutocorrelationConfig:
    """Configuration of :class:`AutocorrelationPeriodogramEstimator`.

    Parameters
    ----------
    lower_bound:
        Shortest candidate period.
    upper_bound:
        Longest lag of the correlation sequence, which is also the longest
        candidate period.
    avg_length:
        Correlation window length; ``0`` uses the lag itself as window.
    detrend, highpass_period:
        Run the input through the high-pass smoother before correlating.
    power_smoothing:
        Weight of the new squared power in the per-period IIR.
    max_power_decay, power_threshold:
        Running-maximum decay and the normalised power needed to vote.
    """

    lower_bound: int = 10
    upper_bound: int = 48
    avg_length: int = 0
    detrend: bool = True
    highpass_period: float = 48.0
    power_smoothing: float = 0.2
    max_power_decay: float = 0.991
    power_threshold: float = 0.5
    default_period: Optional[float] = None

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    @property
    def max_lag(self) -> int:
        return int(self.upper_bound)

    def validate(self) -> None:
        check_bounds(self.lower_bound, self.upper_bound, min_lower=FIRST_PROJECTED_LAG)
        if self.avg_length != 0:
            check_length("avg_length", self.avg_length, minimum=2, maximum=MAX_LENGTH_LIMIT)
        check_range("highpass_period", self.highpass_period, 4.0, MAX_PERIOD_LIMIT, open_lower=True)
        check_range("power_smoothing", self.power_smoothing, 0.0, 1.0, open_lower=True)
        check_range("max_power_decay", self.max_power_decay, 0.0, 1.0, open_lower=True)
        check_range("power_threshold", self.power_threshold, 0.0, 1.0, open_lower=True)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


def pearson(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson correlation of two equally long windows, 0 when degenerate."""

    m = x.size
    if m < 2 or y.size != m:
        return 0.0
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        return 0.0
    sx = float(np.sum(x))
    sy = float(np.sum(y))
    sxx = float(np.dot(x, x))
    syy = float(np.dot(y, y))
    sxy = float(np.dot(x, y))
    denominator = (m * sxx - sx * sx) * (m * syy - sy * sy)
    if not np.isfinite(denominator) or denominator <= TINY:
        return 0.0
    corr = (m * sxy - sx * sy) / np.sqrt(denominator)
    return float(np.clip(corr, -1.0, 1.0)) if np.isfinite(corr) else 0.0


class AutocorrelationPeriodogramEstimator(CycleEstimator):
    name = "autocorrelation_periodogram"
    config_class = AutocorrelationConfig

    def _allocate(self) -> None:
        cfg = self.config
        max_lag = cfg.max_lag
        window = cfg.avg_length if cfg.avg_length else max_lag
        self._history = SampleWindow(max_lag + window)
        self._smoother = HighPassSmoother(cfg.highpass_period) if cfg.detrend else None
        self._scoring = NormalizedPowerScoring(threshold=cfg.power_threshold)

        self.periods = np.arange(int(cfg.lower_bound), max_lag + 1, dtype=float)
        lags = np.arange(FIRST_PROJECTED_LAG, max_lag + 1, dtype=float)
        phase = 2.0 * np.pi * np.outer(1.0 / self.periods, lags)
        self._cos_table = np.cos(phase)
        self._sin_table = np.sin(phase)
        self._corr = np.zeros(max_lag + 1, dtype=float)
        self._smoothed_power = np.zeros(self.periods.size, dtype=float)

    def _reset_state(self) -> None:
        self._history.reset()
        if self._smoother is not None:
            self._smoother.reset()
        self._corr.fill(0.0)
        self._smoothed_power.fill(0.0)
        self._running_max = 0.0

    @property
    def min_history(self) -> int:
        return self.config.max_lag

    def correlations(self) -> np.ndarray:
        """Correlation sequence computed on the last update (lags 0..max_lag)."""

        return self._corr.copy()

    def _autocorrelate(self) -> None:
        recent = self._history.newest_first()
        available = recent.size
        avg_length = self.config.avg_length
        for lag in range(self._corr.size):
            m = min(avg_length if avg_length else lag, available - lag)
            if m < 2:
                self._corr[lag] = 0.0
                continue
            self._corr[lag] = pearson(recent[:m], recent[lag : lag + m])

    def _condition(self, sample: float, step: int) -> float:
        if self._smoother is not None:
            value = self._smoother.update(sample)
            if self._smoother.restarted:
                self._report_restart(step, "high-pass output")
            return value
        if not is_bounded(sample):
            held = self._history[0] if len(self._history) else 0.0
            self._report(step, DiagnosticKind.DEGENERATE, f"sample {sample!r} out of range, {held} held")
            return held
        return sample

    def _step(self, sample: float, step: int) -> float:
        self._history.push(self._condition(sample, step))
        if not self._has_history(step):
            return self._warmup()

        self._autocorrelate()
        projected = self._corr[FIRST_PROJECTED_LAG:]
        cosine_part = self._cos_table @ projected
        sine_part = self._sin_table @ projected
        raw_power = cosine_part * cosine_part + sine_part * sine_part

        a = self.config.power_smoothing
        self._smoothed_power[:] = a * raw_power * raw_power + (1.0 - a) * self._smoothed_power
        self._running_max = max(
            self.config.max_power_decay * self._running_max,
            float(np.max(self._smoothed_power)),
        )
        if not np.isfinite(self._running_max) or self._running_max <= ENERGY_FLOOR:
            return self._no_signal(step, "correlation sequence is flat")

        weights, mask = self._scoring.weights(self._smoothed_power, self._running_max)
        cog = center_of_gravity(self.periods, weights, mask)
        if cog is None:
            return self._no_signal(step, "no period cleared the power threshold")
        return self._ok(cog)


__all__ = ["AutocorrelationConfig", "AutocorrelationPeriodogramEstimator", "pearson"]
