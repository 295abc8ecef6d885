"""Griffiths adaptive-predictor dominant cycle.

An LMS linear predictor of order ``length`` tracks the conditioned input
(high-pass smoothed, then divided by a decaying peak so that the fixed step
``μ = 1/length`` does not depend on the price scale).  Every step the adapted
predictor coefficients are read as an AR model and its spectrum is scanned
over ``[lower_bound, upper_bound]``.  The spectral peak may move the estimate
by at most ``max_step`` per call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..base import CycleEstimator
from ..config import MAX_LENGTH_LIMIT, MAX_PERIOD_LIMIT, check_bounds, check_length, check_range, resolve_default
from ..diagnostics import DiagnosticKind
from ..history import SampleWindow
from ..numeric_guard import TINY, all_finite, clamp
from ..stages.highpass import HighPassSmoother
from ..stages.spectral import ARSpectrum


@dataclass(slots=True)
class GriffithsConfig:
    """Configuration of :class:`AdaptivePredictorEstimator`.

    ``highpass_period`` defaults to ``upper_bound`` when left to ``None``.
    """

    length: int = 40
    lower_bound: int = 18
    upper_bound: int = 40
    highpass_period: Optional[float] = None
    agc_decay: float = 0.991
    spectrum_scale: float = 0.1
    max_step: float = 2.0
    default_period: Optional[float] = None

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    @property
    def resolved_highpass_period(self) -> float:
        return float(self.upper_bound if self.highpass_period is None else self.highpass_period)

    def validate(self) -> None:
        check_length("length", self.length, minimum=2, maximum=MAX_LENGTH_LIMIT)
        check_bounds(self.lower_bound, self.upper_bound)
        check_range("highpass_period", self.resolved_highpass_period, 4.0, MAX_PERIOD_LIMIT, open_lower=True)
        check_range("agc_decay", self.agc_decay, 0.0, 1.0, open_lower=True)
        check_range("spectrum_scale", self.spectrum_scale, 0.0, 1e6, open_lower=True)
        check_range("max_step", self.max_step, 0.0, MAX_PERIOD_LIMIT, open_lower=True)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


class AdaptivePredictorEstimator(CycleEstimator):
    name = "griffiths"
    config_class = GriffithsConfig

    def _allocate(self) -> None:
        cfg = self.config
        self._smoother = HighPassSmoother(cfg.resolved_highpass_period)
        # newest sample at lag 0; lags 1..length feed the predictor
        self._xx = SampleWindow(cfg.length + 1)
        self._mu = 1.0 / cfg.length
        self.periods = np.arange(int(cfg.lower_bound), int(cfg.upper_bound) + 1, dtype=float)
        self._spectrum = ARSpectrum(self.periods, cfg.length)
        self.coefficients = np.zeros(cfg.length, dtype=float)

    def _reset_state(self) -> None:
        self._smoother.reset()
        self._xx.reset()
        self.coefficients.fill(0.0)
        self._peak = 0.0

    @property
    def min_history(self) -> int:
        return self.config.length

    def _condition(self, sample: float, step: int) -> float:
        """High-pass smoothing followed by automatic gain control."""

        filtered = self._smoother.update(sample)
        if self._smoother.restarted:
            self._report_restart(step, "high-pass output")
        self._peak = max(self.config.agc_decay * self._peak, abs(filtered))
        if self._peak <= TINY:
            return 0.0
        return filtered / self._peak

    def _adapt(self, step: int) -> None:
        # lagged[k-1] is the sample k steps back
        lagged = self._xx.newest_first()[1:]
        prediction = float(np.dot(self.coefficients, lagged))
        error = self._xx[0] - prediction
        updated = self.coefficients + self._mu * error * lagged
        if all_finite(updated):
            self.coefficients[:] = updated
        else:
            self._report(step, DiagnosticKind.DEGENERATE, "LMS update diverged, coefficients cleared")
            self.coefficients.fill(0.0)

    def _step(self, sample: float, step: int) -> float:
        self._xx.push(self._condition(sample, step))
        if not self._xx.is_full:
            return self._warmup()
        self._adapt(step)
        if not self._has_history(step):
            return self._warmup()

        previous = self._last
        if self._peak <= TINY:
            target = self._no_signal(step, "conditioned input is flat")
        else:
            power = self._spectrum.power(self.coefficients, self.config.spectrum_scale)
            target = self._ok(float(self.periods[int(np.argmax(power))]))
        step_limit = self.config.max_step
        return clamp(target, previous - step_limit, previous + step_limit)


__all__ = ["GriffithsConfig", "AdaptivePredictorEstimator"]
