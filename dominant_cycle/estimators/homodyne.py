"""Homodyne quadrature dominant cycle (CASF).

The price is smoothed with a 4-tap FIR and run through a damped second-order
"cycle" filter.  The in-phase component is the cycle delayed by three steps,
the quadrature a Hilbert-like four-tap difference of the cycle history whose
gain tracks the previous instantaneous period.  The phase advance between two
consecutive (I, Q) vectors, medianed over five steps, gives the instantaneous
period, which is then smoothed twice.

The estimate is naturally bounded by the phase-rate clamp:
``[2π/1.1 + 0.5, 2π/0.1 + 0.5]``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..base import CycleEstimator
from ..config import check_length, check_range, resolve_default
from ..diagnostics import DiagnosticKind, EstimateStatus
from ..history import SampleWindow
from ..median_window import MedianWindow
from ..numeric_guard import TINY, is_bounded, is_near_zero, safe_div

TWO_PI = 2.0 * math.pi
# Hilbert taps applied to cycle lags 0, 2, 4, 6
QUADRATURE_TAPS = (0.0962, 0.5769, -0.5769, -0.0962)
# Until this step the cycle is the plain second difference of price.
CYCLE_START_STEP = 6


@dataclass(slots=True)
class HomodyneConfig:
    """Configuration of :class:`HomodyneQuadratureEstimator`."""

    alpha: float = 0.07
    min_delta_phase: float = 0.1
    max_delta_phase: float = 1.1
    median_length: int = 5
    instant_blend: float = 0.33
    period_blend: float = 0.15
    default_period: Optional[float] = 15.0

    @property
    def lower_bound(self) -> float:
        return TWO_PI / self.max_delta_phase + 0.5

    @property
    def upper_bound(self) -> float:
        return TWO_PI / self.min_delta_phase + 0.5

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    @property
    def default_delta_phase(self) -> float:
        return TWO_PI / (self.resolved_default - 0.5)

    def validate(self) -> None:
        check_range("alpha", self.alpha, 0.0, 1.0, open_lower=True, open_upper=True)
        check_range("min_delta_phase", self.min_delta_phase, 0.0, math.pi, open_lower=True)
        check_range("max_delta_phase", self.max_delta_phase, self.min_delta_phase, math.pi, open_lower=True)
        check_length("median_length", self.median_length, minimum=1, maximum=100)
        check_range("instant_blend", self.instant_blend, 0.0, 1.0, open_lower=True)
        check_range("period_blend", self.period_blend, 0.0, 1.0, open_lower=True)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


class HomodyneQuadratureEstimator(CycleEstimator):
    name = "homodyne"
    config_class = HomodyneConfig

    def _allocate(self) -> None:
        self._prices = SampleWindow(4)
        self._smooth = SampleWindow(3)
        self._cycle = SampleWindow(7)
        self._delta_median = MedianWindow(self.config.median_length)

    def _reset_state(self) -> None:
        self._clear_filters()
        self._delta_median.reset()
        self.instant_period = self.default_period
        self.period = self.default_period

    def _clear_filters(self) -> None:
        self._prices.reset()
        self._smooth.reset()
        self._cycle.reset()
        self._i1_prev = 0.0
        self._q1_prev = 0.0

    @property
    def min_history(self) -> int:
        return CYCLE_START_STEP

    @staticmethod
    def _seed(window: SampleWindow, value: float) -> None:
        # fill the lags with value so the first differences are zero
        for _ in range(window.capacity - len(window)):
            window.push(value)

    def _push_price(self, price: float) -> None:
        if not len(self._prices):
            self._seed(self._prices, price)
        else:
            self._prices.push(price)

    def _cycle_value(self, step: int) -> float:
        p = self._prices
        smooth = (p[0] + 2.0 * p[1] + 2.0 * p[2] + p[3]) / 6.0
        if not len(self._smooth):
            self._seed(self._smooth, smooth)
        else:
            self._smooth.push(smooth)
        if step < CYCLE_START_STEP:
            return (p[0] - 2.0 * p[1] + p[2]) / 4.0
        a = self.config.alpha
        s = self._smooth
        c = self._cycle
        return ((1.0 - 0.5 * a) ** 2 * (s[0] - 2.0 * s[1] + s[2])
                + 2.0 * (1.0 - a) * c[0]
                - (1.0 - a) ** 2 * c[1])

    def _delta_phase(self, i1: float, q1: float, step: int) -> Optional[float]:
        """Clamped phase advance, or ``None`` (reported) when it is undefined."""

        cfg = self.config
        if is_near_zero(q1) or is_near_zero(self._q1_prev):
            self._report(step, DiagnosticKind.DEGENERATE, "quadrature near zero, default phase rate")
            return None
        denominator = 1.0 + (i1 * self._i1_prev) / (q1 * self._q1_prev)
        if is_near_zero(denominator, TINY):
            self._report(step, DiagnosticKind.DEGENERATE, "phase rate undefined, default phase rate")
            return None
        delta = (i1 / q1 - self._i1_prev / self._q1_prev) / denominator
        if not math.isfinite(delta):
            self._report(step, DiagnosticKind.DEGENERATE, "phase rate not finite, default phase rate")
            return None
        return min(max(delta, cfg.min_delta_phase), cfg.max_delta_phase)

    def _step(self, sample: float, step: int) -> float:
        self._push_price(sample)
        cycle = self._cycle_value(step)
        if not is_bounded(cycle):
            self._report_restart(step, "cycle filter output")
            self._clear_filters()
            cycle = 0.0
        self._cycle.push(cycle)
        if not self._has_history(step):
            return self._warmup()

        cfg = self.config
        c = self._cycle
        taps = QUADRATURE_TAPS
        q1 = (taps[0] * c[0] + taps[1] * c[2] + taps[2] * c[4] + taps[3] * c[6]) * (0.5 + 0.08 * self.instant_period)
        i1 = c[3]
        delta_phase = self._delta_phase(i1, q1, step)
        fallback = delta_phase is None
        if fallback:
            delta_phase = cfg.default_delta_phase
        self._i1_prev = i1
        self._q1_prev = q1

        self._delta_median.push(delta_phase)
        median_delta = self._delta_median.median(default=cfg.default_delta_phase)
        dominant = safe_div(TWO_PI, median_delta, fallback=cfg.resolved_default - 0.5) + 0.5

        self.instant_period = cfg.instant_blend * dominant + (1.0 - cfg.instant_blend) * self.instant_period
        self.period = cfg.period_blend * self.instant_period + (1.0 - cfg.period_blend) * self.period
        if fallback:
            self._status = EstimateStatus.FALLBACK
            return self.period
        return self._ok(self.period)


__all__ = ["HomodyneConfig", "HomodyneQuadratureEstimator"]
