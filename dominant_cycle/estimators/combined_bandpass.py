"""Combined band-pass spectral estimate of the dominant cycle.

Same filter bank as the channelized receiver with a constant bandwidth.  The
squared amplitude of each filter is smoothed by a single-pole EMA and
normalised by a slowly decaying running maximum, so a period keeps voting for
a while after the spectrum has moved.  Periods with normalised power above
``power_threshold`` vote with their normalised power; there is no median
stage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import MAX_PERIOD_LIMIT, check_bounds, check_range, resolve_default
from ..stages.bandpass import BandwidthSchedule
from ..stages.spectral import NormalizedPowerScoring
from .bandpass_cycle import BandpassCycleEstimator


@dataclass(slots=True)
class CombinedBandpassConfig:
    """Configuration of :class:`CombinedBandpassEstimator`."""

    lower_bound: int = 10
    upper_bound: int = 48
    highpass_period: float = 48.0
    bandwidth: float = 0.15
    power_smoothing: float = 0.2
    max_power_decay: float = 0.995
    power_threshold: float = 0.5
    default_period: Optional[float] = None

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    def validate(self) -> None:
        check_bounds(self.lower_bound, self.upper_bound, min_lower=3)
        check_range("highpass_period", self.highpass_period, 4.0, MAX_PERIOD_LIMIT, open_lower=True)
        check_range("bandwidth", self.bandwidth, 0.0, 1.0, open_lower=True)
        check_range("power_smoothing", self.power_smoothing, 0.0, 1.0, open_lower=True)
        check_range("max_power_decay", self.max_power_decay, 0.0, 1.0, open_lower=True)
        check_range("power_threshold", self.power_threshold, 0.0, 1.0, open_lower=True)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


class CombinedBandpassEstimator(BandpassCycleEstimator):
    name = "combined_bandpass"
    config_class = CombinedBandpassConfig

    def _allocate(self) -> None:
        super()._allocate()
        self._smoothed_power = np.zeros(self._bank.size, dtype=float)

    def _reset_state(self) -> None:
        super()._reset_state()
        self._smoothed_power.fill(0.0)
        self._running_max = 0.0

    def _make_schedule(self) -> BandwidthSchedule:
        return BandwidthSchedule.constant(self.config.bandwidth)

    def _make_scoring(self) -> NormalizedPowerScoring:
        return NormalizedPowerScoring(threshold=self.config.power_threshold)

    def _power(self, amplitude: np.ndarray) -> np.ndarray:
        a = self.config.power_smoothing
        self._smoothed_power[:] = a * amplitude + (1.0 - a) * self._smoothed_power
        return self._smoothed_power

    def _max_power(self, power: np.ndarray) -> float:
        self._running_max = max(self.config.max_power_decay * self._running_max, float(np.max(power)))
        return self._running_max


__all__ = ["CombinedBandpassConfig", "CombinedBandpassEstimator"]
