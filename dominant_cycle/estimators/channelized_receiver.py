"""Channelized-receiver dominant cycle (TASC variant).

A bank of band-pass filters tuned to every integer period in ``[8, 50]``
listens to the detrended, smoothed price.  The bandwidth starts wide and
narrows with the step index.  Each filter's amplitude is expressed in decibels
below the strongest filter of the step; filters within ``db_threshold`` of the
peak vote for their period with weight ``20 - dB``.  The raw centre of gravity
goes through a trailing median of ``median_length`` values before the final
clamp.

Usage:
    from dominant_cycle.estimators import ChannelizedReceiverEstimator

    tasc = ChannelizedReceiverEstimator()
    for step, price in enumerate(prices):
        period = tasc.update(price, step)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import MAX_PERIOD_LIMIT, check_bounds, check_length, check_range, resolve_default
from ..median_window import MedianWindow
from ..stages.bandpass import BandwidthSchedule
from ..stages.spectral import DecibelScoring
from .bandpass_cycle import BandpassCycleEstimator


@dataclass(slots=True)
class ChannelizedReceiverConfig:
    """Configuration of :class:`ChannelizedReceiverEstimator`.

    Parameters
    ----------
    lower_bound, upper_bound:
        Period range of the bank and of the returned estimate.
    highpass_period:
        Cut-off period of the detrending high-pass filter.
    bandwidth_start, bandwidth_rate, bandwidth_floor:
        Bandwidth schedule ``δ = max(floor, start - rate * step)``.
    db_threshold, db_ceiling:
        Filters scoring at most ``db_threshold`` dB below the peak vote with
        weight ``db_ceiling - dB``.
    median_length:
        Length of the trailing median applied to the raw centre of gravity.
    default_period:
        Returned before enough history exists; bounds midpoint when ``None``.
    """

    lower_bound: int = 8
    upper_bound: int = 50
    highpass_period: float = 40.0
    bandwidth_start: float = 0.5
    bandwidth_rate: float = 0.015
    bandwidth_floor: float = 0.15
    db_threshold: float = 3.0
    db_ceiling: float = 20.0
    median_length: int = 10
    default_period: Optional[float] = None

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    def validate(self) -> None:
        check_bounds(self.lower_bound, self.upper_bound, min_lower=3)
        check_range("highpass_period", self.highpass_period, 4.0, MAX_PERIOD_LIMIT, open_lower=True)
        check_range("bandwidth_floor", self.bandwidth_floor, 0.0, 1.0, open_lower=True)
        check_range("bandwidth_start", self.bandwidth_start, self.bandwidth_floor, 1.0)
        check_range("bandwidth_rate", self.bandwidth_rate, 0.0, 1.0)
        check_range("db_ceiling", self.db_ceiling, 0.0, 100.0, open_lower=True)
        check_range("db_threshold", self.db_threshold, 0.0, self.db_ceiling)
        check_length("median_length", self.median_length, minimum=1, maximum=100)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


class ChannelizedReceiverEstimator(BandpassCycleEstimator):
    name = "channelized_receiver"
    config_class = ChannelizedReceiverConfig

    def _allocate(self) -> None:
        super()._allocate()
        self._median = MedianWindow(self.config.median_length)

    def _reset_state(self) -> None:
        super()._reset_state()
        self._median.reset()

    def _make_schedule(self) -> BandwidthSchedule:
        cfg = self.config
        return BandwidthSchedule(cfg.bandwidth_start, cfg.bandwidth_rate, cfg.bandwidth_floor)

    def _make_scoring(self) -> DecibelScoring:
        return DecibelScoring(threshold=self.config.db_threshold, ceiling=self.config.db_ceiling)

    def _power(self, amplitude: np.ndarray) -> np.ndarray:
        return amplitude

    def _max_power(self, power: np.ndarray) -> float:
        return float(np.max(power))

    def _post_filter(self, raw: float) -> float:
        self._median.push(raw)
        return self._median.median(default=raw)


__all__ = ["ChannelizedReceiverConfig", "ChannelizedReceiverEstimator"]
