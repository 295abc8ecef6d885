"""Shared pipeline of the band-pass bank estimators.

``HighPassSmoother -> BandpassBank -> power profile -> scoring -> SpectralCoG``.
The channelized-receiver and combined band-pass estimators only differ in the
bandwidth schedule, in how the per-period power and its reference maximum are
formed, in the scoring strategy and in the post filter; they override those
hooks and share everything else.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Union

import numpy as np

from ..base import CycleEstimator
from ..numeric_guard import ENERGY_FLOOR
from ..stages.bandpass import BandpassBank, BandwidthSchedule
from ..stages.highpass import HighPassSmoother
from ..stages.spectral import DecibelScoring, NormalizedPowerScoring, center_of_gravity

Scoring = Union[DecibelScoring, NormalizedPowerScoring]

# The bank starts filtering on the eighth sample.
BANK_START_STEP = 7


class BandpassCycleEstimator(CycleEstimator):
    """Common update step of the band-pass bank estimators."""

    def _allocate(self) -> None:
        cfg = self.config
        self._smoother = HighPassSmoother(cfg.highpass_period)
        self._bank = BandpassBank(int(cfg.lower_bound), int(cfg.upper_bound))
        self._schedule = self._make_schedule()
        self._scoring = self._make_scoring()

    def _reset_state(self) -> None:
        self._smoother.reset()
        self._bank.reset()
        self._raw_prev = self.default_period

    @property
    def min_history(self) -> int:
        return BANK_START_STEP

    @property
    def periods(self) -> np.ndarray:
        return self._bank.periods

    @abstractmethod
    def _make_schedule(self) -> BandwidthSchedule:
        ...

    @abstractmethod
    def _make_scoring(self) -> Scoring:
        ...

    @abstractmethod
    def _power(self, amplitude: np.ndarray) -> np.ndarray:
        """Per-period power profile from the bank's squared amplitudes."""

    @abstractmethod
    def _max_power(self, power: np.ndarray) -> float:
        """Reference maximum used to normalise ``power``."""

    def _post_filter(self, raw: float) -> float:
        return raw

    def _step(self, sample: float, step: int) -> float:
        signal = self._smoother.update(sample)
        if self._smoother.restarted:
            self._report_restart(step, "high-pass output")
        if not self._has_history(step):
            self._bank.observe(signal)
            return self._warmup()

        real, imag = self._bank.update(signal, self._schedule.delta(step))
        if self._bank.restarted:
            self._report_restart(step, "band-pass bank output")
        power = self._power(self._bank.amplitude(real, imag))
        max_power = self._max_power(power)
        if not np.isfinite(max_power) or max_power <= ENERGY_FLOOR:
            raw = self._no_signal(step, "band-pass bank carries no energy")
        else:
            weights, mask = self._scoring.weights(power, max_power)
            cog = center_of_gravity(self._bank.periods, weights, mask)
            if cog is None:
                raw = self._degenerate(step, self._raw_prev, "no hypothesis cleared the threshold")
            else:
                raw = self._ok(cog)
        self._raw_prev = raw
        return self._post_filter(raw)


__all__ = ["BANK_START_STEP", "BandpassCycleEstimator"]
