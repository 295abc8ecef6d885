"""Maximum entropy (Burg) dominant cycle.

The last ``length`` samples, mean removed, are fitted with an autoregressive
model of order ``num_coefficients`` using Burg's order-recursive lattice:
at each order a reflection coefficient minimises the sum of the forward
(``bb1``) and backward (``bb2``) prediction errors, both error sequences are
updated and the lower-order coefficients follow a Levinson update from the
previous order's snapshot.

On a window of one or two cycles the lattice alone biases the frequency by
an amount that depends on the phase of the oscillation.  By default the
Burg coefficients are therefore refined: the forward and backward
prediction equations of the window are solved for the minimum-norm
correction to the Burg solution.  A window that an order-``num_coefficients``
model predicts exactly is then annihilated at its true frequency, while the
directions the window leaves undetermined keep their Burg values.

Coefficients are smoothed over the last ``smoothing_length`` steps with Hann
weights before the AR power spectrum is evaluated at every integer period of
``[lower_bound, upper_bound]``.  The period holding the (first) maximum of the
normalised spectrum is the estimate.

A step failing validation returns the default period and leaves the
coefficient history as it was.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..base import CycleEstimator
from ..config import MAX_LENGTH_LIMIT, check_bounds, check_length, check_range, resolve_default
from ..errors import DegenerateStepError
from ..history import SampleWindow
from ..numeric_guard import TINY, all_finite
from ..stages.spectral import ARSpectrum

# Reflection denominators below this fraction of the window energy count as zero.
RELATIVE_EPS = 1e-12
# Singular values below this fraction of the largest are dropped by the refinement.
REFINE_RCOND = 1e-9


@dataclass(slots=True)
class BurgMESAConfig:
    """Configuration of :class:`BurgMESAEstimator`.

    Parameters
    ----------
    length:
        Number of samples in the analysis window.
    num_coefficients:
        Order of the AR model, smaller than ``length - 1``.
    lower_bound, upper_bound:
        Integer periods scanned by the spectrum.
    smoothing_length:
        Depth of the Hann-weighted coefficient history.
    max_reflection:
        Magnitude limit applied to every reflection coefficient.
    refine:
        Correct the Burg coefficients towards the forward-backward
        least-squares fit of the window.
    """

    length: int = 40
    num_coefficients: int = 8
    lower_bound: int = 10
    upper_bound: int = 40
    smoothing_length: int = 12
    max_reflection: float = 10.0
    refine: bool = True
    default_period: Optional[float] = None

    @property
    def resolved_default(self) -> float:
        return resolve_default(self.default_period, self.lower_bound, self.upper_bound)

    def validate(self) -> None:
        check_length("length", self.length, minimum=4, maximum=MAX_LENGTH_LIMIT)
        check_length("num_coefficients", self.num_coefficients, minimum=1, maximum=self.length - 2)
        check_bounds(self.lower_bound, self.upper_bound)
        check_length("smoothing_length", self.smoothing_length, minimum=1, maximum=100)
        check_range("max_reflection", self.max_reflection, 0.0, 100.0, open_lower=True)
        resolve_default(self.default_period, self.lower_bound, self.upper_bound)


def hann_weights(length: int) -> np.ndarray:
    """``1 - cos(2πj / (length + 1))`` for ``j = 1..length``."""

    j = np.arange(1, int(length) + 1, dtype=float)
    return 1.0 - np.cos(2.0 * np.pi * j / (length + 1.0))


def burg_coefficients(
    data: np.ndarray,
    order: int,
    max_reflection: float = 10.0,
) -> Tuple[np.ndarray, float]:
    """Fit an AR model to ``data`` (oldest first) with Burg's method.

    Returns ``(coefficients, gain)`` where ``data[t] ≈ Σ c[m-1]·data[t-m]``
    and ``gain`` is the residual mean square power.
    """

    n = data.size
    if order < 1 or order >= n - 1:
        raise DegenerateStepError(f"order {order} does not fit a window of {n} samples")
    energy = float(np.dot(data, data))
    if not np.isfinite(energy):
        raise DegenerateStepError("window energy is not finite")
    gain = energy / n
    floor = RELATIVE_EPS * max(energy, TINY)

    coefficients = np.zeros(order, dtype=float)
    snapshot = np.zeros(order, dtype=float)
    bb1 = data[:-1].astype(float)
    bb2 = data[1:].astype(float)

    for k in range(1, order + 1):
        forward = bb1[: n - k]
        backward = bb2[: n - k]
        numerator = float(np.dot(forward, backward))
        denominator = float(np.dot(forward, forward) + np.dot(backward, backward))
        if not np.isfinite(denominator) or denominator <= floor:
            reflection = 0.0
        else:
            reflection = 2.0 * numerator / denominator
        reflection = float(np.clip(reflection, -max_reflection, max_reflection))
        coefficients[k - 1] = reflection
        gain *= 1.0 - reflection * reflection
        if k > 1:
            coefficients[: k - 1] = snapshot[: k - 1] - reflection * snapshot[: k - 1][::-1]
        if k == order:
            break

        snapshot[:k] = coefficients[:k]
        span = n - k - 1
        old_forward = bb1[: span + 1].copy()
        bb1[:span] = old_forward[:span] - reflection * bb2[:span]
        bb2[:span] = bb2[1 : span + 1] - reflection * old_forward[1 : span + 1]

    if not all_finite(coefficients) or not np.isfinite(gain):
        raise DegenerateStepError("Burg recursion produced non-finite coefficients")
    return coefficients, gain


def refine_forward_backward(
    data: np.ndarray,
    coefficients: np.ndarray,
    rcond: float = REFINE_RCOND,
) -> np.ndarray:
    """Minimum-norm correction of ``coefficients`` to the forward-backward fit of ``data``.

    Both ``data[t] = Σ c[m-1]·data[t-m]`` and ``data[t] = Σ c[m-1]·data[t+m]``
    are imposed over the whole window.  On a full-rank window the result is the
    modified-covariance estimate; on a rank-deficient one the unconstrained
    directions keep the values passed in.
    """

    order = coefficients.size
    data = np.asarray(data, dtype=float)
    if order < 1 or order >= data.size:
        raise DegenerateStepError(f"order {order} does not fit a window of {data.size} samples")
    rows = np.lib.stride_tricks.sliding_window_view(data, order + 1)
    # forward rows predict the newest sample from lags 1..order, backward rows the oldest
    design = np.vstack((rows[:, -2::-1], rows[:, 1:]))
    target = np.concatenate((rows[:, -1], rows[:, 0]))
    residual = target - design @ coefficients
    correction = np.linalg.lstsq(design, residual, rcond=rcond)[0]
    refined = coefficients + correction
    if not all_finite(refined):
        raise DegenerateStepError("forward-backward refinement produced non-finite coefficients")
    return refined


class BurgMESAEstimator(CycleEstimator):
    name = "burg_mesa"
    config_class = BurgMESAConfig

    def _allocate(self) -> None:
        cfg = self.config
        self._window = SampleWindow(cfg.length)
        self.periods = np.arange(int(cfg.lower_bound), int(cfg.upper_bound) + 1, dtype=float)
        self._spectrum = ARSpectrum(self.periods, cfg.num_coefficients)
        self._hann = hann_weights(cfg.smoothing_length)
        self._coef_history = np.zeros((cfg.smoothing_length, cfg.num_coefficients), dtype=float)

    def _reset_state(self) -> None:
        self._window.reset()
        self._coef_history.fill(0.0)
        self._coef_count = 0
        self._last_spectrum = np.zeros(self.periods.size, dtype=float)

    @property
    def min_history(self) -> int:
        return self.config.length - 1

    @property
    def spectrum(self) -> np.ndarray:
        """Normalised spectrum of the last successful step, one value per period."""

        return self._last_spectrum.copy()

    def _abort_fallback(self) -> float:
        return self.default_period

    def _smoothed(self, history: np.ndarray, count: int) -> np.ndarray:
        weights = self._hann[:count]
        rows = history[-count:]
        return weights @ rows / float(np.sum(weights))

    def _step(self, sample: float, step: int) -> float:
        self._window.push(sample)
        if not self._has_history(step):
            return self._warmup()

        raw = self._window.oldest_first()
        if raw.size != self.config.length or not all_finite(raw):
            raise DegenerateStepError("analysis window is incomplete or invalid")
        mean = float(np.mean(raw))
        if float(np.ptp(raw)) <= TINY * max(1.0, abs(mean)):
            return self._no_signal(step, "analysis window is flat")

        centred = raw - mean
        coefficients, gain = burg_coefficients(centred, self.config.num_coefficients, self.config.max_reflection)
        if self.config.refine:
            coefficients = refine_forward_backward(centred, coefficients)

        history = np.vstack((self._coef_history[1:], coefficients))
        count = min(self._coef_count + 1, self.config.smoothing_length)
        smoothed = self._smoothed(history, count)

        power = self._spectrum.power(smoothed, gain if gain > TINY else TINY)
        peak = float(np.max(power))
        if not np.isfinite(peak) or peak <= 0.0:
            raise DegenerateStepError("AR spectrum has no finite peak")
        period = float(self.periods[int(np.argmax(power))])

        self._coef_history = history
        self._coef_count = count
        self._last_spectrum = power / peak
        return self._ok(period)


__all__ = [
    "BurgMESAConfig",
    "BurgMESAEstimator",
    "burg_coefficients",
    "hann_weights",
    "refine_forward_backward",
]
