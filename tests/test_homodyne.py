import math

import numpy as np
import pytest

from dominant_cycle import (
    DiagnosticKind,
    EstimateStatus,
    EstimatorConfigError,
    HomodyneQuadratureEstimator,
    RecordingSink,
)


def _sine(period: float, n_samples: int) -> np.ndarray:
    return 100.0 + np.sin(2 * np.pi * np.arange(n_samples) / period)


def test_bounds_follow_phase_rate_clamp():
    homodyne = HomodyneQuadratureEstimator()
    assert homodyne.lower_bound == pytest.approx(2 * math.pi / 1.1 + 0.5)
    assert homodyne.upper_bound == pytest.approx(2 * math.pi / 0.1 + 0.5)
    assert homodyne.default_period == 15.0
    assert homodyne.min_history == 6


def test_warmup_returns_default():
    homodyne = HomodyneQuadratureEstimator()
    outputs = [homodyne.update(p, i) for i, p in enumerate(_sine(20, 6))]
    assert outputs == [15.0] * 6


@pytest.mark.parametrize("period", [12, 20, 30])
def test_tracks_sine_period(period):
    homodyne = HomodyneQuadratureEstimator()
    outputs = np.array([homodyne.update(p, i) for i, p in enumerate(_sine(period, 400))])
    assert np.all(np.abs(outputs[250:] - period) <= 0.15 * period)


def test_constant_input_holds_default_and_reports_degenerate():
    sink = RecordingSink()
    homodyne = HomodyneQuadratureEstimator(sink=sink)
    outputs = [homodyne.update(42.0, i) for i in range(50)]
    assert outputs == pytest.approx([15.0] * 50)
    assert DiagnosticKind.DEGENERATE in sink.kinds()
    assert homodyne.status is EstimateStatus.FALLBACK


def test_cycle_filter_restarts_after_out_of_range_sample():
    sink = RecordingSink()
    homodyne = HomodyneQuadratureEstimator(sink=sink)
    prices = _sine(20, 900)
    prices[300] = 1e300
    outputs = np.array([homodyne.update(p, i) for i, p in enumerate(prices)])
    restarts = [e.step_index for e in sink.events if "cycle filter" in e.detail]
    assert restarts == [300]
    assert np.all(np.isfinite(outputs))
    assert np.all(np.abs(outputs[-100:] - 20.0) <= 3.0)
    assert homodyne.status is EstimateStatus.OK


def test_default_must_fit_bounds():
    with pytest.raises(EstimatorConfigError):
        HomodyneQuadratureEstimator(default_period=5.0)
    with pytest.raises(EstimatorConfigError):
        HomodyneQuadratureEstimator(alpha=1.5)
