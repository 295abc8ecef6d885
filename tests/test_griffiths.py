import numpy as np
import pytest

from dominant_cycle import AdaptivePredictorEstimator, EstimateStatus, EstimatorConfigError


def _noisy_cycle(period: float, n_samples: int, seed: int = 3) -> np.ndarray:
    rng = np.random.default_rng(seed)
    x = np.arange(n_samples)
    trend = np.cumsum(rng.normal(0.0, 0.2, n_samples))
    return 100.0 + trend + 2.0 * np.sin(2 * np.pi * x / period)


def test_defaults():
    griffiths = AdaptivePredictorEstimator()
    assert (griffiths.lower_bound, griffiths.upper_bound) == (18.0, 40.0)
    assert griffiths.default_period == pytest.approx(29.0)
    assert griffiths.min_history == 40
    assert griffiths.config.resolved_highpass_period == 40.0


def test_rate_limit_and_range():
    griffiths = AdaptivePredictorEstimator()
    outputs = np.array([griffiths.update(p, i) for i, p in enumerate(_noisy_cycle(25, 600))])
    assert outputs[:40].tolist() == [29.0] * 40
    assert np.all(np.abs(np.diff(outputs)) <= 2.0 + 1e-9)
    assert np.all((outputs >= 18.0) & (outputs <= 40.0))
    assert griffiths.status is EstimateStatus.OK


def test_tracks_sine_period():
    griffiths = AdaptivePredictorEstimator()
    prices = 100.0 + np.sin(2 * np.pi * np.arange(800) / 25.0)
    outputs = np.array([griffiths.update(p, i) for i, p in enumerate(prices)])
    assert np.all(np.abs(outputs[-100:] - 25.0) <= 2.0)
    assert griffiths.status is EstimateStatus.OK


def test_custom_step_limit():
    griffiths = AdaptivePredictorEstimator(length=20, lower_bound=10, upper_bound=30, max_step=0.5)
    outputs = np.array([griffiths.update(p, i) for i, p in enumerate(_noisy_cycle(15, 400))])
    assert np.all(np.abs(np.diff(outputs)) <= 0.5 + 1e-9)


def test_coefficients_stay_finite_on_spikes():
    griffiths = AdaptivePredictorEstimator()
    prices = _noisy_cycle(25, 300)
    prices[150] = 1e12
    for i, p in enumerate(prices):
        griffiths.update(p, i)
    assert np.all(np.isfinite(griffiths.coefficients))


def test_invalid_config():
    with pytest.raises(EstimatorConfigError):
        AdaptivePredictorEstimator(length=1)
    with pytest.raises(EstimatorConfigError):
        AdaptivePredictorEstimator(highpass_period=3.0)
