import numpy as np
import pytest

from dominant_cycle import CombinedBandpassEstimator, EstimateStatus


def _sine(period: float, n_samples: int, amplitude: float = 1.0) -> np.ndarray:
    return 100.0 + amplitude * np.sin(2 * np.pi * np.arange(n_samples) / period)


def test_defaults():
    combined = CombinedBandpassEstimator()
    assert (combined.lower_bound, combined.upper_bound) == (10.0, 48.0)
    assert combined.default_period == pytest.approx(29.0)


def test_tracks_sine_period():
    combined = CombinedBandpassEstimator()
    outputs = np.array([combined.update(p, i) for i, p in enumerate(_sine(20, 300))])
    assert np.all(np.abs(outputs[200:] - 20.0) <= 3.0)
    assert combined.status is EstimateStatus.OK


def test_follows_period_change():
    combined = CombinedBandpassEstimator()
    prices = np.concatenate((_sine(15, 300), _sine(35, 600)[300:]))
    outputs = np.array([combined.update(p, i) for i, p in enumerate(prices)])
    assert outputs[250:300].mean() < outputs[-50:].mean()


def test_scale_invariance():
    small = CombinedBandpassEstimator()
    large = CombinedBandpassEstimator()
    prices = _sine(25, 250)
    a = [small.update(p, i) for i, p in enumerate(prices)]
    b = [large.update(1000.0 * p, i) for i, p in enumerate(prices)]
    assert a == pytest.approx(b, rel=1e-9)
