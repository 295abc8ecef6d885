import numpy as np
import pytest
from scipy.signal import freqz

from dominant_cycle.stages import ARSpectrum, DecibelScoring, NormalizedPowerScoring, center_of_gravity


def test_center_of_gravity_weights_masked_periods():
    periods = np.array([10.0, 20.0, 30.0])
    weights = np.array([1.0, 1.0, 5.0])
    mask = np.array([True, True, False])
    assert center_of_gravity(periods, weights, mask) == pytest.approx(15.0)


def test_center_of_gravity_degenerate_cases():
    periods = np.array([10.0, 20.0])
    assert center_of_gravity(periods, np.ones(2), np.zeros(2, dtype=bool)) is None
    assert center_of_gravity(periods, np.zeros(2), np.ones(2, dtype=bool)) is None


def test_decibel_scoring_peak_has_zero_db():
    scoring = DecibelScoring(threshold=3.0, ceiling=20.0)
    power = np.array([0.0, 0.5, 1.0])
    db = scoring.decibels(power, 1.0)
    assert db[2] == pytest.approx(0.0)
    assert db[0] == 20.0
    weights, mask = scoring.weights(power, 1.0)
    assert weights[2] == pytest.approx(20.0)
    assert mask.tolist() == [False, False, True]


def test_decibel_scoring_without_energy_votes_nothing():
    scoring = DecibelScoring()
    weights, mask = scoring.weights(np.zeros(4), 0.0)
    assert not mask.any()
    assert not weights.any()


def test_normalized_power_scoring():
    scoring = NormalizedPowerScoring(threshold=0.5)
    weights, mask = scoring.weights(np.array([2.0, 1.2, 0.4]), 2.0)
    assert weights.tolist() == pytest.approx([1.0, 0.6, 0.2])
    assert mask.tolist() == [True, True, False]


def test_ar_spectrum_matches_freqz():
    coefficients = np.array([0.5, -0.3, 0.1])
    periods = np.arange(5, 30, dtype=float)
    spectrum = ARSpectrum(periods, coefficients.size)
    _, response = freqz([1.0], np.concatenate(([1.0], -coefficients)), worN=2 * np.pi / periods)
    expected = 2.0 * np.abs(response) ** 2
    assert spectrum.power(coefficients, 2.0) == pytest.approx(expected, rel=1e-9)


def test_ar_spectrum_rejects_wrong_order():
    spectrum = ARSpectrum(np.arange(10, 20, dtype=float), 4)
    with pytest.raises(IndexError):
        spectrum.denominator(np.zeros(3))
