import numpy as np
import pytest

from dominant_cycle.stages.highpass import SMOOTHING_TAPS, HighPassSmoother, highpass_alpha


def test_highpass_alpha_requires_cutoff_above_four():
    with pytest.raises(ValueError):
        highpass_alpha(4.0)
    assert 0.0 < highpass_alpha(40.0) < 1.0


def test_smoothing_taps_have_unit_gain():
    assert SMOOTHING_TAPS.sum() == pytest.approx(1.0)


def test_constant_price_gives_zero_output():
    smoother = HighPassSmoother(40.0)
    outputs = [smoother.update(100.0) for _ in range(50)]
    assert outputs == [0.0] * 50


def test_linear_ramp_settles_to_constant_offset():
    smoother = HighPassSmoother(40.0)
    alpha = smoother.alpha
    slope = 0.5
    for step in range(400):
        out = smoother.update(100.0 + slope * step)
    expected = 0.5 * (alpha + 1.0) * slope / (1.0 - alpha)
    assert out == pytest.approx(expected, rel=1e-6)


def test_reset_restores_initial_state():
    smoother = HighPassSmoother(20.0)
    prices = 100.0 + np.sin(np.arange(30))
    first = [smoother.update(p) for p in prices]
    smoother.reset()
    second = [smoother.update(p) for p in prices]
    assert first == second


def test_huge_jump_restarts_history():
    smoother = HighPassSmoother(40.0)
    for step in range(20):
        smoother.update(100.0 + np.sin(step))
    assert smoother.update(1e300) == 0.0
    assert smoother.restarted
    # the drop back from the spike is out of range too
    assert smoother.update(100.0) == 0.0
    assert smoother.restarted
    assert smoother.update(100.0) == 0.0
    assert not smoother.restarted
    out = smoother.update(101.0)
    assert out == pytest.approx(0.5 * (smoother.alpha + 1.0))
