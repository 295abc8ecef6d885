import math

import numpy as np
import pytest

from dominant_cycle import numeric_guard as ng


def test_is_finite_rejects_nan_inf_and_non_numbers():
    assert ng.is_finite(1.5)
    assert not ng.is_finite(float("nan"))
    assert not ng.is_finite(float("-inf"))
    assert not ng.is_finite("abc")
    assert not ng.is_finite(None)


def test_finite_or_and_safe_div_fallbacks():
    assert ng.finite_or(float("nan"), 7.0) == 7.0
    assert ng.finite_or(3, 7.0) == 3.0
    assert ng.safe_div(1.0, 0.0, fallback=5.0) == 5.0
    assert ng.safe_div(1.0, 1e-15, fallback=-1.0) == -1.0
    assert ng.safe_div(float("nan"), 2.0, fallback=0.5) == 0.5
    assert ng.safe_div(6.0, 3.0) == pytest.approx(2.0)


def test_safe_log10_scalar_and_array():
    assert ng.safe_log10(100.0) == pytest.approx(2.0)
    assert ng.safe_log10(0.0, fallback=-3.0) == -3.0
    assert ng.safe_log10(-1.0) == 0.0
    values = ng.safe_log10(np.array([10.0, np.nan, 1000.0]), fallback=-1.0)
    assert values.tolist() == pytest.approx([1.0, -1.0, 3.0])


def test_is_near_zero_treats_non_finite_as_zero():
    assert ng.is_near_zero(0.0)
    assert ng.is_near_zero(ng.TINY / 2)
    assert ng.is_near_zero(math.nan)
    assert not ng.is_near_zero(1e-6)


def test_clamp():
    assert ng.clamp(5.0, 0.0, 3.0) == 3.0
    assert ng.clamp(-1.0, 0.0, 3.0) == 0.0
    assert ng.clamp(2.0, 0.0, 3.0) == 2.0
    with pytest.raises(ValueError):
        ng.clamp(1.0, 3.0, 0.0)


def test_all_finite():
    assert ng.all_finite(np.array([1.0, 2.0]))
    assert not ng.all_finite(np.array([1.0, np.nan]))


def test_is_bounded():
    assert ng.is_bounded(1e99)
    assert ng.is_bounded(-ng.MAX_MAGNITUDE)
    assert not ng.is_bounded(1e300)
    assert not ng.is_bounded(math.nan)
    assert not ng.is_bounded("x")
    assert ng.is_bounded(5.0, limit=5.0) and not ng.is_bounded(5.1, limit=5.0)


def test_all_bounded():
    assert ng.all_bounded(np.array([0.0, -1e50, 1e50]))
    assert not ng.all_bounded(np.array([0.0, 1e200]))
    assert not ng.all_bounded(np.array([0.0, np.inf]))
