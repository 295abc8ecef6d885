import math

import pytest

from dominant_cycle.median_window import MedianWindow


def test_median_of_partial_window():
    window = MedianWindow(5)
    for value in (3.0, 1.0, 2.0):
        window.push(value)
    assert window.median() == 2.0
    window.push(4.0)
    assert window.median() == pytest.approx(2.5)
    assert not window.is_full


def test_oldest_values_are_overwritten():
    window = MedianWindow(3)
    for value in (1.0, 2.0, 3.0, 10.0):
        window.push(value)
    assert window.is_full
    assert window.values() == [2.0, 3.0, 10.0]
    assert window.median() == 3.0


def test_non_finite_values_are_rejected():
    window = MedianWindow(3)
    window.push(1.0)
    assert window.push(float("nan")) is False
    assert window.push(float("inf")) is False
    assert len(window) == 1


def test_empty_window_returns_default_and_reset_clears():
    window = MedianWindow(4)
    assert math.isnan(window.median())
    assert window.median(default=12.0) == 12.0
    window.push(5.0)
    window.reset()
    assert len(window) == 0
    assert window.values() == []


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        MedianWindow(0)
