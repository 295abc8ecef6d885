"""Finite-value checks and guarded arithmetic used by every estimator."""
from __future__ import annotations

import math

import numpy as np

# Denominators with an absolute value below this are treated as zero.
TINY: float = 1e-12
# Spectral energy below this level means the input carries no oscillation.
ENERGY_FLOOR: float = 1e-18
# Recursive state beyond this magnitude would overflow once squared.
MAX_MAGNITUDE: float = 1e100


def is_finite(value: float) -> bool:
    try:
        return math.isfinite(value)
    except (TypeError, ValueError):
        return False


def is_bounded(value: float, limit: float = MAX_MAGNITUDE) -> bool:
    return is_finite(value) and abs(value) <= limit


def finite_or(value: float, fallback: float) -> float:
    """Return ``value`` as a float, or ``fallback`` when it is NaN/inf."""

    return float(value) if is_finite(value) else float(fallback)


def is_near_zero(value: float, eps: float = TINY) -> bool:
    return (not is_finite(value)) or abs(value) <= eps


def safe_div(num: float, den: float, fallback: float = 0.0, eps: float = TINY) -> float:
    """Divide ``num`` by ``den`` unless the denominator is degenerate."""

    if is_near_zero(den, eps) or not is_finite(num):
        return float(fallback)
    result = num / den
    return float(result) if is_finite(result) else float(fallback)


def safe_log10(values, fallback: float = 0.0):
    """Base-10 logarithm with ``fallback`` for non-positive or non-finite inputs.

    Accepts a scalar (returns a float) or an array (returns an array).
    """

    arr = np.asarray(values, dtype=float)
    valid = np.isfinite(arr) & (arr > 0.0)
    result = np.where(valid, np.log10(np.where(valid, arr, 1.0)), float(fallback))
    return float(result) if result.ndim == 0 else result


def clamp(value: float, lower: float, upper: float) -> float:
    if lower > upper:
        raise ValueError("lower must not exceed upper")
    return float(min(max(value, lower), upper))


def all_finite(values: np.ndarray) -> bool:
    return bool(np.all(np.isfinite(values)))


def all_bounded(values: np.ndarray, limit: float = MAX_MAGNITUDE) -> bool:
    values = np.asarray(values, dtype=float)
    return bool(np.all(np.isfinite(values)) and np.all(np.abs(values) <= limit))


__all__ = [
    "TINY",
    "ENERGY_FLOOR",
    "MAX_MAGNITUDE",
    "is_bounded",
    "is_finite",
    "finite_or",
    "is_near_zero",
    "safe_div",
    "safe_log10",
    "clamp",
    "all_finite",
    "all_bounded",
]
