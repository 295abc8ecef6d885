"""Configuration validation helpers and the JSON configuration loader.

Each estimator keeps its own ``@dataclass`` configuration next to its
implementation; this module holds the checks they share and the loader
turning a JSON document into validated configuration objects::

    {
        "tasc": {"median_length": 10},
        "burg": {"length": 32, "num_coefficients": 8, "lower_bound": 10, "upper_bound": 40}
    }
"""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import EstimatorConfigError
from .numeric_guard import is_finite

# Capacity limits of the per-period tables and sample windows.
MIN_PERIOD_LIMIT: int = 2
MAX_PERIOD_LIMIT: int = 500
MIN_LENGTH_LIMIT: int = 2
MAX_LENGTH_LIMIT: int = 1000


def check_bounds(lower: float, upper: float, *, integral: bool = True, min_lower: float = MIN_PERIOD_LIMIT) -> None:
    """Validate a ``[lower, upper]`` period range."""

    for label, value in (("lower_bound", lower), ("upper_bound", upper)):
        if not is_finite(value):
            raise EstimatorConfigError(f"{label} must be a finite number, got {value!r}")
        if integral and float(value) != int(value):
            raise EstimatorConfigError(f"{label} must be an integer period, got {value!r}")
    if lower < min_lower:
        raise EstimatorConfigError(f"lower_bound must be >= {min_lower}, got {lower}")
    if upper > MAX_PERIOD_LIMIT:
        raise EstimatorConfigError(f"upper_bound must be <= {MAX_PERIOD_LIMIT}, got {upper}")
    if lower >= upper:
        raise EstimatorConfigError(f"lower_bound ({lower}) must be smaller than upper_bound ({upper})")


def check_length(label: str, value: Any, minimum: int = MIN_LENGTH_LIMIT, maximum: int = MAX_LENGTH_LIMIT) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EstimatorConfigError(f"{label} must be an integer, got {value!r}")
    if value < minimum or value > maximum:
        raise EstimatorConfigError(f"{label} must lie in [{minimum}, {maximum}], got {value}")


def check_range(label: str, value: Any, lower: float, upper: float, *, open_lower: bool = False, open_upper: bool = False) -> None:
    """Validate that ``value`` lies in the interval described by the flags."""

    if not is_finite(value):
        raise EstimatorConfigError(f"{label} must be a finite number, got {value!r}")
    below = value <= lower if open_lower else value < lower
    above = value >= upper if open_upper else value > upper
    if below or above:
        left = "(" if open_lower else "["
        right = ")" if open_upper else "]"
        raise EstimatorConfigError(f"{label} must lie in {left}{lower}, {upper}{right}, got {value}")


def resolve_default(default_period: Optional[float], lower: float, upper: float) -> float:
    """Return the configured default period, or the midpoint of the bounds."""

    if default_period is None:
        return 0.5 * (float(lower) + float(upper))
    if not is_finite(default_period) or not lower <= default_period <= upper:
        raise EstimatorConfigError(
            f"default_period must lie in [{lower}, {upper}], got {default_period!r}"
        )
    return float(default_period)


def build_config(config_cls: type, config: Any = None, overrides: Optional[Mapping[str, Any]] = None):
    """Return a validated copy of ``config`` with ``overrides`` applied.

    ``config`` may be ``None`` (defaults), an instance of ``config_cls`` or a
    mapping of field values.  Unknown fields raise
    :class:`~dominant_cycle.errors.EstimatorConfigError`.
    """

    if config is None:
        values: Dict[str, Any] = {}
    elif isinstance(config, config_cls):
        values = dataclasses.asdict(config)
    elif isinstance(config, Mapping):
        values = dict(config)
    else:
        raise EstimatorConfigError(
            f"{config_cls.__name__} expected, got {type(config).__name__}"
        )
    values.update(overrides or {})
    known = {field.name for field in dataclasses.fields(config_cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise EstimatorConfigError(f"Unknown {config_cls.__name__} fields: {unknown}")
    built = config_cls(**values)
    built.validate()
    return built


def load_estimator_configs(path: str | Path) -> Dict[str, Any]:
    """Load a JSON file mapping estimator names to parameter overrides.

    Returns validated configuration objects keyed by the canonical estimator
    name.  Aliases are accepted (``"mesa"`` loads the Burg configuration).
    """

    from .registry import canonical_name, config_class_for

    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise EstimatorConfigError("The configuration document must be a JSON object")

    configs: Dict[str, Any] = {}
    for name, params in data.items():
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise EstimatorConfigError(f"Parameters of '{name}' must be a JSON object")
        try:
            key = canonical_name(name)
        except ValueError as exc:
            raise EstimatorConfigError(str(exc)) from exc
        configs[key] = build_config(config_class_for(key), params)
    return configs


__all__ = [
    "MIN_PERIOD_LIMIT",
    "MAX_PERIOD_LIMIT",
    "MIN_LENGTH_LIMIT",
    "MAX_LENGTH_LIMIT",
    "check_bounds",
    "check_length",
    "check_range",
    "resolve_default",
    "build_config",
    "load_estimator_configs",
]
