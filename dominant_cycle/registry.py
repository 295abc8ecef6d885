"""Name-based construction of estimators.

Used by the JSON configuration loader and by :mod:`dominant_cycle.replay`
to build estimators from plain strings such as ``"mesa"`` or ``"tasc"``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .base import CycleEstimator
from .diagnostics import DiagnosticSink
from .estimators import (
    AdaptivePredictorEstimator,
    AutocorrelationPeriodogramEstimator,
    BurgMESAEstimator,
    ChannelizedReceiverEstimator,
    CombinedBandpassEstimator,
    HomodyneQuadratureEstimator,
)

ESTIMATOR_REGISTRY: Dict[str, type] = {
    "tasc": ChannelizedReceiverEstimator,
    "channelized": ChannelizedReceiverEstimator,
    "channelized_receiver": ChannelizedReceiverEstimator,
    "acp": AutocorrelationPeriodogramEstimator,
    "autocorrelation": AutocorrelationPeriodogramEstimator,
    "autocorrelation_periodogram": AutocorrelationPeriodogramEstimator,
    "combined": CombinedBandpassEstimator,
    "combined_bandpass": CombinedBandpassEstimator,
    "burg": BurgMESAEstimator,
    "mesa": BurgMESAEstimator,
    "burg_mesa": BurgMESAEstimator,
    "griffiths": AdaptivePredictorEstimator,
    "homodyne": HomodyneQuadratureEstimator,
    "casf": HomodyneQuadratureEstimator,
}


def _lookup(name: str) -> type:
    key = str(name).strip().lower()
    if key not in ESTIMATOR_REGISTRY:
        raise ValueError(f"Unknown cycle estimator '{name}'")
    return ESTIMATOR_REGISTRY[key]


def canonical_name(name: str) -> str:
    """Return the ``name`` attribute of the estimator registered under ``name``."""

    return _lookup(name).name


def config_class_for(name: str) -> type:
    return _lookup(name).config_class


def available_estimators() -> list[str]:
    """Canonical names of every registered estimator, sorted."""

    return sorted({cls.name for cls in ESTIMATOR_REGISTRY.values()})


def build_estimator(
    name: str,
    params: Optional[Any] = None,
    sink: Optional[DiagnosticSink] = None,
) -> CycleEstimator:
    """Instantiate the estimator registered under ``name``.

    ``params`` may be a configuration object or a mapping of overrides.
    """

    cls = _lookup(name)
    if params is not None and not isinstance(params, (dict, cls.config_class)):
        raise TypeError(f"params for '{name}' must be a dict or {cls.config_class.__name__}")
    return cls(params, sink=sink)


__all__ = [
    "ESTIMATOR_REGISTRY",
    "canonical_name",
    "config_class_for",
    "available_estimators",
    "build_estimator",
]
