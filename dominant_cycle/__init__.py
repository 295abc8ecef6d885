"""Streaming dominant-cycle estimators for price series."""

from . import (
    config,
    diagnostics,
    errors,
    estimators,
    registry,
    replay,
    stages,
)
from .base import CycleEstimator
from .diagnostics import DiagnosticEvent, DiagnosticKind, EstimateStatus, LoggingSink, RecordingSink
from .errors import DegenerateStepError, EstimatorConfigError
from .estimators import (
    AdaptivePredictorEstimator,
    AutocorrelationConfig,
    AutocorrelationPeriodogramEstimator,
    BurgMESAConfig,
    BurgMESAEstimator,
    ChannelizedReceiverConfig,
    ChannelizedReceiverEstimator,
    CombinedBandpassConfig,
    CombinedBandpassEstimator,
    GriffithsConfig,
    HomodyneConfig,
    HomodyneQuadratureEstimator,
)
from .registry import build_estimator

__version__ = "0.1.0"

__all__ = [
    "config",
    "diagnostics",
    "errors",
    "estimators",
    "registry",
    "replay",
    "stages",
    "CycleEstimator",
    "DiagnosticEvent",
    "DiagnosticKind",
    "EstimateStatus",
    "LoggingSink",
    "RecordingSink",
    "DegenerateStepError",
    "EstimatorConfigError",
    "AdaptivePredictorEstimator",
    "AutocorrelationConfig",
    "AutocorrelationPeriodogramEstimator",
    "BurgMESAConfig",
    "BurgMESAEstimator",
    "ChannelizedReceiverConfig",
    "ChannelizedReceiverEstimator",
    "CombinedBandpassConfig",
    "CombinedBandpassEstimator",
    "GriffithsConfig",
    "HomodyneConfig",
    "HomodyneQuadratureEstimator",
    "build_estimator",
]
