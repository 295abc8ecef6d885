"""Streaming dominant-cycle estimators."""

from .autocorrelation import AutocorrelationConfig, AutocorrelationPeriodogramEstimator
from .burg_mesa import BurgMESAConfig, BurgMESAEstimator
from .channelized_receiver import ChannelizedReceiverConfig, ChannelizedReceiverEstimator
from .combined_bandpass import CombinedBandpassConfig, CombinedBandpassEstimator
from .griffiths import AdaptivePredictorEstimator, GriffithsConfig
from .homodyne import HomodyneConfig, HomodyneQuadratureEstimator

__all__ = [
    "AutocorrelationConfig",
    "AutocorrelationPeriodogramEstimator",
    "BurgMESAConfig",
    "BurgMESAEstimator",
    "ChannelizedReceiverConfig",
    "ChannelizedReceiverEstimator",
    "CombinedBandpassConfig",
    "CombinedBandpassEstimator",
    "GriffithsConfig",
    "AdaptivePredictorEstimator",
    "HomodyneConfig",
    "HomodyneQuadratureEstimator",
]
