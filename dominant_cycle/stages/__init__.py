"""Signal-processing stages shared by several estimators."""

from .bandpass import BandpassBank, BandwidthSchedule, bandpass_alpha
from .highpass import HighPassSmoother, highpass_alpha
from .spectral import ARSpectrum, DecibelScoring, NormalizedPowerScoring, center_of_gravity

__all__ = [
    "BandpassBank",
    "BandwidthSchedule",
    "bandpass_alpha",
    "HighPassSmoother",
    "highpass_alpha",
    "ARSpectrum",
    "DecibelScoring",
    "NormalizedPowerScoring",
    "center_of_gravity",
]
