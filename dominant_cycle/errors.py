"""Exception types shared by the estimators."""
from __future__ import annotations


class EstimatorConfigError(ValueError):
    """Raised when an estimator configuration is rejected.

    The estimator state is never touched when this error is raised: a new
    instance is not created and a live instance keeps its previous
    configuration.
    """


class DegenerateStepError(ArithmeticError):
    """Raised inside a single update when the step cannot be completed.

    :meth:`dominant_cycle.base.CycleEstimator.update` catches it, discards the
    partial work of the step and returns the estimator fallback.
    """


__all__ = ["EstimatorConfigError", "DegenerateStepError"]
