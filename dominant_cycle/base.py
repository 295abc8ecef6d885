"""Shared contract of the streaming dominant-cycle estimators.

Every estimator follows the same life cycle::

    estimator = BurgMESAEstimator(length=32, num_coefficients=8)   # Init
    for step, price in enumerate(prices):
        period = estimator.update(price, step)                     # Update
    estimator.reset()                                              # Reset

Construction validates the configuration and raises
:class:`~dominant_cycle.errors.EstimatorConfigError` before any state is
allocated.  :meth:`CycleEstimator.update` never raises: degenerate steps fall
back to the previous estimate (or the default period) and are reported to the
diagnostic sink.  The value returned is always finite and within
``[lower_bound, upper_bound]``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from .config import build_config
from .diagnostics import (
    DiagnosticEvent,
    DiagnosticKind,
    DiagnosticSink,
    EstimateStatus,
    LoggingSink,
    emit,
)
from .numeric_guard import clamp, finite_or, is_finite

logger = logging.getLogger(__name__)


class CycleEstimator(ABC):
    """Base class holding the sample guard, fallbacks and range enforcement.

    Subclasses provide ``config_class``, allocate their buffers in
    :meth:`_allocate`, clear them in :meth:`_reset_state` and implement one
    step of their algorithm in :meth:`_step`.
    """

    name: str = "base"
    config_class: type = type(None)

    def __init__(self, config: Any = None, *, sink: Optional[DiagnosticSink] = None, **overrides: Any):
        self._sink: Optional[DiagnosticSink] = sink if sink is not None else LoggingSink()
        self.config = None
        self.configure(config, **overrides)

    # ------------------------------------------------------------------ life cycle
    def configure(self, config: Any = None, **overrides: Any) -> None:
        """Validate ``config`` and (re)build every buffer from it.

        Validation happens first: on error the instance keeps its previous
        configuration and state untouched.
        """

        validated = build_config(self.config_class, config, overrides)
        self.config = validated
        self._allocate()
        self.reset()
        logger.debug("%s configured: %s", self.name, validated)

    def reset(self) -> None:
        """Clear every history back to its initial value."""

        self._last = self.default_period
        self._last_sample: Optional[float] = None
        self._seen = 0
        self._status = EstimateStatus.WARMUP
        self._reset_state()

    def update(self, sample: float, step_index: int) -> float:
        """Consume one sample and return the current period estimate."""

        step = self._step_index(step_index)
        value = self._sanitize(sample, step)
        self._seen += 1
        try:
            with np.errstate(all="ignore"):
                estimate = self._step(value, step)
        except (ArithmeticError, IndexError, TypeError, ValueError) as exc:
            self._report(step, DiagnosticKind.STEP_ABORTED, f"{type(exc).__name__}: {exc}")
            self._status = EstimateStatus.FALLBACK
            estimate = self._abort_fallback()
        return self._finalize(estimate, step)

    # ------------------------------------------------------------------ properties
    @property
    def lower_bound(self) -> float:
        return float(self.config.lower_bound)

    @property
    def upper_bound(self) -> float:
        return float(self.config.upper_bound)

    @property
    def default_period(self) -> float:
        return self.config.resolved_default

    @property
    @abstractmethod
    def min_history(self) -> int:
        """Number of steps that must elapse before the first real estimate."""

    @property
    def last_estimate(self) -> float:
        return self._last

    @property
    def status(self) -> EstimateStatus:
        return self._status

    @property
    def samples_seen(self) -> int:
        return self._seen

    # ------------------------------------------------------------------ subclass hooks
    @abstractmethod
    def _allocate(self) -> None:
        """Size every buffer and precompute read-only tables from ``self.config``."""

    @abstractmethod
    def _reset_state(self) -> None:
        """Clear the recursive histories allocated by :meth:`_allocate`."""

    @abstractmethod
    def _step(self, sample: float, step: int) -> float:
        """Run one step of the algorithm on an already sanitised sample."""

    def _abort_fallback(self) -> float:
        return self._last

    # ------------------------------------------------------------------ helpers
    def _has_history(self, step: int) -> bool:
        return step >= self.min_history and self._seen > self.min_history

    def _warmup(self) -> float:
        self._status = EstimateStatus.WARMUP
        return self.default_period

    def _no_signal(self, step: int, detail: str = "") -> float:
        self._status = EstimateStatus.NO_SIGNAL
        self._report(step, DiagnosticKind.NO_SIGNAL, detail)
        return self.default_period

    def _degenerate(self, step: int, previous: float, detail: str = "") -> float:
        self._status = EstimateStatus.FALLBACK
        self._report(step, DiagnosticKind.DEGENERATE, detail)
        return previous

    def _ok(self, value: float) -> float:
        self._status = EstimateStatus.OK
        return value

    def _report(self, step: int, kind: DiagnosticKind, detail: str = "") -> None:
        emit(self._sink, DiagnosticEvent(self.name, step, kind, detail))

    def _step_index(self, step_index: Any) -> int:
        try:
            return int(step_index)
        except (TypeError, ValueError, OverflowError):
            step = self._seen
            self._report(step, DiagnosticKind.DEGENERATE, f"step index {step_index!r} replaced by {step}")
            return step

    def _report_restart(self, step: int, stage: str) -> None:
        self._report(step, DiagnosticKind.DEGENERATE, f"{stage} out of range, history restarted")

    def _sanitize(self, sample: float, step: int) -> float:
        if is_finite(sample):
            self._last_sample = float(sample)
            return self._last_sample
        replacement = self._last_sample if self._last_sample is not None else 0.0
        self._report(step, DiagnosticKind.INVALID_SAMPLE, f"{sample!r} replaced by {replacement}")
        return replacement

    def _finalize(self, estimate: float, step: int) -> float:
        if not is_finite(estimate):
            self._report(step, DiagnosticKind.DEGENERATE, f"non-finite estimate {estimate!r}")
            self._status = EstimateStatus.FALLBACK
            estimate = finite_or(self._last, self.default_period)
        result = clamp(float(estimate), self.lower_bound, self.upper_bound)
        self._last = result
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"


__all__ = ["CycleEstimator"]
