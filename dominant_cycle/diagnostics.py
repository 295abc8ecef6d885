"""Passive observability hook for the numeric core.

Estimators report degenerate-path events to a *sink*: any callable taking a
:class:`DiagnosticEvent`.  Sinks only observe; the value returned by
``update`` never depends on them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Degenerate paths an estimator can take during one update."""

    INVALID_SAMPLE = "invalid_sample"  # non-finite input replaced
    NO_SIGNAL = "no_signal"            # spectrum carries no energy
    DEGENERATE = "degenerate"          # near-zero denominator, previous value kept
    STEP_ABORTED = "step_aborted"      # step discarded, fallback returned


class EstimateStatus(Enum):
    """How the last returned period was obtained."""

    WARMUP = "warmup"
    OK = "ok"
    NO_SIGNAL = "no_signal"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class DiagnosticEvent:
    estimator: str
    step_index: int
    kind: DiagnosticKind
    detail: str = ""


DiagnosticSink = Callable[[DiagnosticEvent], None]


class LoggingSink:
    """Forward events to :mod:`logging` at debug level."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.log = log or logger
        self.level = level

    def __call__(self, event: DiagnosticEvent) -> None:
        self.log.log(
            self.level,
            "%s step=%d %s %s",
            event.estimator,
            event.step_index,
            event.kind.value,
            event.detail,
        )


class RecordingSink:
    """Keep every event in memory, mostly useful for tests and notebooks."""

    def __init__(self) -> None:
        self.events: List[DiagnosticEvent] = []

    def __call__(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[DiagnosticKind]:
        return [event.kind for event in self.events]

    def clear(self) -> None:
        self.events.clear()


def emit(sink: Optional[DiagnosticSink], event: DiagnosticEvent) -> None:
    """Deliver ``event`` to ``sink``; a failing sink is logged and ignored."""

    if sink is None:
        return
    try:
        sink(event)
    except Exception as exc:  # sink errors must not reach the numeric core
        logger.warning("Diagnostic sink failed on %s: %s", event.kind.value, exc)


__all__ = [
    "DiagnosticKind",
    "EstimateStatus",
    "DiagnosticEvent",
    "DiagnosticSink",
    "LoggingSink",
    "RecordingSink",
    "emit",
]
