"""
Diagnostics Sink
================

Collects every reported failure.

The core never lets a failure escape as a crash. Instead it reports
one ErrorKind plus a message here. The default sink logs and counts.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Protocol

from visimos.models.diagnostics import ErrorKind


logger = logging.getLogger(__name__)


_LEVELS = {
    ErrorKind.INPUT_UNAVAILABLE: logging.ERROR,
    ErrorKind.PERSISTENCE_UNAVAILABLE: logging.WARNING,
    ErrorKind.DEGENERATE_FRAME: logging.WARNING,
    ErrorKind.OUTPUT_UNAVAILABLE: logging.WARNING,
}


@dataclass(frozen=True, slots=True)
class DiagnosticReport:
    """One reported failure."""

    kind: ErrorKind
    message: str


class DiagnosticsSink(Protocol):
    """Protocol for failure reporting."""

    def report(self, kind: ErrorKind, message: str) -> None:
        ...


class LoggingDiagnosticsSink:
    """
    Logs reports and keeps per-kind counters.

    Attributes:
        keep_last: How many reports to retain for inspection
    """

    def __init__(self, keep_last: int = 50) -> None:
        if keep_last < 1:
            raise ValueError(f"keep_last must be >= 1, got {keep_last}")
        self.keep_last = keep_last
        self._counts: Counter = Counter()
        self._recent: List[DiagnosticReport] = []

    def report(self, kind: ErrorKind, message: str) -> None:
        self._counts[kind] += 1
        self._recent.append(DiagnosticReport(kind=kind, message=message))
        del self._recent[:-self.keep_last]

        logger.log(_LEVELS.get(kind, logging.WARNING), f"[{kind.value}] {message}")

    def count(self, kind: ErrorKind) -> int:
        return self._counts[kind]

    @property
    def reports(self) -> List[DiagnosticReport]:
        """Most recent reports, oldest first."""
        return list(self._recent)

    def get_metrics(self) -> dict:
        """Get counters for observability."""
        return {kind.value: self._counts[kind] for kind in ErrorKind}
