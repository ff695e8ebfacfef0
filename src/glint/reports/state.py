"""Run-scoped accumulation of example outcomes.

Nothing here touches a terminal, so counters and records can be checked
directly in tests.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from glint.reports.formatting import format_backtrace, format_location, location_full
from glint.types import Outcome


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimingRecord:
    """Duration of one completed example."""

    description: str
    location: str
    location_full: str
    duration: float


@dataclass(frozen=True, slots=True)
class FailureRecord:
    """Details of one failed example."""

    description: str
    location: str
    location_full: str
    message: str
    backtrace: str


@dataclass
class RunState:
    """Counters and records for a single run."""

    total_expected: int = 0
    examples_seen: int = 0
    passed: int = 0
    failed: int = 0
    pending: int = 0
    has_failures: bool = False
    failures: list[FailureRecord] = field(default_factory=list)
    timings: list[TimingRecord] = field(default_factory=list)
    base_dir: str | None = None
    backtrace_lines: int = 5

    def record(
        self,
        outcome: Outcome,
        description: str,
        location: str,
        duration: float,
        message: str = "",
        backtrace: list[str] | None = None,
    ) -> None:
        """Account for one completed example."""
        duration = _clamp_duration(duration, description)
        short = format_location(location)
        full = location_full(location, self.base_dir)

        self.examples_seen += 1
        self.timings.append(TimingRecord(description, short, full, duration))

        match outcome:
            case Outcome.PASSED:
                self.passed += 1
            case Outcome.PENDING:
                self.pending += 1
            case Outcome.FAILED:
                self.failed += 1
                self.has_failures = True
                self.failures.append(
                    FailureRecord(
                        description=description,
                        location=short,
                        location_full=full,
                        message=message,
                        backtrace=format_backtrace(backtrace, self.backtrace_lines),
                    )
                )

    @property
    def completion(self) -> float:
        """Fraction of the expected examples seen so far, within ``[0, 1]``."""
        if self.total_expected <= 0:
            return 0.0
        return min(1.0, self.examples_seen / self.total_expected)

    def slowest(self, count: int = 3) -> list[TimingRecord]:
        """The ``count`` longest timings, ties kept in completion order."""
        return sorted(self.timings, key=lambda t: t.duration, reverse=True)[:count]


def _clamp_duration(duration: float, description: str) -> float:
    if math.isfinite(duration) and duration >= 0:
        return duration
    logger.debug("Clamping duration %r of %r to 0", duration, description)
    return 0.0


__all__ = ["FailureRecord", "RunState", "TimingRecord"]
