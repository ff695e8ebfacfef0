"""Reporting module for glint run output."""

from glint.reports.base import Reporter
from glint.reports.console import ReportCollector
from glint.reports.recorder import EventRecorder
from glint.reports.registry import (
    get_reporter_registry,
    register_builtin,
    reporter,
    resolve_reporter,
    resolve_reporters,
)
from glint.reports.state import FailureRecord, RunState, TimingRecord


register_builtin(ReportCollector)
register_builtin(EventRecorder)

__all__ = [
    "EventRecorder",
    "FailureRecord",
    "ReportCollector",
    "Reporter",
    "RunState",
    "TimingRecord",
    "get_reporter_registry",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
]
