"""Glint - styled terminal reports for test runs."""

from .config import GlintConfig, load_config
from .events import (
    Event,
    ExampleCompleted,
    ExampleStarted,
    FailureDetail,
    RunStart,
    RunStop,
    SummaryReady,
)
from .reports import EventRecorder, ReportCollector, Reporter, reporter
from .types import Outcome
from .version import __version__


__all__ = [
    # Events
    "Event",
    "RunStart",
    "ExampleStarted",
    "ExampleCompleted",
    "FailureDetail",
    "RunStop",
    "SummaryReady",
    "Outcome",
    # Reporters
    "Reporter",
    "ReportCollector",
    "EventRecorder",
    "reporter",
    # Config
    "GlintConfig",
    "load_config",
    "__version__",
]
