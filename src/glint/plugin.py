"""pytest plugin that streams the session to glint reporters.

Enabled with ``--glint``. The plugin silences pytest's terminal reporter and
translates pytest's hooks into glint events:

- ``pytest_collection_finish`` -> ``RunStart``
- ``pytest_runtest_logstart`` -> ``ExampleStarted``
- ``pytest_runtest_logreport`` (setup/call/teardown) folded per test, then
  ``pytest_runtest_logfinish`` -> one ``ExampleCompleted``
- ``pytest_sessionfinish`` -> ``RunStop`` and ``SummaryReady``

``--collect-only`` runs keep pytest's own listing.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pytest
from rich.console import Console

from glint.config import GlintConfig, load_config
from glint.errors import ConfigError
from glint.events import (
    Event,
    ExampleCompleted,
    ExampleStarted,
    FailureDetail,
    RunStart,
    RunStop,
    SummaryReady,
)
from glint.reports import resolve_reporters
from glint.types import Outcome

if TYPE_CHECKING:
    from glint.reports.base import Reporter


logger = logging.getLogger(__name__)

PLUGIN_NAME = "glint-reporter"

# Higher wins when one test reports several phases.
_PRIORITY = {Outcome.PASSED: 0, Outcome.PENDING: 1, Outcome.FAILED: 2}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("glint", "styled run report")
    group.addoption(
        "--glint",
        action="store_true",
        default=False,
        help="Replace the terminal output with glint's styled report (ignored with --collect-only)",
    )
    group.addoption(
        "--glint-reporter",
        dest="glint_reporters",
        action="append",
        default=None,
        metavar="NAME",
        help="Reporter name or import path (repeatable, default: ReportCollector)",
    )
    group.addoption(
        "--glint-record",
        dest="glint_record",
        default=None,
        metavar="PATH",
        help="Also record the event stream as JSON lines to PATH",
    )


@pytest.hookimpl(trylast=True)
def pytest_configure(config: pytest.Config) -> None:
    if not config.getoption("glint"):
        return
    if config.getoption("collectonly"):
        logger.debug("Collect-only run, keeping the standard terminal reporter")
        return

    try:
        settings = load_config(start=config.rootpath)
    except ConfigError as exc:
        raise pytest.UsageError(str(exc)) from exc

    color = config.getoption("color", default="auto")
    console = Console(
        file=sys.stdout,
        force_terminal=True if color == "yes" else None,
        no_color=color == "no",
    )

    try:
        reporters = build_reporters(config, settings, console)
    except (ImportError, TypeError, ValueError) as exc:
        raise pytest.UsageError(f"glint: {exc}") from exc

    standard = config.pluginmanager.getplugin("terminalreporter")
    if standard is not None:
        config.pluginmanager.unregister(standard)
    config.pluginmanager.register(QuietTerminalReporter(config, sys.stdout), "terminalreporter")

    config.pluginmanager.register(GlintPlugin(reporters), PLUGIN_NAME)


def build_reporters(config: pytest.Config, settings: GlintConfig, console: Console) -> list[Reporter]:
    """Resolve the configured reporters, command line taking precedence."""
    names = list(config.getoption("glint_reporters") or settings.reporters)
    record_path = config.getoption("glint_record") or settings.record_path
    if record_path and "EventRecorder" not in names:
        names.append("EventRecorder")
    if "EventRecorder" in names and not record_path:
        msg = "EventRecorder needs --glint-record PATH or record_path in [tool.glint]"
        raise ValueError(msg)

    options: dict[str, dict[str, Any]] = {
        "ReportCollector": {
            "console": console,
            "config": settings,
            "base_dir": str(config.rootpath),
        },
        "EventRecorder": {"path": record_path},
    }
    return resolve_reporters(names, options)


class QuietTerminalReporter(pytest.TerminalReporter):
    """Stands in for pytest's terminal reporter while glint owns the output.

    Other plugins still reach the terminal through ``"terminalreporter"``
    (``--setup-show``, ``--pdb``, live logging), so the writer stays
    available. Only the progress and summary output is switched off.
    """

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        pass

    def pytest_collection(self) -> None:
        pass

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        pass

    def pytest_collection_finish(self, session: pytest.Session) -> None:
        pass

    def pytest_runtest_logstart(self, nodeid: str, location: tuple[str, int | None, str]) -> None:
        pass

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        pass

    def pytest_runtestloop(self) -> None:
        pass

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        pass


@dataclass
class _TestProgress:
    """Phases of one test seen so far."""

    outcome: Outcome | None = None
    duration: float = 0.0
    failure: FailureDetail | None = None

    def merge(self, report: pytest.TestReport) -> None:
        self.duration += report.duration
        outcome = outcome_from_report(report)
        if outcome is None:
            return
        if outcome == Outcome.FAILED and self.failure is None:
            self.failure = failure_from_report(report)
        if self.outcome is None or _PRIORITY[outcome] > _PRIORITY[self.outcome]:
            self.outcome = outcome


class GlintPlugin:
    """Session-scoped bridge from pytest hooks to reporters."""

    def __init__(self, reporters: list[Reporter]) -> None:
        self.reporters = reporters
        self.pending_count = 0
        self._started_at: float | None = None
        self._in_flight: dict[str, _TestProgress] = {}
        self._collect_errors: list[ExampleCompleted] = []

    def emit(self, event: Event) -> None:
        for reporter in self.reporters:
            reporter.handle(event)

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self._started_at = time.perf_counter()

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        if not report.failed:
            return
        path = report.nodeid or "."
        self._collect_errors.append(
            ExampleCompleted(
                outcome=Outcome.FAILED,
                description=f"Collection error: {path}",
                location=report.fspath or ".",
                failure=FailureDetail(message=report.longreprtext),
            )
        )

    def pytest_collection_finish(self, session: pytest.Session) -> None:
        self.emit(RunStart(expected_count=len(session.items) + len(self._collect_errors)))
        for event in self._collect_errors:
            self.emit(event)

    def pytest_runtest_logstart(self, nodeid: str, location: tuple[str, int | None, str]) -> None:
        self._in_flight[nodeid] = _TestProgress()
        self.emit(ExampleStarted(example_id=nodeid))

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        self._in_flight.setdefault(report.nodeid, _TestProgress()).merge(report)

    def pytest_runtest_logfinish(self, nodeid: str, location: tuple[str, int | None, str]) -> None:
        progress = self._in_flight.pop(nodeid, None)
        if progress is None:
            logger.debug("No reports seen for %s", nodeid)
            return

        outcome = progress.outcome or Outcome.PASSED
        if outcome == Outcome.PENDING:
            self.pending_count += 1

        self.emit(
            ExampleCompleted(
                outcome=outcome,
                description=describe(nodeid, location),
                location=format_pytest_location(location),
                duration=progress.duration,
                failure=progress.failure,
            )
        )

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        duration = time.perf_counter() - self._started_at if self._started_at is not None else 0.0
        self.emit(RunStop())
        self.emit(
            SummaryReady(
                duration=duration,
                failed_count=session.testsfailed,
                pending_count=self.pending_count,
            )
        )


def outcome_from_report(report: pytest.TestReport) -> Outcome | None:
    """Map one phase report to an outcome; ``None`` when the phase has no verdict."""
    if report.when == "call":
        if report.passed:
            return Outcome.PASSED
        if report.failed:
            return Outcome.FAILED
        return Outcome.PENDING
    if report.skipped:
        return Outcome.PENDING
    if report.failed:
        return Outcome.FAILED
    return None


def failure_from_report(report: pytest.TestReport) -> FailureDetail:
    """Crash message and innermost-first ``path:line`` backtrace of a failed phase."""
    longrepr = report.longrepr
    crash = getattr(longrepr, "reprcrash", None)
    message = crash.message if crash is not None else report.longreprtext

    backtrace: list[str] = []
    reprtraceback = getattr(longrepr, "reprtraceback", None)
    for entry in getattr(reprtraceback, "reprentries", ()):
        fileloc = getattr(entry, "reprfileloc", None)
        if fileloc is not None:
            backtrace.append(f"{fileloc.path}:{fileloc.lineno}")
    backtrace.reverse()

    if not backtrace and report.longreprtext:
        backtrace = report.longreprtext.splitlines()

    return FailureDetail(message=message, backtrace=backtrace or None)


def describe(nodeid: str, location: tuple[str, int | None, str]) -> str:
    """Human description of a test: its domain (``Class.test_name[param]``)."""
    domain = location[2] if len(location) > 2 else ""
    return domain or nodeid


def format_pytest_location(location: tuple[str, int | None, str]) -> str:
    """``file:line`` from a pytest location tuple (its line number is 0-based)."""
    path, lineno = location[0], location[1]
    if lineno is None:
        return path
    return f"{path}:{lineno + 1}"


__all__ = [
    "GlintPlugin",
    "QuietTerminalReporter",
    "build_reporters",
    "describe",
    "failure_from_report",
    "format_pytest_location",
    "outcome_from_report",
]
