"""Shared fixtures for unit tests."""

import io
from collections.abc import Callable

import pytest
from rich.console import Console

from glint.events import Event, ExampleCompleted, FailureDetail
from glint.reports import ReportCollector
from glint.types import Outcome


class ListReporter:
    """Reporter that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def handle(self, event: Event) -> None:
        self.events.append(event)


def _completed(
    outcome: Outcome = Outcome.PASSED,
    description: str = "example",
    location: str = "./tests/test_sample.py:10",
    duration: float = 0.01,
    message: str | None = None,
    backtrace: list[str] | None = None,
) -> ExampleCompleted:
    failure = None
    if message is not None or backtrace is not None:
        failure = FailureDetail(message=message or "", backtrace=backtrace)
    return ExampleCompleted(
        outcome=outcome,
        description=description,
        location=location,
        duration=duration,
        failure=failure,
    )


@pytest.fixture
def completed() -> Callable[..., ExampleCompleted]:
    """Factory for ``example_completed`` events."""
    return _completed


@pytest.fixture
def list_reporter() -> ListReporter:
    return ListReporter()


@pytest.fixture(autouse=True)
def terminal_env(monkeypatch):
    """Keep rich terminal detection independent of the host environment."""
    monkeypatch.setenv("TERM", "xterm-256color")
    for name in ("NO_COLOR", "FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE", "COLUMNS", "LINES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def console() -> Console:
    """A terminal console writing into a string buffer."""
    return Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        width=160,
        legacy_windows=False,
    )


@pytest.fixture
def plain_console() -> Console:
    """A non-terminal console: no styles, no cursor control, no links."""
    return Console(file=io.StringIO(), force_terminal=False, width=160)


@pytest.fixture
def collector(console: Console) -> ReportCollector:
    return ReportCollector(console, base_dir="/project")
