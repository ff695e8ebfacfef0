"""Lifecycle events emitted by a test runner.

Every event is an immutable pydantic model tagged by its ``kind`` field, so a
payload coming from Python code, a dict or a recorded JSON line is validated
through the same :data:`EVENT_ADAPTER`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from glint.errors import EventDecodeError
from glint.types import Outcome


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class FailureDetail(_Event):
    """Message and backtrace of a failed example."""

    message: str = ""
    backtrace: list[str] | None = None


class RunStart(_Event):
    kind: Literal["run_start"] = "run_start"
    expected_count: int = 0


class ExampleStarted(_Event):
    kind: Literal["example_started"] = "example_started"
    example_id: str


class ExampleCompleted(_Event):
    kind: Literal["example_completed"] = "example_completed"
    outcome: Outcome
    description: str
    location: str
    duration: float = 0.0
    failure: FailureDetail | None = None


class RunStop(_Event):
    kind: Literal["run_stop"] = "run_stop"


class SummaryReady(_Event):
    kind: Literal["summary_ready"] = "summary_ready"
    duration: float = 0.0
    failed_count: int = 0
    pending_count: int = 0


Event = Annotated[
    Union[RunStart, ExampleStarted, ExampleCompleted, RunStop, SummaryReady],
    Field(discriminator="kind"),
]

EVENT_ADAPTER: TypeAdapter[Event] = TypeAdapter(Event)


def encode_event(event: Event) -> str:
    """Serialize an event to a single JSON line (without the newline)."""
    return EVENT_ADAPTER.dump_json(event).decode("utf-8")


def decode_event(payload: str | bytes | dict) -> Event:
    """Validate a JSON string or a mapping into an event."""
    if isinstance(payload, dict):
        return EVENT_ADAPTER.validate_python(payload)
    return EVENT_ADAPTER.validate_json(payload)


def iter_events(lines: Iterable[str]) -> Iterator[Event]:
    """Decode a JSON-lines event stream, skipping blank lines.

    Raises:
        EventDecodeError: If a line is not a valid event.
    """
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield decode_event(line)
        except ValidationError as exc:
            raise EventDecodeError(line_number, exc) from exc


__all__ = [
    "EVENT_ADAPTER",
    "Event",
    "ExampleCompleted",
    "ExampleStarted",
    "FailureDetail",
    "RunStart",
    "RunStop",
    "SummaryReady",
    "decode_event",
    "encode_event",
    "iter_events",
]
