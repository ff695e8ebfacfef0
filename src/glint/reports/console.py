"""Terminal reporter that turns run events into a styled report."""

from __future__ import annotations

import logging
from typing import assert_never

from rich.console import Console
from rich.style import Style
from rich.text import Text

from glint.config import DEFAULT_CONFIG, GlintConfig
from glint.events import (
    Event,
    ExampleCompleted,
    ExampleStarted,
    FailureDetail,
    RunStart,
    RunStop,
    SummaryReady,
)
from glint.reports.formatting import first_lines, format_duration, truncate
from glint.reports.palette import DEFAULT_PALETTE, Palette
from glint.reports.render import HEADER_ROW, RichRenderer
from glint.reports.state import RunState
from glint.types import Outcome


logger = logging.getLogger(__name__)


class ReportCollector:
    """Accumulates a run's outcomes and renders the live progress line and summary.

    Events are expected in runner order: one ``run_start``, then for every
    example an ``example_started`` and exactly one ``example_completed``, then
    ``run_stop`` and ``summary_ready``. The order is trusted, not checked.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        config: GlintConfig | None = None,
        palette: Palette | None = None,
        renderer: RichRenderer | None = None,
        base_dir: str | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.palette = palette or DEFAULT_PALETTE
        self.renderer = renderer or RichRenderer(console, hyperlinks=self.config.hyperlinks)
        self.base_dir = base_dir
        self.state = self._new_state()
        self.progress_color = self.palette.progress_ongoing
        self.current_example: str | None = None

    def handle(self, event: Event) -> None:
        match event:
            case RunStart():
                self.on_run_start(event.expected_count)
            case ExampleStarted():
                self.on_example_started(event.example_id)
            case ExampleCompleted():
                self.on_example_completed(
                    event.outcome,
                    event.description,
                    event.location,
                    event.duration,
                    event.failure,
                )
            case RunStop():
                self.on_run_stop()
            case SummaryReady():
                self.on_summary_ready(event.duration, event.failed_count, event.pending_count)
            case _:
                assert_never(event)

    # -- lifecycle -----------------------------------------------------------

    def on_run_start(self, expected_count: int) -> None:
        logger.debug("Run started with %d expected examples", expected_count)
        self.state = self._new_state(expected_count)
        self.progress_color = self.palette.progress_ongoing
        self.current_example = None

        self.renderer.blank()
        self.renderer.write(self.renderer.styled("Running tests...", self.palette.header))
        self.renderer.blank()

    def on_example_started(self, example_id: str) -> None:
        self.current_example = example_id

    def on_example_completed(
        self,
        outcome: Outcome,
        description: str,
        location: str,
        duration: float,
        failure: FailureDetail | None = None,
    ) -> None:
        if outcome == Outcome.FAILED:
            self.progress_color = self.palette.progress_failing

        self.state.record(
            outcome,
            description,
            location,
            duration,
            message=failure.message if failure else "",
            backtrace=failure.backtrace if failure else None,
        )
        self.current_example = None
        self.render_progress()

    def on_run_stop(self) -> None:
        self.renderer.blank(2)

    def on_summary_ready(self, duration: float, failed_count: int, pending_count: int) -> None:
        self.render_summary(duration)
        if self.state.failures:
            self.render_failures()
        self.render_slowest()
        self.render_final_status(failed_count, pending_count)

    # -- rendering -----------------------------------------------------------

    def render_progress(self) -> None:
        state, palette, r = self.state, self.palette, self.renderer
        status_style = palette.failure if state.has_failures else palette.success

        counts = r.join(
            [
                r.styled(f"{state.passed}/{state.examples_seen}", status_style),
                r.styled(" "),
                r.styled("(", palette.muted),
                r.styled(f"{state.passed} passed", palette.success),
                r.styled(", ", palette.muted),
                self._count(state.failed, "failed", palette.failure),
                r.styled(", ", palette.muted),
                self._count(state.pending, "pending", palette.pending),
                r.styled(")", palette.muted),
            ]
        )
        bar = r.progress_bar(
            state.completion,
            self.progress_color,
            track_color=palette.progress_track,
            width=self.config.progress_width,
        )
        r.rewrite_line(bar, r.styled(" "), counts)

    def render_summary(self, duration: float) -> None:
        r, palette = self.renderer, self.palette
        body = r.lines(
            [
                r.styled("Test Summary", palette.header),
                "",
                r.join([r.styled("Duration: "), r.styled(format_duration(duration), palette.muted)]),
                f"Examples: {self.state.examples_seen}",
                "",
                self.results_line(),
            ]
        )
        r.write(r.box(body, palette.box_border))

    def results_line(self) -> Text:
        state, palette = self.state, self.palette
        parts = [
            self.renderer.styled(f"{count} {label}", style)
            for count, label, style in (
                (state.passed, "passed", palette.success),
                (state.failed, "failed", palette.failure),
                (state.pending, "pending", palette.pending),
            )
            if count > 0
        ]
        return self.renderer.join(parts, "  ")

    def render_failures(self) -> None:
        r, palette = self.renderer, self.palette
        r.blank()
        r.write(r.styled("Failures", palette.failure))

        for index, failure in enumerate(self.state.failures, start=1):
            content = [
                r.styled(f"{index}) {failure.description}", palette.failure),
                "",
                r.styled(f"Location: {failure.location}", palette.muted),
                r.link(failure.location_full),
                "",
                "Message:",
                first_lines(failure.message, self.config.message_lines),
            ]
            if self.config.show_backtrace and failure.backtrace:
                content += ["", r.styled(failure.backtrace, palette.muted)]

            r.blank()
            r.write(r.box(r.lines(content), palette.failure_border))

    def render_slowest(self) -> None:
        r, palette, config = self.renderer, self.palette, self.config
        r.blank()
        r.write(r.styled(f"Top {config.slowest_count} Slowest Tests", palette.header))
        r.blank()

        slowest = self.state.slowest(config.slowest_count)
        if not slowest:
            r.write(r.styled("  No tests recorded.", palette.muted))
            return

        rows = [
            [
                str(rank),
                truncate(timing.description, config.description_width),
                r.link(timing.location_full, truncate(timing.location, config.location_width)),
                format_duration(timing.duration),
            ]
            for rank, timing in enumerate(slowest, start=1)
        ]
        r.write(r.table(["#", "Test", "Location", "Duration"], rows, self._table_style))

    def render_final_status(self, failed_count: int, pending_count: int) -> None:
        r, palette = self.renderer, self.palette
        r.blank()

        if failed_count > 0:
            r.write(r.banner(" FAILED ", palette.banner_failed))
        elif pending_count > 0:
            r.write(r.banner(" PENDING ", palette.banner_pending))
        else:
            r.write(r.banner(" PASSED ", palette.banner_passed))

        r.blank()

    # -- helpers -------------------------------------------------------------

    def _new_state(self, expected_count: int = 0) -> RunState:
        return RunState(
            total_expected=expected_count,
            base_dir=self.base_dir,
            backtrace_lines=self.config.backtrace_lines,
        )

    def _count(self, count: int, label: str, style: Style) -> Text:
        return self.renderer.styled(f"{count} {label}", style if count > 0 else self.palette.muted)

    def _table_style(self, row: int, column: int) -> Style:
        if row == HEADER_ROW:
            return self.palette.table_header
        return self.palette.table_cell


__all__ = ["ReportCollector"]
