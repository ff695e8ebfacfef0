"""Tests for glint.reports.console module."""

import io
import re

import pytest
from rich.console import Console

from glint.config import GlintConfig
from glint.events import ExampleStarted, RunStart, RunStop, SummaryReady
from glint.reports import ReportCollector
from glint.reports.render import FileLink
from glint.types import Outcome


_LINK = re.compile(r"\x1b\]8;;([^\x07]*)\x07")
_ESCAPES = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]|\x1b\]8;;[^\x07]*\x07")


def raw(console) -> str:
    return console.file.getvalue()


def plain(console) -> str:
    return _ESCAPES.sub("", raw(console))


def section(text: str, heading: str) -> str:
    assert heading in text
    return text.split(heading, 1)[1]


def run(collector, events, duration=1.0, failed_count=None, pending_count=None):
    """Drive a full run and return the collector."""
    collector.handle(RunStart(expected_count=len(events)))
    for index, event in enumerate(events):
        collector.handle(ExampleStarted(example_id=f"id-{index}"))
        collector.handle(event)
    collector.handle(RunStop())

    state = collector.state
    collector.handle(
        SummaryReady(
            duration=duration,
            failed_count=state.failed if failed_count is None else failed_count,
            pending_count=state.pending if pending_count is None else pending_count,
        )
    )
    return collector


class TestLifecycle:
    def test_run_start_prints_header(self, collector, console):
        collector.on_run_start(3)

        assert "Running tests..." in plain(console)
        assert collector.state.total_expected == 3

    def test_run_start_resets_state(self, collector, completed):
        collector.handle(RunStart(expected_count=1))
        collector.handle(completed(Outcome.FAILED, message="boom"))

        collector.handle(RunStart(expected_count=2))

        assert collector.state.examples_seen == 0
        assert collector.state.failures == []
        assert collector.progress_color == collector.palette.progress_ongoing

    def test_example_started_tracks_current_example(self, collector):
        collector.handle(ExampleStarted(example_id="tests/test_a.py::test_one"))

        assert collector.current_example == "tests/test_a.py::test_one"

    def test_handle_dispatches_completed_events(self, collector, completed):
        collector.handle(RunStart(expected_count=3))
        collector.handle(completed(Outcome.PASSED))
        collector.handle(completed(Outcome.FAILED, message="boom"))
        collector.handle(completed(Outcome.PENDING))

        state = collector.state
        assert (state.examples_seen, state.passed, state.failed, state.pending) == (3, 1, 1, 1)
        assert state.failures[0].message == "boom"

    def test_run_stop_prints_blank_lines(self, collector, console):
        collector.on_run_stop()

        assert raw(console) == "\n\n"


class TestProgress:
    def test_progress_rewrites_line_in_place(self, collector, console, completed):
        collector.handle(RunStart(expected_count=2))
        collector.handle(completed(Outcome.PASSED))
        collector.handle(completed(Outcome.PENDING))

        output = raw(console)
        assert output.count("\r\x1b[0K") == 2
        assert not output.endswith("\n")
        assert "1/1 (1 passed, 0 failed, 0 pending)" in plain(console)
        assert "1/2 (1 passed, 0 failed, 1 pending)" in plain(console)

    def test_progress_counts_failures(self, collector, console, completed):
        collector.handle(RunStart(expected_count=2))
        collector.handle(completed(Outcome.FAILED, message="boom"))

        assert "0/1 (0 passed, 1 failed, 0 pending)" in plain(console)

    def test_failure_turns_progress_red_for_rest_of_run(self, collector, completed):
        collector.handle(RunStart(expected_count=3))
        collector.handle(completed(Outcome.PASSED))
        assert collector.progress_color == collector.palette.progress_ongoing

        collector.handle(completed(Outcome.FAILED, message="boom"))
        collector.handle(completed(Outcome.PASSED))

        assert collector.progress_color == collector.palette.progress_failing

    def test_progress_skipped_on_non_terminal(self, plain_console, completed):
        collector = ReportCollector(plain_console)
        collector.handle(completed(Outcome.PASSED))

        assert raw(plain_console) == ""
        assert collector.state.passed == 1


class TestSummary:
    def test_summary_box(self, collector, console, completed):
        run(
            collector,
            [completed(Outcome.PASSED), completed(Outcome.PASSED), completed(Outcome.FAILED, message="x")],
            duration=1.5,
        )

        summary = section(plain(console), "Test Summary")
        assert "Duration: 1.5s" in summary
        assert "Examples: 3" in summary
        assert "2 passed  1 failed" in summary

    def test_results_line_lists_only_nonzero_categories(self, collector, completed):
        collector.handle(RunStart(expected_count=2))
        collector.handle(completed(Outcome.PASSED))
        collector.handle(completed(Outcome.PENDING))

        assert collector.results_line().plain == "1 passed  1 pending"

    def test_results_line_empty_run(self, collector):
        assert collector.results_line().plain == ""


class TestFailures:
    def test_failure_boxes_in_order(self, collector, console, completed):
        run(
            collector,
            [
                completed(Outcome.FAILED, "first fails", "./tests/test_a.py:3", message="first message"),
                completed(Outcome.PASSED),
                completed(Outcome.FAILED, "second fails", "tests/test_b.py:8", message="second message"),
            ],
        )

        failures = section(plain(console), "Failures")
        assert failures.index("1) first fails") < failures.index("2) second fails")
        assert "Location: tests/test_a.py:3" in failures
        assert "/project/tests/test_a.py:3" in failures
        assert "Message:" in failures
        assert "second message" in failures

    def test_location_is_hyperlinked(self, collector, console, completed):
        run(collector, [completed(Outcome.FAILED, "fails", "./tests/test_a.py:3", message="m")])

        link = "\x1b]8;;file:///project/tests/test_a.py:3\x07/project/tests/test_a.py:3\x1b]8;;\x07"
        assert link in raw(console)

    def test_message_cut_to_ten_lines(self, collector, console, completed):
        message = "\n".join(f"line {i}" for i in range(15))
        run(collector, [completed(Outcome.FAILED, message=message)])

        failures = section(plain(console), "Failures")
        assert "line 9" in failures
        assert "line 10" not in failures
        assert "line 14" not in failures

    def test_no_failures_section_without_failures(self, collector, console, completed):
        run(collector, [completed(Outcome.PASSED)])

        assert "Failures" not in plain(console)

    def test_backtrace_hidden_by_default(self, collector, console, completed):
        run(collector, [completed(Outcome.FAILED, message="m", backtrace=["tests/test_a.py:3"])])

        assert "tests/test_a.py:3" not in section(plain(console), "Failures").split("Message:")[1]

    def test_backtrace_shown_when_configured(self, console, completed):
        collector = ReportCollector(console, config=GlintConfig(show_backtrace=True))
        frames = [f"frame_{i}.py:{i}" for i in range(8)]
        run(collector, [completed(Outcome.FAILED, message="m", backtrace=frames)])

        failures = section(plain(console), "Failures")
        assert "frame_4.py:4" in failures
        assert "frame_5.py:5" not in failures


class TestSlowest:
    def test_lists_slowest_descending(self, collector, console, completed):
        run(
            collector,
            [
                completed(description="medium", duration=0.3),
                completed(description="fast", duration=0.01),
                completed(description="slow", duration=0.5),
            ],
            duration=2.0,
        )

        table = section(plain(console), "Top 3 Slowest Tests")
        assert table.index("slow") < table.index("medium") < table.index("fast")
        assert table.index("500.0ms") < table.index("300.0ms") < table.index("10.0ms")

    def test_only_three_rows(self, collector, console, completed):
        run(
            collector,
            [completed(description=f"test {i}", duration=i / 10) for i in range(1, 6)],
        )

        table = section(plain(console), "Top 3 Slowest Tests")
        assert "test 5" in table
        assert "test 3" in table
        assert "test 2" not in table

    def test_truncates_description_and_location(self, collector, console, completed):
        description = "d" * 60
        location = "./tests/" + "nested/" * 6 + "test_deep.py:1"
        run(collector, [completed(description=description, location=location)])

        table = section(plain(console), "Top 3 Slowest Tests")
        assert "d" * 47 + "..." in table
        assert "d" * 48 not in table
        assert "tests/nested/nested/nested/..." in table

    def test_location_links_to_absolute_path(self, collector, console, completed):
        run(collector, [completed(location="./tests/test_a.py:3")])

        slowest = section(raw(console), "Slowest Tests")
        assert "\x1b]8;;file:///project/tests/test_a.py:3\x07" in slowest

    def test_no_tests_recorded(self, collector, console):
        run(collector, [])

        table = section(plain(console), "Top 3 Slowest Tests")
        assert "No tests recorded." in table
        assert "Location" not in table

    def test_links_disabled(self, console, completed):
        collector = ReportCollector(console, config=GlintConfig(hyperlinks=False))
        run(collector, [completed(Outcome.FAILED, message="m")])

        assert "\x1b]8;;" not in raw(console)

    def test_links_dropped_on_non_terminal(self, plain_console, completed):
        collector = ReportCollector(plain_console, base_dir="/project")
        run(collector, [completed(Outcome.FAILED, location="tests/test_a.py:3", message="m")])

        output = raw(plain_console)
        assert "\x1b" not in output
        assert "/project/tests/test_a.py:3" in output


class TestFinalStatus:
    @pytest.mark.parametrize(
        ("failed", "pending", "expected"),
        [
            (1, 0, "FAILED"),
            (2, 5, "FAILED"),
            (0, 3, "PENDING"),
            (0, 0, "PASSED"),
        ],
    )
    def test_banner_priority(self, collector, console, failed, pending, expected):
        run(collector, [], failed_count=failed, pending_count=pending)

        banners = {"FAILED", "PENDING", "PASSED"}
        output = plain(console)
        assert expected in output
        for other in banners - {expected}:
            assert other not in output

    def test_banner_trusts_summary_counts(self, collector, console, completed):
        run(collector, [completed(Outcome.FAILED, message="m")], failed_count=0, pending_count=0)

        assert "PASSED" in plain(console)
        assert "FAILED" not in plain(console)


def terminal(width: int) -> Console:
    return Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        width=width,
        legacy_windows=False,
    )


class TestLinksFitWidth:
    def test_long_link_is_shortened_and_closed(self):
        console = terminal(10)

        console.print(FileLink("/abc/def/ghi.py:1"))

        assert raw(console) == "\x1b]8;;file:///abc/def/ghi.py:1\x07/abc/def/…\x1b]8;;\x07\n"

    def test_short_link_untouched(self):
        console = terminal(40)

        console.print(FileLink("/a.py:1", "a.py:1"))

        assert raw(console) == "\x1b]8;;file:///a.py:1\x07a.py:1\x1b]8;;\x07\n"

    @pytest.mark.parametrize("width", [80, 40])
    def test_every_opened_link_is_closed(self, completed, width):
        console = terminal(width)
        collector = ReportCollector(console, base_dir="/home/runner/work/my-service/my-service")
        location = "./tests/integration/api/test_payments_endpoint.py:120"

        run(collector, [completed(Outcome.FAILED, "charges the card", location, message="declined")])

        targets = _LINK.findall(raw(console))
        assert len(targets) == 4
        assert targets[0::2] == ["file:///home/runner/work/my-service/my-service/tests/integration/api/test_payments_endpoint.py:120"] * 2
        assert targets[1::2] == ["", ""]
        assert "…" in plain(console)
