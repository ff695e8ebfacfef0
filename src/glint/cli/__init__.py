"""CLI module for glint."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from glint.config import load_config
from glint.errors import GlintError
from glint.events import SummaryReady, iter_events
from glint.reports import ReportCollector
from glint.version import __version__


logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for glint CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "replay":
        raise SystemExit(_replay(args))

    parser.print_help()
    raise SystemExit(0)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glint", description="Styled terminal reports for test runs")
    parser.add_argument("--version", action="version", version=f"glint {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    replay_parser = subparsers.add_parser("replay", help="Render a recorded event stream")
    replay_parser.add_argument("events", type=Path, help="JSON-lines file written by --glint-record")
    replay_parser.add_argument("--width", type=int, help="Console width (default: terminal width)")
    replay_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colors in the report",
    )
    replay_parser.add_argument(
        "--no-links",
        action="store_true",
        help="Do not emit terminal hyperlinks",
    )

    return parser


def _replay(args: argparse.Namespace, console: Console | None = None) -> int:
    """Feed a recorded stream through the terminal reporter.

    Returns 0 when the summary has no failures, 1 when it has, 2 when the
    file cannot be read or holds an invalid event.
    """
    console = console or Console(width=args.width, no_color=args.no_color)
    errors = Console(stderr=True)
    summary: SummaryReady | None = None

    try:
        config = load_config()
        if args.no_links:
            config = config.model_copy(update={"hyperlinks": False})
        collector = ReportCollector(console, config=config)

        with args.events.open(encoding="utf-8") as fh:
            for event in iter_events(fh):
                collector.handle(event)
                if isinstance(event, SummaryReady):
                    summary = event
    except OSError as exc:
        errors.print(f"Cannot read {args.events}: {exc.strerror or exc}", style="red", markup=False)
        return 2
    except GlintError as exc:
        errors.print(str(exc), style="red", markup=False)
        return 2

    if summary is None:
        logger.debug("No summary_ready event in %s", args.events)
        return 0
    return 1 if summary.failed_count > 0 else 0


__all__ = ["main"]
