"""Fixed color palette for the terminal reporter."""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style


GREEN = "#04B575"
RED = "#FF6B6B"
YELLOW = "#FFCC00"
PURPLE = "#7D56F4"
GREY = "#626262"
TRACK = "#3C3C3C"


@dataclass(frozen=True)
class Palette:
    """Named styles handed to every render call of a run."""

    header: Style = Style(bold=True, color=PURPLE)
    success: Style = Style(bold=True, color=GREEN)
    failure: Style = Style(bold=True, color=RED)
    pending: Style = Style(bold=True, color=YELLOW)
    muted: Style = Style(color=GREY)
    box_border: Style = Style(color="#874BFD")
    failure_border: Style = Style(color=RED)
    table_header: Style = Style(bold=True, color="#FAFAFA", bgcolor="#5A56E0")
    table_cell: Style = Style()
    progress_ongoing: str = GREEN
    progress_failing: str = RED
    progress_track: str = TRACK
    banner_failed: Style = Style(bold=True, color="#FFFFFF", bgcolor=RED)
    banner_pending: Style = Style(bold=True, color="#000000", bgcolor=YELLOW)
    banner_passed: Style = Style(bold=True, color="#FFFFFF", bgcolor=GREEN)


DEFAULT_PALETTE = Palette()
