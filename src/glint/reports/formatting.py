"""Pure text helpers used by the terminal reporter."""

from __future__ import annotations

import math
import os
from collections.abc import Sequence


def format_duration(seconds: float) -> str:
    """Render a duration with a unit matching its magnitude.

    >>> format_duration(5.5)
    '5.5s'
    >>> format_duration(125.5)
    '2m 5.5s'
    """
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0

    if seconds < 0.001:
        return f"{round(seconds * 1_000_000, 2)}µs"
    if seconds < 1:
        return f"{round(seconds * 1000, 2)}ms"
    if seconds < 60:
        return f"{round(seconds, 2)}s"

    minutes = math.floor(seconds / 60)
    secs = round(seconds % 60, 2)
    return f"{minutes}m {secs}s"


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, ending with ``...`` when cut."""
    if len(text) <= max_length:
        return text
    if max_length < 3:
        return text[:max_length]
    return f"{text[: max_length - 3]}..."


def format_location(location: str) -> str:
    """Strip a single leading ``./`` from a ``file:line`` location."""
    return location.removeprefix("./")


def location_full(location: str, base: str | os.PathLike[str] | None = None) -> str:
    """Expand a ``file:line`` location to an absolute path, keeping the line."""
    file, sep, line = location.rpartition(":")
    if not sep or not line.isdigit():
        file, line = location, ""

    expanded = os.path.expanduser(file)
    if base is not None:
        expanded = os.path.join(os.fspath(base), expanded)
    absolute = os.path.abspath(expanded)

    return f"{absolute}:{line}" if line else absolute


def format_backtrace(backtrace: Sequence[str] | None, limit: int = 5) -> str:
    """Join the first ``limit`` backtrace lines, or ``""`` without a backtrace."""
    if not backtrace:
        return ""
    return "\n".join(backtrace[:limit])


def first_lines(text: str, limit: int) -> str:
    """Keep the first ``limit`` lines of ``text``."""
    return "\n".join(text.splitlines()[:limit])


def link_escapes(target: str) -> tuple[str, str]:
    """Opening and closing OSC 8 sequences of a ``file://`` link to ``target``."""
    return f"\x1b]8;;file://{target}\x07", "\x1b]8;;\x07"


def hyperlink(target: str, text: str | None = None) -> str:
    """Wrap ``text`` in a terminal hyperlink pointing at ``file://<target>``."""
    display = target if text is None else text
    opening, closing = link_escapes(target)
    return f"{opening}{display}{closing}"


__all__ = [
    "first_lines",
    "format_backtrace",
    "format_duration",
    "format_location",
    "hyperlink",
    "link_escapes",
    "location_full",
    "truncate",
]
