"""Rendering primitives on top of rich.

:class:`RichRenderer` is the only object that writes to the console. The
collector builds renderables through it and never touches the output stream.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from rich import box
from rich.cells import cell_len
from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.control import Control
from rich.measure import Measurement
from rich.padding import Padding
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.segment import ControlType, Segment
from rich.style import Style
from rich.styled import Styled
from rich.table import Table
from rich.text import Text

from glint.reports.formatting import link_escapes


HEADER_ROW = -1

# Marks the OSC 8 escapes as zero-width control segments (they end with BEL).
_LINK_CONTROL = ((ControlType.BELL,),)

StyleFunc = Callable[[int, int], Style]


class FileLink:
    """A line of text wrapped in an OSC 8 ``file://`` hyperlink.

    The escape sequences are emitted as control segments: they take no cells
    when rich lays out boxes and tables, and they are dropped when the console
    is not a terminal. Text wider than the space it is given is shortened with
    an ellipsis so the closing sequence is never cropped away.
    """

    def __init__(
        self,
        target: str,
        text: str | None = None,
        style: Style | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self.target = target
        self.text = target if text is None else text
        self.style = style
        self.enabled = enabled

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        text = Text(self.text, no_wrap=True, end="")
        text.truncate(options.max_width, overflow="ellipsis")

        if not self.enabled:
            yield Segment(text.plain, self.style)
            yield Segment.line()
            return

        opening, closing = link_escapes(self.target)
        yield Segment(opening, None, _LINK_CONTROL)
        yield Segment(text.plain, self.style)
        yield Segment(closing, None, _LINK_CONTROL)
        yield Segment.line()

    def __rich_measure__(self, console: Console, options: ConsoleOptions) -> Measurement:
        width = cell_len(self.text)
        return Measurement(width, width)


class RichRenderer:
    """Builds styled renderables and writes them to a rich console."""

    def __init__(self, console: Console | None = None, *, hyperlinks: bool = True) -> None:
        self.console = console or Console()
        self.hyperlinks = hyperlinks

    def styled(self, text: str, style: Style | None = None) -> Text:
        return Text(text, style=style or "")

    def join(self, parts: Iterable[Text], separator: str = "") -> Text:
        return Text(separator).join(parts)

    def lines(self, lines: Iterable[RenderableType]) -> Group:
        """Stack renderables vertically; plain strings become unstyled lines."""
        return Group(*(Text(line) if isinstance(line, str) else line for line in lines))

    def box(
        self,
        body: RenderableType,
        border_style: Style,
        *,
        padding: tuple[int, int] = (1, 2),
    ) -> Panel:
        """A rounded border around ``body``, shrunk to fit its content."""
        return Panel(
            body,
            box=box.ROUNDED,
            border_style=border_style,
            padding=padding,
            expand=False,
        )

    def progress_bar(
        self,
        fraction: float,
        color: str,
        *,
        track_color: str,
        width: int,
    ) -> ProgressBar:
        fraction = min(1.0, max(0.0, fraction))
        return ProgressBar(
            total=1.0,
            completed=fraction,
            width=width,
            style=Style(color=track_color),
            complete_style=Style(color=color),
            finished_style=Style(color=color),
        )

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[RenderableType]],
        style_for: StyleFunc,
    ) -> Table:
        """A rounded table; ``style_for(row, column)`` gets ``HEADER_ROW`` for headers."""
        table = Table(box=box.ROUNDED, padding=(0, 1))
        for column, header in enumerate(headers):
            table.add_column(header, header_style=style_for(HEADER_ROW, column))

        for row_index, row in enumerate(rows):
            cells: list[RenderableType] = []
            for column, cell in enumerate(row):
                style = style_for(row_index, column)
                if isinstance(cell, str):
                    cells.append(Text(cell, style=style))
                else:
                    cells.append(Styled(cell, style))
            table.add_row(*cells)
        return table

    def link(self, target: str, text: str | None = None, style: Style | None = None) -> FileLink:
        return FileLink(target, text, style, enabled=self.hyperlinks)

    def banner(self, label: str, style: Style, *, padding: tuple[int, int] = (0, 2)) -> Padding:
        return Padding(Text(label, style=style), padding, style=style, expand=False)

    def write(self, *renderables: RenderableType) -> None:
        """Print each renderable on its own line(s)."""
        for renderable in renderables:
            self.console.print(renderable)

    def blank(self, count: int = 1) -> None:
        self.console.line(count)

    def rewrite_line(self, *renderables: RenderableType) -> None:
        """Replace the current terminal line with ``renderables``.

        Sinks that are not terminals cannot move the cursor back, so nothing
        is written to them.
        """
        if not self.console.is_terminal or self.console.is_dumb_terminal:
            return
        self.console.control(
            Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 0))
        )
        self.console.print(*renderables, sep="", end="")


__all__ = ["HEADER_ROW", "FileLink", "RichRenderer", "StyleFunc"]
