"""Reporter that records the event stream as JSON lines."""

from __future__ import annotations

import logging
from pathlib import Path

from glint.events import Event, encode_event


logger = logging.getLogger(__name__)


class EventRecorder:
    """Append every event to a JSON-lines file that ``glint replay`` can read.

    The file is truncated when the recorder is created.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")
        logger.debug("Recording events to %s", self.path)

    def handle(self, event: Event) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(encode_event(event) + "\n")


__all__ = ["EventRecorder"]
