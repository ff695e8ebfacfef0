"""Base reporter protocol for glint output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from glint.events import Event


@runtime_checkable
class Reporter(Protocol):
    """Protocol defining the interface for run reporters.

    Reporters receive every lifecycle event in runner order. Handlers run
    synchronously and must finish their output before returning.
    """

    def handle(self, event: Event) -> None:
        """Called once per lifecycle event."""
        ...
