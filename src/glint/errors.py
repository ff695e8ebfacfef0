"""Error types raised by glint."""

from pathlib import Path


class GlintError(Exception):
    """Base class for glint errors."""


class ConfigError(GlintError):
    """Raised when the ``[tool.glint]`` table cannot be loaded."""

    def __init__(self, path: Path, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause

        message = f"Invalid glint configuration in {path}"
        if cause:
            message += f"\n{cause}"

        super().__init__(message)


class EventDecodeError(GlintError):
    """Raised when a recorded event line fails validation."""

    def __init__(self, line_number: int, cause: Exception) -> None:
        self.line_number = line_number
        self.cause = cause
        super().__init__(f"Invalid event on line {line_number}: {cause}")
