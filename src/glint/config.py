"""Configuration loaded from ``[tool.glint]`` in ``pyproject.toml``."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from glint.errors import ConfigError


logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"


class GlintConfig(BaseModel):
    """Settings shared by the terminal reporter, the pytest plugin and the CLI."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    slowest_count: int = Field(default=3, ge=0)
    description_width: int = Field(default=50, ge=4)
    location_width: int = Field(default=30, ge=4)
    message_lines: int = Field(default=10, ge=1)
    backtrace_lines: int = Field(default=5, ge=0)
    progress_width: int = Field(default=50, ge=1)
    hyperlinks: bool = True
    show_backtrace: bool = False
    reporters: list[str] = Field(default_factory=lambda: ["ReportCollector"])
    record_path: str | None = None


DEFAULT_CONFIG = GlintConfig()


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the nearest ``pyproject.toml`` at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, *, start: Path | None = None) -> GlintConfig:
    """Load glint settings.

    Args:
        path: Explicit ``pyproject.toml`` to read. Searched for when omitted.
        start: Directory the search starts from (defaults to the working directory).

    Returns:
        The parsed config, or :data:`DEFAULT_CONFIG` when no table is present.

    Raises:
        ConfigError: If the file cannot be parsed or the table is invalid.
    """
    path = path or find_pyproject(start)
    if path is None:
        return DEFAULT_CONFIG

    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(path, exc) from exc

    table = data.get("tool", {}).get("glint")
    if table is None:
        return DEFAULT_CONFIG

    try:
        config = GlintConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(path, exc) from exc

    logger.debug("Loaded glint config from %s", path)
    return config


__all__ = ["DEFAULT_CONFIG", "GlintConfig", "find_pyproject", "load_config"]
