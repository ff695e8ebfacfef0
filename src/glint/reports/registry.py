"""Name-based lookup of reporter classes.

The pytest plugin and ``[tool.glint] reporters`` refer to reporters by name.
A name is either a key of the registry (``ReportCollector``) or an import
string (``myapp.reports:SlackReporter`` or ``myapp.reports.SlackReporter``).
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from glint.reports.base import Reporter


logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Reporter")

_reporter_registry: dict[str, type[Reporter]] = {}
_builtin_registry: dict[str, type[Reporter]] = {}


def _register(cls: type[T], name: str | None, *, builtin: bool) -> type[T]:
    key = name or cls.__name__
    _reporter_registry[key] = cls
    if builtin:
        _builtin_registry[key] = cls
    logger.debug("Registered reporter %s -> %s.%s", key, cls.__module__, cls.__qualname__)
    return cls


def reporter(cls: type[T] | None = None, *, name: str | None = None) -> type[T] | Any:
    """Register a reporter class so it can be selected by name.

    Usable bare or with a custom registry name:

        @reporter
        class SlackReporter: ...

        @reporter(name="slack")
        class SlackReporter: ...
    """
    if cls is not None:
        return _register(cls, name, builtin=False)
    return lambda cls: _register(cls, name, builtin=False)


def register_builtin(cls: type[T]) -> type[T]:
    """Register a reporter shipped with glint; it survives ``clear_reporter_registry``."""
    return _register(cls, None, builtin=True)


def get_reporter_registry() -> dict[str, type[Reporter]]:
    return _reporter_registry


def clear_reporter_registry() -> None:
    """Drop user registrations, keeping the built-in reporters."""
    _reporter_registry.clear()
    _reporter_registry.update(_builtin_registry)


def _split_import_path(import_path: str) -> tuple[str, str]:
    separator = ":" if ":" in import_path else "."
    module_path, _, attribute = import_path.rpartition(separator)
    if not module_path or not attribute:
        msg = f"Invalid import path: {import_path}"
        raise ValueError(msg)
    return module_path, attribute


def _import_reporter_class(import_path: str) -> type[Reporter]:
    from glint.reports.base import Reporter

    module_path, attribute = _split_import_path(import_path)
    module = importlib.import_module(module_path)
    try:
        cls = getattr(module, attribute)
    except AttributeError as exc:
        msg = f"Module {module_path} has no reporter named {attribute}"
        raise ValueError(msg) from exc

    if not isinstance(cls, type) or not issubclass(cls, Reporter):
        msg = f"{import_path} is not a Reporter class"
        raise TypeError(msg)
    return cls


def resolve_reporter(name: str, **kwargs: Any) -> Reporter:
    """Instantiate a reporter from a registry name or an import string.

    Raises:
        ValueError: If the name is unknown or the import string is malformed.
        TypeError: If the import string points at something that is not a reporter.
        ImportError: If the module of an import string cannot be imported.
    """
    cls = _reporter_registry.get(name)
    if cls is None:
        if ":" not in name and "." not in name:
            available = ", ".join(sorted(_reporter_registry))
            msg = f"Unknown reporter: {name}. Available: {available}"
            raise ValueError(msg)
        cls = _import_reporter_class(name)

    logger.debug("Resolved reporter %s", name)
    return cls(**kwargs)


def resolve_reporters(
    names: list[str],
    options: dict[str, dict[str, Any]] | None = None,
) -> list[Reporter]:
    """Instantiate reporters in order; ``options`` maps a name to its constructor kwargs."""
    options = options or {}
    return [resolve_reporter(name, **options.get(name, {})) for name in names]


__all__ = [
    "clear_reporter_registry",
    "get_reporter_registry",
    "register_builtin",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
]
