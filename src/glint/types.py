"""Shared types for glint."""

from enum import Enum


class Outcome(str, Enum):
    """Terminal result of a single example."""

    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"  # Skipped or not yet implemented
