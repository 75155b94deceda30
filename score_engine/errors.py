"""Error types raised by the scoring engine."""

from __future__ import annotations


class ScoreEngineError(Exception):
    """Base class for engine errors."""


class ActivityNotFound(ScoreEngineError, LookupError):
    """Raised when an operation targets an unknown or deleted activity."""

    def __init__(self, activity_id: str):
        super().__init__(f"Activity not found: {activity_id}")
        self.activity_id = activity_id


class InvalidConfiguration(ScoreEngineError, ValueError):
    """Raised for out-of-range settings such as a cutoff hour outside 0-23."""
