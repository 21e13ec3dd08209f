"""
Application-level exceptions.

All failures raised by the engine are local, synchronous validation errors:
nothing is retried here. Each carries a stable error code so the API layer
can map it to a consistent JSON error response (HTTP 400 for bad input).
"""

from __future__ import annotations

from typing import Any


class ReputulError(Exception):
    """Base class for engine errors. `code` is stable and safe to expose to clients."""

    code = "reputul_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class InvalidRatingError(ReputulError, ValueError):
    """Rating is not an integer in [1, 5]. Raised at ingestion and at gate evaluation."""

    code = "invalid_rating"

    def __init__(self, rating: Any, message: str | None = None) -> None:
        super().__init__(message or f"Rating must be an integer between 1 and 5, got {rating!r}")
        self.rating = rating


class InvalidGoalTargetError(ReputulError, ValueError):
    """Goal target is not a number in (0, 5]."""

    code = "invalid_goal_target"

    def __init__(self, target: Any, message: str | None = None) -> None:
        super().__init__(message or f"Goal target must be a number in (0, 5], got {target!r}")
        self.target = target


class ConfigurationError(ReputulError):
    """Scoring configuration is missing or invalid. Fatal at startup."""

    code = "configuration_error"

    def __init__(self, setting: str, message: str) -> None:
        super().__init__(f"{setting}: {message}")
        self.setting = setting
