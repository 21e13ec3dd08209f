"""
Core utilities — exceptions and cross-cutting concerns.

Provides the error taxonomy shared by the analysis engine, the config
layer, and the API server.
"""

from backend_reputul.core.exceptions import (  # noqa: F401
    ConfigurationError,
    InvalidGoalTargetError,
    InvalidRatingError,
    ReputulError,
)

__all__ = [
    "ConfigurationError",
    "InvalidGoalTargetError",
    "InvalidRatingError",
    "ReputulError",
]
