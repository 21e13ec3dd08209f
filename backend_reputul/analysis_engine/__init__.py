"""
Analysis engine package — reputation scoring, goal projection, feedback routing.

Pure functions over review sets (or a single rating) plus configuration.
No I/O and no shared mutable state; callers fetch reviews and links from
the collaborator stores and pass them in.
"""

from backend_reputul.analysis_engine.models import (
    Badge,
    RatingGoal,
    ReputationBreakdown,
    ReputationSnapshot,
    Review,
    ReviewSource,
    validate_rating,
)
from backend_reputul.analysis_engine.scorer import (
    assign_badge,
    compute_breakdown,
    compute_snapshot,
    wilson_lower_bound,
)
from backend_reputul.analysis_engine.goals import project_goals, validate_target
from backend_reputul.analysis_engine.feedback_gate import (
    RoutingDecision,
    RoutingOutcome,
    route,
)

__all__ = [
    "Badge",
    "RatingGoal",
    "ReputationBreakdown",
    "ReputationSnapshot",
    "Review",
    "ReviewSource",
    "validate_rating",
    "assign_badge",
    "compute_breakdown",
    "compute_snapshot",
    "wilson_lower_bound",
    "project_goals",
    "validate_target",
    "RoutingDecision",
    "RoutingOutcome",
    "route",
]
