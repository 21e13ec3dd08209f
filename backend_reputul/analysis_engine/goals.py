"""
Rating goal projection: how many 5-star reviews to reach each milestone.

Assumes every future review is 5 stars and solves for the minimal integer n
with (sum + 5n) / (count + n) >= target. A 5.0 target is asymptotic for any
imperfect record (denominator 5 - target is zero), so it reports the
configured goal cap instead of dividing.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Iterable, Sequence

from backend_reputul.analysis_engine.models import MAX_RATING, RatingGoal, Review
from backend_reputul.analysis_engine.scorer import public_rating, round_half_up, validate_reviews
from backend_reputul.config.settings import ScoringConfig, get_scoring_config
from backend_reputul.core.exceptions import InvalidGoalTargetError
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)

# Decimal places kept before ceil(); absorbs float noise such as 9.999999999999998
_CEIL_GUARD_DIGITS = 9


def validate_target(target: Any) -> float:
    """Return target as float if it is a real number in (0, 5]; raise InvalidGoalTargetError otherwise."""
    if isinstance(target, bool) or not isinstance(target, numbers.Real):
        raise InvalidGoalTargetError(target)
    value = float(target)
    if math.isnan(value) or not 0 < value <= MAX_RATING:
        raise InvalidGoalTargetError(target)
    return value


def reviews_needed_for(target: float, total: int, rating_sum: int, goal_cap: int) -> int:
    """
    Minimal count of additional 5-star reviews to lift the mean to target.

    Always >= 1 (callers only ask for unachieved goals). "Achieved" compares
    the 1-decimal public rating, so a target with finer precision can sit
    between the rounded and the raw mean (e.g. raw 4.33, shown 4.3, target
    4.32): the raw formula gives 0 there, but the goal is still open and one
    more 5-star review is reported. For target 5.0 the answer is 1 when the
    record is perfect or empty, else goal_cap.
    """
    gap = MAX_RATING - target
    if gap <= 0:
        if rating_sum == MAX_RATING * total:
            return 1
        return goal_cap
    raw = (target * total - rating_sum) / gap
    needed = math.ceil(round(max(0.0, raw), _CEIL_GUARD_DIGITS))
    return max(1, min(goal_cap, needed))


def progress_toward(current: float, target: float) -> int:
    """Percent of the way from 0 to target, rounded half-up and clamped to [0, 100]."""
    percent = round_half_up(100 * current / target, 0)
    return int(max(0.0, min(100.0, percent)))


def project_goal(
    target: Any,
    current_rating: float,
    total: int,
    rating_sum: int,
    goal_cap: int,
) -> RatingGoal:
    value = validate_target(target)
    if current_rating >= value:
        return RatingGoal(target=value, reviews_needed=0, progress=100, achieved=True)
    return RatingGoal(
        target=value,
        reviews_needed=reviews_needed_for(value, total, rating_sum, goal_cap),
        progress=progress_toward(current_rating, value),
        achieved=False,
    )


def project_goals(
    reviews: Iterable[Review],
    targets: Sequence[Any] | None = None,
    config: ScoringConfig | None = None,
) -> list[RatingGoal]:
    """
    Project one RatingGoal per target, preserving input order (no dedup).

    Args:
        reviews: Read-only review collection; may be empty.
        targets: Rating milestones in (0, 5]; None uses config.default_goal_targets.
        config: Scoring constants (goal cap, default targets).

    Raises:
        InvalidGoalTargetError: if any target is outside (0, 5] or not a number.
        InvalidRatingError: if any review's rating is outside 1–5.
    """
    config = config or get_scoring_config()
    if targets is None:
        targets = config.default_goal_targets
    checked = [validate_target(t) for t in targets]

    rows = validate_reviews(reviews)
    current = public_rating(rows)
    total = len(rows)
    rating_sum = sum(r.rating for r in rows)

    goals = [project_goal(t, current, total, rating_sum, config.goal_cap) for t in checked]
    logger.debug(
        "goals_projected",
        total_reviews=total,
        public_rating=current,
        targets=checked,
        reviews_needed=[g.reviews_needed for g in goals],
    )
    return goals
