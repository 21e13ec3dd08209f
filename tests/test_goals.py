"""
Pytest tests for rating goal projection.
"""

from __future__ import annotations

import math

import pytest


def _reviews(ratings):
    from backend_reputul.analysis_engine.models import Review

    return [Review(rating=r) for r in ratings]


def test_goals_for_mixed_record():
    """[5,5,5,4,3] (4.4): 10 fives reach 4.8, 25 reach 4.9, 5.0 is capped."""
    from backend_reputul.analysis_engine.goals import project_goals

    goals = project_goals(_reviews([5, 5, 5, 4, 3]), targets=[4.8, 4.9, 5.0])
    assert [g.target for g in goals] == [4.8, 4.9, 5.0]
    assert [g.reviews_needed for g in goals] == [10, 25, 10_000]
    assert [g.progress for g in goals] == [92, 90, 88]
    assert not any(g.achieved for g in goals)
    assert goals[0].to_dict() == {"target": 4.8, "reviewsNeeded": 10, "progress": 92, "achieved": False}


def test_reviews_needed_is_minimal():
    """n reaches the target and n-1 does not."""
    from backend_reputul.analysis_engine.goals import project_goals

    ratings = [5, 4, 4, 3, 5, 2, 5]
    total, rating_sum = len(ratings), sum(ratings)
    for target in (4.2, 4.5, 4.75, 4.9):
        (goal,) = project_goals(_reviews(ratings), targets=[target])
        n = goal.reviews_needed
        assert (rating_sum + 5 * n) / (total + n) >= target - 1e-9
        assert (rating_sum + 5 * (n - 1)) / (total + n - 1) < target


def test_achieved_goal():
    from backend_reputul.analysis_engine.goals import project_goals

    goals = project_goals(_reviews([5, 5, 5, 4, 3]), targets=[4.0, 4.4])
    for g in goals:
        assert g.achieved is True
        assert g.reviews_needed == 0
        assert g.progress == 100


def test_perfect_record_achieves_five():
    from backend_reputul.analysis_engine.goals import project_goals

    (goal,) = project_goals(_reviews([5, 5]), targets=[5.0])
    assert goal.achieved is True
    assert goal.reviews_needed == 0


def test_empty_record_needs_one_review():
    from backend_reputul.analysis_engine.goals import project_goals

    goals = project_goals([], targets=[4.8, 5.0])
    assert [g.reviews_needed for g in goals] == [1, 1]
    assert [g.progress for g in goals] == [0, 0]
    assert not any(g.achieved for g in goals)


def test_default_targets_and_goal_cap_from_config():
    from backend_reputul.analysis_engine.goals import project_goals
    from backend_reputul.config.settings import ScoringConfig

    config = ScoringConfig(goal_cap=500, default_goal_targets=(4.5, 5.0))
    goals = project_goals(_reviews([4, 4]), config=config)
    assert [g.target for g in goals] == [4.5, 5.0]
    assert goals[1].reviews_needed == 500


def test_targets_order_preserved_without_dedup():
    from backend_reputul.analysis_engine.goals import project_goals

    goals = project_goals(_reviews([4]), targets=[4.9, 4.5, 4.9])
    assert [g.target for g in goals] == [4.9, 4.5, 4.9]


@pytest.mark.parametrize("target", [0, -1, 5.1, True, "4.8", None, math.nan])
def test_invalid_targets_rejected(target):
    from backend_reputul.analysis_engine.goals import project_goals
    from backend_reputul.core.exceptions import InvalidGoalTargetError

    with pytest.raises(InvalidGoalTargetError):
        project_goals(_reviews([5]), targets=[4.8, target])


def test_reviews_needed_clamped_to_cap():
    from backend_reputul.analysis_engine.goals import reviews_needed_for

    # 1000 one-star reviews, target 4.99: far beyond the cap
    assert reviews_needed_for(4.99, 1000, 1000, 10_000) == 10_000


def test_progress_rounds_half_up_and_clamps():
    from backend_reputul.analysis_engine.goals import progress_toward

    assert progress_toward(1.7, 4.0) == 43
    assert progress_toward(4.4, 4.8) == 92
    assert progress_toward(0.0, 4.8) == 0
    assert progress_toward(5.0, 4.0) == 100


def test_target_finer_than_displayed_rating_stays_open():
    """4.33 displays as 4.3, below a 4.32 target, so one more five-star review is still needed."""
    from backend_reputul.analysis_engine.goals import project_goals

    (goal,) = project_goals(_reviews([5, 4, 4]), targets=[4.32])
    assert goal.achieved is False
    assert goal.reviews_needed == 1
