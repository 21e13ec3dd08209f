"""
FastAPI router: GET /reputation/{business_id}/snapshot, /goals, /breakdown.

Reads the business's reviews through the ReviewStore dependency and hands
them to the pure scoring engine. Nothing is cached; every request recomputes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from backend_reputul.analysis_engine.goals import project_goals
from backend_reputul.analysis_engine.scorer import compute_breakdown, compute_snapshot
from backend_reputul.api_server.deps import get_config, get_review_store
from backend_reputul.config.settings import ScoringConfig
from backend_reputul.core.exceptions import InvalidGoalTargetError
from backend_reputul.database.stores import ReviewStore
from backend_reputul.reputul_logging import bind_business

router = APIRouter(prefix="/reputation", tags=["reputation"])


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class SnapshotResponse(BaseModel):
    """GET /reputation/{business_id}/snapshot response."""

    model_config = ConfigDict(populate_by_name=True)

    public_rating: float = Field(..., alias="publicRating", ge=0, le=5, description="Mean rating, 1 decimal")
    total_reviews: int = Field(..., alias="totalReviews", ge=0)
    wilson_score: float = Field(..., alias="wilsonScore", ge=0, le=1, description="Wilson lower bound of the positive share")
    health_score: int = Field(..., alias="healthScore", ge=0, le=100)
    badge: str = Field(..., description="Reputation badge")


class GoalResponse(BaseModel):
    """One rating milestone."""

    model_config = ConfigDict(populate_by_name=True)

    target: float
    reviews_needed: int = Field(..., alias="reviewsNeeded", ge=0, description="Additional 5-star reviews needed")
    progress: int = Field(..., ge=0, le=100)
    achieved: bool


class SourcePerformance(BaseModel):
    """Review count and mean rating for one platform."""

    count: int = Field(..., ge=1)
    rating: float = Field(..., ge=1, le=5)


class BreakdownResponse(BaseModel):
    """GET /reputation/{business_id}/breakdown response: components behind the health score."""

    model_config = ConfigDict(populate_by_name=True)

    quality_score: float = Field(..., alias="qualityScore", ge=0, le=100)
    velocity_score: float = Field(..., alias="velocityScore", ge=0, le=100)
    responsiveness_score: float = Field(..., alias="responsivenessScore", ge=0, le=100)
    composite_score: int = Field(..., alias="compositeScore", ge=0, le=100)
    health_label: str = Field(..., alias="healthLabel")
    total_reviews: int = Field(..., alias="totalReviews", ge=0)
    positive_reviews: int = Field(..., alias="positiveReviews", ge=0)
    recent_reviews: int = Field(..., alias="recentReviews", ge=0)
    rating_distribution: dict[str, int] = Field(default_factory=dict, alias="ratingDistribution")
    source_distribution: dict[str, int] = Field(default_factory=dict, alias="sourceDistribution")
    source_performance: dict[str, SourcePerformance] = Field(default_factory=dict, alias="sourcePerformance")


def parse_targets(raw: str | None) -> list[float] | None:
    """Parse a comma-separated targets query value. None or blank means use the configured defaults."""
    if raw is None or not raw.strip():
        return None
    targets: list[float] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            targets.append(float(part))
        except ValueError as e:
            raise InvalidGoalTargetError(part) from e
    return targets


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@router.get("/{business_id}/snapshot", response_model=SnapshotResponse)
def get_snapshot(
    business_id: str,
    store: ReviewStore = Depends(get_review_store),
    config: ScoringConfig = Depends(get_config),
) -> SnapshotResponse:
    snapshot = compute_snapshot(store.list_reviews(business_id), config=config)
    bind_business(business_id, __name__).info(
        "reputation_snapshot_served",
        total_reviews=snapshot.total_reviews,
        health_score=snapshot.health_score,
        badge=snapshot.badge.value,
    )
    return SnapshotResponse(**snapshot.to_dict())


@router.get("/{business_id}/goals", response_model=list[GoalResponse])
def get_goals(
    business_id: str,
    targets: str | None = Query(None, description="Comma-separated rating targets, e.g. 4.8,4.9,5.0"),
    store: ReviewStore = Depends(get_review_store),
    config: ScoringConfig = Depends(get_config),
) -> list[GoalResponse]:
    parsed = parse_targets(targets)
    goals = project_goals(store.list_reviews(business_id), targets=parsed, config=config)
    bind_business(business_id, __name__).info(
        "reputation_goals_served",
        targets=[g.target for g in goals],
        reviews_needed=[g.reviews_needed for g in goals],
    )
    return [GoalResponse(**g.to_dict()) for g in goals]


@router.get("/{business_id}/breakdown", response_model=BreakdownResponse)
def get_breakdown(
    business_id: str,
    store: ReviewStore = Depends(get_review_store),
    config: ScoringConfig = Depends(get_config),
) -> BreakdownResponse:
    breakdown = compute_breakdown(store.list_reviews(business_id), config=config)
    bind_business(business_id, __name__).info(
        "reputation_breakdown_served",
        composite_score=breakdown.composite_score,
        health_label=breakdown.health_label,
    )
    return BreakdownResponse(**breakdown.to_dict())
