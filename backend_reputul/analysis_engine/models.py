"""
Data models for analysis engine input and output.

Review is the only input fact; everything else is derived on demand,
never persisted by the engine, and discarded after being returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from backend_reputul.core.exceptions import InvalidRatingError

MIN_RATING = 1
MAX_RATING = 5
# Ratings at or above this count as "positive" for Wilson and routing
POSITIVE_RATING_THRESHOLD = 4


def validate_rating(rating: Any) -> int:
    """
    Return rating unchanged if it is an int in [1, 5]; raise InvalidRatingError otherwise.

    bool is rejected even though it subclasses int. Never clamps.
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRatingError(rating, f"Rating must be a whole number, got {rating!r}")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise InvalidRatingError(rating)
    return rating


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReviewSource(str, Enum):
    GOOGLE = "GOOGLE"
    FACEBOOK = "FACEBOOK"
    DIRECT = "DIRECT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "ReviewSource":
        """Map a platform tag (any case) to a source; unknown tags become OTHER."""
        if isinstance(value, ReviewSource):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Review:
    """
    One customer star rating. Immutable; owned by the review store.

    rating: 1–5 (validated on construction).
    source: Platform the review came from.
    created_at: When the review was left.
    replied_at: When the owner replied; None if never.
    """

    rating: int
    source: ReviewSource = ReviewSource.DIRECT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    replied_at: datetime | None = None

    def __post_init__(self) -> None:
        validate_rating(self.rating)
        object.__setattr__(self, "source", ReviewSource.parse(self.source))
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        if self.replied_at is not None:
            object.__setattr__(self, "replied_at", ensure_utc(self.replied_at))

    @property
    def is_positive(self) -> bool:
        return self.rating >= POSITIVE_RATING_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        return {
            "rating": self.rating,
            "source": self.source.value,
            "created_at": self.created_at.isoformat(),
            "replied_at": self.replied_at.isoformat() if self.replied_at else None,
        }


class Badge(str, Enum):
    UNRANKED = "Unranked"
    NEW_STARTER = "New Starter"
    TOP_RATED = "Top Rated"
    TRUSTED_PRO = "Trusted Pro"
    NEIGHBORHOOD_FAVORITE = "Neighborhood Favorite"
    RISING_STAR = "Rising Star"
    BUILDING_REPUTATION = "Building Reputation"


@dataclass(frozen=True)
class ReputationSnapshot:
    """
    Aggregate reputation for one business at one point in time.

    public_rating: Arithmetic mean, 1 decimal; 0 when there are no reviews.
    wilson_score: Lower bound of the 95% Wilson interval for the positive share (0–1).
    health_score: Weighted composite 0–100.
    """

    public_rating: float
    total_reviews: int
    wilson_score: float
    health_score: int
    badge: Badge

    def to_dict(self) -> dict[str, Any]:
        return {
            "publicRating": self.public_rating,
            "totalReviews": self.total_reviews,
            "wilsonScore": self.wilson_score,
            "healthScore": self.health_score,
            "badge": self.badge.value,
        }


@dataclass(frozen=True)
class ReputationBreakdown:
    """Per-component view behind the health score, for the dashboard breakdown panel."""

    quality_score: float
    velocity_score: float
    responsiveness_score: float
    composite_score: int
    health_label: str
    total_reviews: int
    positive_reviews: int
    recent_reviews: int
    rating_distribution: dict[str, int]
    source_distribution: dict[str, int]
    # source -> {"count": n, "rating": mean rounded to 1 decimal}
    source_performance: dict[str, dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "qualityScore": self.quality_score,
            "velocityScore": self.velocity_score,
            "responsivenessScore": self.responsiveness_score,
            "compositeScore": self.composite_score,
            "healthLabel": self.health_label,
            "totalReviews": self.total_reviews,
            "positiveReviews": self.positive_reviews,
            "recentReviews": self.recent_reviews,
            "ratingDistribution": dict(self.rating_distribution),
            "sourceDistribution": dict(self.source_distribution),
            "sourcePerformance": {k: dict(v) for k, v in self.source_performance.items()},
        }


@dataclass(frozen=True)
class RatingGoal:
    """How far a business is from one target rating, assuming only 5-star reviews from now on."""

    target: float
    reviews_needed: int
    progress: int
    achieved: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "reviewsNeeded": self.reviews_needed,
            "progress": self.progress,
            "achieved": self.achieved,
        }
