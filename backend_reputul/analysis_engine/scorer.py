"""
Reputation score computation — Wilson quality, velocity, responsiveness, badge.

Responsibilities:
- Turn a business's review set into a ReputationSnapshot (public rating,
  Wilson lower bound, 0–100 health score, badge).
- Expose the per-component breakdown behind the health score.
- Fail fast on malformed ratings instead of skewing the aggregate.

Pure functions: no I/O, no shared mutable state. Safe to call from any
number of threads; `now` is injectable so results are reproducible.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from backend_reputul.analysis_engine.models import (
    MAX_RATING,
    MIN_RATING,
    POSITIVE_RATING_THRESHOLD,
    Badge,
    ReputationBreakdown,
    ReputationSnapshot,
    Review,
    ensure_utc,
    validate_rating,
)
from backend_reputul.config.settings import ScoringConfig, get_scoring_config
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)

# 95% confidence
WILSON_Z = 1.96

QUALITY_WEIGHT = 0.60
VELOCITY_WEIGHT = 0.25
RESPONSIVENESS_WEIGHT = 0.15

HEALTH_MIN = 0
HEALTH_MAX = 100

# Badge / health label thresholds
HEALTH_HIGH = 76
HEALTH_MID = 46
MIN_REVIEWS_FOR_RANK = 5
TOP_RATED_MIN_RATING = 4.5
NEIGHBORHOOD_FAVORITE_MIN_RATING = 4.7

HEALTH_LABEL_EXCELLENT = "Excellent"
HEALTH_LABEL_GOOD = "Good"
HEALTH_LABEL_NEEDS_ATTENTION = "Needs Attention"


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like a person would (4.25 -> 4.3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def validate_reviews(reviews: Iterable[Review]) -> list[Review]:
    """Materialize reviews, checking every rating. One bad row fails the whole computation."""
    rows = list(reviews)
    for review in rows:
        validate_rating(getattr(review, "rating", None))
    return rows


def _now(now: datetime | None) -> datetime:
    return ensure_utc(now) if now is not None else datetime.now(timezone.utc)


def public_rating(reviews: Sequence[Review]) -> float:
    """Arithmetic mean rounded to 1 decimal; 0 when empty."""
    if not reviews:
        return 0.0
    mean = sum(r.rating for r in reviews) / len(reviews)
    return round_half_up(mean, 1)


def wilson_lower_bound(positive: int, total: int, z: float = WILSON_Z) -> float:
    """
    Lower bound of the Wilson score interval for a binomial proportion.

    More conservative than the raw share: 2/2 positive scores well below
    200/200 positive. Returns 0 when total is 0; clamped into [0, 1].
    """
    if total <= 0:
        return 0.0
    if positive < 0 or positive > total:
        raise ValueError(f"positive must be in [0, total], got {positive}/{total}")
    n = float(total)
    p_hat = positive / n
    z2 = z * z
    centre = p_hat + z2 / (2 * n)
    margin = z * math.sqrt((p_hat * (1 - p_hat) + z2 / (4 * n)) / n)
    bound = (centre - margin) / (1 + z2 / n)
    return max(0.0, min(1.0, bound))


def count_recent(reviews: Sequence[Review], now: datetime, window_days: int) -> int:
    """Reviews created within the trailing window. Future-dated reviews count as recent."""
    cutoff = now - timedelta(days=window_days)
    return sum(1 for r in reviews if ensure_utc(r.created_at) >= cutoff)


def velocity_component(recent_count: int, velocity_target: int) -> float:
    """Saturating 0–1: min(1, recent / target)."""
    if velocity_target <= 0:
        return 1.0
    return min(1.0, recent_count / velocity_target)


def responsiveness_component(reviews: Sequence[Review], now: datetime, sla_days: float) -> float:
    """
    Share of reviews needing a reply that got one within the SLA.

    A review needs a reply when it is negative and either has been replied to
    or its SLA window has elapsed. Unreplied reviews still inside the window
    are pending and not counted. 1.0 when nothing needs a reply.
    """
    sla = timedelta(days=sla_days)
    needing = 0
    on_time = 0
    for review in reviews:
        if review.rating >= POSITIVE_RATING_THRESHOLD:
            continue
        created = ensure_utc(review.created_at)
        replied = review.replied_at
        if replied is None:
            if now - created <= sla:
                continue
            needing += 1
            continue
        needing += 1
        if ensure_utc(replied) - created <= sla:
            on_time += 1
    if needing == 0:
        return 1.0
    return on_time / needing


def health_score(quality: float, velocity: float, responsiveness: float) -> int:
    """Weighted composite 60/25/15 on [0, 1] components, scaled to an int 0–100."""
    raw = 100 * (
        QUALITY_WEIGHT * quality
        + VELOCITY_WEIGHT * velocity
        + RESPONSIVENESS_WEIGHT * responsiveness
    )
    return max(HEALTH_MIN, min(HEALTH_MAX, int(round_half_up(raw, 0))))


def assign_badge(health: int, total_reviews: int, rating: float) -> Badge:
    """
    Ordered threshold table, evaluated top-down. Exactly one badge results.

    Order is part of the contract; do not reorder.
    """
    if total_reviews == 0:
        return Badge.UNRANKED
    if total_reviews < MIN_REVIEWS_FOR_RANK:
        return Badge.NEW_STARTER
    if health >= HEALTH_HIGH and rating >= TOP_RATED_MIN_RATING:
        return Badge.TOP_RATED
    if health >= HEALTH_HIGH:
        return Badge.TRUSTED_PRO
    if health >= HEALTH_MID and rating >= NEIGHBORHOOD_FAVORITE_MIN_RATING:
        return Badge.NEIGHBORHOOD_FAVORITE
    if health >= HEALTH_MID:
        return Badge.RISING_STAR
    return Badge.BUILDING_REPUTATION


def health_label(score: int) -> str:
    if score >= HEALTH_HIGH:
        return HEALTH_LABEL_EXCELLENT
    if score >= HEALTH_MID:
        return HEALTH_LABEL_GOOD
    return HEALTH_LABEL_NEEDS_ATTENTION


def _components(
    rows: Sequence[Review], config: ScoringConfig, now: datetime
) -> tuple[float, float, float, int]:
    """(quality, velocity, responsiveness, recent_count) for a non-empty validated set."""
    positive = sum(1 for r in rows if r.rating >= POSITIVE_RATING_THRESHOLD)
    quality = wilson_lower_bound(positive, len(rows))
    recent = count_recent(rows, now, config.velocity_window_days)
    velocity = velocity_component(recent, config.velocity_target)
    responsiveness = responsiveness_component(rows, now, config.responsiveness_sla_days)
    return quality, velocity, responsiveness, recent


def compute_snapshot(
    reviews: Iterable[Review],
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> ReputationSnapshot:
    """
    Compute the reputation snapshot for one business's review set.

    Args:
        reviews: Read-only review collection; may be empty.
        config: Scoring constants (defaults to the process-wide config).
        now: Reference time for the velocity window and SLA checks.

    Returns:
        ReputationSnapshot. Empty input yields {0, 0, 0.0, 0, Unranked}.

    Raises:
        InvalidRatingError: if any review's rating is outside 1–5 or not an int.
    """
    rows = validate_reviews(reviews)
    config = config or get_scoring_config()
    now = _now(now)

    if not rows:
        return ReputationSnapshot(
            public_rating=0.0,
            total_reviews=0,
            wilson_score=0.0,
            health_score=0,
            badge=Badge.UNRANKED,
        )

    rating = public_rating(rows)
    quality, velocity, responsiveness, recent = _components(rows, config, now)
    health = health_score(quality, velocity, responsiveness)
    badge = assign_badge(health, len(rows), rating)

    logger.debug(
        "snapshot_computed",
        total_reviews=len(rows),
        public_rating=rating,
        wilson_score=round(quality, 4),
        recent_reviews=recent,
        health_score=health,
        badge=badge.value,
    )
    return ReputationSnapshot(
        public_rating=rating,
        total_reviews=len(rows),
        wilson_score=quality,
        health_score=health,
        badge=badge,
    )


def source_performance(reviews: Sequence[Review]) -> dict[str, dict[str, Any]]:
    """Per-platform review count and mean rating (1 decimal), in first-seen order."""
    by_source: dict[str, list[int]] = {}
    for review in reviews:
        by_source.setdefault(review.source.value, []).append(review.rating)
    return {
        source: {"count": len(ratings), "rating": round_half_up(sum(ratings) / len(ratings), 1)}
        for source, ratings in by_source.items()
    }


def compute_breakdown(
    reviews: Iterable[Review],
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> ReputationBreakdown:
    """
    Per-component breakdown behind the health score (each component 0–100).

    With no reviews every component is 0 so the breakdown agrees with the
    snapshot's health score of 0.
    """
    rows = validate_reviews(reviews)
    config = config or get_scoring_config()
    now = _now(now)

    distribution = {str(star): 0 for star in range(MIN_RATING, MAX_RATING + 1)}
    for star, count in Counter(r.rating for r in rows).items():
        distribution[str(star)] = count
    sources = dict(Counter(r.source.value for r in rows))
    positive = sum(1 for r in rows if r.rating >= POSITIVE_RATING_THRESHOLD)

    if not rows:
        return ReputationBreakdown(
            quality_score=0.0,
            velocity_score=0.0,
            responsiveness_score=0.0,
            composite_score=0,
            health_label=health_label(0),
            total_reviews=0,
            positive_reviews=0,
            recent_reviews=0,
            rating_distribution=distribution,
            source_distribution=sources,
            source_performance={},
        )

    quality, velocity, responsiveness, recent = _components(rows, config, now)
    composite = health_score(quality, velocity, responsiveness)
    return ReputationBreakdown(
        quality_score=round_half_up(quality * 100, 1),
        velocity_score=round_half_up(velocity * 100, 1),
        responsiveness_score=round_half_up(responsiveness * 100, 1),
        composite_score=composite,
        health_label=health_label(composite),
        total_reviews=len(rows),
        positive_reviews=positive,
        recent_reviews=recent,
        rating_distribution=distribution,
        source_distribution=sources,
        source_performance=source_performance(rows),
    )
