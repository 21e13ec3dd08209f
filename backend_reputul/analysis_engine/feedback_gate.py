"""
Feedback routing gate: decide the next screen after a customer rates an experience.

Two terminal outcomes: rating >= 4 goes to PUBLIC_REVIEWS, rating <= 3 to
PRIVATE_FEEDBACK. The outcome only changes which screen is emphasized.
Every configured public review link is returned in both branches: hiding
links from low raters is review gating, which major platforms prohibit.
RoutingDecision has no way to carry a subset of the links; review_urls is
always a projection of the full link set it was built from.

Stateless and deterministic: same rating and links give an equal decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from backend_reputul.analysis_engine.models import POSITIVE_RATING_THRESHOLD, validate_rating
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)


class RoutingOutcome(str, Enum):
    PUBLIC_REVIEWS = "PUBLIC_REVIEWS"
    PRIVATE_FEEDBACK = "PRIVATE_FEEDBACK"


RATING_LABELS = {
    1: "Poor",
    2: "Fair",
    3: "Good",
    4: "Very Good",
    5: "Excellent",
}

OUTCOME_MESSAGES = {
    RoutingOutcome.PUBLIC_REVIEWS: "Fantastic! Would you mind sharing your experience publicly?",
    RoutingOutcome.PRIVATE_FEEDBACK: "We'd love to hear more about your experience",
}


@dataclass(frozen=True)
class RoutingDecision:
    """
    Result of one gate evaluation.

    outcome: Which screen to emphasize.
    rating: The validated 1–5 rating that produced this decision.
    platform_links: Read-only copy of every configured platform link.
    """

    outcome: RoutingOutcome
    rating: int
    platform_links: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "platform_links", MappingProxyType(dict(self.platform_links)))

    @property
    def review_urls(self) -> dict[str, str]:
        """Every configured platform link, regardless of outcome. Fresh dict per call."""
        return dict(self.platform_links)

    @property
    def rating_label(self) -> str:
        return RATING_LABELS[self.rating]

    @property
    def message(self) -> str:
        return OUTCOME_MESSAGES[self.outcome]

    def to_dict(self) -> dict[str, Any]:
        return {
            "routingDecision": self.outcome.value,
            "reviewUrls": self.review_urls,
            "rating": self.rating,
            "ratingLabel": self.rating_label,
            "message": self.message,
        }


def decide_outcome(rating: int) -> RoutingOutcome:
    """Transition rule only; rating must already be validated."""
    if rating >= POSITIVE_RATING_THRESHOLD:
        return RoutingOutcome.PUBLIC_REVIEWS
    return RoutingOutcome.PRIVATE_FEEDBACK


def route(rating: Any, platform_links: Mapping[str, str] | None = None) -> RoutingDecision:
    """
    Route one customer rating.

    Args:
        rating: Integer star rating, 1–5.
        platform_links: Platform name -> public review URL. Empty is valid.

    Returns:
        RoutingDecision whose review_urls equals platform_links in both branches.

    Raises:
        InvalidRatingError: if rating is not an int in [1, 5].
    """
    value = validate_rating(rating)
    links = dict(platform_links or {})
    outcome = decide_outcome(value)
    decision = RoutingDecision(outcome=outcome, rating=value, platform_links=links)
    logger.info(
        "feedback_gate_routed",
        rating=value,
        decision=outcome.value,
        platform_count=len(links),
        platforms=sorted(links),
    )
    return decision
