"""
FastAPI router: POST /feedback-gate/{customer_token}/rate.

Public endpoint hit by the customer's rating page. Resolves the token to a
business, loads its platform links and routes the rating. The response always
carries every configured review link, whichever screen is emphasized.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from backend_reputul.analysis_engine.feedback_gate import route
from backend_reputul.api_server.deps import get_platform_link_store
from backend_reputul.database.stores import PlatformLinkStore
from backend_reputul.reputul_logging import bind_business, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/feedback-gate", tags=["feedback-gate"])


class RateRequest(BaseModel):
    """POST body. Rating is validated by the gate so that errors carry the engine's error code."""

    rating: Any = Field(..., description="Star rating, integer 1–5")


class RoutingDecisionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    routing_decision: str = Field(..., alias="routingDecision", description="PUBLIC_REVIEWS or PRIVATE_FEEDBACK")
    review_urls: dict[str, str] = Field(default_factory=dict, alias="reviewUrls", description="Every configured platform link")
    rating: int = Field(..., ge=1, le=5)
    rating_label: str = Field(..., alias="ratingLabel")
    message: str


@router.post("/{customer_token}/rate", response_model=RoutingDecisionResponse)
def rate(
    customer_token: str,
    body: RateRequest,
    links: PlatformLinkStore = Depends(get_platform_link_store),
) -> RoutingDecisionResponse:
    customer_token = customer_token.strip()
    business_id = links.resolve_customer_token(customer_token) if customer_token else None
    if business_id is None:
        logger.info("feedback_gate_unknown_token")
        raise HTTPException(status_code=404, detail="Unknown feedback link")
    decision = route(body.rating, links.get_platform_links(business_id))
    bind_business(business_id, __name__).info("feedback_gate_rate", decision=decision.outcome.value)
    return RoutingDecisionResponse(**decision.to_dict())
