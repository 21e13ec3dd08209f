"""
Pytest tests for the FastAPI reputation and feedback-gate endpoints.

Uses the temporary SQLite store from conftest; some tests swap in
in-memory stores via app.dependency_overrides.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

LINKS = {"google": "https://g.page/r/example/review", "facebook": "https://facebook.com/example/reviews"}


@pytest.fixture
def seeded(sql_store):
    """biz-1 with [5,5,5,4,3], platform links and one customer token."""
    from backend_reputul.analysis_engine.models import Review

    now = datetime.now(timezone.utc)
    for rating in (5, 5, 5, 4, 3):
        sql_store.add_review("biz-1", Review(rating=rating, created_at=now - timedelta(days=1)))
    for platform, url in LINKS.items():
        sql_store.set_platform_link("biz-1", platform, url)
    sql_store.register_customer_token("tok-1", "biz-1")
    return sql_store


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_snapshot(client, seeded):
    r = client.get("/reputation/biz-1/snapshot")
    assert r.status_code == 200
    data = r.json()
    assert data["publicRating"] == 4.4
    assert data["totalReviews"] == 5
    assert 0 < data["wilsonScore"] < 1
    assert 0 <= data["healthScore"] <= 100
    assert data["badge"] in {"Trusted Pro", "Top Rated", "Rising Star", "Neighborhood Favorite", "Building Reputation"}


def test_snapshot_unknown_business_is_unranked(client):
    r = client.get("/reputation/nobody/snapshot")
    assert r.status_code == 200
    assert r.json() == {"publicRating": 0.0, "totalReviews": 0, "wilsonScore": 0.0, "healthScore": 0, "badge": "Unranked"}


def test_goals_default_and_custom_targets(client, seeded):
    r = client.get("/reputation/biz-1/goals")
    assert r.status_code == 200
    goals = r.json()
    assert isinstance(goals, list)
    assert [g["target"] for g in goals] == [4.8, 4.9, 5.0]
    assert [g["reviewsNeeded"] for g in goals] == [10, 25, 10_000]

    r = client.get("/reputation/biz-1/goals", params={"targets": "4.0,4.8"})
    assert r.status_code == 200
    goals = r.json()
    assert [g["target"] for g in goals] == [4.0, 4.8]
    assert goals[0]["achieved"] is True
    assert goals[1]["reviewsNeeded"] == 10


@pytest.mark.parametrize("targets", ["4.8,abc", "5.5", "0"])
def test_goals_bad_target_is_400(client, seeded, targets):
    r = client.get("/reputation/biz-1/goals", params={"targets": targets})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_goal_target"


def test_breakdown(client, seeded):
    r = client.get("/reputation/biz-1/breakdown")
    assert r.status_code == 200
    data = r.json()
    assert data["totalReviews"] == 5
    assert data["positiveReviews"] == 4
    assert data["ratingDistribution"] == {"1": 0, "2": 0, "3": 1, "4": 1, "5": 3}
    assert data["velocityScore"] == 50.0
    assert data["recentReviews"] == 5
    assert data["sourceDistribution"] == {"DIRECT": 5}
    assert data["sourcePerformance"] == {"DIRECT": {"count": 5, "rating": 4.4}}
    snap = client.get("/reputation/biz-1/snapshot").json()
    assert data["compositeScore"] == snap["healthScore"]


def test_corrupt_stored_rating_is_400(client, sql_store):
    from backend_reputul.database.sql_store import ReviewRow

    with sql_store._session_scope() as session:
        session.add(ReviewRow(business_id="biz-9", rating=0, source="DIRECT", created_at=0))
    r = client.get("/reputation/biz-9/snapshot")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_rating"


@pytest.mark.parametrize("rating,decision", [(5, "PUBLIC_REVIEWS"), (4, "PUBLIC_REVIEWS"), (3, "PRIVATE_FEEDBACK"), (1, "PRIVATE_FEEDBACK")])
def test_feedback_gate_always_returns_all_links(client, seeded, rating, decision):
    r = client.post("/feedback-gate/tok-1/rate", json={"rating": rating})
    assert r.status_code == 200
    data = r.json()
    assert data["routingDecision"] == decision
    assert data["reviewUrls"] == LINKS
    assert data["rating"] == rating


def test_feedback_gate_unknown_token_is_404(client, seeded):
    r = client.post("/feedback-gate/nope/rate", json={"rating": 5})
    assert r.status_code == 404


@pytest.mark.parametrize("rating", [0, 6, 3.5, "5", True])
def test_feedback_gate_invalid_rating_is_400(client, seeded, rating):
    r = client.post("/feedback-gate/tok-1/rate", json={"rating": rating})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_rating"


def test_in_memory_store_override(client):
    """Routers only depend on the store interfaces."""
    from backend_reputul.analysis_engine.models import Review
    from backend_reputul.api_server.deps import get_platform_link_store, get_review_store
    from backend_reputul.api_server.server import app
    from backend_reputul.database.stores import InMemoryPlatformLinkStore, InMemoryReviewStore

    reviews = InMemoryReviewStore({"mem": [Review(rating=5) for _ in range(3)]})
    links = InMemoryPlatformLinkStore({"mem": {}}, {"tok-mem": "mem"})
    app.dependency_overrides[get_review_store] = lambda: reviews
    app.dependency_overrides[get_platform_link_store] = lambda: links

    snap = client.get("/reputation/mem/snapshot").json()
    assert snap["totalReviews"] == 3
    assert snap["badge"] == "New Starter"

    r = client.post("/feedback-gate/tok-mem/rate", json={"rating": 2})
    assert r.status_code == 200
    assert r.json()["reviewUrls"] == {}
