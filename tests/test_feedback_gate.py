"""
Pytest tests for the feedback routing gate.

Every decision must carry all configured review links, whatever the rating.
"""

from __future__ import annotations

import pytest

LINKS = {
    "google": "https://g.page/r/example/review",
    "facebook": "https://facebook.com/example/reviews",
}


def test_high_rating_routes_public():
    from backend_reputul.analysis_engine.feedback_gate import RoutingOutcome, route

    d = route(5, LINKS)
    assert d.outcome is RoutingOutcome.PUBLIC_REVIEWS
    assert d.review_urls == LINKS
    assert d.to_dict() == {
        "routingDecision": "PUBLIC_REVIEWS",
        "reviewUrls": LINKS,
        "rating": 5,
        "ratingLabel": "Excellent",
        "message": "Fantastic! Would you mind sharing your experience publicly?",
    }


def test_low_rating_routes_private_with_all_links():
    from backend_reputul.analysis_engine.feedback_gate import RoutingOutcome, route

    d = route(2, LINKS)
    assert d.outcome is RoutingOutcome.PRIVATE_FEEDBACK
    assert d.review_urls == LINKS
    assert d.rating_label == "Fair"
    assert d.message == "We'd love to hear more about your experience"


def test_every_rating_gets_identical_links():
    from backend_reputul.analysis_engine.feedback_gate import route

    urls = [route(r, LINKS).review_urls for r in range(1, 6)]
    assert all(u == LINKS for u in urls)


@pytest.mark.parametrize("rating,expected", [(1, "PRIVATE_FEEDBACK"), (3, "PRIVATE_FEEDBACK"), (4, "PUBLIC_REVIEWS")])
def test_threshold(rating, expected):
    from backend_reputul.analysis_engine.feedback_gate import route

    assert route(rating, LINKS).outcome.value == expected


def test_empty_links():
    from backend_reputul.analysis_engine.feedback_gate import route

    assert route(4, {}).review_urls == {}
    assert route(1).review_urls == {}


def test_decision_isolated_from_caller_mutation():
    """Mutating the input map or a returned review_urls dict never changes the decision."""
    from backend_reputul.analysis_engine.feedback_gate import route

    links = dict(LINKS)
    d = route(3, links)
    links["yelp"] = "https://yelp.com/biz/example"
    urls = d.review_urls
    urls.pop("google")
    assert d.review_urls == LINKS
    with pytest.raises(TypeError):
        d.platform_links["google"] = "https://evil.example"


def test_same_input_same_decision():
    from backend_reputul.analysis_engine.feedback_gate import route

    assert route(4, LINKS) == route(4, dict(LINKS))


@pytest.mark.parametrize("rating", [0, 6, -1, 3.5, 4.0, True, "5", None])
def test_invalid_ratings_rejected(rating):
    from backend_reputul.analysis_engine.feedback_gate import route
    from backend_reputul.core.exceptions import InvalidRatingError

    with pytest.raises(InvalidRatingError):
        route(rating, LINKS)
