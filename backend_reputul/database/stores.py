"""
Collaborator interfaces consumed by the API layer, plus in-memory adapters.

The engine itself never touches storage: the API fetches a business's
reviews and platform links through these interfaces and passes plain
values into the pure scoring functions.
"""

from __future__ import annotations

import threading
from typing import Iterable, Mapping, Protocol, runtime_checkable

from backend_reputul.analysis_engine.models import Review


@runtime_checkable
class ReviewStore(Protocol):
    def list_reviews(self, business_id: str) -> list[Review]:
        """Return every review for a business; empty list when it has none."""
        ...


@runtime_checkable
class PlatformLinkStore(Protocol):
    def get_platform_links(self, business_id: str) -> dict[str, str]:
        """Return platform name -> public review URL for a business; empty dict when none configured."""
        ...

    def resolve_customer_token(self, token: str) -> str | None:
        """Return the business_id a customer gate token belongs to, or None if unknown."""
        ...


class InMemoryReviewStore:
    """Dict-backed ReviewStore for tests, demos and the CSV tool."""

    def __init__(self, reviews: Mapping[str, Iterable[Review]] | None = None) -> None:
        self._lock = threading.Lock()
        self._reviews: dict[str, list[Review]] = {
            business_id: list(rows) for business_id, rows in (reviews or {}).items()
        }

    def add_review(self, business_id: str, review: Review) -> None:
        with self._lock:
            self._reviews.setdefault(business_id, []).append(review)

    def list_reviews(self, business_id: str) -> list[Review]:
        with self._lock:
            return list(self._reviews.get(business_id, []))


class InMemoryPlatformLinkStore:
    """Dict-backed PlatformLinkStore for tests and demos."""

    def __init__(
        self,
        links: Mapping[str, Mapping[str, str]] | None = None,
        customer_tokens: Mapping[str, str] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._links: dict[str, dict[str, str]] = {
            business_id: dict(platforms) for business_id, platforms in (links or {}).items()
        }
        self._tokens: dict[str, str] = dict(customer_tokens or {})

    def set_platform_link(self, business_id: str, platform: str, url: str) -> None:
        with self._lock:
            self._links.setdefault(business_id, {})[platform] = url

    def register_customer_token(self, token: str, business_id: str) -> None:
        with self._lock:
            self._tokens[token] = business_id

    def get_platform_links(self, business_id: str) -> dict[str, str]:
        with self._lock:
            return dict(self._links.get(business_id, {}))

    def resolve_customer_token(self, token: str) -> str | None:
        with self._lock:
            return self._tokens.get(token)
