"""
Reputul API Python client.

Uses the requests library; mirrors the FastAPI routes one method each.

Usage:
    from backend_reputul.client import ReputulClient
    client = ReputulClient("http://localhost:8000")
    snapshot = client.get_snapshot("biz-42")
"""

from __future__ import annotations

from typing import Any, Sequence

import requests


class ReputulClientError(Exception):
    """Raised when the API returns an error response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        response: requests.Response | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.response = response


class ReputulClient:
    """Client for the Reputul reputation API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        resp = self._session.request(method, url, params=params, json=json, timeout=self.timeout)
        if not resp.ok:
            detail: Any = resp.text
            code = None
            if resp.headers.get("content-type", "").startswith("application/json"):
                body = resp.json()
                detail = body.get("detail", resp.text)
                code = body.get("code")
            raise ReputulClientError(
                f"API error: {detail}",
                status_code=resp.status_code,
                code=code,
                response=resp,
            )
        return resp

    def health(self) -> dict[str, str]:
        """Liveness probe."""
        return self._request("GET", "/health").json()

    def get_snapshot(self, business_id: str) -> dict[str, Any]:
        """publicRating, totalReviews, wilsonScore, healthScore, badge."""
        return self._request("GET", f"/reputation/{business_id}/snapshot").json()

    def get_goals(self, business_id: str, targets: Sequence[float] | None = None) -> list[dict[str, Any]]:
        """Rating goals; targets default to the server's configured milestones."""
        params = {"targets": ",".join(str(t) for t in targets)} if targets else None
        return self._request("GET", f"/reputation/{business_id}/goals", params=params).json()

    def get_breakdown(self, business_id: str) -> dict[str, Any]:
        return self._request("GET", f"/reputation/{business_id}/breakdown").json()

    def submit_rating(self, customer_token: str, rating: int) -> dict[str, Any]:
        """Submit a customer's star rating; returns the routing decision with every review link."""
        return self._request("POST", f"/feedback-gate/{customer_token}/rate", json={"rating": rating}).json()
