"""
Pytest fixtures for Reputul tests. Uses a temporary SQLite DB for the review store.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def scoring_env(monkeypatch):
    """Clear REPUTUL_* overrides and the cached config so every test starts from defaults."""
    for name in (
        "REPUTUL_VELOCITY_TARGET",
        "REPUTUL_VELOCITY_WINDOW_DAYS",
        "REPUTUL_RESPONSIVENESS_SLA_DAYS",
        "REPUTUL_GOAL_CAP",
        "REPUTUL_GOAL_TARGETS",
    ):
        monkeypatch.delenv(name, raising=False)

    from backend_reputul.config.settings import get_scoring_config

    get_scoring_config.cache_clear()
    yield
    get_scoring_config.cache_clear()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sql_store(tmp_path, monkeypatch):
    """
    Point the SQL store at a temporary SQLite DB and init tables.
    Resets the store cache so each test gets a fresh DB. Unset DATABASE_URL so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("REPUTUL_DB_PATH", str(tmp_path / "reputul.db"))

    from backend_reputul.database import sql_store as db

    db.reset_store_for_test()
    store = db.get_sql_store()
    yield store
    db.reset_store_for_test()


@pytest.fixture
def client(sql_store):
    """FastAPI TestClient over the temp SQL store. Depends on sql_store so the temp DB is set before app runs."""
    from fastapi.testclient import TestClient

    from backend_reputul.api_server.server import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
