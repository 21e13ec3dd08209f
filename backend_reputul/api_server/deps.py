"""
FastAPI dependencies: collaborator stores and scoring config.

Production wiring uses the SQLAlchemy store; tests swap these out through
app.dependency_overrides.
"""

from __future__ import annotations

from backend_reputul.config.settings import ScoringConfig, get_scoring_config
from backend_reputul.database.sql_store import get_sql_store
from backend_reputul.database.stores import PlatformLinkStore, ReviewStore


def get_review_store() -> ReviewStore:
    return get_sql_store()


def get_platform_link_store() -> PlatformLinkStore:
    return get_sql_store()


def get_config() -> ScoringConfig:
    return get_scoring_config()
