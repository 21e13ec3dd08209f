"""
Database package — collaborator stores for reviews and platform links.

The scoring engine never imports this package; the API server does.
"""

from backend_reputul.database.stores import (
    InMemoryPlatformLinkStore,
    InMemoryReviewStore,
    PlatformLinkStore,
    ReviewStore,
)
from backend_reputul.database.sql_store import SqlStore, get_sql_store, reset_store_for_test

__all__ = [
    "InMemoryPlatformLinkStore",
    "InMemoryReviewStore",
    "PlatformLinkStore",
    "ReviewStore",
    "SqlStore",
    "get_sql_store",
    "reset_store_for_test",
]
