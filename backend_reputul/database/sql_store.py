"""
SQLAlchemy-backed review and platform-link store.

Uses DATABASE_URL for PostgreSQL when set; otherwise falls back to SQLite
(REPUTUL_DB_PATH or reputul.db). Implements both ReviewStore and
PlatformLinkStore so the API can run against a real database.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from sqlalchemy import Column, Integer, String, UniqueConstraint, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_reputul.analysis_engine.models import Review, ReviewSource, ensure_utc, validate_rating
from backend_reputul.config.env import get_database_url
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# -----------------------------------------------------------------------------
# SQLAlchemy models
# -----------------------------------------------------------------------------


class ReviewRow(Base):
    """One customer review. Timestamps are Unix seconds (UTC)."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(String(64), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    source = Column(String(32), nullable=False, default=ReviewSource.DIRECT.value)
    created_at = Column(Integer, nullable=False, index=True)
    replied_at = Column(Integer, nullable=True)

    def to_review(self) -> Review:
        """Convert to a domain Review. Raises InvalidRatingError for a corrupt rating."""
        return Review(
            rating=self.rating,
            source=ReviewSource.parse(self.source),
            created_at=datetime.fromtimestamp(self.created_at, tz=timezone.utc),
            replied_at=(
                datetime.fromtimestamp(self.replied_at, tz=timezone.utc)
                if self.replied_at is not None
                else None
            ),
        )


class PlatformLinkRow(Base):
    """Public review link for one platform of one business."""

    __tablename__ = "platform_links"
    __table_args__ = (UniqueConstraint("business_id", "platform", name="uq_platform_links_business_platform"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(String(64), nullable=False, index=True)
    platform = Column(String(64), nullable=False)
    url = Column(String(1024), nullable=False)


class CustomerTokenRow(Base):
    """Maps a customer's feedback-gate token to the business that sent it."""

    __tablename__ = "customer_tokens"

    token = Column(String(128), primary_key=True)
    business_id = Column(String(64), nullable=False, index=True)
    created_at = Column(Integer, nullable=False)


def _to_unix(value: datetime) -> int:
    return int(ensure_utc(value).timestamp())


class SqlStore:
    """ReviewStore + PlatformLinkStore over one SQLAlchemy engine."""

    def __init__(self, url: str | None = None) -> None:
        self.url = url or get_database_url()
        connect_args: dict[str, Any] = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(self.url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info("sql_store_engine", url=self.url.split("?")[0].split("//")[-1])

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create tables if they do not exist. Safe to call on every startup."""
        Base.metadata.create_all(bind=self._engine)
        logger.info("sql_store_init_db", tables=sorted(Base.metadata.tables))

    def dispose(self) -> None:
        self._engine.dispose()

    # -- reviews ---------------------------------------------------------------

    def add_review(self, business_id: str, review: Review) -> int:
        """Insert one review. Rating is validated again at ingestion. Returns the new row id."""
        business_id = (business_id or "").strip()
        if not business_id:
            raise ValueError("business_id must be non-empty")
        validate_rating(review.rating)
        with self._session_scope() as session:
            row = ReviewRow(
                business_id=business_id,
                rating=review.rating,
                source=review.source.value,
                created_at=_to_unix(review.created_at),
                replied_at=_to_unix(review.replied_at) if review.replied_at else None,
            )
            session.add(row)
            session.flush()
            row_id = row.id
        logger.debug("review_added", business_id=business_id, rating=review.rating, source=review.source.value)
        return row_id

    def list_reviews(self, business_id: str) -> list[Review]:
        """
        Return every review for a business, oldest first.

        Raises:
            InvalidRatingError: if a stored row has a rating outside 1–5.
        """
        with self._session_scope() as session:
            rows = (
                session.query(ReviewRow)
                .filter(ReviewRow.business_id == business_id)
                .order_by(ReviewRow.created_at, ReviewRow.id)
                .all()
            )
            return [r.to_review() for r in rows]

    # -- platform links ----------------------------------------------------------

    def set_platform_link(self, business_id: str, platform: str, url: str) -> bool:
        """Insert or update a platform link. Returns True if newly added."""
        platform = (platform or "").strip()
        url = (url or "").strip()
        if not platform or not url:
            raise ValueError("platform and url are required")
        try:
            with self._session_scope() as session:
                session.add(PlatformLinkRow(business_id=business_id, platform=platform, url=url))
                session.flush()
            return True
        except IntegrityError:
            with self._session_scope() as session:
                session.query(PlatformLinkRow).filter(
                    PlatformLinkRow.business_id == business_id,
                    PlatformLinkRow.platform == platform,
                ).update({"url": url})
            return False

    def get_platform_links(self, business_id: str) -> dict[str, str]:
        with self._session_scope() as session:
            rows = (
                session.query(PlatformLinkRow)
                .filter(PlatformLinkRow.business_id == business_id)
                .order_by(PlatformLinkRow.id)
                .all()
            )
            return {r.platform: r.url for r in rows}

    # -- customer tokens ---------------------------------------------------------

    def register_customer_token(self, token: str, business_id: str) -> bool:
        """Returns True if newly registered, False if the token already exists."""
        token = (token or "").strip()
        if not token:
            raise ValueError("token must be non-empty")
        try:
            with self._session_scope() as session:
                session.add(CustomerTokenRow(token=token, business_id=business_id, created_at=int(time.time())))
                session.flush()
            return True
        except IntegrityError:
            logger.info("customer_token_already_exists", business_id=business_id)
            return False

    def resolve_customer_token(self, token: str) -> str | None:
        with self._session_scope() as session:
            row = session.query(CustomerTokenRow).filter(CustomerTokenRow.token == token).first()
            return row.business_id if row else None


_store: SqlStore | None = None


def get_sql_store() -> SqlStore:
    """Create or return the cached process-wide store; tables are created on first use."""
    global _store
    if _store is None:
        _store = SqlStore()
        _store.init_db()
    return _store


def reset_store_for_test() -> None:
    """Drop the cached store. For tests only; use with a new REPUTUL_DB_PATH."""
    global _store
    if _store is not None:
        _store.dispose()
    _store = None
