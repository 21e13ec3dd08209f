"""
Score an exported review CSV: snapshot, rating goals and breakdown as JSON.

CSV columns: rating (required), source (blank means DIRECT), created_at,
replied_at (optional; ISO-8601 or anything pandas can parse). A row with a
bad rating fails the whole run, same as the API.

Optionally loads the rows into the review store for a business
(--import-business) so the running API serves the same numbers.

Usage:
  python -m backend_reputul.tools.score_reviews_csv reviews.csv
  python -m backend_reputul.tools.score_reviews_csv reviews.csv --targets 4.5,4.8 --import-business biz-42
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from backend_reputul.analysis_engine.goals import project_goals
from backend_reputul.analysis_engine.models import Review, ReviewSource
from backend_reputul.analysis_engine.scorer import compute_breakdown, compute_snapshot
from backend_reputul.core.exceptions import InvalidGoalTargetError, InvalidRatingError
from backend_reputul.reputul_logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("rating",)


def _timestamp(value: Any) -> datetime | None:
    if value is None or pd.isna(value):
        return None
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.to_pydatetime()


def _rating(value: Any) -> Any:
    """Whole-number floats (pandas upcasts int columns with blanks) become int; anything else passes through for validation."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if hasattr(value, "item"):
        return _rating(value.item())
    return value


def load_reviews(path: Path) -> list[Review]:
    """Read a review CSV into Review objects. Raises InvalidRatingError on any bad rating."""
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV must have columns {list(REQUIRED_COLUMNS)}, got {list(df.columns)}")
    for column in ("source", "created_at", "replied_at"):
        if column not in df.columns:
            df[column] = None

    now = datetime.now(timezone.utc)
    reviews: list[Review] = []
    for _, row in df.iterrows():
        rating = row["rating"]
        if pd.isna(rating):
            raise InvalidRatingError(None)
        reviews.append(
            Review(
                rating=_rating(rating),
                source=ReviewSource.parse(row["source"]) if pd.notna(row["source"]) else ReviewSource.DIRECT,
                created_at=_timestamp(row["created_at"]) or now,
                replied_at=_timestamp(row["replied_at"]),
            )
        )
    return reviews


def score(reviews: list[Review], targets: list[float] | None = None) -> dict[str, Any]:
    return {
        "snapshot": compute_snapshot(reviews).to_dict(),
        "goals": [g.to_dict() for g in project_goals(reviews, targets=targets)],
        "breakdown": compute_breakdown(reviews).to_dict(),
    }


def _parse_targets(raw: str | None) -> list[float] | None:
    if not raw:
        return None
    try:
        return [float(t) for t in raw.split(",") if t.strip()]
    except ValueError as e:
        raise InvalidGoalTargetError(raw) from e


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score a review CSV export")
    parser.add_argument("csv_path", type=Path, help="CSV with rating[,source,created_at,replied_at]")
    parser.add_argument("--targets", default=None, help="Comma-separated goal targets (default: configured)")
    parser.add_argument("--import-business", default=None, help="Also load rows into the review store for this business id")
    args = parser.parse_args(argv)

    if not args.csv_path.is_file():
        print(f"[score_reviews_csv] ERROR: {args.csv_path} not found", file=sys.stderr)
        return 1

    try:
        reviews = load_reviews(args.csv_path)
        result = score(reviews, _parse_targets(args.targets))
    except (InvalidRatingError, InvalidGoalTargetError) as e:
        print(f"[score_reviews_csv] ERROR: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[score_reviews_csv] ERROR: {e}", file=sys.stderr)
        return 1

    if args.import_business:
        from backend_reputul.database.sql_store import get_sql_store

        store = get_sql_store()
        for review in reviews:
            store.add_review(args.import_business, review)
        logger.info("score_reviews_csv_imported", business_id=args.import_business, count=len(reviews))

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
