"""
Environment variable loading for Reputul.

- API_HOST / API_PORT: bind address for the API server (default 0.0.0.0:8000)
- DATABASE_URL: SQLAlchemy URL for the review / platform-link store
- REPUTUL_DB_PATH: SQLite file used when DATABASE_URL is not set (default reputul.db)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_reputul/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000
DEFAULT_SQLITE_PATH = "reputul.db"


def load_reputul_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env vars."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def get_env(name: str, default: str = "") -> str:
    """Return stripped env value, or default when unset or blank."""
    load_reputul_env()
    raw = (os.getenv(name) or "").strip()
    return raw or default


def get_api_host() -> str:
    return get_env("API_HOST", DEFAULT_API_HOST)


def get_api_port() -> int:
    raw = get_env("API_PORT", str(DEFAULT_API_PORT))
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_API_PORT


def get_database_url() -> str:
    """Return DATABASE_URL if set; else a SQLite URL from REPUTUL_DB_PATH or the default file."""
    url = get_env("DATABASE_URL")
    if url:
        return url
    path = get_env("REPUTUL_DB_PATH", DEFAULT_SQLITE_PATH)
    return f"sqlite:///{path}"
