"""
Configuration management for Backend Reputul.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for scoring constants.
"""

from backend_reputul.config.settings import ScoringConfig, get_scoring_config, load_scoring_config  # noqa: F401

__all__ = ["ScoringConfig", "get_scoring_config", "load_scoring_config"]
