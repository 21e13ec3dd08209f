"""
Scoring configuration.

Responsibilities:
- Load scoring constants from environment variables (.env supported).
- Validate them once at startup; invalid values raise ConfigurationError,
  which prevents the service from serving any request.
- Expose an immutable ScoringConfig shared by every worker without locking.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass, field
from typing import Any, Callable

from backend_reputul.config.env import get_env
from backend_reputul.core.exceptions import ConfigurationError

DEFAULT_VELOCITY_TARGET = 10
DEFAULT_VELOCITY_WINDOW_DAYS = 90
DEFAULT_RESPONSIVENESS_SLA_DAYS = 7
DEFAULT_GOAL_CAP = 10_000
DEFAULT_GOAL_TARGETS = (4.8, 4.9, 5.0)

# Upper bound for day-based windows (100 years); larger values overflow datetime arithmetic
MAX_WINDOW_DAYS = 36_500

ENV_VELOCITY_TARGET = "REPUTUL_VELOCITY_TARGET"
ENV_VELOCITY_WINDOW_DAYS = "REPUTUL_VELOCITY_WINDOW_DAYS"
ENV_RESPONSIVENESS_SLA_DAYS = "REPUTUL_RESPONSIVENESS_SLA_DAYS"
ENV_GOAL_CAP = "REPUTUL_GOAL_CAP"
ENV_GOAL_TARGETS = "REPUTUL_GOAL_TARGETS"


@dataclass(frozen=True)
class ScoringConfig:
    """
    Process-wide scoring constants. Frozen: loaded once, never mutated.

    velocity_target: Recent reviews needed for a full Velocity component.
    velocity_window_days: Trailing window counted as "recent".
    responsiveness_sla_days: Owner reply deadline, in days after the review.
    goal_cap: Finite stand-in for "unreachable" (5.0 target with an imperfect record).
    default_goal_targets: Milestones used when the caller passes none.
    """

    velocity_target: int = DEFAULT_VELOCITY_TARGET
    velocity_window_days: int = DEFAULT_VELOCITY_WINDOW_DAYS
    responsiveness_sla_days: float = DEFAULT_RESPONSIVENESS_SLA_DAYS
    goal_cap: int = DEFAULT_GOAL_CAP
    default_goal_targets: tuple[float, ...] = field(default=DEFAULT_GOAL_TARGETS)

    def __post_init__(self) -> None:
        if self.velocity_target < 1:
            raise ConfigurationError("velocity_target", f"must be >= 1, got {self.velocity_target}")
        if not 1 <= self.velocity_window_days <= MAX_WINDOW_DAYS:
            raise ConfigurationError(
                "velocity_window_days", f"must be in [1, {MAX_WINDOW_DAYS}], got {self.velocity_window_days}"
            )
        sla = self.responsiveness_sla_days
        if not math.isfinite(sla) or not 0 < sla <= MAX_WINDOW_DAYS:
            raise ConfigurationError(
                "responsiveness_sla_days", f"must be finite and in (0, {MAX_WINDOW_DAYS}], got {sla}"
            )
        if self.goal_cap < 1:
            raise ConfigurationError("goal_cap", f"must be >= 1, got {self.goal_cap}")
        for target in self.default_goal_targets:
            if math.isnan(target) or not 0 < target <= 5:
                raise ConfigurationError("default_goal_targets", f"target {target} outside (0, 5]")

    def to_dict(self) -> dict[str, Any]:
        return {
            "velocity_target": self.velocity_target,
            "velocity_window_days": self.velocity_window_days,
            "responsiveness_sla_days": self.responsiveness_sla_days,
            "goal_cap": self.goal_cap,
            "default_goal_targets": list(self.default_goal_targets),
        }


def _parse(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = get_env(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(name, f"cannot parse {raw!r}") from e


def _parse_targets(raw: str) -> tuple[float, ...]:
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if not parts:
        raise ValueError("no targets")
    return tuple(float(p) for p in parts)


def load_scoring_config() -> ScoringConfig:
    """Read scoring constants from env. Missing/blank values fall back to defaults."""
    return ScoringConfig(
        velocity_target=_parse(ENV_VELOCITY_TARGET, DEFAULT_VELOCITY_TARGET, int),
        velocity_window_days=_parse(ENV_VELOCITY_WINDOW_DAYS, DEFAULT_VELOCITY_WINDOW_DAYS, int),
        responsiveness_sla_days=_parse(ENV_RESPONSIVENESS_SLA_DAYS, DEFAULT_RESPONSIVENESS_SLA_DAYS, float),
        goal_cap=_parse(ENV_GOAL_CAP, DEFAULT_GOAL_CAP, int),
        default_goal_targets=_parse(ENV_GOAL_TARGETS, DEFAULT_GOAL_TARGETS, _parse_targets),
    )


@functools.lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """
    Return the process-wide ScoringConfig (loaded once, then cached).

    Raises:
        ConfigurationError: if any REPUTUL_* variable is unparsable or out of range.
    """
    return load_scoring_config()
