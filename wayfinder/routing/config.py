"""Route search configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from wayfinder.constants import DEFAULT_MAX_HOPS


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


@dataclass(frozen=True)
class SearchConfig:
    """Centralized configuration for route search.

    Attributes:
        max_hops: Default hop bound when a call does not pass one. Clamped
            to [1, 5] at search time.
        max_expansions: Optional cap on expanded candidates. When hit, the
            search returns the best route found so far, marked inexact.
        time_limit_seconds: Optional wall-clock cap, same semantics.
        prune_by_bound: If True, drop candidates whose optimistic output
            bound cannot beat the best route found so far. If False, run
            to exhaustion. Both settings return the same route.
    """

    max_hops: int = DEFAULT_MAX_HOPS
    max_expansions: int | None = None
    time_limit_seconds: float | None = None
    prune_by_bound: bool = True

    def __post_init__(self) -> None:
        if self.max_expansions is not None and self.max_expansions < 1:
            raise ValueError(f"max_expansions must be positive, got {self.max_expansions}")
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise ValueError(
                f"time_limit_seconds must be positive, got {self.time_limit_seconds}"
            )

    @property
    def is_budgeted(self) -> bool:
        return self.max_expansions is not None or self.time_limit_seconds is not None

    @classmethod
    def from_env(cls) -> SearchConfig:
        """Build a config from environment variables.

        - WAYFINDER_MAX_HOPS: default hop bound (default: 3)
        - WAYFINDER_MAX_EXPANSIONS: expansion budget (default: unbounded)
        - WAYFINDER_TIME_LIMIT_SECONDS: time budget (default: unbounded)
        """
        max_hops = _env_int("WAYFINDER_MAX_HOPS")
        return cls(
            max_hops=DEFAULT_MAX_HOPS if max_hops is None else max_hops,
            max_expansions=_env_int("WAYFINDER_MAX_EXPANSIONS"),
            time_limit_seconds=_env_float("WAYFINDER_TIME_LIMIT_SECONDS"),
        )


# Default configuration instance
DEFAULT_SEARCH_CONFIG = SearchConfig()
