"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RouteError(Enum):
    """Reasons a route search produced no route."""

    INVALID_INPUT = "invalid_input"
    ROUTE_NOT_FOUND = "route_not_found"
    # No route, and at least one trade overflowed the working width
    OVERFLOW = "overflow"
    BUDGET_EXHAUSTED = "budget_exhausted"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"


@dataclass(frozen=True)
class HopResult:
    """Result of a single hop in a multi-hop route."""

    pool: str
    input_token: str
    output_token: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class RouteResult:
    """Best route found by a search.

    Attributes:
        route: Pool addresses in trade order
        assets: Asset sequence, one longer than route
        amount_in: Amount sold into the first pool
        amount_out: Amount received from the last pool
        hops: Per-hop amount breakdown
        exact: False when a search budget cut the search short, in which
            case the route is the best found so far, not a proven optimum
        expansions: Number of candidates expanded
    """

    route: list[str]
    assets: list[str]
    amount_in: int
    amount_out: int
    hops: list[HopResult]
    exact: bool = True
    expansions: int = 0

    @property
    def hop_count(self) -> int:
        return len(self.route)

    @property
    def is_multihop(self) -> bool:
        return len(self.route) > 1


@dataclass(frozen=True)
class SearchOutcome:
    """Outcome of a route search: a route, or the reason there is none.

    Attributes:
        result: The route, or None on error
        error: Why there is no route, if any
        error_detail: Optional human-readable detail
        max_hops: Effective hop bound after clamping
        stats: Search counters (expansions, pruned candidates, ...)
    """

    result: RouteResult | None
    error: RouteError | None = None
    error_detail: str | None = None
    max_hops: int | None = None
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.result is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_exact(self) -> bool:
        """True if the search proved its route optimal."""
        return self.is_valid and self.result is not None and self.result.exact

    @classmethod
    def found(
        cls,
        result: RouteResult,
        *,
        max_hops: int | None = None,
        stats: dict[str, int] | None = None,
    ) -> SearchOutcome:
        return cls(result=result, max_hops=max_hops, stats=stats or {})

    @classmethod
    def with_error(
        cls,
        error: RouteError,
        detail: str | None = None,
        *,
        max_hops: int | None = None,
        stats: dict[str, int] | None = None,
    ) -> SearchOutcome:
        return cls(
            result=None,
            error=error,
            error_detail=detail,
            max_hops=max_hops,
            stats=stats or {},
        )


__all__ = ["HopResult", "RouteError", "RouteResult", "SearchOutcome"]
