"""Best-output route search over a pool snapshot.

The search is a best-first label-setting search. Candidates are drawn from a
max-priority frontier ordered by (amount desc, hops asc, discovery order).
Each asset keeps a table of non-dominated labels; a candidate is dropped
when another label at the same asset has at least the same amount, no more
hops, and a subset of its visited assets. Pricing is monotone in the input
amount only while it does not overflow, so a label may dominate only if its
amount is within the asset's overflow limit (see ``OverflowLimits``). Then a
dominated candidate can never finish ahead of its dominator.

Amounts held in different assets are not comparable, so reaching the
target first does not prove optimality by itself. Instead the search keeps
the best target arrival as an incumbent and drops any candidate whose
optimistic bound (see ``bounds.py``) falls below it. With bound pruning
disabled the search runs to exhaustion and returns the same route.
"""

from __future__ import annotations

import heapq
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from wayfinder.amm.constant_product import (
    ConstantProductAMM,
    ConstantProductPool,
    constant_product,
)
from wayfinder.amm.result import PricingError
from wayfinder.constants import clamp_max_hops
from wayfinder.models.types import is_uint64, normalize_identifier
from wayfinder.routing.bounds import OverflowLimits, RouteBounds
from wayfinder.routing.config import DEFAULT_SEARCH_CONFIG, SearchConfig
from wayfinder.routing.graph import PoolGraph
from wayfinder.routing.types import HopResult, RouteError, RouteResult, SearchOutcome

logger = structlog.get_logger()


@dataclass
class _Label:
    """A non-dominated way of holding `amount` of an asset."""

    amount: int
    hops: int
    visited: frozenset[str]
    # Every continuation of this label prices without overflow
    safe: bool = True
    alive: bool = True

    def dominates(self, amount: int, hops: int, visited: frozenset[str]) -> bool:
        return (
            self.safe
            and self.amount >= amount
            and self.hops <= hops
            and self.visited <= visited
        )


class _LabelTable:
    """Best-known table: asset -> non-dominated labels.

    Local to one search call.
    """

    def __init__(self) -> None:
        self._labels: dict[str, list[_Label]] = {}

    def insert(
        self,
        asset: str,
        amount: int,
        hops: int,
        visited: frozenset[str],
        safe: bool = True,
    ) -> _Label | None:
        """Record a label unless an existing one dominates it.

        Labels the newcomer dominates are retired; their queued candidates
        become stale. A label that is not overflow-safe neither blocks nor
        retires others.

        Returns:
            The new label, or None if it was dominated
        """
        labels = self._labels.setdefault(asset, [])
        for label in labels:
            if label.dominates(amount, hops, visited):
                return None

        new_label = _Label(amount, hops, visited, safe)
        survivors = []
        for label in labels:
            if new_label.dominates(label.amount, label.hops, label.visited):
                label.alive = False
            else:
                survivors.append(label)
        survivors.append(new_label)
        self._labels[asset] = survivors
        return new_label

    def __len__(self) -> int:
        return sum(len(labels) for labels in self._labels.values())


@dataclass
class _Candidate:
    """Frontier entry: a partial route ending at `asset`."""

    asset: str
    amount: int
    hops: int
    pools: tuple[ConstantProductPool, ...]
    assets: tuple[str, ...]
    amounts: tuple[int, ...]
    label: _Label

    def extend(self, pool: ConstantProductPool, asset: str, amount: int, label: _Label) -> _Candidate:
        return _Candidate(
            asset=asset,
            amount=amount,
            hops=self.hops + 1,
            pools=self.pools + (pool,),
            assets=self.assets + (asset,),
            amounts=self.amounts + (amount,),
            label=label,
        )

    def is_better_arrival(self, other: _Candidate | None) -> bool:
        """More output, or the same output in fewer hops."""
        if other is None:
            return True
        return self.amount > other.amount or (
            self.amount == other.amount and self.hops < other.hops
        )


@dataclass
class _SearchStats:
    expansions: int = 0
    pushed: int = 0
    stale: int = 0
    dominated: int = 0
    pruned: int = 0
    unpriceable: int = 0
    overflows: int = 0
    hop_limited: int = 0
    arrivals: int = 0

    def as_dict(self) -> dict[str, int]:
        return dict(self.__dict__)


@dataclass
class _Frontier:
    """Max-priority frontier keyed by (amount desc, hops asc, discovery order)."""

    _heap: list[tuple[int, int, int, _Candidate]] = field(default_factory=list)
    _seq: int = 0

    def push(self, candidate: _Candidate) -> None:
        heapq.heappush(self._heap, (-candidate.amount, candidate.hops, self._seq, candidate))
        self._seq += 1

    def pop(self) -> _Candidate:
        return heapq.heappop(self._heap)[3]

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __len__(self) -> int:
        return len(self._heap)


class RouteSearch:
    """Finds the route with the greatest final output under a hop bound.

    Usage:
        search = RouteSearch()
        outcome = search.find_best_route(pools, token_in, token_out, 10**6, max_hops=3)
        if outcome.is_valid:
            print(outcome.result.route, outcome.result.amount_out)
    """

    def __init__(
        self,
        config: SearchConfig | None = None,
        amm: ConstantProductAMM | None = None,
    ) -> None:
        """Initialize with optional configuration and AMM.

        Args:
            config: Search configuration. Uses DEFAULT_SEARCH_CONFIG if not provided.
            amm: Pricing model. Uses the module-level constant product AMM by default.
        """
        self.config = config or DEFAULT_SEARCH_CONFIG
        self.amm = amm or constant_product

    def find_best_route(
        self,
        pools: Sequence[ConstantProductPool],
        input_asset: str,
        output_asset: str,
        amount_in: int,
        max_hops: int | None = None,
    ) -> SearchOutcome:
        """Find the best route from input_asset to output_asset.

        Args:
            pools: Immutable pool snapshot; its order breaks ties
            input_asset: Asset being sold
            output_asset: Asset being bought
            amount_in: Amount of input_asset to sell (uint64)
            max_hops: Hop bound, clamped to [1, 5]. Defaults to config.max_hops.

        Returns:
            SearchOutcome with the best route, or INVALID_INPUT,
            ROUTE_NOT_FOUND, OVERFLOW (no route, and some trade overflowed)
            or BUDGET_EXHAUSTED
        """
        requested_hops = self.config.max_hops if max_hops is None else max_hops
        effective_hops = clamp_max_hops(requested_hops)
        if effective_hops != requested_hops:
            logger.warning(
                "max_hops_clamped",
                requested=requested_hops,
                effective=effective_hops,
            )

        token_in = normalize_identifier(input_asset)
        token_out = normalize_identifier(output_asset)

        if token_in == token_out:
            return SearchOutcome.with_error(
                RouteError.INVALID_INPUT,
                "input and output asset are the same",
                max_hops=effective_hops,
            )
        if not pools:
            return SearchOutcome.with_error(
                RouteError.INVALID_INPUT, "empty pool snapshot", max_hops=effective_hops
            )
        if not is_uint64(amount_in):
            return SearchOutcome.with_error(
                RouteError.INVALID_INPUT,
                f"amount_in must be a uint64, got {amount_in!r}",
                max_hops=effective_hops,
            )

        try:
            graph = PoolGraph.from_pools(pools)
        except ValueError as err:
            return SearchOutcome.with_error(
                RouteError.INVALID_INPUT, str(err), max_hops=effective_hops
            )

        if not graph.has_asset(token_in) or not graph.has_asset(token_out):
            return SearchOutcome.with_error(
                RouteError.ROUTE_NOT_FOUND,
                "asset not present in any pool",
                max_hops=effective_hops,
            )

        return self._search(graph, token_in, token_out, amount_in, effective_hops)

    def _search(
        self,
        graph: PoolGraph,
        token_in: str,
        token_out: str,
        amount_in: int,
        max_hops: int,
    ) -> SearchOutcome:
        config = self.config
        bounds = RouteBounds(graph, token_out, max_hops, self.amm) if config.prune_by_bound else None
        limits = OverflowLimits(graph, token_out, max_hops)
        deadline = (
            time.monotonic() + config.time_limit_seconds
            if config.time_limit_seconds is not None
            else None
        )

        stats = _SearchStats()
        labels = _LabelTable()
        frontier = _Frontier()

        seed_visited = frozenset([token_in])
        seed_label = labels.insert(token_in, amount_in, 0, seed_visited)
        assert seed_label is not None  # first label for the input asset
        frontier.push(
            _Candidate(
                asset=token_in,
                amount=amount_in,
                hops=0,
                pools=(),
                assets=(token_in,),
                amounts=(amount_in,),
                label=seed_label,
            )
        )

        incumbent: _Candidate | None = None
        budget_hit = False

        while frontier:
            current = frontier.pop()

            if not current.label.alive:
                stats.stale += 1
                continue

            if current.asset == token_out:
                stats.arrivals += 1
                if current.is_better_arrival(incumbent):
                    incumbent = current
                continue

            if current.hops >= max_hops:
                stats.hop_limited += 1
                continue

            if bounds is not None and self._is_hopeless(
                bounds, current.asset, current.amount, max_hops - current.hops, incumbent
            ):
                stats.pruned += 1
                continue

            # Out of budget: stop expanding, but keep draining the frontier
            # so target arrivals already queued still count
            if budget_hit or self._budget_exhausted(stats, deadline):
                budget_hit = True
                continue

            stats.expansions += 1
            for edge in graph._neighbors_fast(current.asset):
                if edge.other in current.label.visited:
                    continue

                pricing = self.amm.compute_output(edge.pool, current.asset, current.amount)
                if not pricing.is_valid:
                    stats.unpriceable += 1
                    if pricing.error is PricingError.OVERFLOW:
                        stats.overflows += 1
                        logger.warning(
                            "pool_skipped_overflow",
                            pool=edge.pool.address,
                            token_in=current.asset,
                            amount_in=current.amount,
                        )
                    continue
                amount_out = pricing.amount_out
                if not amount_out:
                    continue

                remaining = max_hops - current.hops - 1
                if bounds is not None and self._is_hopeless(
                    bounds, edge.other, amount_out, remaining, incumbent
                ):
                    stats.pruned += 1
                    continue

                label = labels.insert(
                    edge.other,
                    amount_out,
                    current.hops + 1,
                    current.label.visited | {edge.other},
                    safe=limits.is_safe(edge.other, amount_out, remaining),
                )
                if label is None:
                    stats.dominated += 1
                    continue

                frontier.push(current.extend(edge.pool, edge.other, amount_out, label))
                stats.pushed += 1

        logger.debug(
            "route_search_finished",
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            max_hops=max_hops,
            found=incumbent is not None,
            budget_hit=budget_hit,
            labels=len(labels),
            **stats.as_dict(),
        )

        if incumbent is None:
            if budget_hit:
                return SearchOutcome.with_error(
                    RouteError.BUDGET_EXHAUSTED,
                    "search budget exhausted before reaching the output asset",
                    max_hops=max_hops,
                    stats=stats.as_dict(),
                )
            if stats.overflows:
                return SearchOutcome.with_error(
                    RouteError.OVERFLOW,
                    f"no route within {max_hops} hops; "
                    f"{stats.overflows} trade(s) overflowed the 128-bit working width",
                    max_hops=max_hops,
                    stats=stats.as_dict(),
                )
            return SearchOutcome.with_error(
                RouteError.ROUTE_NOT_FOUND,
                f"no route within {max_hops} hops",
                max_hops=max_hops,
                stats=stats.as_dict(),
            )

        return SearchOutcome.found(
            self._build_result(incumbent, exact=not budget_hit, expansions=stats.expansions),
            max_hops=max_hops,
            stats=stats.as_dict(),
        )

    @staticmethod
    def _is_hopeless(
        bounds: RouteBounds,
        asset: str,
        amount: int,
        remaining_hops: int,
        incumbent: _Candidate | None,
    ) -> bool:
        """True if no continuation can reach the incumbent's amount.

        Without an incumbent, a candidate is hopeless only if it cannot
        reach the target with any positive amount.
        """
        threshold = incumbent.amount if incumbent is not None else 1
        return bounds.upper_bound(asset, amount, remaining_hops) < threshold

    def _budget_exhausted(self, stats: _SearchStats, deadline: float | None) -> bool:
        max_expansions = self.config.max_expansions
        if max_expansions is not None and stats.expansions >= max_expansions:
            return True
        return deadline is not None and time.monotonic() >= deadline

    @staticmethod
    def _build_result(candidate: _Candidate, *, exact: bool, expansions: int) -> RouteResult:
        hops = [
            HopResult(
                pool=pool.address,
                input_token=candidate.assets[i],
                output_token=candidate.assets[i + 1],
                amount_in=candidate.amounts[i],
                amount_out=candidate.amounts[i + 1],
            )
            for i, pool in enumerate(candidate.pools)
        ]
        return RouteResult(
            route=[pool.address for pool in candidate.pools],
            assets=list(candidate.assets),
            amount_in=candidate.amounts[0],
            amount_out=candidate.amount,
            hops=hops,
            exact=exact,
            expansions=expansions,
        )


def find_best_route(
    pools: Sequence[ConstantProductPool],
    input_asset: str,
    output_asset: str,
    amount_in: int,
    max_hops: int | None = None,
    config: SearchConfig | None = None,
) -> SearchOutcome:
    """Find the best route with a one-off RouteSearch."""
    return RouteSearch(config).find_best_route(
        pools, input_asset, output_asset, amount_in, max_hops
    )


__all__ = ["RouteSearch", "find_best_route"]
