"""Pool graph for multi-hop routing.

Provides an adjacency view over a pool snapshot: each asset maps to the
pools it can be sold into and the asset received from each. The graph is
rebuilt per search and never mutated afterwards.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence
from typing import NamedTuple

from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.models.types import normalize_identifier


class Edge(NamedTuple):
    """A pool reachable from an asset, and the asset it pays out."""

    pool: ConstantProductPool
    other: str


class PoolGraph:
    """Graph of assets connected by liquidity pools.

    Unlike a plain token graph, parallel pools between the same pair are
    kept as separate edges: they price differently, and a route names pools,
    not pairs. Neighbor lists preserve snapshot order so that ties between
    equally good routes resolve the same way on every run.
    """

    def __init__(self) -> None:
        """Initialize an empty pool graph."""
        self._adjacency: dict[str, list[Edge]] = {}
        self._pools: dict[str, ConstantProductPool] = {}

    @classmethod
    def from_pools(cls, pools: Sequence[ConstantProductPool]) -> PoolGraph:
        """Build a PoolGraph from a pool snapshot.

        Args:
            pools: Ordered pool snapshot

        Returns:
            PoolGraph with one edge per pool and direction

        Raises:
            ValueError: If the snapshot is empty or repeats a pool address
        """
        if not pools:
            raise ValueError("Cannot build a pool graph from an empty snapshot")

        graph = cls()
        for pool in pools:
            graph._add_pool(pool)
        return graph

    def _add_pool(self, pool: ConstantProductPool) -> None:
        if pool.address in self._pools:
            raise ValueError(f"Duplicate pool in snapshot: {pool.address}")
        self._pools[pool.address] = pool
        self._adjacency.setdefault(pool.token_a, []).append(Edge(pool, pool.token_b))
        self._adjacency.setdefault(pool.token_b, []).append(Edge(pool, pool.token_a))

    def neighbors(self, asset: str) -> list[Edge]:
        """Get every (pool, other asset) pair tradeable from asset.

        Args:
            asset: Asset identifier (any case, will be normalized)

        Returns:
            Edges in snapshot order; empty if the asset is unknown
        """
        return self._adjacency.get(normalize_identifier(asset), [])

    def _neighbors_fast(self, asset_normalized: str) -> list[Edge]:
        """Neighbors for an already-normalized asset identifier."""
        return self._adjacency.get(asset_normalized, [])

    def has_asset(self, asset: str) -> bool:
        return normalize_identifier(asset) in self._adjacency

    def pool(self, address: str) -> ConstantProductPool | None:
        """Look up a pool by address."""
        return self._pools.get(normalize_identifier(address))

    @property
    def assets(self) -> list[str]:
        return list(self._adjacency)

    @property
    def asset_count(self) -> int:
        """Number of unique assets in the graph."""
        return len(self._adjacency)

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def iter_simple_routes(
        self,
        asset_in: str,
        asset_out: str,
        max_hops: int,
    ) -> Iterator[list[ConstantProductPool]]:
        """Enumerate every simple pool path from asset_in to asset_out.

        Breadth-first, so shorter routes come out first. A route never
        revisits an asset. Unusable pools are still enumerated; pricing
        decides whether a route actually trades.

        The number of routes grows exponentially with max_hops, so this is
        meant for small snapshots and for cross-checking the search.

        Args:
            asset_in: Starting asset
            asset_out: Target asset
            max_hops: Maximum number of pools per route

        Yields:
            Lists of pools forming a route
        """
        start = normalize_identifier(asset_in)
        target = normalize_identifier(asset_out)
        if start == target or max_hops < 1:
            return

        queue: deque[tuple[str, list[ConstantProductPool], frozenset[str]]] = deque(
            [(start, [], frozenset([start]))]
        )
        while queue:
            asset, route, visited = queue.popleft()
            for edge in self._neighbors_fast(asset):
                if edge.other in visited:
                    continue
                new_route = route + [edge.pool]
                if edge.other == target:
                    yield new_route
                elif len(new_route) < max_hops:
                    queue.append((edge.other, new_route, visited | {edge.other}))


__all__ = ["Edge", "PoolGraph"]
