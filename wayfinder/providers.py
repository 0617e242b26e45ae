"""Interfaces of the collaborators around the route engine.

The engine itself performs no I/O. Reserve data comes in through a
ReserveProvider; found routes go out to a RouteBuilder (which turns them
into ledger operations, re-validating against live reserves) and may be
kept between steps by a RouteStore. Only the static provider lives here;
the others are implemented by the integrating system.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.routing.types import RouteResult


@runtime_checkable
class ReserveProvider(Protocol):
    """Source of pool snapshots.

    Freshness is the provider's responsibility. Each call must return a
    snapshot the caller may hold for the duration of a search without it
    changing underneath.
    """

    def get_pools(self) -> list[ConstantProductPool]:
        """Return the current pool snapshot, in a stable order."""
        ...


@runtime_checkable
class RouteBuilder(Protocol):
    """Turns a route into executable steps against the ledger."""

    def build(self, route: RouteResult, min_amount_out: int) -> Any:
        """Build executable operations for route.

        Implementations must re-check every hop against live reserves:
        the engine only certifies optimality against the snapshot it saw.
        """
        ...


@runtime_checkable
class RouteStore(Protocol):
    """Keeps a found route unchanged between separate execution steps."""

    def save(self, key: str, route: RouteResult) -> None: ...

    def load(self, key: str) -> RouteResult | None: ...


class StaticReserveProvider:
    """ReserveProvider over a fixed list of pools.

    Pools are immutable, so copying the list on every read is enough to
    give each caller its own snapshot.
    """

    def __init__(self, pools: Iterable[ConstantProductPool]) -> None:
        self._pools = list(pools)

    def get_pools(self) -> list[ConstantProductPool]:
        return list(self._pools)

    def __len__(self) -> int:
        return len(self._pools)


__all__ = ["ReserveProvider", "RouteBuilder", "RouteStore", "StaticReserveProvider"]
