"""Pytest configuration and fixtures."""

import pytest

from tests.helpers import (
    POOL_WY,
    POOL_XW,
    POOL_XY,
    POOL_XZ,
    POOL_YZ,
    W,
    X,
    Y,
    Z,
    make_pool,
)
from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.routing.config import SearchConfig
from wayfinder.routing.search import RouteSearch


@pytest.fixture
def search() -> RouteSearch:
    """Route search with bound pruning (the default)."""
    return RouteSearch(SearchConfig())


@pytest.fixture
def exhaustive_search() -> RouteSearch:
    """Route search that runs to exhaustion."""
    return RouteSearch(SearchConfig(prune_by_bound=False))


@pytest.fixture
def direct_pool() -> ConstantProductPool:
    """Scenario A: single X/Y pool, 1M / 2M reserves, 30 bps."""
    return make_pool(X, Y, 1_000_000, 2_000_000, fee_bps=30, address=POOL_XY)


@pytest.fixture
def chain_pools() -> list[ConstantProductPool]:
    """Scenario B: X-Y and Y-Z chained, no direct X-Z pool."""
    return [
        make_pool(X, Y, address=POOL_XY),
        make_pool(Y, Z, address=POOL_YZ),
    ]


@pytest.fixture
def competing_pools() -> list[ConstantProductPool]:
    """Scenario C: expensive direct X-Z pool next to a cheap X-Y-Z path.

    At 1,000 in, the two-hop path pays 992 against 989 direct.
    At 100,000 in, slippage through two pools makes the direct pool win.
    """
    return [
        make_pool(X, Z, fee_bps=100, address=POOL_XZ),
        make_pool(X, Y, address=POOL_XY),
        make_pool(Y, Z, address=POOL_YZ),
    ]


@pytest.fixture
def detour_pools() -> list[ConstantProductPool]:
    """A cheap 1-hop way to Y and a richer 2-hop way to Y via W.

    With a 2-hop budget only X-Y-Z fits; with 3 hops X-W-Y-Z pays more.
    """
    return [
        make_pool(X, Y, address=POOL_XY),
        make_pool(X, W, fee_bps=0, address=POOL_XW),
        make_pool(W, Y, 1_000_000, 10_000_000, fee_bps=0, address=POOL_WY),
        make_pool(Y, Z, address=POOL_YZ),
    ]
