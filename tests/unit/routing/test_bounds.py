"""Tests for optimistic route bounds."""

import random
from fractions import Fraction

from tests.helpers import (
    X,
    Y,
    Z,
    asset_id,
    brute_force_best,
    make_pool,
    random_snapshot,
    replay,
)
from wayfinder.amm.constant_product import compute_output
from wayfinder.amm.result import PricingError
from wayfinder.constants import UINT64_MAX, UINT128_MAX
from wayfinder.routing.bounds import OverflowLimits, RouteBounds
from wayfinder.routing.graph import PoolGraph


class TestRouteBounds:
    """Tests for RouteBounds."""

    def test_target_bound_is_amount(self, chain_pools):
        bounds = RouteBounds(PoolGraph.from_pools(chain_pools), Z, 3)
        assert bounds.upper_bound(Z, 12345, 0) == 12345

    def test_unreachable_within_hops(self, chain_pools):
        bounds = RouteBounds(PoolGraph.from_pools(chain_pools), Z, 3)
        assert bounds.rate(X, 1) == 0
        assert bounds.upper_bound(X, 1000, 1) == 0
        assert bounds.upper_bound(X, 1000, 0) == 0

    def test_chained_rate(self, chain_pools):
        bounds = RouteBounds(PoolGraph.from_pools(chain_pools), Z, 3)
        one_hop = Fraction(9970, 10_000)
        assert bounds.rate(Y, 1) == one_hop
        assert bounds.rate(X, 2) == one_hop * one_hop

    def test_rate_monotone_in_hops(self, competing_pools):
        bounds = RouteBounds(PoolGraph.from_pools(competing_pools), Z, 3)
        rates = [bounds.rate(X, k) for k in range(4)]
        assert rates == sorted(rates)

    def test_rate_clamps_remaining_hops(self, chain_pools):
        bounds = RouteBounds(PoolGraph.from_pools(chain_pools), Z, 2)
        assert bounds.rate(X, 10) == bounds.rate(X, 2)
        assert bounds.rate(X, -1) == 0

    def test_reserve_cap(self):
        pools = [make_pool(X, Z, 10, 500), make_pool(Y, Z, 10, 700), make_pool(X, Y, 10, 9000)]
        bounds = RouteBounds(PoolGraph.from_pools(pools), Z, 3)
        assert bounds.reserve_cap == 700
        assert bounds.upper_bound(X, 10**9, 3) == 700

    def test_unusable_pools_ignored(self):
        pools = [make_pool(X, Z, reserve_a=0)]
        bounds = RouteBounds(PoolGraph.from_pools(pools), Z, 3)
        assert bounds.rate(X, 3) == 0
        assert bounds.reserve_cap == 0

    def test_bound_never_below_best_route(self):
        """No real route beats the bound from the input asset."""
        rng = random.Random(7)
        for _ in range(30):
            pools = random_snapshot(rng, assets=5, pools=7)
            graph = PoolGraph.from_pools(pools)
            source, target = asset_id(0), asset_id(1)
            if not graph.has_asset(source) or not graph.has_asset(target):
                continue
            for max_hops in (1, 2, 3):
                best = brute_force_best(pools, source, target, 10_000, max_hops)
                if best is None:
                    continue
                bounds = RouteBounds(graph, target, max_hops)
                assert bounds.upper_bound(source, 10_000, max_hops) >= best[1]


class TestOverflowLimits:
    """Tests for OverflowLimits."""

    def test_no_limit_without_hops(self, chain_pools):
        limits = OverflowLimits(PoolGraph.from_pools(chain_pools), Z, 3)
        assert limits.limit(X, 0) is None
        assert limits.is_safe(X, UINT64_MAX, 0)

    def test_target_has_no_limit(self, chain_pools):
        limits = OverflowLimits(PoolGraph.from_pools(chain_pools), Z, 3)
        assert limits.limit(Z, 3) is None

    def test_small_reserves_allow_any_amount(self, chain_pools):
        limits = OverflowLimits(PoolGraph.from_pools(chain_pools), Z, 3)
        assert limits.is_safe(X, UINT64_MAX, 3)
        assert limits.is_safe(Y, UINT64_MAX, 3)

    def test_single_pool_limit_is_exact(self):
        """The limit prices; one more unit overflows."""
        pool = make_pool(X, Y, 10**6, UINT64_MAX)
        limits = OverflowLimits(PoolGraph.from_pools([pool]), Y, 1)

        limit = limits.limit(X, 1)

        assert limit == UINT128_MAX // (9970 * UINT64_MAX)
        assert compute_output(pool, X, limit).is_valid
        assert compute_output(pool, X, limit + 1).error is PricingError.OVERFLOW

    def test_downstream_limit_is_exact(self):
        """A first hop paying more than the next pool can price is limited too."""
        first = make_pool(X, Y, 10**6, 10**18)
        deep = make_pool(Y, Z, 10**18, UINT64_MAX)
        limits = OverflowLimits(PoolGraph.from_pools([first, deep]), Z, 2)

        limit = limits.limit(X, 2)

        assert limit is not None
        assert limit < limits.limit(X, 1)
        assert replay([first, deep], X, limit) is not None
        assert replay([first, deep], X, limit + 1) is None

    def test_limit_tightens_with_hops(self):
        pools = [make_pool(X, Y, 10**6, 10**18), make_pool(Y, Z, 10**18, UINT64_MAX)]
        limits = OverflowLimits(PoolGraph.from_pools(pools), Z, 3)
        assert limits.limit(X, 2) <= limits.limit(X, 1)
        assert limits.limit(X, 3) == limits.limit(X, 2)

    def test_unusable_pools_ignored(self):
        pools = [make_pool(X, Z, reserve_a=0, reserve_b=UINT64_MAX)]
        limits = OverflowLimits(PoolGraph.from_pools(pools), Z, 2)
        assert limits.limit(X, 2) is None
