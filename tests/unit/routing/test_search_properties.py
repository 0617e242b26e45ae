"""Randomized checks of the route search against exhaustive enumeration.

Snapshots are small (at most six pools) so every simple path can be priced
directly. Seeds are fixed so failures reproduce.
"""

import random

import pytest

from tests.helpers import (
    asset_id,
    brute_force_best,
    make_pool,
    pool_id,
    random_snapshot,
    replay,
)
from wayfinder.constants import UINT64_MAX
from wayfinder.routing import RouteError, RouteSearch, SearchConfig

SEEDS = range(40)
AMOUNTS = [1, 997, 50_000, 3_000_000]


def _snapshot(seed: int, zero_reserve_chance: float = 0.0):
    rng = random.Random(seed)
    assets = rng.randint(3, 5)
    pools = rng.randint(2, 6)
    return (
        random_snapshot(rng, assets, pools, zero_reserve_chance=zero_reserve_chance),
        assets,
        rng,
    )


def _walk_assets(pools, token_in):
    assets = [token_in]
    for pool in pools:
        assets.append(pool.get_token_out(assets[-1]))
    return assets


class TestOptimality:
    """The search returns the best simple route within the hop bound."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_matches_brute_force(self, seed):
        pools, assets, rng = _snapshot(seed, zero_reserve_chance=0.15)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        search = RouteSearch()

        for max_hops in (1, 2, 3, 4):
            for amount_in in AMOUNTS:
                outcome = search.find_best_route(pools, source, target, amount_in, max_hops)
                best = brute_force_best(pools, source, target, amount_in, max_hops)

                if best is None:
                    assert outcome.error is RouteError.ROUTE_NOT_FOUND
                    continue
                assert outcome.is_exact
                assert outcome.result.amount_out == best[1]

    @pytest.mark.parametrize("seed", SEEDS)
    def test_pruned_matches_exhaustive(self, seed):
        pools, assets, rng = _snapshot(seed)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        pruned = RouteSearch(SearchConfig(prune_by_bound=True))
        exhaustive = RouteSearch(SearchConfig(prune_by_bound=False))

        for max_hops in (1, 3, 5):
            for amount_in in AMOUNTS:
                a = pruned.find_best_route(pools, source, target, amount_in, max_hops)
                b = exhaustive.find_best_route(pools, source, target, amount_in, max_hops)
                assert a.error == b.error
                if a.is_valid:
                    assert a.result.route == b.result.route
                    assert a.result.amount_out == b.result.amount_out


RESERVE_MAGNITUDES = [10**3, 10**6, 10**9, 10**12, 10**15, 10**18, UINT64_MAX]
WIDE_AMOUNTS = [1_000, 10**9, 10**15, UINT64_MAX]


def _wide_snapshot(seed: int):
    """Snapshot mixing tiny and uint64-sized reserves, so some trades overflow."""
    rng = random.Random(seed)
    assets = rng.randint(3, 5)
    pools = []
    for i in range(rng.randint(3, 6)):
        a, b = rng.sample(range(assets), 2)
        pools.append(
            make_pool(
                asset_id(a),
                asset_id(b),
                rng.choice(RESERVE_MAGNITUDES),
                rng.choice(RESERVE_MAGNITUDES),
                fee_bps=rng.choice([0, 30, 100]),
                address=pool_id(i),
            )
        )
    return pools, assets, rng


class TestOptimalityUnderOverflow:
    """Trades that overflow never hide a route that prices."""

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("prune_by_bound", [True, False])
    def test_matches_brute_force(self, seed, prune_by_bound):
        pools, assets, rng = _wide_snapshot(seed)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        search = RouteSearch(SearchConfig(prune_by_bound=prune_by_bound))

        for max_hops in (1, 2, 3):
            for amount_in in WIDE_AMOUNTS:
                outcome = search.find_best_route(pools, source, target, amount_in, max_hops)
                best = brute_force_best(pools, source, target, amount_in, max_hops)

                if best is None:
                    assert outcome.error in (RouteError.ROUTE_NOT_FOUND, RouteError.OVERFLOW)
                    continue
                assert outcome.is_exact
                assert outcome.result.amount_out == best[1]


class TestRouteShape:
    """Structural guarantees on every returned route."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_route_is_simple_and_bounded(self, seed):
        pools, assets, rng = _snapshot(seed)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        by_address = {pool.address: pool for pool in pools}

        for max_hops in (1, 2, 3):
            outcome = RouteSearch().find_best_route(pools, source, target, 10_000, max_hops)
            if not outcome.is_valid:
                continue
            result = outcome.result
            route_pools = [by_address[address] for address in result.route]

            assert 1 <= len(route_pools) <= max_hops
            walked = _walk_assets(route_pools, source)
            assert walked == result.assets
            assert walked[-1] == target
            assert len(set(walked)) == len(walked)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_replay_reproduces_output(self, seed):
        pools, assets, rng = _snapshot(seed)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        by_address = {pool.address: pool for pool in pools}

        outcome = RouteSearch().find_best_route(pools, source, target, 25_000, 3)
        if outcome.is_valid:
            route_pools = [by_address[address] for address in outcome.result.route]
            assert replay(route_pools, source, 25_000) == outcome.result.amount_out
            assert outcome.result.amount_out > 0


class TestMonotonicity:
    """Loosening the hop bound never makes the answer worse."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_more_hops_never_worse(self, seed):
        pools, assets, rng = _snapshot(seed)
        source, target = (asset_id(i) for i in rng.sample(range(assets), 2))
        search = RouteSearch()

        previous = 0
        for max_hops in range(1, 6):
            outcome = search.find_best_route(pools, source, target, 100_000, max_hops)
            amount = outcome.result.amount_out if outcome.is_valid else 0
            assert amount >= previous
            previous = amount

    @pytest.mark.parametrize("seed", SEEDS)
    def test_same_asset_always_invalid(self, seed):
        pools, assets, _ = _snapshot(seed)
        search = RouteSearch()
        for i in range(assets):
            outcome = search.find_best_route(pools, asset_id(i), asset_id(i), 1000)
            assert outcome.error is RouteError.INVALID_INPUT
