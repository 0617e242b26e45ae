#!/usr/bin/env python3
"""Profile route search on random pool snapshots.

Compares bound-pruned search against the exhaustive mode on the same
snapshots, checks that both return the same route, and prints timings.
"""

import argparse
import cProfile
import logging
import pstats
import random
import sys
import time
from pathlib import Path

import structlog

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.routing.config import SearchConfig
from wayfinder.routing.search import RouteSearch
from wayfinder.routing.types import SearchOutcome

logger = structlog.get_logger()


def asset_id(index: int) -> str:
    return "0x" + f"{index:064x}"


def pool_id(index: int) -> str:
    return "0x" + "ff" + f"{index:062x}"


def random_snapshot(rng: random.Random, assets: int, pools: int) -> list[ConstantProductPool]:
    """Build a random snapshot with reserves between 1e6 and 1e12."""
    snapshot = []
    for i in range(pools):
        a, b = rng.sample(range(assets), 2)
        snapshot.append(
            ConstantProductPool(
                address=pool_id(i),
                token_a=asset_id(a),
                token_b=asset_id(b),
                reserve_a=rng.randint(10**6, 10**12),
                reserve_b=rng.randint(10**6, 10**12),
                fee_bps=rng.choice([1, 5, 30, 100]),
            )
        )
    return snapshot


def timed(search: RouteSearch, snapshot, amount: int, max_hops: int) -> tuple[float, SearchOutcome]:
    start = time.perf_counter()
    outcome = search.find_best_route(snapshot, asset_id(0), asset_id(1), amount, max_hops)
    return time.perf_counter() - start, outcome


def main() -> int:
    parser = argparse.ArgumentParser(description="Profile route search")
    parser.add_argument("--assets", type=int, default=30, help="Number of assets (default: 30)")
    parser.add_argument("--pools", type=int, default=120, help="Number of pools (default: 120)")
    parser.add_argument("--runs", type=int, default=10, help="Snapshots to try (default: 10)")
    parser.add_argument("--max-hops", type=int, default=4, help="Hop bound (default: 4)")
    parser.add_argument("--amount", type=int, default=10**6, help="Amount in (default: 1e6)")
    parser.add_argument("--seed", type=int, default=0, help="RNG seed (default: 0)")
    parser.add_argument("--profile", action="store_true", help="Print cProfile stats")
    parser.add_argument("--top", type=int, default=25, help="Profile rows to show (default: 25)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    rng = random.Random(args.seed)
    pruned = RouteSearch(SearchConfig(prune_by_bound=True))
    exhaustive = RouteSearch(SearchConfig(prune_by_bound=False))
    profiler = cProfile.Profile() if args.profile else None
    mismatches = 0

    for run in range(args.runs):
        snapshot = random_snapshot(rng, args.assets, args.pools)

        if profiler is not None:
            profiler.enable()
        pruned_time, pruned_outcome = timed(pruned, snapshot, args.amount, args.max_hops)
        if profiler is not None:
            profiler.disable()
        full_time, full_outcome = timed(exhaustive, snapshot, args.amount, args.max_hops)

        same = pruned_outcome.result == full_outcome.result or (
            pruned_outcome.result is not None
            and full_outcome.result is not None
            and pruned_outcome.result.route == full_outcome.result.route
            and pruned_outcome.result.amount_out == full_outcome.result.amount_out
        )
        if not same:
            mismatches += 1
            logger.error("mode_mismatch", run=run)

        logger.info(
            "run_finished",
            run=run,
            found=pruned_outcome.is_valid,
            hops=pruned_outcome.result.hop_count if pruned_outcome.result else None,
            amount_out=pruned_outcome.result.amount_out if pruned_outcome.result else None,
            pruned_ms=round(pruned_time * 1000, 2),
            exhaustive_ms=round(full_time * 1000, 2),
            pruned_expansions=pruned_outcome.stats.get("expansions"),
            exhaustive_expansions=full_outcome.stats.get("expansions"),
        )

    if profiler is not None:
        stats = pstats.Stats(profiler)
        stats.sort_stats("cumulative").print_stats(args.top)

    print(f"{args.runs} runs, {mismatches} mismatches")
    return 1 if mismatches else 0


if __name__ == "__main__":
    sys.exit(main())
