"""Optimistic output bounds for branch-and-bound route search.

A constant-product pool never pays more than its fee-adjusted spot rate per
unit sold, and never more than its output reserve. Chaining the best such
rates towards the target gives, for every asset and remaining hop budget, a
bound that no real continuation can exceed.

Rates are exact fractions; nothing here uses floating point.

OverflowLimits runs the same level-by-level pass in the other direction:
it finds, per asset and hop budget, the largest amount that can still be
priced along every continuation.
"""

from __future__ import annotations

from fractions import Fraction

from wayfinder.amm.constant_product import (
    ConstantProductAMM,
    ConstantProductPool,
    constant_product,
)
from wayfinder.constants import BPS_DENOMINATOR, UINT128_MAX
from wayfinder.routing.graph import PoolGraph


class RouteBounds:
    """Upper bounds on the target amount reachable from any asset.

    ``_rates[k][asset]`` is the largest product of fee-adjusted spot rates
    over any walk of at most ``k`` pools from ``asset`` to the target. Walks
    may revisit assets, which only loosens the bound.
    """

    def __init__(
        self,
        graph: PoolGraph,
        target: str,
        max_hops: int,
        amm: ConstantProductAMM = constant_product,
    ) -> None:
        self._target = target
        self._cap = 0
        self._rates: list[dict[str, Fraction]] = [{target: Fraction(1)}]

        for edge in graph.neighbors(target):
            if edge.pool.is_usable:
                self._cap = max(self._cap, edge.pool.get_reserves(edge.other)[1])

        for _ in range(max_hops):
            previous = self._rates[-1]
            current = dict(previous)
            for asset in graph.assets:
                if asset == target:
                    continue
                best = current.get(asset, Fraction(0))
                for edge in graph.neighbors(asset):
                    downstream = previous.get(edge.other)
                    if not downstream or not edge.pool.is_usable:
                        continue
                    rate = amm.effective_rate(edge.pool, asset) * downstream
                    if rate > best:
                        best = rate
                if best:
                    current[asset] = best
            self._rates.append(current)

    @property
    def reserve_cap(self) -> int:
        """Largest target reserve in any usable pool paying out the target."""
        return self._cap

    def rate(self, asset: str, remaining_hops: int) -> Fraction:
        """Best chained rate from asset to the target within remaining_hops."""
        remaining_hops = max(0, min(remaining_hops, len(self._rates) - 1))
        return self._rates[remaining_hops].get(asset, Fraction(0))

    def upper_bound(self, asset: str, amount: int, remaining_hops: int) -> int:
        """Largest target amount a candidate could still produce.

        Args:
            asset: Asset the candidate currently holds
            amount: Amount of that asset
            remaining_hops: Hops left in the budget

        Returns:
            An integer no real continuation can exceed (0 if the target is
            out of reach)
        """
        if asset == self._target:
            return amount
        rate = self.rate(asset, remaining_hops)
        if not rate:
            return 0
        return min((amount * rate.numerator) // rate.denominator, self._cap)


class OverflowLimits:
    """Largest amounts that price without overflow along any continuation.

    ``_limits[k][asset]`` is the largest amount of ``asset`` for which every
    walk of at most ``k`` pools prices within the 128-bit working width.
    Assets missing from a level have no limit there. Up to its limit an
    amount is priced by a monotone function, so only such amounts may
    dominate smaller ones.
    """

    def __init__(self, graph: PoolGraph, target: str, max_hops: int) -> None:
        self._limits: list[dict[str, int]] = [{}]

        for _ in range(max_hops):
            previous = self._limits[-1]
            current: dict[str, int] = {}
            for asset in graph.assets:
                # The search never trades out of the target
                if asset == target:
                    continue
                for edge in graph.neighbors(asset):
                    if not edge.pool.is_usable:
                        continue
                    limit = _edge_limit(edge.pool, asset, previous.get(edge.other))
                    if asset not in current or limit < current[asset]:
                        current[asset] = limit
            self._limits.append(current)

    def limit(self, asset: str, remaining_hops: int) -> int | None:
        """Largest overflow-free amount, or None if there is no limit."""
        remaining_hops = max(0, min(remaining_hops, len(self._limits) - 1))
        return self._limits[remaining_hops].get(asset)

    def is_safe(self, asset: str, amount: int, remaining_hops: int) -> bool:
        limit = self.limit(asset, remaining_hops)
        return limit is None or amount <= limit


def _edge_limit(pool: ConstantProductPool, token_in: str, downstream: int | None) -> int:
    """Largest amount pool prices without overflow and with output <= downstream."""
    reserve_in, reserve_out = pool.get_reserves(token_in)
    fee_multiplier = pool.fee_multiplier
    base = reserve_in * BPS_DENOMINATOR

    # numerator = amount * fee_multiplier * reserve_out
    # denominator = base + amount * fee_multiplier
    limit = min(
        UINT128_MAX // (fee_multiplier * reserve_out),
        (UINT128_MAX - base) // fee_multiplier,
    )
    # Output stays below reserve_out, so only a smaller downstream limit binds:
    # out(amount) <= d  iff  amount * fee_multiplier * (reserve_out - d - 1) < (d + 1) * base
    if downstream is not None and reserve_out - 1 > downstream:
        excess = reserve_out - downstream - 1
        limit = min(limit, ((downstream + 1) * base - 1) // (fee_multiplier * excess))
    return limit


__all__ = ["OverflowLimits", "RouteBounds"]
