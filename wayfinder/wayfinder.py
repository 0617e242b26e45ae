"""Main entry point tying route search, quoting and slippage checks together.

The Wayfinder class owns no pool state: every call works on the snapshot it
is given (or reads one from a ReserveProvider), so a single instance can be
shared between concurrent callers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.providers import ReserveProvider, RouteStore
from wayfinder.quotes.calculator import QuoteCalculator
from wayfinder.quotes.result import Quote, QuoteError
from wayfinder.routing.config import SearchConfig
from wayfinder.routing.search import RouteSearch
from wayfinder.routing.types import RouteError, RouteResult, SearchOutcome

logger = structlog.get_logger()


@dataclass(frozen=True)
class QuoteOutcome:
    """Route plus quote, or the first error that stopped the pipeline.

    Attributes:
        search: The underlying search outcome (always present)
        quote: The quote, when the route was found and quoted
        error: RouteError from search or slippage, or QuoteError from quoting
        error_detail: Optional human-readable detail
    """

    search: SearchOutcome
    quote: Quote | None = None
    error: RouteError | QuoteError | None = None
    error_detail: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.quote is not None

    @property
    def route(self) -> RouteResult | None:
        return self.search.result


class Wayfinder:
    """Finds, quotes and slippage-checks swap routes.

    Args:
        config: Search configuration. If None, read from the environment.
        search: Route search to use. Built from config if None.
        calculator: Quote calculator. Default instance if None.
        store: Optional route store; routes are saved when a key is given.
    """

    def __init__(
        self,
        config: SearchConfig | None = None,
        search: RouteSearch | None = None,
        calculator: QuoteCalculator | None = None,
        store: RouteStore | None = None,
    ) -> None:
        self.config = config or SearchConfig.from_env()
        self.search = search or RouteSearch(self.config)
        self.calculator = calculator or QuoteCalculator()
        self.store = store

    def find_route(
        self,
        pools: Sequence[ConstantProductPool],
        input_asset: str,
        output_asset: str,
        amount_in: int,
        max_hops: int | None = None,
    ) -> SearchOutcome:
        """Search for the best route without quoting it."""
        return self.search.find_best_route(pools, input_asset, output_asset, amount_in, max_hops)

    def quote(
        self,
        pools: Sequence[ConstantProductPool],
        input_asset: str,
        output_asset: str,
        amount_in: int,
        max_hops: int | None = None,
        min_amount_out: int = 0,
        route_key: str | None = None,
    ) -> QuoteOutcome:
        """Find the best route and quote it.

        Args:
            pools: Pool snapshot
            input_asset: Asset being sold
            output_asset: Asset being bought
            amount_in: Amount to sell
            max_hops: Hop bound (clamped to [1, 5])
            min_amount_out: Reject routes paying out less than this
            route_key: If set and a store is configured, save the route under it

        Returns:
            QuoteOutcome carrying the search outcome and, on success, the quote
        """
        outcome = self.find_route(pools, input_asset, output_asset, amount_in, max_hops)
        if not outcome.is_valid:
            logger.info(
                "no_route",
                input_asset=input_asset,
                output_asset=output_asset,
                amount_in=amount_in,
                error=outcome.error.value if outcome.error else None,
                detail=outcome.error_detail,
            )
            return QuoteOutcome(
                search=outcome, error=outcome.error, error_detail=outcome.error_detail
            )

        result = outcome.result
        assert result is not None

        if result.amount_out < min_amount_out:
            logger.info(
                "slippage_exceeded",
                amount_out=result.amount_out,
                min_amount_out=min_amount_out,
                route=result.route,
            )
            return QuoteOutcome(
                search=outcome,
                error=RouteError.SLIPPAGE_EXCEEDED,
                error_detail=f"best output {result.amount_out} < minimum {min_amount_out}",
            )

        quote_result = self.calculator.build_quote(result.route, pools, input_asset, amount_in)
        if not quote_result.is_valid:
            # The replay runs on the same snapshot as the search, so this
            # means the snapshot was mutated mid-call
            logger.error(
                "quote_replay_failed",
                route=result.route,
                error=quote_result.error.value if quote_result.error else None,
                detail=quote_result.error_detail,
            )
            return QuoteOutcome(
                search=outcome,
                error=quote_result.error,
                error_detail=quote_result.error_detail,
            )

        if route_key is not None and self.store is not None:
            self.store.save(route_key, result)

        logger.info(
            "route_quoted",
            hops=result.hop_count,
            amount_in=amount_in,
            amount_out=result.amount_out,
            exact=result.exact,
        )
        return QuoteOutcome(search=outcome, quote=quote_result.quote)

    def quote_from(
        self,
        provider: ReserveProvider,
        input_asset: str,
        output_asset: str,
        amount_in: int,
        max_hops: int | None = None,
        min_amount_out: int = 0,
        route_key: str | None = None,
    ) -> QuoteOutcome:
        """Quote against a fresh snapshot read from provider."""
        return self.quote(
            provider.get_pools(),
            input_asset,
            output_asset,
            amount_in,
            max_hops=max_hops,
            min_amount_out=min_amount_out,
            route_key=route_key,
        )


_default_wayfinder: Wayfinder | None = None


def get_default_wayfinder() -> Wayfinder:
    """Shared Wayfinder configured from the environment (lazily created)."""
    global _default_wayfinder
    if _default_wayfinder is None:
        _default_wayfinder = Wayfinder()
    return _default_wayfinder


__all__ = ["QuoteOutcome", "Wayfinder", "get_default_wayfinder"]
