"""Quote calculator: fees and price impact for a found route.

Uses SafeInt for fee arithmetic so that an oversized amount surfaces as a
typed OVERFLOW error rather than a silently wrong fee.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, localcontext

import structlog

from wayfinder.amm.constant_product import (
    ConstantProductAMM,
    ConstantProductPool,
    constant_product,
)
from wayfinder.amm.result import PricingError
from wayfinder.constants import BPS_DENOMINATOR
from wayfinder.models.types import normalize_identifier
from wayfinder.quotes.result import HopFee, Quote, QuoteError, QuoteResult
from wayfinder.safe_int import S, SafeIntError

logger = structlog.get_logger()

# Precision for price impact arithmetic, and the number of decimal places
# the percentage is reported with
IMPACT_PRECISION = 50
IMPACT_QUANTUM = Decimal("0.000001")

_PRICING_TO_QUOTE_ERROR = {
    PricingError.ASSET_NOT_IN_POOL: QuoteError.ASSET_NOT_IN_POOL,
    PricingError.ZERO_LIQUIDITY: QuoteError.ZERO_LIQUIDITY,
    PricingError.OVERFLOW: QuoteError.OVERFLOW,
}


class QuoteCalculator:
    """Derives total fee and price impact by replaying a route.

    The replay uses the same snapshot the route was searched on, so the
    replayed output equals the search's output exactly.
    """

    def __init__(self, amm: ConstantProductAMM | None = None) -> None:
        self.amm = amm or constant_product

    def build_quote(
        self,
        route: Sequence[str],
        pools: Sequence[ConstantProductPool],
        input_asset: str,
        amount_in: int,
    ) -> QuoteResult:
        """Replay route hop by hop and compute its quote.

        Args:
            route: Pool addresses in trade order
            pools: Pool snapshot the route was found on
            input_asset: Asset sold into the first pool
            amount_in: Amount sold

        Returns:
            QuoteResult with the quote or the error that stopped the replay
        """
        if not route:
            return QuoteResult.with_error(QuoteError.EMPTY_ROUTE)
        if amount_in <= 0:
            return QuoteResult.with_error(QuoteError.ZERO_INPUT, "amount_in must be positive")

        by_address = {pool.address: pool for pool in pools}
        token = normalize_identifier(input_asset)
        amount = amount_in
        hop_fees: list[HopFee] = []
        total_fee = S(0)

        for address in route:
            pool = by_address.get(normalize_identifier(address))
            if pool is None:
                return QuoteResult.with_error(QuoteError.UNKNOWN_POOL, address)

            pricing = self.amm.compute_output(pool, token, amount)
            if not pricing.is_valid:
                assert pricing.error is not None
                return QuoteResult.with_error(
                    _PRICING_TO_QUOTE_ERROR[pricing.error], pricing.error_detail
                )

            try:
                fee = (S(amount) * S(pool.fee_bps) // S(BPS_DENOMINATOR)).to_uint64()
                total_fee = total_fee + fee
            except SafeIntError as err:
                return QuoteResult.with_error(QuoteError.OVERFLOW, str(err))

            hop_fees.append(
                HopFee(
                    pool=pool.address,
                    token=token,
                    amount_in=amount,
                    fee_bps=pool.fee_bps,
                    fee=fee,
                )
            )
            assert pricing.amount_out is not None
            token = pool.get_token_out(token)
            amount = pricing.amount_out

        first_pool = by_address[normalize_identifier(route[0])]
        reserve_in, reserve_out = first_pool.get_reserves(input_asset)
        impact = price_impact_pct(amount_in, amount, reserve_in, reserve_out)

        quote = Quote(
            route=[normalize_identifier(address) for address in route],
            amount_in=amount_in,
            amount_out=amount,
            total_fee=total_fee.value,
            price_impact_pct=impact,
            hop_fees=hop_fees,
        )
        logger.debug(
            "quote_built",
            hops=len(route),
            amount_in=amount_in,
            amount_out=amount,
            total_fee=quote.total_fee,
            price_impact_pct=str(impact),
        )
        return QuoteResult.ok(quote)


def price_impact_pct(amount_in: int, amount_out: int, reserve_in: int, reserve_out: int) -> Decimal:
    """Percentage shortfall of the execution price against the spot price.

    impact = (1 - (amount_out / amount_in) / (reserve_out / reserve_in)) * 100

    Args:
        amount_in: Amount sold
        amount_out: Amount received
        reserve_in: First pool's reserve of the sold asset
        reserve_out: First pool's reserve of the asset it pays out

    Returns:
        Impact in percent, rounded to six decimal places
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("price impact needs a positive input and non-empty reserves")

    with localcontext() as ctx:
        ctx.prec = IMPACT_PRECISION
        # (out / in) / (r_out / r_in) == (out * r_in) / (in * r_out), exact integers
        ratio = Decimal(amount_out * reserve_in) / Decimal(amount_in * reserve_out)
        impact = (Decimal(1) - ratio) * Decimal(100)
        return impact.quantize(IMPACT_QUANTUM)


# Singleton instance
quote_calculator = QuoteCalculator()


def build_quote(
    route: Sequence[str],
    pools: Sequence[ConstantProductPool],
    input_asset: str,
    amount_in: int,
) -> QuoteResult:
    """Build a quote with the default calculator."""
    return quote_calculator.build_quote(route, pools, input_asset, amount_in)


__all__ = ["QuoteCalculator", "build_quote", "price_impact_pct", "quote_calculator"]
