"""Constant-product AMM implementation.

Pools hold two assets and price trades with x * y = k, charging a fee in
basis points on the input amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

import structlog

from wayfinder.amm.result import PricingError, PricingResult
from wayfinder.constants import BPS_DENOMINATOR
from wayfinder.models.types import is_uint64, normalize_identifier
from wayfinder.safe_int import S, SafeIntError

logger = structlog.get_logger()


@dataclass(frozen=True)
class ConstantProductPool:
    """Snapshot of a two-asset constant-product pool.

    Pools are immutable for the duration of a search; a new reserve reading
    is a new pool object.
    """

    address: str
    token_a: str
    token_b: str
    reserve_a: int
    reserve_b: int
    # Fee in basis points (30 = 0.3%)
    fee_bps: int = 30

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "address", normalize_identifier(self.address))
        object.__setattr__(self, "token_a", normalize_identifier(self.token_a))
        object.__setattr__(self, "token_b", normalize_identifier(self.token_b))

        if self.token_a == self.token_b:
            raise ValueError(f"Pool {self.address} must hold two distinct assets")
        if isinstance(self.fee_bps, bool) or not isinstance(self.fee_bps, int):
            raise ValueError(f"Pool {self.address} fee must be an int, got {self.fee_bps!r}")
        if not 0 <= self.fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"Pool {self.address} fee out of range: {self.fee_bps} bps")
        for name in ("reserve_a", "reserve_b"):
            if not is_uint64(getattr(self, name)):
                raise ValueError(
                    f"Pool {self.address} {name} must be a uint64, got {getattr(self, name)!r}"
                )

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps).

        For 30 bps (0.3%), this returns 9970.
        """
        return BPS_DENOMINATOR - self.fee_bps

    @property
    def is_usable(self) -> bool:
        """A pool can only trade while both reserves are non-zero."""
        return self.reserve_a > 0 and self.reserve_b > 0

    def has_token(self, token: str) -> bool:
        return normalize_identifier(token) in (self.token_a, self.token_b)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_identifier(token_in)
        if token_in_norm == self.token_a:
            return self.reserve_a, self.reserve_b
        elif token_in_norm == self.token_b:
            return self.reserve_b, self.reserve_a
        else:
            raise ValueError(f"Token {token_in} not in pool {self.address}")

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        token_in_norm = normalize_identifier(token_in)
        if token_in_norm == self.token_a:
            return self.token_b
        elif token_in_norm == self.token_b:
            return self.token_a
        else:
            raise ValueError(f"Token {token_in} not in pool {self.address}")


class ConstantProductAMM:
    """Constant-product AMM math.

    Formula: amount_out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))

    All arithmetic is integer with truncating division, checked against the
    128-bit working width, so results are bit-reproducible across platforms.
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = 9970,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: 10000 - fee_bps (default 9970 for a 0.3% fee)

        Returns:
            Output token amount

        Raises:
            DivisionByZero: If the denominator is zero
            Overflow: If an intermediate product exceeds 128 bits
        """
        amount_in_with_fee = S(amount_in) * S(fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).to_uint64()

    def compute_output(
        self,
        pool: ConstantProductPool,
        token_in: str,
        amount_in: int,
    ) -> PricingResult:
        """Price a trade of amount_in of token_in through pool.

        Args:
            pool: The pool to trade through
            token_in: Asset being sold into the pool
            amount_in: Amount being sold

        Returns:
            PricingResult with the output amount, or the reason the pool
            cannot price the trade
        """
        if not pool.has_token(token_in):
            return PricingResult.with_error(
                PricingError.ASSET_NOT_IN_POOL,
                f"{token_in} not in pool {pool.address}",
            )

        reserve_in, reserve_out = pool.get_reserves(token_in)
        if reserve_in == 0 or reserve_out == 0:
            return PricingResult.with_error(
                PricingError.ZERO_LIQUIDITY,
                f"pool {pool.address} reserves ({reserve_in}, {reserve_out})",
            )

        if amount_in == 0:
            return PricingResult.ok(0)

        try:
            amount_out = self.get_amount_out(
                amount_in, reserve_in, reserve_out, pool.fee_multiplier
            )
        except SafeIntError as err:
            logger.debug(
                "pricing_overflow",
                pool=pool.address,
                token_in=token_in,
                amount_in=amount_in,
                error=str(err),
            )
            return PricingResult.with_error(PricingError.OVERFLOW, str(err))

        return PricingResult.ok(amount_out)

    def spot_price(self, pool: ConstantProductPool, token_in: str) -> Fraction:
        """Instantaneous price of token_in in units of the other asset.

        Returns reserve_out / reserve_in as an exact fraction, before fees.

        Raises:
            ValueError: If token_in is not in the pool or reserve_in is zero
        """
        reserve_in, reserve_out = pool.get_reserves(token_in)
        if reserve_in == 0:
            raise ValueError(f"Pool {pool.address} has no {token_in} reserve")
        return Fraction(reserve_out, reserve_in)

    def effective_rate(self, pool: ConstantProductPool, token_in: str) -> Fraction:
        """Marginal rate net of fees: spot price scaled by the fee multiplier.

        This is an upper bound on amount_out / amount_in for any trade size.
        """
        return self.spot_price(pool, token_in) * Fraction(pool.fee_multiplier, BPS_DENOMINATOR)


# Singleton instance
constant_product = ConstantProductAMM()


def compute_output(pool: ConstantProductPool, token_in: str, amount_in: int) -> PricingResult:
    """Price a trade through pool with the default AMM."""
    return constant_product.compute_output(pool, token_in, amount_in)


__all__ = [
    "ConstantProductPool",
    "ConstantProductAMM",
    "constant_product",
    "compute_output",
]
