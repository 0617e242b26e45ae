"""Pydantic models for the quote API request and response."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from wayfinder.amm.constant_product import ConstantProductPool
from wayfinder.models.types import FeeBps, Identifier, Uint64


class PoolSnapshot(BaseModel):
    """One pool of the reserve snapshot supplied by the caller."""

    address: Identifier
    token_a: Identifier = Field(alias="tokenA")
    token_b: Identifier = Field(alias="tokenB")
    fee_bps: FeeBps = Field(alias="feeBps", description="Pool fee in basis points")
    reserve_a: Uint64 = Field(alias="reserveA")
    reserve_b: Uint64 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _distinct_tokens(self) -> "PoolSnapshot":
        if self.token_a.lower() == self.token_b.lower():
            raise ValueError("tokenA and tokenB must differ")
        return self

    def to_pool(self) -> ConstantProductPool:
        return ConstantProductPool(
            address=self.address,
            token_a=self.token_a,
            token_b=self.token_b,
            reserve_a=int(self.reserve_a),
            reserve_b=int(self.reserve_b),
            fee_bps=self.fee_bps,
        )


class QuoteRequest(BaseModel):
    """Request for the best route between two assets."""

    pools: list[PoolSnapshot]
    input_asset: Identifier = Field(alias="inputAsset")
    output_asset: Identifier = Field(alias="outputAsset")
    amount_in: Uint64 = Field(alias="amountIn")
    max_hops: int | None = Field(
        default=None,
        alias="maxHops",
        description="Hop bound; clamped to [1, 5]. Server default if omitted.",
    )
    min_amount_out: Uint64 = Field(default="0", alias="minAmountOut")

    model_config = {"populate_by_name": True}

    def to_pools(self) -> list[ConstantProductPool]:
        return [pool.to_pool() for pool in self.pools]


class HopBreakdown(BaseModel):
    """Amounts entering and leaving one pool of the route."""

    pool: Identifier
    input_asset: Identifier = Field(alias="inputAsset")
    output_asset: Identifier = Field(alias="outputAsset")
    amount_in: Uint64 = Field(alias="amountIn")
    amount_out: Uint64 = Field(alias="amountOut")
    fee: Uint64 | None = None

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Quote for the best route, or the reason there is none.

    ``status`` is "ok" on success, otherwise the error code, which lets a
    client tell invalid input from an unreachable asset.
    """

    status: Literal[
        "ok",
        "invalid_input",
        "route_not_found",
        "budget_exhausted",
        "slippage_exceeded",
        "empty_route",
        "zero_input",
        "unknown_pool",
        "asset_not_in_pool",
        "zero_liquidity",
        "overflow",
        "internal_error",
        "timeout",
    ]
    route: list[Identifier] = Field(default_factory=list)
    amount_in: Uint64 | None = Field(default=None, alias="amountIn")
    amount_out: Uint64 | None = Field(default=None, alias="amountOut")
    total_fee: str | None = Field(default=None, alias="totalFee")
    price_impact_pct: str | None = Field(default=None, alias="priceImpactPct")
    hops: list[HopBreakdown] = Field(default_factory=list)
    exact: bool | None = None
    max_hops: int | None = Field(default=None, alias="maxHops")
    error_detail: str | None = Field(default=None, alias="errorDetail")

    model_config = {"populate_by_name": True}

    @classmethod
    def failure(cls, status: str, detail: str | None = None) -> "QuoteResponse":
        return cls(status=status, error_detail=detail)
