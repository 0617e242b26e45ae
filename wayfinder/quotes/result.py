"""Quote result types."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class QuoteError(Enum):
    """Types of quote calculation errors."""

    EMPTY_ROUTE = "empty_route"
    ZERO_INPUT = "zero_input"
    UNKNOWN_POOL = "unknown_pool"
    ASSET_NOT_IN_POOL = "asset_not_in_pool"
    ZERO_LIQUIDITY = "zero_liquidity"
    OVERFLOW = "overflow"


@dataclass(frozen=True)
class HopFee:
    """Fee charged by one pool, denominated in that hop's input asset."""

    pool: str
    token: str
    amount_in: int
    fee_bps: int
    fee: int


@dataclass(frozen=True)
class Quote:
    """User-facing quote for a route.

    Attributes:
        route: Pool addresses in trade order
        amount_in: Amount sold
        amount_out: Amount received after the last hop
        total_fee: Sum of per-hop fees, each floor(input_at_hop * fee_bps / 10000)
        price_impact_pct: Shortfall of amount_out / amount_in against the
            first pool's spot price, in percent
        hop_fees: Per-hop fee breakdown
    """

    route: list[str]
    amount_in: int
    amount_out: int
    total_fee: int
    price_impact_pct: Decimal
    hop_fees: list[HopFee] = field(default_factory=list)


@dataclass(frozen=True)
class QuoteResult:
    """Result of a quote calculation.

    Follows the same explicit success/failure shape as the pricing and
    search results, so a caller never has to interpret a bare None.
    """

    quote: Quote | None
    error: QuoteError | None = None
    error_detail: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and self.quote is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, quote: Quote) -> "QuoteResult":
        return cls(quote=quote)

    @classmethod
    def with_error(cls, error: QuoteError, detail: str | None = None) -> "QuoteResult":
        return cls(quote=None, error=error, error_detail=detail)
