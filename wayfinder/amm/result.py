"""Pricing result types."""

from dataclasses import dataclass
from enum import Enum


class PricingError(Enum):
    """Reasons a pool cannot price a trade."""

    ASSET_NOT_IN_POOL = "asset_not_in_pool"
    ZERO_LIQUIDITY = "zero_liquidity"
    OVERFLOW = "overflow"


@dataclass(frozen=True)
class PricingResult:
    """Result of pricing a trade through a single pool.

    Pricing never raises: a pool that cannot price the trade reports why,
    and the caller decides whether that is fatal (quotes) or just makes the
    edge untraversable (route search).

    Attributes:
        amount_out: Output amount, or None on error.
        error: The pricing error, if any.
        error_detail: Optional human-readable detail about the error.

    Examples:
        result = PricingResult.ok(1993)
        assert result.is_valid and result.amount_out == 1993

        result = PricingResult.with_error(PricingError.ZERO_LIQUIDITY)
        assert not result.is_valid
    """

    amount_out: int | None
    error: PricingError | None = None
    error_detail: str | None = None

    @property
    def is_valid(self) -> bool:
        """True if the trade was priced."""
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_tradeable(self) -> bool:
        """True if the trade was priced and yields a non-zero amount."""
        return self.is_valid and bool(self.amount_out)

    @classmethod
    def ok(cls, amount_out: int) -> "PricingResult":
        return cls(amount_out=amount_out)

    @classmethod
    def with_error(cls, error: PricingError, detail: str | None = None) -> "PricingResult":
        return cls(amount_out=None, error=error, error_detail=detail)
