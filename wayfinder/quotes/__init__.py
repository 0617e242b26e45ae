"""Quote calculation for found routes."""

from wayfinder.quotes.calculator import (
    QuoteCalculator,
    build_quote,
    price_impact_pct,
    quote_calculator,
)
from wayfinder.quotes.result import HopFee, Quote, QuoteError, QuoteResult

__all__ = [
    "HopFee",
    "Quote",
    "QuoteCalculator",
    "QuoteError",
    "QuoteResult",
    "build_quote",
    "price_impact_pct",
    "quote_calculator",
]
