"""AMM (Automated Market Maker) implementations."""

from wayfinder.amm.constant_product import (
    ConstantProductAMM,
    ConstantProductPool,
    compute_output,
    constant_product,
)
from wayfinder.amm.result import PricingError, PricingResult

__all__ = [
    # Constant product
    "ConstantProductAMM",
    "ConstantProductPool",
    "constant_product",
    "compute_output",
    # Results
    "PricingError",
    "PricingResult",
]
