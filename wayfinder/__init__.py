"""Wayfinder - best-output multi-hop routing across constant-product pools."""

from wayfinder.wayfinder import QuoteOutcome, Wayfinder, get_default_wayfinder

__version__ = "0.1.0"
__all__ = ["QuoteOutcome", "Wayfinder", "get_default_wayfinder", "__version__"]
