"""Protocol constants for the Wayfinder route optimizer.

Centralizes pricing parameters, hop bounds and integer widths.
"""

# Fees are expressed in basis points (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Hop bounds for a single route
MIN_ROUTE_HOPS = 1
MAX_ROUTE_HOPS = 5
DEFAULT_MAX_HOPS = 3

# Token amounts and reserves are unsigned 64-bit integers on the ledger.
# Intermediate products in the pricing formula are evaluated at 128 bits.
AMOUNT_BITS = 64
WORKING_BITS = 128
UINT64_MAX = 2**AMOUNT_BITS - 1
UINT128_MAX = 2**WORKING_BITS - 1

# Asset and pool identifiers are 32 bytes, carried as 0x-prefixed hex
IDENTIFIER_BYTES = 32


def clamp_max_hops(max_hops: int) -> int:
    """Clamp a requested hop bound into [MIN_ROUTE_HOPS, MAX_ROUTE_HOPS]."""
    return max(MIN_ROUTE_HOPS, min(max_hops, MAX_ROUTE_HOPS))
