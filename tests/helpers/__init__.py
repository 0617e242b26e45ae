"""Test helpers module for shared test utilities.

- constants: Asset and pool identifiers
- factories: Pool factories, replay and brute-force route enumeration
"""

from tests.helpers.constants import (
    POOL_WY,
    POOL_WZ,
    POOL_XW,
    POOL_XY,
    POOL_XZ,
    POOL_YZ,
    V,
    W,
    X,
    Y,
    Z,
    asset_id,
    pool_id,
)
from tests.helpers.factories import (
    brute_force_best,
    expected_out,
    make_pool,
    random_snapshot,
    replay,
)

__all__ = [
    # Constants
    "X",
    "Y",
    "Z",
    "W",
    "V",
    "POOL_XY",
    "POOL_YZ",
    "POOL_XZ",
    "POOL_XW",
    "POOL_WY",
    "POOL_WZ",
    "asset_id",
    "pool_id",
    # Factories
    "make_pool",
    "expected_out",
    "replay",
    "brute_force_best",
    "random_snapshot",
]
