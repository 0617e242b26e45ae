"""Shared types for Wayfinder data structures.

API request/response models live in ``wayfinder.models.quote``.
"""

from wayfinder.models.types import (
    FeeBps,
    Identifier,
    Uint64,
    is_uint64,
    is_valid_identifier,
    normalize_identifier,
)

__all__ = [
    "FeeBps",
    "Identifier",
    "Uint64",
    "is_uint64",
    "is_valid_identifier",
    "normalize_identifier",
]
