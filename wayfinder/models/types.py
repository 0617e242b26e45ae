"""Shared type definitions for Wayfinder models.

These types are used across pool snapshots, search results and the API.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from wayfinder.constants import BPS_DENOMINATOR, IDENTIFIER_BYTES, UINT64_MAX

# 0x prefix plus two hex chars per byte
IDENTIFIER_LENGTH = 2 + 2 * IDENTIFIER_BYTES


def validate_uint64(value: Any) -> str:
    """Validate that a value is a valid uint64 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint64 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint64 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint64 must be string or int, got bool")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Uint64 cannot be negative: {value}")
        if value > UINT64_MAX:
            raise ValueError(f"Uint64 overflow: {value} > 2^64-1")
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"Uint64 must be string or int, got {type(value).__name__}")

    try:
        int_value = int(value)
    except ValueError as err:
        raise ValueError(f"Uint64 must be a decimal integer string: '{value}'") from err

    if int_value < 0:
        raise ValueError(f"Uint64 cannot be negative: {value}")
    if int_value > UINT64_MAX:
        raise ValueError(f"Uint64 overflow: {value} > 2^64-1")

    return value


# 32-byte identifier (64 hex chars after 0x prefix)
Identifier = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{64}$")]

# 64-bit unsigned integer as decimal string (validated)
Uint64 = Annotated[
    str,
    BeforeValidator(validate_uint64),
    Field(description="64-bit unsigned integer as decimal string"),
]

# Pool fee in basis points, strictly below 100%
FeeBps = Annotated[int, Field(ge=0, lt=BPS_DENOMINATOR)]


def normalize_identifier(identifier: str, *, validate: bool = False) -> str:
    """Normalize an asset or pool identifier to lowercase 0x-prefixed hex.

    Args:
        identifier: A 32-byte identifier (with or without 0x prefix)
        validate: If True, raises ValueError for malformed identifiers.

    Returns:
        Lowercase identifier with 0x prefix

    Raises:
        ValueError: If validate=True and identifier is malformed
    """
    ident = identifier.lower()
    if not ident.startswith("0x"):
        ident = "0x" + ident

    if validate and not is_valid_identifier(ident):
        raise ValueError(f"Invalid identifier: {identifier}")

    return ident


def is_valid_identifier(identifier: str) -> bool:
    """Check if a string is a 0x-prefixed 32-byte hex identifier."""
    if not isinstance(identifier, str):
        return False
    if not identifier.startswith("0x"):
        return False
    if len(identifier) != IDENTIFIER_LENGTH:
        return False
    try:
        int(identifier, 16)
        return True
    except ValueError:
        return False


def is_uint64(value: Any) -> bool:
    """Check if a value is an int within [0, 2^64-1]."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT64_MAX
