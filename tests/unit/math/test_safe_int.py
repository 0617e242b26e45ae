"""Tests for SafeInt checked fixed-width arithmetic."""

import pytest

from wayfinder.constants import UINT64_MAX, UINT128_MAX
from wayfinder.safe_int import (
    DivisionByZero,
    Overflow,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_default_width_is_128_bits(self):
        assert SafeInt(1).bits == 128

    def test_max_value_fits(self):
        """The largest 128-bit value is accepted."""
        assert SafeInt(UINT128_MAX).value == UINT128_MAX

    def test_value_above_width_raises(self):
        with pytest.raises(Overflow):
            SafeInt(UINT128_MAX + 1)

    def test_custom_width(self):
        assert SafeInt(255, bits=8).value == 255
        with pytest.raises(Overflow):
            SafeInt(256, bits=8)

    def test_negative_rejected(self):
        """Amounts are unsigned."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_from_invalid_type_raises(self):
        """SafeInt rejects non-integers, including bool."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero_constructor(self):
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_add_overflow_raises(self):
        with pytest.raises(Overflow):
            S(UINT128_MAX) + 1

    def test_sub(self):
        assert (S(10) - S(3)).value == 7
        assert (10 - S(3)).value == 7
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction underflow raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_rsub_underflow_raises(self):
        with pytest.raises(Underflow):
            5 - S(10)

    def test_mul(self):
        assert (S(6) * S(7)).value == 42
        assert (S(6) * 7).value == 42
        assert (6 * S(7)).value == 42

    def test_mul_at_width_boundary(self):
        """2^64 * 2^63 fits in 128 bits, 2^64 * 2^64 does not."""
        assert (S(2**64) * S(2**63)).value == 2**127
        with pytest.raises(Overflow) as exc_info:
            S(2**64) * S(2**64)
        assert "uint128" in str(exc_info.value)

    def test_mul_uses_left_operand_width(self):
        with pytest.raises(Overflow):
            S(16, bits=8) * 16

    def test_floordiv_truncates(self):
        assert (S(10) // S(3)).value == 3
        assert (S(10) // 3).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero) as exc_info:
            S(10) // S(0)
        assert "Division by zero" in str(exc_info.value)

    def test_mod(self):
        assert (S(10) % S(3)).value == 1
        with pytest.raises(DivisionByZero):
            S(10) % 0

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors share one catchable base."""
        for error in (DivisionByZero, Underflow, Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntComparison:
    """Tests for SafeInt comparison operations."""

    def test_eq(self):
        assert S(5) == S(5)
        assert S(5) == 5
        assert S(5) != 6

    def test_ordering(self):
        assert S(5) < S(6)
        assert S(5) <= 5
        assert S(6) > 5
        assert S(6) >= S(6)

    def test_eq_other_type(self):
        assert (S(5) == "5") is False

    def test_hash_matches_value(self):
        assert hash(S(7)) == hash(7)


class TestSafeIntConversion:
    """Tests for narrowing and conversion."""

    def test_to_uint64(self):
        assert S(UINT64_MAX).to_uint64() == UINT64_MAX

    def test_to_uint64_overflow(self):
        with pytest.raises(Overflow) as exc_info:
            S(UINT64_MAX + 1).to_uint64()
        assert "uint64" in str(exc_info.value)

    def test_is_uint64(self):
        assert S(UINT64_MAX).is_uint64()
        assert not S(UINT64_MAX + 1).is_uint64()

    def test_int_bool_index(self):
        assert int(S(9)) == 9
        assert bool(S(0)) is False
        assert [0, 1, 2][S(1)] == 1

    def test_checked_div(self):
        assert S(9).checked_div(2) == 4
        assert S(9).checked_div(0) is None

    def test_repr_and_str(self):
        assert repr(S(3)) == "SafeInt(3, bits=128)"
        assert str(S(3)) == "3"
