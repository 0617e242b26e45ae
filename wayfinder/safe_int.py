"""Checked unsigned integers of a fixed width.

Python integers grow without bound, so a pricing formula evaluated with them
never fails where a 64/128-bit ledger program would. SafeInt closes that gap:
amounts and reserves are 64-bit, the formula's intermediates are checked
against a 128-bit working width, and every violation raises.

- Results wider than the working width raise Overflow
- Negative results raise Underflow
- Zero divisors raise DivisionByZero

Usage pattern:
    from wayfinder.safe_int import S

    def amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        numerator = S(amount_in) * S(reserve_out)
        denominator = S(reserve_in) + S(amount_in)
        # Narrow back to the amount width on the way out
        return (numerator // denominator).to_uint64()
"""

from __future__ import annotations

from wayfinder.constants import UINT64_MAX, WORKING_BITS


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Floor division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Result below zero."""

    pass


class Overflow(SafeIntError):
    """Result wider than the width it is checked against."""

    pass


class SafeInt:
    """Unsigned integer whose arithmetic is checked against ``bits``.

    The width travels with the left operand (128 bits unless given), so
    ``S(a) * b`` is checked at 128 bits whatever ``b`` is.

    Attributes:
        value: The wrapped integer (read-only)
        bits: Width results are checked against (read-only)
    """

    __slots__ = ("_value", "_bits")
    _value: int
    _bits: int

    def __init__(self, value: int | SafeInt, bits: int = WORKING_BITS) -> None:
        """Wrap an int, or copy the value of another SafeInt.

        Raises:
            TypeError: If value is neither an int nor a SafeInt (bool included)
            Underflow: If value is negative
            Overflow: If value needs more than ``bits`` bits
        """
        if isinstance(value, SafeInt):
            raw = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            raw = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._bits = bits
        self._value = self._check(raw)

    @property
    def _max(self) -> int:
        return (1 << self._bits) - 1

    def _check(self, result: int) -> int:
        if result < 0:
            raise Underflow(f"Negative value: {result}")
        if result > self._max:
            raise Overflow(f"Value exceeds uint{self._bits}: {result}")
        return result

    def _new(self, result: int) -> SafeInt:
        return SafeInt(result, self._bits)

    @property
    def value(self) -> int:
        return self._value

    @property
    def bits(self) -> int:
        return self._bits

    def __repr__(self) -> str:
        return f"SafeInt({self._value}, bits={self._bits})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # Arithmetic

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return self._new(self._value + _raw(other))

    def __radd__(self, other: int) -> SafeInt:
        return self._new(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract, refusing to go below zero.

        Raises:
            Underflow: If other is larger than self
        """
        subtrahend = _raw(other)
        if subtrahend > self._value:
            raise Underflow(f"Underflow: {self._value} - {subtrahend} < 0")
        return self._new(self._value - subtrahend)

    def __rsub__(self, other: int) -> SafeInt:
        if self._value > other:
            raise Underflow(f"Underflow: {other} - {self._value} < 0")
        return self._new(other - self._value)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply within the working width.

        Raises:
            Overflow: If the product needs more than ``bits`` bits
        """
        factor = _raw(other)
        product = self._value * factor
        if product > self._max:
            raise Overflow(f"Overflow: {self._value} * {factor} exceeds uint{self._bits}")
        return self._new(product)

    def __rmul__(self, other: int) -> SafeInt:
        return self * other

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Truncating division.

        Raises:
            DivisionByZero: If other is zero
        """
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return self._new(self._value // divisor)

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return self._new(self._value % divisor)

    # Comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    # Conversion

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def checked_div(self, other: SafeInt | int) -> SafeInt | None:
        """Truncating division that returns None for a zero divisor."""
        divisor = _raw(other)
        if divisor == 0:
            return None
        return self._new(self._value // divisor)

    def to_uint64(self) -> int:
        """Unwrap, narrowing to the 64-bit amount width.

        Raises:
            Overflow: If value exceeds 2^64-1
        """
        if self._value > UINT64_MAX:
            raise Overflow(f"Value exceeds uint64 max: {self._value}")
        return self._value

    def is_uint64(self) -> bool:
        return self._value <= UINT64_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


# Short alias used throughout the pricing code
S = SafeInt
