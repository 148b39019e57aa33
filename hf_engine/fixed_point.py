"""Q64.64 fixed-point arithmetic on plain Python ints.

A Q64.64 value is an unsigned 128-bit integer whose high 64 bits hold the
integer part and whose low 64 bits hold the binary fraction:

    value = raw / 2**64

Python ints never overflow, so every operation checks its result against
the width the value is supposed to fit in. Products are bounded by 256 bits
(the widest intermediate) and public results by 128 bits. Exceeding either
raises ``ArithmeticOverflow``; nothing is ever truncated or wrapped.

Rounding:
    All divisions floor (Python ``//``), so each step is exact and the same
    inputs always produce the same bits.
"""
from __future__ import annotations

from decimal import Decimal, localcontext

from .errors import ArithmeticOverflow, DivisionByZero, InvalidInput

FRACTION_BITS = 64
ONE_Q64 = 1 << FRACTION_BITS
FRACTION_MASK = ONE_Q64 - 1

MAX_U64 = (1 << 64) - 1
MAX_U128 = (1 << 128) - 1
MAX_U256 = (1 << 256) - 1


def _check_operand(value: int, name: str = "operand") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or value > MAX_U128:
        raise InvalidInput(f"{name} out of Q64.64 range: {value}")
    return value


def _narrow(value: int, op: str) -> int:
    """Fit a 256-bit intermediate back into 128 bits or fail."""
    if value > MAX_U128:
        raise ArithmeticOverflow(f"{op}: result does not fit in 128 bits")
    return value


def q64_mul(a: int, b: int) -> int:
    """Multiply two Q64.64 values: ``(a * b) >> 64``."""
    _check_operand(a, "a")
    _check_operand(b, "b")
    prod = a * b
    if prod > MAX_U256:
        raise ArithmeticOverflow("q64_mul: 256-bit product overflow")
    return _narrow(prod >> FRACTION_BITS, "q64_mul")


def q64_div(a: int, b: int) -> int:
    """Divide two Q64.64 values: ``(a << 64) // b``.

    The dividend is widened before dividing so the quotient keeps its
    fractional bits.
    """
    _check_operand(a, "a")
    _check_operand(b, "b")
    if b == 0:
        raise DivisionByZero("q64_div: divisor is zero")
    if a > (MAX_U256 >> FRACTION_BITS):
        raise ArithmeticOverflow("q64_div: dividend shift overflows 256 bits")
    return _narrow((a << FRACTION_BITS) // b, "q64_div")


def q64_add(a: int, b: int) -> int:
    _check_operand(a, "a")
    _check_operand(b, "b")
    return _narrow(a + b, "q64_add")


def mul_div(a: int, b: int, denom: int) -> int:
    """Compute ``a * b // denom`` with a checked 256-bit product."""
    _check_operand(a, "a")
    _check_operand(b, "b")
    _check_operand(denom, "denom")
    if denom == 0:
        raise DivisionByZero("mul_div: denominator is zero")
    prod = a * b
    if prod > MAX_U256:
        raise ArithmeticOverflow("mul_div: 256-bit product overflow")
    return _narrow(prod // denom, "mul_div")


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def from_int(n: int) -> int:
    """Integer → Q64.64 (``n << 64``). ``n`` must fit in 64 bits."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidInput(f"from_int expects a non-negative int, got {n!r}")
    if n > MAX_U64:
        raise ArithmeticOverflow(f"from_int: {n} does not fit in 64 integer bits")
    return n << FRACTION_BITS


def to_parts(q: int) -> tuple[int, int]:
    """Split a Q64.64 value into ``(integer, fraction)``.

    The fraction is the raw low 64 bits, i.e. ``fraction / 2**64`` of a unit.
    """
    _check_operand(q, "q")
    return q >> FRACTION_BITS, q & FRACTION_MASK


def to_decimal(q: int) -> Decimal:
    """Exact decimal rendering: ``integer + fraction / 2**64``."""
    integer, fraction = to_parts(q)
    # 2**-64 has 64 significant decimal digits; 120 covers any Q64.64 exactly.
    with localcontext() as ctx:
        ctx.prec = 120
        return Decimal(integer) + Decimal(fraction) / Decimal(ONE_Q64)


def to_float(q: int) -> float:
    integer, fraction = to_parts(q)
    return integer + fraction / 2**FRACTION_BITS


def format_q64(q: int, places: int = 4) -> str:
    """Render a Q64.64 value as a fixed-point decimal string."""
    return f"{to_decimal(q):.{places}f}"


def from_decimal(value: Decimal | float | str) -> int:
    """Decimal quantity → Q64.64, flooring the fraction below 2**-64."""
    d = Decimal(str(value))
    if not d.is_finite() or d < 0:
        raise InvalidInput(f"cannot represent {value!r} as Q64.64")
    with localcontext() as ctx:
        ctx.prec = 120
        raw = int(d * ONE_Q64)
    return _narrow(raw, "from_decimal")
