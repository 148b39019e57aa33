"""Unit tests for Q64.64 fixed-point arithmetic."""
from __future__ import annotations

from decimal import Decimal

import pytest

from hf_engine.errors import ArithmeticOverflow, DivisionByZero, InvalidInput
from hf_engine.fixed_point import (
    MAX_U128,
    ONE_Q64,
    format_q64,
    from_decimal,
    from_int,
    mul_div,
    q64_add,
    q64_div,
    q64_mul,
    to_decimal,
    to_float,
    to_parts,
)

HALF = ONE_Q64 // 2
QUARTER = ONE_Q64 // 4


# ---------------------------------------------------------------------------
# q64_mul
# ---------------------------------------------------------------------------


class TestQ64Mul:
    def test_one_is_identity(self) -> None:
        assert q64_mul(ONE_Q64, ONE_Q64) == ONE_Q64
        assert q64_mul(12345 * ONE_Q64 + 678, ONE_Q64) == 12345 * ONE_Q64 + 678

    def test_integers(self) -> None:
        assert q64_mul(from_int(2), from_int(3)) == from_int(6)

    def test_fractions(self) -> None:
        assert q64_mul(HALF, HALF) == QUARTER

    def test_zero(self) -> None:
        assert q64_mul(0, MAX_U128) == 0

    def test_overflow_is_reported(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            q64_mul(MAX_U128, from_int(2))

    def test_largest_fitting_product(self) -> None:
        assert q64_mul(MAX_U128, ONE_Q64) == MAX_U128

    def test_negative_operand_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            q64_mul(-1, ONE_Q64)

    def test_operand_beyond_128_bits_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            q64_mul(MAX_U128 + 1, 1)

    def test_bool_operand_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            q64_mul(True, ONE_Q64)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# q64_div
# ---------------------------------------------------------------------------


class TestQ64Div:
    def test_basic(self) -> None:
        assert q64_div(ONE_Q64, from_int(2)) == HALF
        assert q64_div(from_int(3), from_int(2)) == ONE_Q64 + HALF

    def test_divide_by_zero(self) -> None:
        with pytest.raises(DivisionByZero):
            q64_div(ONE_Q64, 0)

    def test_zero_dividend(self) -> None:
        assert q64_div(0, from_int(7)) == 0

    def test_quotient_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            q64_div(MAX_U128, HALF)

    def test_floors(self) -> None:
        # 1/3 is not representable; the result is floored.
        third = q64_div(ONE_Q64, from_int(3))
        assert third == ONE_Q64 // 3

    @pytest.mark.parametrize(
        "a,b",
        [
            (ONE_Q64, from_int(3)),
            (from_int(1582) + 123_456_789, from_int(25)),
            (7, 3),
            (from_int(10**9), HALF + 17),
            (123_456_789_012_345_678_901_234, 98_765_432_109_876_543),
        ],
    )
    def test_mul_div_identity_within_rounding(self, a: int, b: int) -> None:
        back = q64_mul(q64_div(a, b), b)
        assert back <= a
        assert a - back <= (b >> 64) + 1


# ---------------------------------------------------------------------------
# q64_add / mul_div
# ---------------------------------------------------------------------------


class TestQ64Add:
    def test_basic(self) -> None:
        assert q64_add(HALF, HALF) == ONE_Q64

    def test_max_plus_zero(self) -> None:
        assert q64_add(MAX_U128, 0) == MAX_U128

    def test_carry_out_overflows(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            q64_add(MAX_U128, 1)


class TestMulDiv:
    def test_basic(self) -> None:
        assert mul_div(5, ONE_Q64, 10) == HALF

    def test_zero_denominator(self) -> None:
        with pytest.raises(DivisionByZero):
            mul_div(1, 1, 0)

    def test_result_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            mul_div(MAX_U128, MAX_U128, 1)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


class TestConversions:
    def test_from_int(self) -> None:
        assert from_int(3) == 3 << 64
        assert from_int(0) == 0

    def test_from_int_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            from_int(1 << 64)

    def test_from_int_negative(self) -> None:
        with pytest.raises(InvalidInput):
            from_int(-1)

    def test_to_parts(self) -> None:
        assert to_parts(ONE_Q64 + QUARTER) == (1, 1 << 62)
        assert to_parts(MAX_U128) == ((1 << 64) - 1, (1 << 64) - 1)

    def test_to_decimal_exact(self) -> None:
        assert to_decimal(ONE_Q64 + QUARTER) == Decimal("1.25")
        assert to_decimal(1) * Decimal(2**64) == 1

    def test_to_float(self) -> None:
        assert to_float(from_int(3) + HALF) == 3.5

    def test_format(self) -> None:
        assert format_q64(ONE_Q64 + HALF, 2) == "1.50"
        assert format_q64(0) == "0.0000"

    def test_from_decimal(self) -> None:
        assert from_decimal("1.0") == ONE_Q64
        assert from_decimal(0.5) == HALF
        assert from_decimal(Decimal("2.25")) == from_int(2) + QUARTER

    def test_from_decimal_rejects_negative(self) -> None:
        with pytest.raises(InvalidInput):
            from_decimal(-1)

    def test_from_decimal_rejects_infinity(self) -> None:
        with pytest.raises(InvalidInput):
            from_decimal(float("inf"))
