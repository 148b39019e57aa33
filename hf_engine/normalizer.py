"""Convert raw token amounts, prices and basis points into Q64.64."""
from __future__ import annotations

from .errors import InvalidDecimals, InvalidInput
from .fixed_point import MAX_U64, ONE_Q64, mul_div

PRICE_DECIMALS = 8
BPS_SCALE = 10_000
MAX_DECIMALS_U8 = 255


def ten_pow(decimals: int) -> int:
    """Checked ``10**decimals``, bounded to an unsigned 64-bit result.

    Decimals of 20 and above overflow 64 bits and raise ``InvalidDecimals``.
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidInput(f"decimals must be an int, got {type(decimals).__name__}")
    if decimals < 0 or decimals > MAX_DECIMALS_U8:
        raise InvalidInput(f"decimals out of u8 range: {decimals}")
    power = 10**decimals
    if power > MAX_U64:
        raise InvalidDecimals(f"10^{decimals} does not fit in 64 bits")
    return power


def normalize(amount: int, decimals: int) -> int:
    """Raw token amount → Q64.64 whole units.

    Computes ``amount * ONE_Q64 / 10**decimals``, multiplying first so no
    precision is lost before scaling down. A zero amount is simply zero.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidInput(f"amount must be an int, got {type(amount).__name__}")
    if amount < 0 or amount > MAX_U64:
        raise InvalidInput(f"amount out of u64 range: {amount}")
    return mul_div(amount, ONE_Q64, ten_pow(decimals))


def price_to_q64(price_e8: int) -> int:
    """USD price scaled by 10^8 → Q64.64."""
    return normalize(price_e8, PRICE_DECIMALS)


def bps_to_q64(bps: int) -> int:
    """Basis points → Q64.64 fraction (``bps / 10000``)."""
    return mul_div(bps, ONE_Q64, BPS_SCALE)


def borrow_factor_divisor_q64(bps: int) -> int:
    """Borrow factor in bps → Q64.64 divisor ``10000 / bps``.

    A borrow factor of 5000 bps is a 2x divisor and halves the collateral
    contribution; 10000 bps is a 1x divisor.
    """
    if bps <= 0:
        raise InvalidInput("borrow factor divisor needs a positive bps value")
    return mul_div(BPS_SCALE, ONE_Q64, bps)
