"""Health factor = risk-weighted collateral / debt, as Q64.64."""
from __future__ import annotations

from decimal import Decimal

from ..fixed_point import MAX_U128, ONE_Q64, format_q64, q64_div, to_decimal
from ..models import ComputationInput
from .aggregator import aggregate

# Returned when there is no debt; the position can never be unhealthy.
MAX_HF = MAX_U128


def evaluate(collateral_value: int, debt_value: int) -> int:
    """Divide the two totals into a Q64.64 health factor.

    Returns ``MAX_HF`` when ``debt_value`` is zero. Zero collateral against
    non-zero debt yields 0.
    """
    if debt_value == 0:
        return MAX_HF
    return q64_div(collateral_value, debt_value)


def compute_hf(inp: ComputationInput) -> int:
    """Aggregate the entries and evaluate the health factor."""
    return evaluate(*aggregate(inp))


def is_liquidatable(hf_q64: int, threshold_q64: int = ONE_Q64) -> bool:
    """True when the health factor is strictly below the threshold."""
    return hf_q64 < threshold_q64


def hf_to_decimal(hf_q64: int) -> Decimal:
    """Decimal health factor, with the no-debt sentinel as infinity."""
    if hf_q64 == MAX_HF:
        return Decimal("Infinity")
    return to_decimal(hf_q64)


def format_hf(hf_q64: int, places: int = 4) -> str:
    if hf_q64 == MAX_HF:
        return "∞"
    return format_q64(hf_q64, places)
