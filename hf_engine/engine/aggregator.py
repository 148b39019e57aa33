"""Fold collateral and debt entries into two Q64.64 totals.

    collateral_value = Σ amount_i * price_i * lt_i / bf_divisor_i
    debt_value       = Σ amount_j * price_j

Every entry is validated before any arithmetic starts. Any failure aborts
the whole fold and the partial sums are discarded.
"""
from __future__ import annotations

import logging

from ..errors import (
    InvalidBorrowFactor,
    InvalidInput,
    InvalidLiqThreshold,
    InvalidPrice,
)
from ..fixed_point import MAX_U64, q64_add, q64_div, q64_mul
from ..models import CollateralEntry, ComputationInput, DebtEntry
from ..normalizer import (
    BPS_SCALE,
    borrow_factor_divisor_q64,
    bps_to_q64,
    normalize,
    price_to_q64,
    ten_pow,
)

logger = logging.getLogger(__name__)

MAX_PRICE_E8 = (1 << 63) - 1
MIN_BORROW_FACTOR_BPS = 1_000


def _require_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
    return value


def _validate_common(amount: object, decimals: object, price_e8: object) -> None:
    amount = _require_int(amount, "amount")
    if amount < 0 or amount > MAX_U64:
        raise InvalidInput(f"amount out of u64 range: {amount}")
    price = _require_int(price_e8, "price_e8")
    if price <= 0 or price > MAX_PRICE_E8:
        raise InvalidPrice(f"price_e8 must be in 1..{MAX_PRICE_E8}, got {price}")
    ten_pow(_require_int(decimals, "decimals"))


def validate_collateral(entry: CollateralEntry) -> None:
    """Reject a structurally malformed collateral entry."""
    if not isinstance(entry, CollateralEntry):
        raise InvalidInput(f"expected CollateralEntry, got {type(entry).__name__}")
    _validate_common(entry.amount, entry.decimals, entry.price_e8)

    lt = _require_int(entry.liq_threshold_bps, "liq_threshold_bps")
    if lt < 0 or lt > BPS_SCALE:
        raise InvalidLiqThreshold(f"liq_threshold_bps must be in 0..10000, got {lt}")

    bf = _require_int(entry.borrow_factor_bps, "borrow_factor_bps")
    if bf != 0 and not MIN_BORROW_FACTOR_BPS <= bf <= BPS_SCALE:
        raise InvalidBorrowFactor(
            f"borrow_factor_bps must be 0 or in 1000..10000, got {bf}"
        )


def validate_debt(entry: DebtEntry) -> None:
    """Reject a structurally malformed debt entry."""
    if not isinstance(entry, DebtEntry):
        raise InvalidInput(f"expected DebtEntry, got {type(entry).__name__}")
    _validate_common(entry.amount, entry.decimals, entry.price_e8)


def collateral_value(entry: CollateralEntry) -> int:
    """Risk-weighted Q64.64 USD value of one collateral entry."""
    if entry.amount == 0:
        return 0

    value = q64_mul(normalize(entry.amount, entry.decimals), price_to_q64(entry.price_e8))
    value = q64_mul(value, bps_to_q64(entry.liq_threshold_bps))

    # 0 means no derating; the divide is never reached with a zero divisor.
    if entry.borrow_factor_bps > 0:
        value = q64_div(value, borrow_factor_divisor_q64(entry.borrow_factor_bps))

    return value


def debt_value(entry: DebtEntry) -> int:
    """Q64.64 USD value of one debt entry."""
    if entry.amount == 0:
        return 0
    return q64_mul(normalize(entry.amount, entry.decimals), price_to_q64(entry.price_e8))


def aggregate(inp: ComputationInput) -> tuple[int, int]:
    """Return ``(collateral_value, debt_value)`` as Q64.64 totals."""
    for c in inp.collaterals:
        validate_collateral(c)
    for d in inp.debts:
        validate_debt(d)

    total_collateral = 0
    for c in inp.collaterals:
        total_collateral = q64_add(total_collateral, collateral_value(c))

    total_debt = 0
    for d in inp.debts:
        total_debt = q64_add(total_debt, debt_value(d))

    logger.debug(
        "Aggregated %d collaterals, %d debts → collateral=%d debt=%d",
        len(inp.collaterals),
        len(inp.debts),
        total_collateral,
        total_debt,
    )
    return total_collateral, total_debt
