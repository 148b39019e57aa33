"""Data models, all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CollateralEntry:
    """One collateral-side reserve position of one owner.

    ``price_e8`` is a USD price scaled by 10^8. ``liq_threshold_bps`` is the
    share of the value counted toward the health factor. A
    ``borrow_factor_bps`` of 0 means no derating.
    """

    amount: int
    decimals: int
    price_e8: int
    liq_threshold_bps: int
    borrow_factor_bps: int = 0


@dataclass(frozen=True)
class DebtEntry:
    """One debt-side reserve position of one owner."""

    amount: int
    decimals: int
    price_e8: int


@dataclass(frozen=True)
class ComputationInput:
    """Collateral and debt entries for one owner. Order is irrelevant."""

    collaterals: tuple[CollateralEntry, ...] = ()
    debts: tuple[DebtEntry, ...] = ()


@dataclass(frozen=True)
class HfState:
    """Persisted health-factor slot for one owner."""

    owner: str
    last_hf_q64: int
    last_update: int


@dataclass(frozen=True)
class HealthFactorComputed:
    """Event emitted after a health factor is stored."""

    owner: str
    hf_q64: int
    timestamp: int
