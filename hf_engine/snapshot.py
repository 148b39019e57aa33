"""Read-only market snapshot used to build computation entries.

Reserve configuration and oracle prices are captured once and passed in,
so entry construction never reaches for shared market state.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .errors import InvalidInput
from .models import CollateralEntry, ComputationInput, DebtEntry

# Reserve market prices are scaled by 2**60.
PRICE_SF_BITS = 60
PRICE_E8_SCALE = 10**8


def price_sf_to_e8(market_price_sf: int) -> int:
    """2**60-scaled price → 10^8-scaled price (floored)."""
    if market_price_sf < 0:
        raise InvalidInput(f"market price must be non-negative, got {market_price_sf}")
    return (market_price_sf * PRICE_E8_SCALE) >> PRICE_SF_BITS


def pct_to_bps(value: int) -> int:
    """Percent → basis points. Values above 100 are taken as bps already."""
    if value < 0:
        raise InvalidInput(f"percentage must be non-negative, got {value}")
    return value * 100 if value <= 100 else value


@dataclass(frozen=True)
class ReserveSnapshot:
    """Configuration and price of one reserve at snapshot time."""

    symbol: str
    decimals: int
    market_price_sf: int
    liquidation_threshold_pct: int
    borrow_factor_bps: int = 0

    @property
    def price_e8(self) -> int:
        return price_sf_to_e8(self.market_price_sf)

    @property
    def liq_threshold_bps(self) -> int:
        return pct_to_bps(self.liquidation_threshold_pct)


@dataclass(frozen=True)
class MarketSnapshot:
    """All reserves of one market, keyed by symbol."""

    reserves: Mapping[str, ReserveSnapshot] = field(default_factory=dict)

    def reserve(self, symbol: str) -> ReserveSnapshot:
        try:
            return self.reserves[symbol]
        except KeyError:
            raise InvalidInput(f"Unknown reserve '{symbol}'") from None

    def collateral_entry(self, symbol: str, amount: int) -> CollateralEntry:
        r = self.reserve(symbol)
        return CollateralEntry(
            amount=amount,
            decimals=r.decimals,
            price_e8=r.price_e8,
            liq_threshold_bps=r.liq_threshold_bps,
            borrow_factor_bps=r.borrow_factor_bps,
        )

    def debt_entry(self, symbol: str, amount: int) -> DebtEntry:
        r = self.reserve(symbol)
        return DebtEntry(amount=amount, decimals=r.decimals, price_e8=r.price_e8)

    def build_input(
        self,
        deposits: Mapping[str, int],
        borrows: Mapping[str, int],
    ) -> ComputationInput:
        """Resolve deposit/borrow amounts into a ``ComputationInput``.

        Non-positive amounts are dropped, as an obligation reports no
        position for them.
        """
        collaterals = tuple(
            self.collateral_entry(sym, amt) for sym, amt in deposits.items() if amt > 0
        )
        debts = tuple(
            self.debt_entry(sym, amt) for sym, amt in borrows.items() if amt > 0
        )
        return ComputationInput(collaterals=collaterals, debts=debts)
