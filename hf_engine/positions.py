"""Parse positions documents into computation inputs.

A positions document lists owners. Each owner either carries explicit
entries::

    owners:
      - owner: alice
        collaterals:
          - {amount: 10000000000, decimals: 9, price_e8: 18612000000,
             liq_threshold_bps: 8500, borrow_factor_bps: 0}
        debts:
          - {amount: 5000000, decimals: 6, price_e8: 500000000}

or raw deposit/borrow amounts resolved through a top-level ``reserves``
snapshot::

    reserves:
      SOL: {decimals: 9, market_price_sf: 214587...,
            liquidation_threshold_pct: 74}
    owners:
      - owner: bob
        deposits: {SOL: 1000000000}
        borrows: {USDC: 50000000}
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidInput
from .models import CollateralEntry, ComputationInput, DebtEntry
from .snapshot import MarketSnapshot, ReserveSnapshot

logger = logging.getLogger(__name__)


def _as_int(raw: Any, name: str) -> int:
    """Accept ints and base-10 integer strings (large amounts are often quoted)."""
    if isinstance(raw, bool):
        raise InvalidInput(f"{name} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise InvalidInput(f"{name} must be an integer, got {raw!r}") from None
    raise InvalidInput(f"{name} must be an integer, got {raw!r}")


def _require(raw: dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(raw, dict):
        raise InvalidInput(f"{where} must be a mapping, got {type(raw).__name__}")
    if key not in raw:
        raise InvalidInput(f"{where}: missing '{key}'")
    return raw[key]


def parse_collateral(raw: dict[str, Any]) -> CollateralEntry:
    where = "collateral"
    return CollateralEntry(
        amount=_as_int(_require(raw, "amount", where), "amount"),
        decimals=_as_int(_require(raw, "decimals", where), "decimals"),
        price_e8=_as_int(_require(raw, "price_e8", where), "price_e8"),
        liq_threshold_bps=_as_int(
            _require(raw, "liq_threshold_bps", where), "liq_threshold_bps"
        ),
        borrow_factor_bps=_as_int(raw.get("borrow_factor_bps", 0), "borrow_factor_bps"),
    )


def parse_debt(raw: dict[str, Any]) -> DebtEntry:
    where = "debt"
    return DebtEntry(
        amount=_as_int(_require(raw, "amount", where), "amount"),
        decimals=_as_int(_require(raw, "decimals", where), "decimals"),
        price_e8=_as_int(_require(raw, "price_e8", where), "price_e8"),
    )


def parse_reserves(raw: dict[str, Any]) -> MarketSnapshot:
    if not isinstance(raw, dict):
        raise InvalidInput(f"'reserves' must be a mapping, got {type(raw).__name__}")
    reserves: dict[str, ReserveSnapshot] = {}
    for symbol, cfg in raw.items():
        if not isinstance(cfg, dict):
            raise InvalidInput(f"reserve '{symbol}' must be a mapping")
        where = f"reserve '{symbol}'"
        reserves[symbol] = ReserveSnapshot(
            symbol=symbol,
            decimals=_as_int(_require(cfg, "decimals", where), "decimals"),
            market_price_sf=_as_int(
                _require(cfg, "market_price_sf", where), "market_price_sf"
            ),
            liquidation_threshold_pct=_as_int(
                cfg.get("liquidation_threshold_pct", 0), "liquidation_threshold_pct"
            ),
            borrow_factor_bps=_as_int(cfg.get("borrow_factor_bps", 0), "borrow_factor_bps"),
        )
    return MarketSnapshot(reserves=reserves)


def _entries(raw: Any, name: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidInput(f"'{name}' must be a list, got {type(raw).__name__}")
    return raw


def _amounts(raw: Any, name: str) -> dict[str, int]:
    if not isinstance(raw, dict):
        raise InvalidInput(f"'{name}' must be a mapping of reserve → amount")
    return {sym: _as_int(amt, f"{name}.{sym}") for sym, amt in raw.items()}


def parse_owner(raw: dict[str, Any], market: MarketSnapshot) -> tuple[str, ComputationInput]:
    """Parse one owner block into ``(owner, ComputationInput)``."""
    owner = str(_require(raw, "owner", "owner block"))
    if not owner:
        raise InvalidInput("owner block has an empty 'owner'")

    if "deposits" in raw or "borrows" in raw:
        inp = market.build_input(
            _amounts(raw.get("deposits") or {}, "deposits"),
            _amounts(raw.get("borrows") or {}, "borrows"),
        )
    else:
        inp = ComputationInput(
            collaterals=tuple(
                parse_collateral(c) for c in _entries(raw.get("collaterals"), "collaterals")
            ),
            debts=tuple(parse_debt(d) for d in _entries(raw.get("debts"), "debts")),
        )
    return owner, inp


def parse_positions(raw: dict[str, Any]) -> list[tuple[str, ComputationInput]]:
    """Parse a loaded positions document."""
    if not isinstance(raw, dict):
        raise InvalidInput("positions document must be a mapping")
    market = parse_reserves(raw.get("reserves", {}) or {})
    owners = raw.get("owners", []) or []
    if not isinstance(owners, list):
        raise InvalidInput("'owners' must be a list")
    return [parse_owner(o, market) for o in owners]


def load_positions(path: str | Path) -> list[tuple[str, ComputationInput]]:
    """Load and parse a YAML positions file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Positions file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    positions = parse_positions(raw)
    logger.info("Loaded %d owner position(s) from %s", len(positions), path)
    return positions
