"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from hf_engine.config import (
    AppConfig,
    EngineConfig,
    NotificationsConfig,
    StoreConfig,
    TelegramConfig,
)
from hf_engine.models import CollateralEntry, ComputationInput, DebtEntry
from hf_engine.services import HealthFactorService
from hf_engine.store import InMemoryHfStore


# ---------------------------------------------------------------------------
# Entry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sol_collateral() -> CollateralEntry:
    """10 SOL at $186.12 with an 85% liquidation threshold."""
    return CollateralEntry(
        amount=10_000_000_000,
        decimals=9,
        price_e8=18_612_000_000,
        liq_threshold_bps=8500,
        borrow_factor_bps=0,
    )


@pytest.fixture()
def small_sol_collateral() -> CollateralEntry:
    """0.1 SOL at $186.12 with an 85% liquidation threshold."""
    return CollateralEntry(
        amount=100_000_000,
        decimals=9,
        price_e8=18_612_000_000,
        liq_threshold_bps=8500,
        borrow_factor_bps=0,
    )


@pytest.fixture()
def usdc_debt() -> DebtEntry:
    """5 units of a 6-decimal token priced at $5."""
    return DebtEntry(amount=5_000_000, decimals=6, price_e8=500_000_000)


@pytest.fixture()
def healthy_input(
    sol_collateral: CollateralEntry, usdc_debt: DebtEntry
) -> ComputationInput:
    return ComputationInput(collaterals=(sol_collateral,), debts=(usdc_debt,))


@pytest.fixture()
def underwater_input(
    small_sol_collateral: CollateralEntry, usdc_debt: DebtEntry
) -> ComputationInput:
    return ComputationInput(collaterals=(small_sol_collateral,), debts=(usdc_debt,))


@pytest.fixture()
def overflowing_input() -> ComputationInput:
    """Max u64 amount at the max price: the weighted value exceeds 128 bits."""
    return ComputationInput(
        collaterals=(
            CollateralEntry(
                amount=(1 << 64) - 1,
                decimals=0,
                price_e8=(1 << 63) - 1,
                liq_threshold_bps=10_000,
            ),
        ),
        debts=(DebtEntry(amount=1_000_000, decimals=6, price_e8=100_000_000),),
    )


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------


class FixedClock:
    """Deterministic clock returning increasing unix seconds."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def memory_store() -> InMemoryHfStore:
    return InMemoryHfStore()


@pytest.fixture()
def service(memory_store: InMemoryHfStore, clock: FixedClock) -> HealthFactorService:
    return HealthFactorService(memory_store, clock=clock)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        engine=EngineConfig(liquidation_hf=1.0),
        store=StoreConfig(backend="memory"),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    engine:
      liquidation_hf: 1.05
    store:
      backend: file
      path: "/tmp/hf_state.json"
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Positions file fixtures
# ---------------------------------------------------------------------------

SAMPLE_POSITIONS_YAML = textwrap.dedent("""\
    reserves:
      SOL:
        decimals: 9
        market_price_sf: 214443399856873537536  # exactly 186 * 2**60
        liquidation_threshold_pct: 74
      USDC:
        decimals: 6
        market_price_sf: 1152921504606846976    # exactly 2**60
        liquidation_threshold_pct: 80
    owners:
      - owner: alice
        collaterals:
          - amount: 10000000000
            decimals: 9
            price_e8: 18612000000
            liq_threshold_bps: 8500
            borrow_factor_bps: 0
        debts:
          - amount: 5000000
            decimals: 6
            price_e8: 500000000
      - owner: bob
        collaterals:
          - amount: "100000000"
            decimals: 9
            price_e8: 18612000000
            liq_threshold_bps: 8500
        debts:
          - amount: 5000000
            decimals: 6
            price_e8: 500000000
      - owner: carol
        deposits: {SOL: 1000000000}
        borrows: {USDC: 50000000}
""")


@pytest.fixture()
def sample_positions_path(tmp_path: Path) -> Path:
    path = tmp_path / "positions.yaml"
    path.write_text(SAMPLE_POSITIONS_YAML)
    return path
