"""Health-factor monitoring: computes each owner and notifies on risk."""
from __future__ import annotations

import html
import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from ..config import AppConfig
from ..engine import format_hf, is_liquidatable
from ..errors import HfError
from ..fixed_point import from_decimal
from ..interfaces.notifier import Notifier
from ..models import ComputationInput, HfState
from ..notifications import TelegramNotifier
from .health_factor import HealthFactorService

logger = logging.getLogger(__name__)


class HealthMonitor:
    """Run health-factor checks for many owners and dispatch notifications."""

    def __init__(
        self,
        config: AppConfig,
        service: HealthFactorService,
        notifiers: list[Notifier] | None = None,
    ) -> None:
        self._config = config
        self._service = service
        self._threshold_q64 = from_decimal(config.engine.liquidation_hf)

        if notifiers is None:
            notifiers = []
            if config.notifications.telegram.enabled:
                notifiers.append(TelegramNotifier(config.notifications.telegram))
        self._notifiers: list[Notifier] = notifiers
        # Owners whose computation failed during the last check_and_alert run.
        self.failed_owners: list[str] = []

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_owner(owner: str) -> str:
        if len(owner) > 16:
            owner = f"{owner[:8]}...{owner[-6:]}"
        return html.escape(owner)

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def _status(self, hf_q64: int) -> str:
        if is_liquidatable(hf_q64, self._threshold_q64):
            return "🚨 LIQUIDATABLE"
        return "✅ Healthy"

    def _build_log_message(self, state: HfState) -> str:
        return (
            f"📊 {self._format_owner(state.owner)}\n"
            f"\n"
            f"{self._status(state.last_hf_q64)}\n"
            f"HF: {format_hf(state.last_hf_q64)}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    def _build_liquidation_alert(self, state: HfState) -> str:
        return (
            f"🚨 HF {format_hf(state.last_hf_q64)} below "
            f"{self._config.engine.liquidation_hf:g}\n"
            f"\n"
            f"Owner: {self._format_owner(state.owner)}\n"
            f"Raw Q64.64: {state.last_hf_q64}\n"
            f"\n"
            f"Position is eligible for liquidation.\n"
            f"{self._now_str()} UTC"
        )

    def _build_failure_message(self, owner: str, error: HfError) -> str:
        return (
            f"❌ HF computation failed\n"
            f"\n"
            f"Owner: {self._format_owner(owner)}\n"
            f"{type(error).__name__}: {html.escape(str(error))}\n"
            f"\n"
            f"Stored HF left unchanged.\n"
            f"{self._now_str()} UTC"
        )

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str, silent: bool = True) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Core workflow
    # ------------------------------------------------------------------

    def is_liquidatable(self, state: HfState) -> bool:
        return is_liquidatable(state.last_hf_q64, self._threshold_q64)

    async def check_and_alert(
        self, positions: Iterable[tuple[str, ComputationInput]]
    ) -> dict[str, HfState]:
        """Compute every owner's HF, log it, and alert on liquidatable ones.

        A failure for one owner is reported and does not stop the others.
        Returns the freshly stored slots of the owners that succeeded.
        """
        results: dict[str, HfState] = {}
        self.failed_owners = []

        for owner, inp in positions:
            try:
                state = self._service.compute(owner, inp)
            except HfError as e:
                self.failed_owners.append(owner)
                await self._send_log(self._build_failure_message(owner, e), silent=False)
                continue

            results[owner] = state
            await self._send_log(self._build_log_message(state))

            if self.is_liquidatable(state):
                logger.warning(
                    "Owner %s is liquidatable (HF %s)", owner, format_hf(state.last_hf_q64)
                )
                await self._send_alert(
                    self._build_liquidation_alert(state),
                    subject="🚨 Liquidation threshold crossed",
                )

        logger.info(
            "Checked %d owner(s); %d liquidatable",
            len(results),
            sum(1 for s in results.values() if self.is_liquidatable(s)),
        )
        return results
