"""Compute, persist and announce health factors."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from ..engine import compute_hf, format_hf
from ..errors import HfError
from ..interfaces.store import HfStore
from ..models import ComputationInput, HealthFactorComputed, HfState

logger = logging.getLogger(__name__)

Listener = Callable[[HealthFactorComputed], None]


def _unix_now() -> int:
    return int(time.time())


class HealthFactorService:
    """Compute an owner's health factor and overwrite their stored slot.

    A failed computation raises and leaves the stored slot as it was, so
    callers can always tell a failure from a successful write.
    """

    def __init__(
        self,
        store: HfStore,
        clock: Callable[[], int] | None = None,
        listeners: Iterable[Listener] = (),
    ) -> None:
        self._store = store
        self._clock = clock or _unix_now
        self._listeners: list[Listener] = list(listeners)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def last(self, owner: str) -> HfState | None:
        """Return the stored slot for ``owner``, if any."""
        return self._store.get(owner)

    def compute(self, owner: str, inp: ComputationInput) -> HfState:
        """Compute and store the health factor for ``owner``."""
        try:
            hf_q64 = compute_hf(inp)
        except HfError as e:
            logger.error(
                "HF computation failed for %s (%s): %s", owner, type(e).__name__, e
            )
            raise

        previous = self._store.get(owner)
        now = self._clock()
        state = HfState(owner=owner, last_hf_q64=hf_q64, last_update=now)
        self._store.put(state)

        logger.info(
            "HF for %s: %s (%s)",
            owner,
            format_hf(hf_q64),
            "initialized" if previous is None else "updated",
        )

        event = HealthFactorComputed(owner=owner, hf_q64=hf_q64, timestamp=now)
        for listener in self._listeners:
            listener(event)

        return state
