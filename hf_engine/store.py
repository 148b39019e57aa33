"""Health-factor slot storage backends."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .config import StoreConfig
from .models import HfState

logger = logging.getLogger(__name__)


class InMemoryHfStore:
    """Keep health-factor slots in a dict keyed by owner."""

    def __init__(self) -> None:
        self._slots: dict[str, HfState] = {}

    def get(self, owner: str) -> HfState | None:
        return self._slots.get(owner)

    def put(self, state: HfState) -> None:
        self._slots[state.owner] = state

    def __len__(self) -> int:
        return len(self._slots)


class JsonFileHfStore:
    """Persist health-factor slots in a single JSON document.

    The document maps owner → ``{"last_hf_q64": str, "last_update": int}``.
    Q64.64 values are stored as decimal strings so 128-bit integers survive
    JSON readers that only handle doubles. Each ``put`` rewrites the file
    through a temp file and ``os.replace``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with open(self._path) as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"HF store {self._path} is not a JSON object")
        return raw

    def get(self, owner: str) -> HfState | None:
        slot = self._load().get(owner)
        if slot is None:
            return None
        return HfState(
            owner=owner,
            last_hf_q64=int(slot["last_hf_q64"]),
            last_update=int(slot["last_update"]),
        )

    def put(self, state: HfState) -> None:
        data = self._load()
        data[state.owner] = {
            "last_hf_q64": str(state.last_hf_q64),
            "last_update": state.last_update,
        }

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self._path)
        logger.debug("Stored HF slot for %s in %s", state.owner, self._path)


def create_store(config: StoreConfig) -> InMemoryHfStore | JsonFileHfStore:
    """Build the store backend named in the configuration."""
    if config.backend == "file":
        return JsonFileHfStore(config.path)
    return InMemoryHfStore()
