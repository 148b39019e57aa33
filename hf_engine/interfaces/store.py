"""HF store protocol: persisted health-factor slot per owner."""
from typing import Protocol

from ..models import HfState


class HfStore(Protocol):
    """Abstract interface for the per-owner health-factor slot.

    Writes for the same owner are expected to be serialized by the caller.
    """

    def get(self, owner: str) -> HfState | None: ...

    def put(self, state: HfState) -> None: ...
