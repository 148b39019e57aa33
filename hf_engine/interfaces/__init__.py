"""Protocol interfaces for the health-factor engine."""
from .notifier import Notifier
from .store import HfStore

__all__ = ["HfStore", "Notifier"]
