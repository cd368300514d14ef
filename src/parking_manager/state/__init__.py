"""State management module."""

from .ledger import SessionLedger
from .models import HistoryEntry, LotSettings, LotState, Session, Slot, normalize_vehicle_id
from .slot_registry import SlotRegistry
from .statistics import LotStatistics, compute_statistics

__all__ = [
    "HistoryEntry",
    "LotSettings",
    "LotState",
    "LotStatistics",
    "Session",
    "SessionLedger",
    "Slot",
    "SlotRegistry",
    "compute_statistics",
    "normalize_vehicle_id",
]
