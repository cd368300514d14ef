"""Aggregate views derived from the registry and the ledger."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel

from .ledger import SessionLedger
from .slot_registry import SlotRegistry

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")


class LotStatistics(BaseModel):
    """Point-in-time statistics. Recomputed on every request."""

    total_revenue: Decimal
    occupancy_rate: Decimal  # percent, one decimal place
    total_slots: int
    occupied_count: int
    available_count: int
    active_sessions: int
    completed_sessions: int


def occupancy_rate(occupied: int, total: int) -> Decimal:
    """Occupied share of slots in percent, 0 when there are no slots."""
    if total <= 0:
        return Decimal("0.0")
    rate = Decimal(occupied) * 100 / Decimal(total)
    return rate.quantize(TENTHS, rounding=ROUND_HALF_UP)


def compute_statistics(registry: SlotRegistry, ledger: SessionLedger) -> LotStatistics:
    """Compute revenue and occupancy from current state."""
    history = ledger.history
    revenue = sum((entry.payment for entry in history), Decimal("0"))

    total = registry.total
    occupied = registry.occupied_count

    return LotStatistics(
        total_revenue=revenue.quantize(CENTS, rounding=ROUND_HALF_UP),
        occupancy_rate=occupancy_rate(occupied, total),
        total_slots=total,
        occupied_count=occupied,
        available_count=total - occupied,
        active_sessions=len(ledger.active_sessions),
        completed_sessions=len(history),
    )
