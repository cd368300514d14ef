"""Paginated plain-text report of the lot."""

import textwrap
from datetime import datetime
from decimal import Decimal

from .billing.duration import format_duration
from .state.models import LotState
from .state.statistics import LotStatistics

TITLE = "Car Parking Management System"
PAGE_BREAK = "\f\n"
TIME_FORMAT = "%Y-%m-%d %H:%M"


def _money(symbol: str, amount: Decimal) -> str:
    return f"{symbol}{amount:.2f}"


def _report_lines(
    state: LotState,
    stats: LotStatistics,
    generated_at: datetime,
    currency: str,
) -> list[str]:
    lines = [
        TITLE,
        f"Generated on: {generated_at.strftime(TIME_FORMAT)}",
        "",
        "Statistics Overview",
        f"  Total Revenue: {_money(currency, stats.total_revenue)}",
        f"  Occupancy Rate: {stats.occupancy_rate}%",
        f"  Available Slots: {stats.available_count}",
        f"  Total Slots: {stats.total_slots}",
        f"  Hourly Rate: {_money(currency, state.settings.hourly_rate)}",
        "",
        "Parking Slots Status",
        "Occupied Slots:",
    ]

    occupied = [s for s in state.slots if s.occupied]
    if occupied:
        lines.extend(f"  Slot {s.id}: {s.vehicle_id}" for s in occupied)
    else:
        lines.append("  No occupied slots")

    lines.append("Available Slots:")
    free_ids = ", ".join(str(s.id) for s in state.slots if not s.occupied)
    if free_ids:
        lines.extend(textwrap.wrap(free_ids, width=50, initial_indent="  ", subsequent_indent="  "))
    else:
        lines.append("  No available slots")

    lines += ["", "Active Parking Sessions"]
    if state.active_sessions:
        lines.append(f"{'Vehicle':<14}{'Slot':<6}{'Entry Time':<18}Duration")
        for s in state.active_sessions:
            lines.append(
                f"{s.vehicle_id:<14}{s.slot_id:<6}"
                f"{s.entry_time.strftime(TIME_FORMAT):<18}"
                f"{format_duration(generated_at - s.entry_time)}"
            )
    else:
        lines.append("No active sessions")

    lines += ["", "Parking History"]
    if state.history:
        lines.append(
            f"{'Vehicle':<14}{'Slot':<6}{'Entry':<18}{'Exit':<18}{'Duration':<14}Payment"
        )
        # Most recent first
        for h in reversed(state.history):
            lines.append(
                f"{h.vehicle_id:<14}{h.slot_id:<6}"
                f"{h.entry_time.strftime(TIME_FORMAT):<18}"
                f"{h.exit_time.strftime(TIME_FORMAT):<18}"
                f"{h.duration:<14}{_money(currency, h.payment)}"
            )
    else:
        lines.append("No history available")

    return lines


def render_report(
    state: LotState,
    stats: LotStatistics,
    generated_at: datetime,
    currency: str = "₹",
    lines_per_page: int = 50,
) -> list[str]:
    """
    Render the lot as a list of text pages.

    Each page holds at most lines_per_page body lines followed by a
    "Page i of n" footer.

    Args:
        state: Snapshot of the lot
        stats: Statistics computed for the same snapshot
        generated_at: Report time, also used for live session durations
        currency: Symbol printed before amounts
        lines_per_page: Body lines per page

    Returns:
        Pages in order
    """
    if lines_per_page < 1:
        raise ValueError("lines_per_page must be at least 1")

    lines = _report_lines(state, stats, generated_at, currency)
    chunks = [lines[i:i + lines_per_page] for i in range(0, len(lines), lines_per_page)]
    total = len(chunks)

    return [
        "\n".join(chunk + ["", f"Page {number} of {total}".center(60)]) + "\n"
        for number, chunk in enumerate(chunks, start=1)
    ]
