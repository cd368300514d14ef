"""Active parking sessions and the completed-session history."""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Optional

from ..billing.duration import format_duration
from ..billing.fees import billed_hours, fee_for_hours
from ..errors import (
    InvalidVehicleId,
    LedgerConsistencyError,
    SlotUnavailable,
    VehicleAlreadyParked,
    VehicleNotFound,
)
from ..metrics import record_session_completed, record_session_started
from .models import HistoryEntry, Session, normalize_vehicle_id
from .slot_registry import SlotRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionLedger:
    """
    Runs vehicle entry and exit against a SlotRegistry.

    Active sessions are keyed by normalized vehicle id, so lookups are
    case-insensitive. History is append-only and ordered by exit.

    Every check happens before any mutation, so a rejected park() or
    unpark() leaves slots, sessions and history untouched.
    """

    def __init__(self, registry: SlotRegistry, clock: Clock = utc_now):
        """
        Initialize the ledger.

        Args:
            registry: Slots the sessions are recorded against
            clock: Returns the current time, injectable for tests
        """
        self.registry = registry
        self.clock = clock
        self._active: dict[str, Session] = {}
        self._history: list[HistoryEntry] = []

    def restore(self, sessions: Iterable[Session], history: Iterable[HistoryEntry]) -> None:
        """Replace sessions and history with previously saved ones."""
        self._active = {s.vehicle_id: s for s in sessions}
        self._history = list(history)
        logger.info(
            f"Restored {len(self._active)} active session(s), {len(self._history)} in history"
        )

    def park(self, vehicle_id: str, slot_id: int) -> Session:
        """
        Start a session for a vehicle in a free slot.

        Args:
            vehicle_id: Vehicle number, any case and surrounding whitespace
            slot_id: Slot to park in

        Returns:
            The new session

        Raises:
            InvalidVehicleId: If vehicle_id is blank
            VehicleAlreadyParked: If the vehicle has an active session
            SlotUnavailable: If the slot does not exist or is occupied
        """
        key = normalize_vehicle_id(vehicle_id)
        if not key:
            raise InvalidVehicleId("Vehicle number must not be empty")

        existing = self._active.get(key)
        if existing is not None:
            raise VehicleAlreadyParked(key, existing.slot_id)

        if self.registry.find_free(slot_id) is None:
            raise SlotUnavailable(slot_id)

        session = Session(
            vehicle_id=key,
            slot_id=slot_id,
            entry_time=self.clock(),
            session_id=uuid.uuid4().hex,
        )
        self.registry.occupy(slot_id, key)
        self._active[key] = session

        record_session_started()
        logger.info(f"Vehicle {key} parked in slot {slot_id}")
        return session

    def unpark(self, vehicle_id: str, hourly_rate: Decimal) -> HistoryEntry:
        """
        End a vehicle's session, bill it and archive it.

        Args:
            vehicle_id: Vehicle number, matched case-insensitively
            hourly_rate: Rate in force at exit

        Returns:
            The history entry written for the session

        Raises:
            VehicleNotFound: If the vehicle has no active session
            InvalidTimeRange: If the clock reads earlier than the entry time
            LedgerConsistencyError: If the session's slot no longer exists
        """
        key = normalize_vehicle_id(vehicle_id)
        session = self._active.get(key)
        if session is None:
            raise VehicleNotFound(key or vehicle_id)

        exit_time = self.clock()
        hours = billed_hours(session.entry_time, exit_time)
        payment = fee_for_hours(hours, hourly_rate)

        if self.registry.get(session.slot_id) is None:
            raise LedgerConsistencyError(
                f"Session {session.session_id} points at missing slot {session.slot_id}"
            )

        entry = HistoryEntry(
            vehicle_id=session.vehicle_id,
            slot_id=session.slot_id,
            entry_time=session.entry_time,
            exit_time=exit_time,
            duration=format_duration(exit_time - session.entry_time),
            payment=payment,
        )

        self.registry.free(session.slot_id)
        del self._active[key]
        self._history.append(entry)

        record_session_completed(payment, hours)
        logger.info(
            f"Vehicle {key} left slot {session.slot_id} after {entry.duration}, "
            f"charged {payment}"
        )
        return entry

    def find_session(self, vehicle_id: str) -> Optional[Session]:
        """Get the active session for a vehicle, if any."""
        return self._active.get(normalize_vehicle_id(vehicle_id))

    def clear(self) -> None:
        """Drop all active sessions and history."""
        self._active.clear()
        self._history.clear()

    @property
    def active_sessions(self) -> list[Session]:
        """Active sessions in the order they were started."""
        return list(self._active.values())

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)
