"""Parking service: owns the lot state and persists it after every change."""

import logging
import threading
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from .billing.duration import format_duration
from .errors import ParkingRejection, StorageError
from .metrics import record_rejection, record_snapshot_save_failure
from .state.ledger import Clock, SessionLedger, utc_now
from .state.models import ActiveSessionView, HistoryEntry, LotSettings, LotState, Session, Slot
from .state.settings import checked_hourly_rate, checked_slot_count
from .state.slot_registry import SlotRegistry
from .state.statistics import LotStatistics, compute_statistics
from .storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ParkingService:
    """
    Single owner of the slot registry, session ledger and settings.

    Each mutating call runs one operation to completion, then saves a full
    snapshot. A failed save does not undo the operation: the in-memory
    state stays authoritative, the failure is kept in last_save_error and
    durable reports False until a later save succeeds.
    """

    def __init__(
        self,
        state: LotState,
        store: Optional[SnapshotStore] = None,
        clock: Clock = utc_now,
    ):
        """
        Build the service from a state.

        Args:
            state: Initial state; empty slots are created from its settings
            store: Where snapshots are written, or None to keep state in memory
            clock: Returns the current time, injectable for tests
        """
        self.store = store
        self.clock = clock
        self.settings = state.settings.model_copy()
        self.last_save_error: Optional[StorageError] = None
        self._lock = threading.Lock()

        if state.slots:
            self.registry = SlotRegistry.from_slots(state.slots)
        else:
            self.registry = SlotRegistry(self.settings.slot_count)

        self.ledger = SessionLedger(self.registry, clock=clock)
        self.ledger.restore(state.active_sessions, state.history)

    @classmethod
    def open(
        cls,
        store: SnapshotStore,
        defaults: Optional[LotSettings] = None,
        clock: Clock = utc_now,
    ) -> "ParkingService":
        """
        Load the saved state, or start from defaults when there is none.

        Raises:
            StorageError: If a snapshot exists but can't be loaded
        """
        state = store.load()
        if state is not None:
            return cls(state, store=store, clock=clock)

        service = cls(LotState(settings=defaults or LotSettings()), store=store, clock=clock)
        service._persist()
        return service

    @property
    def durable(self) -> bool:
        """Whether the last snapshot write succeeded."""
        return self.last_save_error is None

    # Mutations

    def park(self, vehicle_id: str, slot_id: int) -> Session:
        """Park a vehicle in a free slot. See SessionLedger.park."""
        with self._lock:
            try:
                session = self.ledger.park(vehicle_id, slot_id)
            except ParkingRejection as e:
                self._rejected("park", e)
                raise
            self._persist()
            return session

    def unpark(self, vehicle_id: str) -> HistoryEntry:
        """Bill and archive a vehicle's session. See SessionLedger.unpark."""
        with self._lock:
            try:
                entry = self.ledger.unpark(vehicle_id, self.settings.hourly_rate)
            except ParkingRejection as e:
                self._rejected("unpark", e)
                raise
            self._persist()
            return entry

    def update_slot_count(self, count: int) -> LotSettings:
        """
        Resize the lot.

        Destructive: every slot is recreated free, and all active sessions
        and history are discarded. Callers must confirm with the operator.

        Raises:
            InvalidConfig: If count is out of range
        """
        with self._lock:
            try:
                count = checked_slot_count(count)
            except ParkingRejection as e:
                self._rejected("update_slot_count", e)
                raise

            self.registry.initialize(count)
            self.ledger.clear()
            self.settings = self.settings.model_copy(update={"slot_count": count})
            logger.info(f"Lot reset to {count} slots; sessions and history cleared")

            self._persist()
            return self.settings

    def update_hourly_rate(self, rate: Union[Decimal, int, float, str]) -> LotSettings:
        """
        Change the hourly rate. Applies to every exit from now on.

        Raises:
            InvalidConfig: If the rate is negative or not a number
        """
        with self._lock:
            try:
                value = checked_hourly_rate(rate)
            except ParkingRejection as e:
                self._rejected("update_hourly_rate", e)
                raise

            self.settings = self.settings.model_copy(update={"hourly_rate": value})
            logger.info(f"Hourly rate set to {value}")

            self._persist()
            return self.settings

    def clear_all(self) -> None:
        """Free every slot and discard sessions and history. Settings are kept."""
        with self._lock:
            self.registry.free_all()
            self.ledger.clear()
            logger.info("All sessions and history cleared")
            self._persist()

    # Queries

    def snapshot(self) -> LotState:
        """Full current state, as it would be saved."""
        return LotState(
            settings=self.settings.model_copy(),
            slots=self.registry.slots,
            active_sessions=self.ledger.active_sessions,
            history=list(self.ledger.history),
        )

    def statistics(self) -> LotStatistics:
        return compute_statistics(self.registry, self.ledger)

    def slots(self) -> list[Slot]:
        return self.registry.slots

    def get_slot(self, slot_id: int) -> Optional[Slot]:
        return self.registry.get(slot_id)

    def history(self) -> list[HistoryEntry]:
        return list(self.ledger.history)

    def active_session_views(self, now: Optional[datetime] = None) -> list[ActiveSessionView]:
        """
        Active sessions with their elapsed time as of now.

        Read-only; clients poll this to refresh live durations.
        """
        now = now or self.clock()
        return [
            ActiveSessionView(
                vehicle_id=s.vehicle_id,
                slot_id=s.slot_id,
                entry_time=s.entry_time,
                session_id=s.session_id,
                duration=format_duration(now - s.entry_time),
            )
            for s in self.ledger.active_sessions
        ]

    def _rejected(self, operation: str, error: ParkingRejection) -> None:
        record_rejection(operation, error.code)
        logger.warning(f"{operation} rejected: {error}")

    def _persist(self) -> None:
        if self.store is None:
            return

        try:
            self.store.save(self.snapshot())
        except StorageError as e:
            record_snapshot_save_failure()
            logger.error(f"State changed but could not be saved: {e}")
            self.last_save_error = e
        else:
            self.last_save_error = None
