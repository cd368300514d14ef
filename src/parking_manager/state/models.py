"""Data models for slots, sessions and history."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

DEFAULT_SLOT_COUNT = 10
DEFAULT_HOURLY_RATE = Decimal("5.00")
MAX_SLOT_COUNT = 100
MAX_HOURLY_RATE = Decimal("1000000.00")


def normalize_vehicle_id(vehicle_id: str) -> str:
    """Canonical form of a vehicle identifier: trimmed and uppercased."""
    return vehicle_id.strip().upper()


class Slot(BaseModel):
    """A numbered parking space."""

    id: int = Field(ge=1)
    occupied: bool = False
    vehicle_id: Optional[str] = None

    @model_validator(mode="after")
    def check_occupancy(self) -> "Slot":
        if self.occupied != (self.vehicle_id is not None):
            raise ValueError(
                f"Slot {self.id}: occupied={self.occupied} but vehicle_id={self.vehicle_id!r}"
            )
        return self


class Session(BaseModel):
    """An in-progress stay of one vehicle in one slot."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: str
    slot_id: int
    entry_time: AwareDatetime
    session_id: str


class HistoryEntry(BaseModel):
    """Archived record of a completed stay. Never modified once written."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: str
    slot_id: int
    entry_time: AwareDatetime
    exit_time: AwareDatetime
    duration: str
    payment: Decimal


class LotSettings(BaseModel):
    """Operator-adjustable lot settings."""

    slot_count: int = Field(default=DEFAULT_SLOT_COUNT, ge=1, le=MAX_SLOT_COUNT)
    hourly_rate: Decimal = Field(default=DEFAULT_HOURLY_RATE, ge=0, le=MAX_HOURLY_RATE)


class LotState(BaseModel):
    """
    Full domain state, as persisted in a snapshot.

    Cross-checks slots against active sessions so that a corrupted or
    hand-edited snapshot is rejected instead of loaded half-valid.
    """

    settings: LotSettings = Field(default_factory=LotSettings)
    slots: list[Slot] = Field(default_factory=list)
    active_sessions: list[Session] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_consistency(self) -> "LotState":
        ids = [s.id for s in self.slots]
        if ids != list(range(1, len(ids) + 1)):
            raise ValueError(f"Slot ids must run 1..{len(ids)} in order")
        if ids and len(ids) != self.settings.slot_count:
            raise ValueError(
                f"{len(ids)} slots saved but slot_count is {self.settings.slot_count}"
            )

        for slot in self.slots:
            vehicle = slot.vehicle_id
            if vehicle is not None and vehicle != normalize_vehicle_id(vehicle):
                raise ValueError(f"Slot {slot.id} holds unnormalized vehicle id {vehicle!r}")

        slots = {s.id: s for s in self.slots}
        vehicles: set[str] = set()
        session_slots: set[int] = set()

        for session in self.active_sessions:
            if session.vehicle_id != normalize_vehicle_id(session.vehicle_id):
                raise ValueError(f"Session holds unnormalized vehicle id {session.vehicle_id!r}")
            if session.vehicle_id in vehicles:
                raise ValueError(f"Vehicle {session.vehicle_id} has more than one session")
            if session.slot_id in session_slots:
                raise ValueError(f"Slot {session.slot_id} has more than one session")
            slot = slots.get(session.slot_id)
            if slot is None or slot.vehicle_id != session.vehicle_id:
                raise ValueError(
                    f"Session for {session.vehicle_id} does not match slot {session.slot_id}"
                )
            vehicles.add(session.vehicle_id)
            session_slots.add(session.slot_id)

        orphaned = [s.id for s in self.slots if s.occupied and s.id not in session_slots]
        if orphaned:
            raise ValueError(f"Occupied slots without a session: {orphaned}")

        return self


class ActiveSessionView(BaseModel):
    """An active session with its live elapsed time, for display only."""

    vehicle_id: str
    slot_id: int
    entry_time: datetime
    session_id: str
    duration: str
