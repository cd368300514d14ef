"""Exception types raised by the parking core."""

from typing import Optional


class ParkingError(Exception):
    """Base class for all parking errors."""


class ParkingRejection(ParkingError):
    """A request the caller can recover from. State is left unchanged."""

    code = "rejected"


class InvalidConfig(ParkingRejection):
    """Slot count or hourly rate outside the accepted range."""

    code = "invalid_config"


class InvalidVehicleId(ParkingRejection):
    """Vehicle identifier is empty after normalization."""

    code = "invalid_vehicle_id"


class VehicleAlreadyParked(ParkingRejection):
    """The vehicle already has an active session."""

    code = "vehicle_already_parked"

    def __init__(self, vehicle_id: str, slot_id: int):
        self.vehicle_id = vehicle_id
        self.slot_id = slot_id
        super().__init__(f"Vehicle {vehicle_id} is already parked in slot {slot_id}")


class SlotUnavailable(ParkingRejection):
    """The slot does not exist or is occupied."""

    code = "slot_unavailable"

    def __init__(self, slot_id: int):
        self.slot_id = slot_id
        super().__init__(f"Slot {slot_id} is not available")


class VehicleNotFound(ParkingRejection):
    """No active session for the vehicle."""

    code = "vehicle_not_found"

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle {vehicle_id} is not found in active sessions")


class InvalidTimeRange(ParkingRejection):
    """Exit time precedes entry time (clock fault)."""

    code = "invalid_time_range"


class StorageError(ParkingError):
    """Snapshot could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class LedgerConsistencyError(ParkingError):
    """Slots and sessions disagree. Indicates a bug, not a user error."""
