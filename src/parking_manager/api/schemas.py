"""API request and response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class SlotResponse(BaseModel):
    """Response schema for a single parking slot."""

    id: int
    occupied: bool
    vehicle_id: Optional[str] = None


class StatusResponse(BaseModel):
    """Response schema for overall lot status."""

    total_slots: int
    available: int
    occupied: int
    occupancy_rate: Decimal
    total_revenue: Decimal
    hourly_rate: Decimal
    active_sessions: int
    completed_sessions: int
    slots: list[SlotResponse]
    durable: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    durable: bool
    uptime_seconds: float


class ParkRequest(BaseModel):
    """Vehicle entry request."""

    vehicle_id: str
    slot_id: int


class SessionResponse(BaseModel):
    """An active parking session."""

    vehicle_id: str
    slot_id: int
    entry_time: datetime
    session_id: str
    duration: Optional[str] = None


class SessionCreatedResponse(SessionResponse):
    durable: bool


class HistoryEntryResponse(BaseModel):
    """A completed parking session."""

    vehicle_id: str
    slot_id: int
    entry_time: datetime
    exit_time: datetime
    duration: str
    payment: Decimal


class ExitResponse(HistoryEntryResponse):
    durable: bool


class SlotCountUpdate(BaseModel):
    slot_count: int


class HourlyRateUpdate(BaseModel):
    # Range checks happen in the service so every caller gets the same error
    hourly_rate: Decimal


class SettingsResponse(BaseModel):
    """Current lot settings."""

    slot_count: int
    hourly_rate: Decimal
    max_slot_count: int
    durable: bool


class ResetResponse(BaseModel):
    success: bool
    message: str
    durable: bool


class ErrorResponse(BaseModel):
    """Body returned for rejected requests."""

    error: str
    detail: str
