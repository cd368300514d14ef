"""Pytest configuration and fixtures for parking manager tests."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from parking_manager.service import ParkingService
from parking_manager.state.ledger import SessionLedger
from parking_manager.state.models import LotSettings, LotState
from parking_manager.state.slot_registry import SlotRegistry
from parking_manager.storage.snapshot_store import SnapshotStore


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def registry():
    """Three free slots."""
    return SlotRegistry(3)


@pytest.fixture
def ledger(registry, clock):
    return SessionLedger(registry, clock=clock)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / "state.json")


@pytest.fixture
def service(store, clock):
    """Service over a fresh three-slot lot billed at 10.00 per hour."""
    settings = LotSettings(slot_count=3, hourly_rate=Decimal("10.00"))
    return ParkingService(LotState(settings=settings), store=store, clock=clock)
