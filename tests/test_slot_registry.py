"""Tests for the slot registry."""
import pytest

from parking_manager.errors import InvalidConfig, LedgerConsistencyError
from parking_manager.state.models import Slot
from parking_manager.state.slot_registry import SlotRegistry


class TestInitialize:

    @pytest.mark.parametrize("count", [1, 3, 10, 100])
    def test_creates_free_slots_numbered_from_one(self, count):
        registry = SlotRegistry(count)

        assert [s.id for s in registry.slots] == list(range(1, count + 1))
        assert all(not s.occupied and s.vehicle_id is None for s in registry.slots)
        assert registry.total == count
        assert registry.available_count == count

    @pytest.mark.parametrize("count", [0, -1])
    def test_rejects_non_positive_count(self, count):
        with pytest.raises(InvalidConfig):
            SlotRegistry(count)

    def test_reinitialize_discards_occupancy(self, registry):
        registry.occupy(2, "AB12")

        registry.initialize(5)

        assert registry.total == 5
        assert registry.occupied_count == 0

    def test_failed_reinitialize_keeps_slots(self, registry):
        registry.occupy(1, "AB12")

        with pytest.raises(InvalidConfig):
            registry.initialize(0)

        assert registry.total == 3
        assert registry.get(1).vehicle_id == "AB12"


class TestOccupancy:

    def test_occupy_and_free(self, registry):
        registry.occupy(2, "AB12")
        assert registry.get(2) == Slot(id=2, occupied=True, vehicle_id="AB12")
        assert registry.occupied_count == 1

        registry.free(2)
        assert registry.get(2) == Slot(id=2)
        assert registry.occupied_count == 0

    def test_find_free(self, registry):
        registry.occupy(1, "AB12")

        assert registry.find_free(1) is None
        assert registry.find_free(2).id == 2
        assert registry.find_free(0) is None
        assert registry.find_free(4) is None

    def test_unknown_slot_is_a_consistency_fault(self, registry):
        with pytest.raises(LedgerConsistencyError):
            registry.occupy(9, "AB12")
        with pytest.raises(LedgerConsistencyError):
            registry.free(9)

    def test_lists_are_ordered_by_id(self, registry):
        registry.occupy(3, "CC33")
        registry.occupy(1, "AA11")

        assert [s.id for s in registry.list_occupied()] == [1, 3]
        assert [s.id for s in registry.list_free()] == [2]

    def test_free_all(self, registry):
        registry.occupy(1, "AA11")
        registry.occupy(3, "CC33")

        registry.free_all()

        assert registry.total == 3
        assert registry.available_count == 3

    def test_queries_return_copies(self, registry):
        slot = registry.get(1)
        slot.occupied = True
        slot.vehicle_id = "HACK"

        assert registry.get(1).occupied is False


def test_from_slots_restores_occupancy():
    registry = SlotRegistry.from_slots(
        [Slot(id=1), Slot(id=2, occupied=True, vehicle_id="AB12")]
    )

    assert registry.total == 2
    assert [s.id for s in registry.list_occupied()] == [2]
