"""Fixed-size collection of numbered parking slots."""

import logging
from typing import Iterable, Optional

from ..errors import InvalidConfig, LedgerConsistencyError
from ..metrics import update_slot_counts
from .models import Slot

logger = logging.getLogger(__name__)


class SlotRegistry:
    """
    Owns every slot and its occupancy.

    Slots are numbered 1..N and always looked up by id. Queries hand out
    copies so that occupancy only changes through occupy() and free().
    """

    def __init__(self, count: int):
        """
        Create a registry of free slots.

        Args:
            count: Number of slots

        Raises:
            InvalidConfig: If count is not positive
        """
        self._slots: dict[int, Slot] = {}
        self.initialize(count)

    @classmethod
    def from_slots(cls, slots: Iterable[Slot]) -> "SlotRegistry":
        """Rebuild a registry from previously saved slots."""
        registry = cls.__new__(cls)
        registry._slots = {s.id: s.model_copy() for s in slots}
        registry._publish_counts()
        return registry

    def initialize(self, count: int) -> None:
        """Replace all slots with count free slots."""
        if count <= 0:
            raise InvalidConfig(f"Slot count must be positive, got {count}")

        self._slots = {i: Slot(id=i) for i in range(1, count + 1)}
        self._publish_counts()
        logger.info(f"Initialized {count} parking slots")

    def get(self, slot_id: int) -> Optional[Slot]:
        """Get a copy of a slot, or None if the id is out of range."""
        slot = self._slots.get(slot_id)
        return slot.model_copy() if slot else None

    def find_free(self, slot_id: int) -> Optional[Slot]:
        """Get the slot if it exists and is free, otherwise None."""
        slot = self._slots.get(slot_id)
        if slot is None or slot.occupied:
            return None
        return slot.model_copy()

    def occupy(self, slot_id: int, vehicle_id: str) -> None:
        """Mark a slot as holding vehicle_id."""
        slot = self._require(slot_id)
        slot.occupied = True
        slot.vehicle_id = vehicle_id
        self._publish_counts()

    def free(self, slot_id: int) -> None:
        """Release a slot."""
        slot = self._require(slot_id)
        slot.occupied = False
        slot.vehicle_id = None
        self._publish_counts()

    def free_all(self) -> None:
        """Release every slot, keeping the slot count."""
        for slot in self._slots.values():
            slot.occupied = False
            slot.vehicle_id = None
        self._publish_counts()

    @property
    def slots(self) -> list[Slot]:
        return [self._slots[i].model_copy() for i in sorted(self._slots)]

    def list_free(self) -> list[Slot]:
        return [s for s in self.slots if not s.occupied]

    def list_occupied(self) -> list[Slot]:
        return [s for s in self.slots if s.occupied]

    @property
    def total(self) -> int:
        return len(self._slots)

    @property
    def occupied_count(self) -> int:
        return sum(1 for s in self._slots.values() if s.occupied)

    @property
    def available_count(self) -> int:
        return self.total - self.occupied_count

    def _require(self, slot_id: int) -> Slot:
        slot = self._slots.get(slot_id)
        if slot is None:
            raise LedgerConsistencyError(f"Slot {slot_id} does not exist")
        return slot

    def _publish_counts(self) -> None:
        update_slot_counts(
            total=self.total,
            available=self.available_count,
            occupied=self.occupied_count,
        )
