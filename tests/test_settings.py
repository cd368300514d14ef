"""Tests for settings validation."""
from decimal import Decimal

import pytest

from parking_manager.errors import InvalidConfig
from parking_manager.state.models import MAX_HOURLY_RATE, MAX_SLOT_COUNT
from parking_manager.state.settings import checked_hourly_rate, checked_slot_count


class TestSlotCount:

    @pytest.mark.parametrize("count", [1, 50, MAX_SLOT_COUNT])
    def test_accepts_range(self, count):
        assert checked_slot_count(count) == count

    @pytest.mark.parametrize("count", [0, -3, MAX_SLOT_COUNT + 1, 2.5, True, "10"])
    def test_rejects_outside_range(self, count):
        with pytest.raises(InvalidConfig):
            checked_slot_count(count)


class TestHourlyRate:

    @pytest.mark.parametrize(
        "rate, expected",
        [(0, "0.00"), ("5", "5.00"), (Decimal("7.5"), "7.50"), (2.345, "2.35")],
    )
    def test_normalizes_to_cents(self, rate, expected):
        assert checked_hourly_rate(rate) == Decimal(expected)

    @pytest.mark.parametrize(
        "rate",
        [-1, "-0.01", "abc", "NaN", "Infinity", "1e30", MAX_HOURLY_RATE + Decimal("0.01")],
    )
    def test_rejects_invalid(self, rate):
        with pytest.raises(InvalidConfig):
            checked_hourly_rate(rate)

    def test_accepts_upper_bound(self):
        assert checked_hourly_rate(MAX_HOURLY_RATE) == MAX_HOURLY_RATE
