"""Validation for operator-adjustable lot settings."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..errors import InvalidConfig
from .models import MAX_HOURLY_RATE, MAX_SLOT_COUNT

CENTS = Decimal("0.01")


def checked_slot_count(count: int) -> int:
    """
    Validate a slot count.

    Raises:
        InvalidConfig: Unless 1 <= count <= MAX_SLOT_COUNT
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidConfig(f"Slot count must be a whole number, got {count!r}")
    if not 1 <= count <= MAX_SLOT_COUNT:
        raise InvalidConfig(
            f"Slot count must be between 1 and {MAX_SLOT_COUNT}, got {count}"
        )
    return count


def checked_hourly_rate(rate: Union[Decimal, int, float, str]) -> Decimal:
    """
    Validate an hourly rate and round it to cents.

    Raises:
        InvalidConfig: Unless the rate is a number between 0 and MAX_HOURLY_RATE
    """
    try:
        value = Decimal(str(rate))
    except (InvalidOperation, ValueError):
        raise InvalidConfig(f"Hourly rate must be a number, got {rate!r}") from None

    if not value.is_finite() or value < 0:
        raise InvalidConfig(f"Hourly rate must be a non-negative number, got {rate!r}")
    if value > MAX_HOURLY_RATE:
        raise InvalidConfig(f"Hourly rate must not exceed {MAX_HOURLY_RATE}, got {rate!r}")

    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
