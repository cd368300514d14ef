"""Time-based parking fee calculation."""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import InvalidConfig, InvalidTimeRange

ONE_HOUR = timedelta(hours=1)
CENTS = Decimal("0.01")
MINIMUM_BILLED_HOURS = 1


def billed_hours(entry_time: datetime, exit_time: datetime) -> int:
    """
    Number of hours charged for a stay.

    Elapsed time is rounded up to the next whole hour, with a one-hour
    minimum even for stays of a few seconds.

    Raises:
        InvalidTimeRange: If exit_time is before entry_time
    """
    elapsed = exit_time - entry_time
    if elapsed < timedelta(0):
        raise InvalidTimeRange(
            f"Exit time {exit_time.isoformat()} is before entry time {entry_time.isoformat()}"
        )

    # Integer division on timedelta keeps this exact (microsecond resolution)
    whole_hours, remainder = divmod(elapsed, ONE_HOUR)
    if remainder:
        whole_hours += 1

    return max(MINIMUM_BILLED_HOURS, whole_hours)


def fee_for_hours(hours: int, hourly_rate: Decimal) -> Decimal:
    """
    Charge for a number of billed hours, rounded half-up to cents.

    Raises:
        InvalidConfig: If hourly_rate is negative or the fee can't be represented
    """
    rate = Decimal(hourly_rate)
    if rate < 0:
        raise InvalidConfig(f"Hourly rate must not be negative: {rate}")

    try:
        return (rate * hours).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidConfig(f"Fee for {hours}h at {rate} is too large") from None


def compute_fee(
    entry_time: datetime,
    exit_time: datetime,
    hourly_rate: Decimal,
) -> Decimal:
    """
    Compute the charge for a stay.

    Args:
        entry_time: When the vehicle entered
        exit_time: When the vehicle left
        hourly_rate: Charge per billed hour

    Returns:
        Fee rounded half-up to two decimal places

    Raises:
        InvalidTimeRange: If exit_time is before entry_time
        InvalidConfig: If hourly_rate is negative
    """
    return fee_for_hours(billed_hours(entry_time, exit_time), hourly_rate)
