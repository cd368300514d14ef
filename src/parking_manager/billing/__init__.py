"""Fee and duration computation."""

from .duration import format_duration
from .fees import billed_hours, compute_fee, fee_for_hours

__all__ = ["billed_hours", "compute_fee", "fee_for_hours", "format_duration"]
