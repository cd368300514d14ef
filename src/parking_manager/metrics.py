"""Prometheus metrics for parking lot activity."""

from decimal import Decimal

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

# Fees charged per completed session
SESSION_FEES = Histogram(
    "parking_session_fee",
    "Fee charged for a completed parking session",
    buckets=(5, 10, 20, 50, 100, 200, 500, 1000),
    registry=REGISTRY,
)

# Billed hours per completed session
SESSION_BILLED_HOURS = Histogram(
    "parking_session_billed_hours",
    "Hours billed for a completed parking session",
    buckets=(1, 2, 3, 4, 6, 8, 12, 24, 48, 168),
    registry=REGISTRY,
)

SESSIONS_STARTED = Counter(
    "parking_sessions_started_total",
    "Total number of vehicles parked",
    registry=REGISTRY,
)

SESSIONS_COMPLETED = Counter(
    "parking_sessions_completed_total",
    "Total number of vehicles that exited",
    registry=REGISTRY,
)

REVENUE = Counter(
    "parking_revenue_total",
    "Total fees charged since process start",
    registry=REGISTRY,
)

# Rejected operations by error code
REJECTIONS = Counter(
    "parking_rejections_total",
    "Total number of rejected operations",
    ["operation", "reason"],
    registry=REGISTRY,
)

SNAPSHOT_SAVE_FAILURES = Counter(
    "parking_snapshot_save_failures_total",
    "Number of times the state snapshot could not be written",
    registry=REGISTRY,
)

# Total slots gauges
TOTAL_SLOTS = Gauge(
    "parking_slots_total",
    "Total number of parking slots",
    registry=REGISTRY,
)

AVAILABLE_SLOTS = Gauge(
    "parking_slots_available",
    "Number of available parking slots",
    registry=REGISTRY,
)

OCCUPIED_SLOTS = Gauge(
    "parking_slots_occupied",
    "Number of occupied parking slots",
    registry=REGISTRY,
)


def record_session_started() -> None:
    """Record a vehicle entering."""
    SESSIONS_STARTED.inc()


def record_session_completed(fee: Decimal, billed_hours: int) -> None:
    """Record a vehicle exiting with the fee charged."""
    SESSIONS_COMPLETED.inc()
    REVENUE.inc(float(fee))
    SESSION_FEES.observe(float(fee))
    SESSION_BILLED_HOURS.observe(billed_hours)


def record_rejection(operation: str, reason: str) -> None:
    """Record a rejected operation."""
    REJECTIONS.labels(operation=operation, reason=reason).inc()


def record_snapshot_save_failure() -> None:
    """Increment snapshot save failure counter."""
    SNAPSHOT_SAVE_FAILURES.inc()


def update_slot_counts(total: int, available: int, occupied: int) -> None:
    """Update overall slot count gauges."""
    TOTAL_SLOTS.set(total)
    AVAILABLE_SLOTS.set(available)
    OCCUPIED_SLOTS.set(occupied)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
