"""Human-readable elapsed time."""

from datetime import timedelta


def format_duration(elapsed: timedelta) -> str:
    """
    Format an elapsed span using its largest unit and the next finer one.

    Lossy display format, never used for billing: 1d 2h 3m, 2h 5m,
    4m 10s or 12s. Negative spans are shown as 0s.
    """
    seconds = max(0, elapsed // timedelta(seconds=1))
    minutes, secs = divmod(seconds, 60)
    hours, mins = divmod(minutes, 60)
    days, hrs = divmod(hours, 24)

    if days:
        return f"{days}d {hrs}h {mins}m"
    if hours:
        return f"{hours}h {mins}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{seconds}s"
