"""
Timing helpers based on the monotonic clock.

Example:
    start_t = start()
    ...
    lg.debug("done", extra={"after": since(start_t)})
"""

import time


def start() -> float:
    """Get the current monotonic time for timing measurements."""
    return time.monotonic()


def since(start_t: float) -> float:
    """Return seconds elapsed since start_t."""
    return time.monotonic() - start_t


def delta_str(secs: float, precise: bool = False) -> str:
    """
    Render a duration in a compact human-readable form.

    Args:
        secs: Duration in seconds
        precise: Show microseconds for sub-millisecond durations

    Returns:
        str: e.g. "350ms", "2.500s", "1m05s", "1h02m"

    Example:
        >>> delta_str(0.35)
        '350ms'
        >>> delta_str(65)
        '1m05s'
    """
    if secs < 0:
        return "-" + delta_str(-secs, precise)
    if secs < 0.001 and precise:
        return f"{secs * 1_000_000:.0f}μs"
    if secs < 1:
        return f"{secs * 1000:.0f}ms"
    if secs < 60:
        return f"{secs:.3f}s"
    minutes, rem = divmod(int(secs), 60)
    if minutes < 60:
        return f"{minutes}m{rem:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m"


def ms_to_secs(ms: float) -> float:
    """Convert milliseconds to seconds."""
    return ms / 1000.0
