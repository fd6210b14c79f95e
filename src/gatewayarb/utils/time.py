"""
Time utilities.

Wall-clock timestamps for records and monotonic clocks for latency
measurement.
"""

import time


def get_timestamp_ms() -> int:
    """
    Get current timestamp in milliseconds.

    Used for metric and opportunity timestamps.

    Returns:
        Current Unix timestamp in milliseconds.
    """
    return time.time_ns() // 1_000_000


def monotonic_ms() -> float:
    """
    Monotonic clock in milliseconds.

    Not affected by wall-clock adjustments; use for elapsed time only.
    """
    return time.perf_counter() * 1000.0


class LatencyTimer:
    """
    Context manager for measuring operation latency.

    Example:
        >>> with LatencyTimer() as timer:
        ...     do_something()
        >>> print(f"Latency: {timer.latency_ms:.1f}ms")
    """

    __slots__ = ("start_ms", "end_ms", "latency_ms")

    def __init__(self) -> None:
        self.start_ms: float = 0.0
        self.end_ms: float = 0.0
        self.latency_ms: float = 0.0

    def __enter__(self) -> "LatencyTimer":
        self.start_ms = monotonic_ms()
        return self

    def __exit__(self, *args: object) -> None:
        self.end_ms = monotonic_ms()
        self.latency_ms = self.end_ms - self.start_ms


def format_duration_ms(duration_ms: float) -> str:
    """
    Format a duration in milliseconds for human-readable display.

    Examples:
        >>> format_duration_ms(850)
        '850ms'
        >>> format_duration_ms(1500)
        '1.50s'
    """
    if duration_ms < 1000:
        return f"{duration_ms:.0f}ms"
    return f"{duration_ms / 1000:.2f}s"
