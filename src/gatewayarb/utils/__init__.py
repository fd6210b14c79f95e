"""Utility functions for the arbitrage engine."""

from gatewayarb.utils.math import (
    floor_amount,
    format_profit,
    lamports_to_sol,
    safe_divide,
)
from gatewayarb.utils.time import (
    LatencyTimer,
    format_duration_ms,
    get_timestamp_ms,
    monotonic_ms,
)


__all__ = [
    "LatencyTimer",
    "floor_amount",
    "format_duration_ms",
    "format_profit",
    "get_timestamp_ms",
    "lamports_to_sol",
    "monotonic_ms",
    "safe_divide",
]
