"""
Mathematical utilities for swap-chain calculations.

Amounts handled by the quote service are integral smallest-unit
quantities; these helpers keep conversions and ratios consistent.
"""

import math
from typing import Final

from gatewayarb.config.constants import LAMPORTS_PER_SOL


# Epsilon for floating point comparisons
EPSILON: Final[float] = 1e-10


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default on division by zero.

    Args:
        numerator: The dividend.
        denominator: The divisor.
        default: Value to return if denominator is zero.

    Returns:
        Result of division or default value.
    """
    if abs(denominator) < EPSILON:
        return default
    return numerator / denominator


def floor_amount(value: float | int | str) -> int:
    """
    Floor an amount to integral smallest units.

    Example:
        >>> floor_amount(100499999.9)
        100499999
        >>> floor_amount("42")
        42
    """
    return math.floor(float(value)) if not isinstance(value, int) else value


def lamports_to_sol(lamports: int | float) -> float:
    """
    Convert lamports to SOL.

    Example:
        >>> lamports_to_sol(10_000)
        1e-05
    """
    return lamports / LAMPORTS_PER_SOL


def format_profit(profit_pct: float) -> str:
    """
    Format profit percentage for display.

    Args:
        profit_pct: Profit as percentage.

    Returns:
        Formatted string with sign.
    """
    sign = "+" if profit_pct >= 0 else ""
    return f"{sign}{profit_pct:.4f}%"
