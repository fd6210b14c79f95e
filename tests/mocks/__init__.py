"""Mock implementations for testing."""

from tests.mocks.channels import MockChannel
from tests.mocks.quote import (
    LOSING_RATES,
    PROFITABLE_RATES,
    SOL,
    TRADE_AMOUNT,
    USDC,
    USDT,
    MockQuoter,
    MockSigner,
    MockSwapSource,
    make_route,
)


__all__ = [
    "LOSING_RATES",
    "PROFITABLE_RATES",
    "SOL",
    "TRADE_AMOUNT",
    "USDC",
    "USDT",
    "MockChannel",
    "MockQuoter",
    "MockSigner",
    "MockSwapSource",
    "make_route",
]
