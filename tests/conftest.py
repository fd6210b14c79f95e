"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from unittest.mock import MagicMock

import base58
import pytest
from pydantic import SecretStr
from solders.keypair import Keypair

from gatewayarb.config.settings import Settings
from gatewayarb.core.types import CandidateChain, Chain, Opportunity
from gatewayarb.strategy.routes import candidate
from gatewayarb.utils.time import get_timestamp_ms
from tests.mocks import (
    LOSING_RATES,
    PROFITABLE_RATES,
    SOL,
    TRADE_AMOUNT,
    USDC,
    USDT,
    MockQuoter,
    make_route,
)


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def sol() -> str:
    """SOL mint."""
    return SOL


@pytest.fixture
def usdc() -> str:
    """USDC mint."""
    return USDC


@pytest.fixture
def usdt() -> str:
    """USDT mint."""
    return USDT


@pytest.fixture
def sol_usdc_usdt() -> CandidateChain:
    """SOL -> USDC -> USDT -> SOL catalog entry."""
    return candidate("SOL", "USDC", "USDT")


# =============================================================================
# Quote Fixtures
# =============================================================================


@pytest.fixture
def profitable_quoter() -> MockQuoter:
    """Quoter for which SOL -> USDC -> USDT -> SOL yields +0.5%."""
    return MockQuoter(PROFITABLE_RATES)


@pytest.fixture
def losing_quoter() -> MockQuoter:
    """Quoter for which SOL -> USDC -> USDT -> SOL yields -1%."""
    return MockQuoter(LOSING_RATES)


@pytest.fixture
def profitable_chain() -> Chain:
    """Closed SOL -> USDC -> USDT -> SOL chain at +0.5%."""
    return Chain(
        (
            make_route(SOL, USDC, TRADE_AMOUNT, 2_000_000_000),
            make_route(USDC, USDT, 2_000_000_000, 2_000_000_000),
            make_route(USDT, SOL, 2_000_000_000, 100_500_000),
        )
    )


@pytest.fixture
def sample_opportunity(profitable_chain: Chain) -> Opportunity:
    """Opportunity built from the profitable chain."""
    return Opportunity(
        name="SOL→USDC→USDT→SOL",
        chain=profitable_chain,
        input_amount=profitable_chain.input_amount,
        final_output=profitable_chain.final_output,
        profit_pct=0.5,
        slippage_bps=50,
        timestamp_ms=get_timestamp_ms(),
    )


# =============================================================================
# Wallet Fixtures
# =============================================================================


@pytest.fixture
def keypair() -> Keypair:
    """Fresh random wallet keypair."""
    return Keypair()


@pytest.fixture
def private_key(keypair: Keypair) -> str:
    """Base58 secret of the test keypair."""
    return base58.b58encode(bytes(keypair)).decode()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings(private_key: str) -> Settings:
    """Settings with a valid key and no pauses."""
    return Settings(
        private_key=SecretStr(private_key),
        scan_interval_seconds=0.0,
        candidate_delay_seconds=0.0,
        delivery_timeout_seconds=1.0,
    )


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_reporter() -> MagicMock:
    """Reporter that swallows output."""
    return MagicMock()
