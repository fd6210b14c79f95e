"""
Integration tests for opportunity execution.

Tests the quote -> swap -> sign -> deliver -> record flow with mocks at
the service boundaries.
"""

from dataclasses import replace

import pytest

from gatewayarb.config.constants import FAILED_SIGNATURE
from gatewayarb.core.errors import GatewayClientError
from gatewayarb.core.types import (
    ChannelLanding,
    DeliveryChannel,
    ExecutionStatus,
    Opportunity,
    TransactionMetric,
)
from gatewayarb.delivery.coordinator import DeliveryCoordinator
from gatewayarb.execution.executor import Executor
from gatewayarb.telemetry.metrics import InMemoryMetricsSink
from tests.mocks import PROFITABLE_RATES, SOL, USDC, MockChannel, MockQuoter, MockSigner, MockSwapSource


class FullDiskMetricsSink(InMemoryMetricsSink):
    """Sink whose storage write always fails."""

    def _on_record(self, metric: TransactionMetric) -> None:
        raise OSError("No space left on device")


class TestExecutor:
    """Integration tests for Executor."""

    @pytest.fixture
    def metrics(self) -> InMemoryMetricsSink:
        """Create metrics sink."""
        return InMemoryMetricsSink()

    @pytest.fixture
    def jito(self) -> MockChannel:
        """Fast relay channel with a refunded tip."""
        return MockChannel(
            DeliveryChannel.JITO,
            delay=0.01,
            landing=ChannelLanding("5jitoSig", cost=15000, refunded=True),
        )

    @pytest.fixture
    def standard(self) -> MockChannel:
        """Slow direct RPC channel."""
        return MockChannel(DeliveryChannel.STANDARD, delay=2.0, landing=ChannelLanding("4rpcSig", cost=5000))

    @pytest.fixture
    def quoter(self) -> MockQuoter:
        """Quoter used for first-leg refreshes."""
        return MockQuoter(PROFITABLE_RATES)

    @pytest.fixture
    def swap_source(self) -> MockSwapSource:
        """Swap source returning a fixed transaction."""
        return MockSwapSource("dW5zaWduZWQ=")

    @pytest.fixture
    def signer(self) -> MockSigner:
        """Signer that tags transactions."""
        return MockSigner()

    def _executor(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        channels: list[MockChannel],
        metrics: InMemoryMetricsSink,
    ) -> Executor:
        return Executor(
            quoter=quoter,
            swap_source=swap_source,
            signer=signer,
            coordinator=DeliveryCoordinator(channels, timeout=5.0),
            metrics=metrics,
            tip=10_000,
        )

    @pytest.mark.asyncio
    async def test_successful_execution(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        jito: MockChannel,
        standard: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test the full flow landing through the relay."""
        executor = self._executor(quoter, swap_source, signer, [jito, standard], metrics)

        result = await executor.execute(sample_opportunity)

        assert result.is_success
        assert result.delivery is not None
        assert result.delivery.channel == DeliveryChannel.JITO

        metric = result.metric
        assert metric.signature == "5jitoSig"
        assert metric.success is True
        assert metric.used_gateway is True
        assert metric.cost == 15000
        assert metric.refunded is True
        assert metric.channel == DeliveryChannel.JITO
        assert metrics.metrics == [metric]

        # Scanned route reused; slippage already matched
        assert quoter.calls == []
        assert swap_source.requests == [(dict(sample_opportunity.first_leg.raw), signer.public_key)]
        assert jito.submissions == [("signed:dW5zaWduZWQ=", 10_000)]
        assert standard.cancelled

    @pytest.mark.asyncio
    async def test_standard_rpc_win(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a direct RPC landing is recorded as non-gateway."""
        standard = MockChannel(DeliveryChannel.STANDARD, delay=0.0, landing=ChannelLanding("4rpcSig", cost=5000))
        executor = self._executor(quoter, swap_source, signer, [standard], metrics)

        result = await executor.execute(sample_opportunity)

        assert result.is_success
        assert result.metric.used_gateway is False
        assert result.metric.cost == 5000

    @pytest.mark.asyncio
    async def test_no_swap_transaction(
        self,
        quoter: MockQuoter,
        signer: MockSigner,
        jito: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a missing swap transaction records exactly one failed metric."""
        executor = self._executor(quoter, MockSwapSource(None), signer, [jito], metrics)

        result = await executor.execute(sample_opportunity)

        assert result.status == ExecutionStatus.FAILED
        assert result.error_kind == "NoSwapTransactionError"
        assert len(metrics) == 1
        metric = metrics.metrics[0]
        assert metric.signature == FAILED_SIGNATURE
        assert metric.success is False
        assert metric.cost == 0
        assert metric.used_gateway is True
        assert signer.signed == []
        assert jito.submissions == []

    @pytest.mark.asyncio
    async def test_delivery_failure(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that losing every channel is returned, not raised."""
        broken = MockChannel(DeliveryChannel.RPC, error=GatewayClientError("Blockhash not found", code=-32002))
        executor = self._executor(quoter, swap_source, signer, [broken], metrics)

        result = await executor.execute(sample_opportunity)

        assert not result.is_success
        assert result.error_kind == "DeliveryError"
        assert "Blockhash not found" in result.error_message
        assert metrics.metrics[0].success is False

    @pytest.mark.asyncio
    async def test_standard_only_failure_not_gateway(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        jito: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a failed direct-only attempt is attributed to standard RPC."""
        standard = MockChannel(DeliveryChannel.STANDARD, error=RuntimeError("node unreachable"))
        executor = self._executor(quoter, swap_source, signer, [jito, standard], metrics)

        result = await executor.execute(sample_opportunity, channels=[DeliveryChannel.STANDARD])

        assert not result.is_success
        assert result.metric.used_gateway is False
        assert jito.submissions == []

    @pytest.mark.asyncio
    async def test_first_leg_requoted_at_adaptive_slippage(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        jito: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a higher tolerance is applied through a fresh quote."""
        opportunity = replace(sample_opportunity, slippage_bps=75)
        executor = self._executor(quoter, swap_source, signer, [jito], metrics)

        result = await executor.execute(opportunity)

        assert result.is_success
        assert quoter.calls == [(SOL, USDC, 100_000_000, 75)]
        quote, _ = swap_source.requests[0]
        assert quote["slippageBps"] == 75

    @pytest.mark.asyncio
    async def test_requote_failure_uses_scanned_route(
        self,
        swap_source: MockSwapSource,
        signer: MockSigner,
        jito: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test fallback to the scanned first leg when the refresh fails."""
        opportunity = replace(sample_opportunity, slippage_bps=100)
        executor = self._executor(MockQuoter({}), swap_source, signer, [jito], metrics)

        result = await executor.execute(opportunity)

        assert result.is_success
        quote, _ = swap_source.requests[0]
        assert quote["slippageBps"] == 50

    @pytest.mark.asyncio
    async def test_stats(
        self,
        quoter: MockQuoter,
        signer: MockSigner,
        jito: MockChannel,
        metrics: InMemoryMetricsSink,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test execution counters."""
        ok = self._executor(quoter, MockSwapSource(), signer, [jito], metrics)
        await ok.execute(sample_opportunity)
        await ok.execute(sample_opportunity)
        failing = self._executor(quoter, MockSwapSource(None), signer, [jito], metrics)
        await failing.execute(sample_opportunity)

        assert ok.stats["successful"] == 2
        assert ok.stats["success_rate"] == 100.0
        assert failing.stats["failed"] == 1
        assert len(metrics) == 3

    @pytest.mark.asyncio
    async def test_sink_failure_keeps_landed_result(
        self,
        quoter: MockQuoter,
        swap_source: MockSwapSource,
        signer: MockSigner,
        jito: MockChannel,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a broken metrics store does not hide a landed transaction."""
        executor = self._executor(quoter, swap_source, signer, [jito], FullDiskMetricsSink())

        result = await executor.execute(sample_opportunity)

        assert result.is_success
        assert result.delivery is not None
        assert result.delivery.signature == "5jitoSig"
        assert executor.stats["successful"] == 1
        assert executor.stats["metric_errors"] == 1

    @pytest.mark.asyncio
    async def test_sink_failure_on_failed_attempt(
        self,
        quoter: MockQuoter,
        signer: MockSigner,
        jito: MockChannel,
        sample_opportunity: Opportunity,
    ) -> None:
        """Test that a failed attempt is still returned when its metric cannot be stored."""
        executor = self._executor(quoter, MockSwapSource(None), signer, [jito], FullDiskMetricsSink())

        result = await executor.execute(sample_opportunity)

        assert result.status == ExecutionStatus.FAILED
        assert result.error_kind == "NoSwapTransactionError"
        assert result.metric.signature == FAILED_SIGNATURE
        assert executor.stats["metric_errors"] == 1
