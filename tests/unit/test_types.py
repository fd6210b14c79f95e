"""
Unit tests for core value types.

Tests chain validation, scan report ordering and metric serialization.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from gatewayarb.core.types import (
    CandidateChain,
    CandidateOutcome,
    CandidateStatus,
    Chain,
    ChannelState,
    DeliveryAttempt,
    DeliveryChannel,
    Opportunity,
    ScanReport,
    Route,
    TransactionMetric,
)
from tests.mocks import SOL, USDC, USDT, make_route


def _opportunity(name: str, profit_pct: float, chain: Chain) -> Opportunity:
    return Opportunity(
        name=name,
        chain=chain,
        input_amount=chain.input_amount,
        final_output=chain.final_output,
        profit_pct=profit_pct,
        slippage_bps=50,
        timestamp_ms=0,
    )


class TestChain:
    """Tests for Chain validation."""

    def test_closed_chain(self, profitable_chain: Chain) -> None:
        """Test accessors of a valid chain."""
        assert len(profitable_chain) == 3
        assert profitable_chain.start_token == SOL
        assert profitable_chain.input_amount == 100_000_000
        assert profitable_chain.final_output == 100_500_000
        assert profitable_chain.tokens == (SOL, USDC, USDT, SOL)

    def test_empty_rejected(self) -> None:
        """Test that a chain needs at least one route."""
        with pytest.raises(ValueError, match="at least one"):
            Chain(())

    def test_discontiguous_rejected(self) -> None:
        """Test that each hop must start where the previous one ended."""
        with pytest.raises(ValueError, match="Discontiguous"):
            Chain(
                (
                    make_route(SOL, USDC, 100, 2000),
                    make_route(USDT, SOL, 2000, 101),
                )
            )

    def test_open_chain_rejected(self) -> None:
        """Test that the last output must be the first input."""
        with pytest.raises(ValueError, match="not closed"):
            Chain(
                (
                    make_route(SOL, USDC, 100, 2000),
                    make_route(USDC, USDT, 2000, 2000),
                )
            )

    @given(
        path=st.lists(
            st.sampled_from([USDC, USDT, "BonkMint", "JtoMint"]),
            min_size=1,
            max_size=4,
            unique=True,
        ),
        amounts=st.lists(st.integers(min_value=1, max_value=10**12), min_size=5, max_size=5),
    )
    def test_closed_paths_always_valid(self, path: list[str], amounts: list[int]) -> None:
        """Property: any contiguous path that returns to start validates."""
        tokens = [SOL, *path, SOL]
        routes = tuple(
            make_route(tokens[i], tokens[i + 1], amounts[i], amounts[i + 1])
            for i in range(len(tokens) - 1)
        )

        chain = Chain(routes)

        assert chain.tokens == tuple(tokens)
        assert chain.start_token == SOL
        assert chain.final_output == amounts[len(tokens) - 1]

    def test_raw_excluded_from_equality(self) -> None:
        """Test that the raw quote payload does not affect equality."""
        a = make_route(SOL, USDC, 100, 2000)
        b = Route(SOL, USDC, 100, 2000, 0.0, 50, raw={"contextSlot": 1})

        assert a == b


class TestScanReport:
    """Tests for ScanReport ordering and partitioning."""

    def test_best_profit_first(self, profitable_chain: Chain) -> None:
        """Test descending profit ordering."""
        entry = CandidateChain("x", SOL, (USDC, USDT))
        report = ScanReport(
            outcomes=[
                CandidateOutcome(entry, CandidateStatus.ACCEPTED, _opportunity("low", 0.1, profitable_chain)),
                CandidateOutcome(entry, CandidateStatus.ACCEPTED, _opportunity("high", 0.9, profitable_chain)),
                CandidateOutcome(entry, CandidateStatus.NO_ROUTE, failed_hop=0),
            ]
        )

        assert [o.name for o in report.opportunities] == ["high", "low"]
        assert len(report.rejected) == 1

    def test_ties_keep_scan_order(self, profitable_chain: Chain) -> None:
        """Test that equal profits stay in catalog order."""
        entry = CandidateChain("x", SOL, (USDC, USDT))
        report = ScanReport(
            outcomes=[
                CandidateOutcome(entry, CandidateStatus.ACCEPTED, _opportunity(name, 0.5, profitable_chain))
                for name in ("first", "second", "third")
            ]
        )

        assert [o.name for o in report.opportunities] == ["first", "second", "third"]

    def test_duration(self) -> None:
        """Test scan duration."""
        report = ScanReport(started_ms=1000, finished_ms=1750)

        assert report.duration_ms == 750


class TestOpportunity:
    """Tests for Opportunity accessors."""

    def test_first_leg_and_profit(self, sample_opportunity: Opportunity) -> None:
        """Test first leg and absolute profit."""
        assert sample_opportunity.first_leg.input_token == SOL
        assert sample_opportunity.first_leg.output_token == USDC
        assert sample_opportunity.profit_amount == 500_000


class TestDeliveryChannel:
    """Tests for DeliveryChannel flags."""

    def test_standard_is_not_gateway(self) -> None:
        """Test that only the standard channel bypasses the relay."""
        assert not DeliveryChannel.STANDARD.is_gateway
        assert all(c.is_gateway for c in DeliveryChannel if c is not DeliveryChannel.STANDARD)

    def test_tipped_channels(self) -> None:
        """Test which channels take an incentive tip."""
        tipped = {c for c in DeliveryChannel if c.is_tipped}

        assert tipped == {DeliveryChannel.JITO, DeliveryChannel.NOZOMI}


class TestDeliveryAttempt:
    """Tests for DeliveryAttempt bookkeeping."""

    def test_all_pending_initially(self) -> None:
        """Test that every channel starts pending."""
        attempt = DeliveryAttempt("tx", (DeliveryChannel.RPC, DeliveryChannel.JITO))

        assert attempt.states == {
            DeliveryChannel.RPC: ChannelState.PENDING,
            DeliveryChannel.JITO: ChannelState.PENDING,
        }
        assert attempt.winner is None

    def test_mark_records_error(self) -> None:
        """Test state transitions and error capture."""
        attempt = DeliveryAttempt("tx", (DeliveryChannel.RPC, DeliveryChannel.JITO))

        attempt.mark(DeliveryChannel.RPC, ChannelState.FAILED, "boom")
        attempt.mark(DeliveryChannel.JITO, ChannelState.LANDED)

        assert ChannelState.PENDING not in attempt.states.values()
        assert attempt.errors == {DeliveryChannel.RPC: "boom"}
        assert attempt.states[DeliveryChannel.JITO] == ChannelState.LANDED


class TestTransactionMetric:
    """Tests for TransactionMetric serialization."""

    def test_to_dict_success(self) -> None:
        """Test field names of a landed metric."""
        metric = TransactionMetric(
            signature="5abc",
            timestamp_ms=1700000000000,
            used_gateway=True,
            success=True,
            cost=15000,
            channel=DeliveryChannel.JITO,
            landing_time_ms=420,
            refunded=True,
        )

        assert metric.to_dict() == {
            "signature": "5abc",
            "timestamp": 1700000000000,
            "usedGateway": True,
            "deliveryMethod": "jito",
            "success": True,
            "cost": 15000,
            "landingTime": 420,
            "refunded": True,
        }

    def test_to_dict_failure(self) -> None:
        """Test that a failed metric has no delivery method or landing time."""
        metric = TransactionMetric("failed", 1, used_gateway=False, success=False, cost=0)
        data = metric.to_dict()

        assert data["deliveryMethod"] is None
        assert data["landingTime"] is None
        assert data["success"] is False
