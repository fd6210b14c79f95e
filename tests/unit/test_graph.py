"""
Unit tests for ChainDiscovery.

Tests graph construction and closed-loop enumeration.
"""

import pytest

from gatewayarb.strategy.graph import ChainDiscovery
from gatewayarb.strategy.routes import TOKENS


class TestChainDiscovery:
    """Tests for ChainDiscovery."""

    @pytest.fixture
    def discovery(self) -> ChainDiscovery:
        """Create discovery over the default token registry."""
        return ChainDiscovery(TOKENS)

    @pytest.fixture
    def pairs(self) -> list[tuple[str, str]]:
        """Stablecoin triangle plus a BONK spoke."""
        return [("SOL", "USDC"), ("USDC", "USDT"), ("SOL", "USDT"), ("SOL", "BONK")]

    def test_build_graph(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test that each pair adds edges in both directions."""
        edges = discovery.build_graph(pairs)

        assert edges == 8
        assert discovery.get_tokens() == {"SOL", "USDC", "USDT", "BONK"}
        assert discovery.graph.has_edge("USDT", "USDC")

    def test_unknown_and_self_pairs_skipped(self, discovery: ChainDiscovery) -> None:
        """Test that unusable pairs are ignored."""
        edges = discovery.build_graph([("SOL", "DOGE"), ("USDC", "USDC"), ("SOL", "USDC")])

        assert edges == 2
        assert "DOGE" not in discovery.get_tokens()

    def test_find_triangles(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test that both directions of the triangle are found."""
        discovery.build_graph(pairs)

        chains = discovery.find_chains(start="SOL", hops=3)

        names = sorted(c.name for c in chains)
        assert names == ["SOL→USDC→USDT→SOL", "SOL→USDT→USDC→SOL"]
        for chain in chains:
            assert chain.start_token == TOKENS["SOL"]
            assert len(chain.intermediates) == 2

    def test_dead_end_excluded(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test that a spoke with no way back is not a loop."""
        discovery.build_graph(pairs)

        chains = discovery.find_chains(start="SOL", hops=3)

        assert all(TOKENS["BONK"] not in c.intermediates for c in chains)

    def test_two_hop_loops(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test out-and-back loops."""
        discovery.build_graph(pairs)

        chains = discovery.find_chains(start="SOL", hops=2)

        assert len(chains) == 3

    def test_max_chains(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test the result limit."""
        discovery.build_graph(pairs)

        chains = discovery.find_chains(start="SOL", hops=2, max_chains=1)

        assert len(chains) == 1
        assert discovery.get_chains() == chains

    def test_missing_start(self, discovery: ChainDiscovery) -> None:
        """Test that an absent start token yields nothing."""
        discovery.build_graph([("USDC", "USDT")])

        assert discovery.find_chains(start="SOL") == []

    def test_single_hop_rejected(self, discovery: ChainDiscovery) -> None:
        """Test that a loop needs at least two hops."""
        with pytest.raises(ValueError):
            discovery.find_chains(hops=1)

    def test_to_dict(self, discovery: ChainDiscovery, pairs: list[tuple[str, str]]) -> None:
        """Test serializable output."""
        discovery.build_graph(pairs)
        discovery.find_chains(hops=3)

        data = discovery.to_dict()

        assert len(data["chains"]) == 2
        assert data["chains"][0]["start"] == TOKENS["SOL"]
