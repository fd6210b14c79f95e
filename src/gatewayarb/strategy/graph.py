"""
Candidate chain discovery using graph analysis.

Uses NetworkX to build a token graph from tradable pairs and
enumerate closed loops from a start token.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

import networkx as nx

from gatewayarb.config.constants import DEFAULT_MAX_CHAINS, DEFAULT_MAX_HOPS
from gatewayarb.core.types import CandidateChain
from gatewayarb.strategy.routes import TOKENS


logger = logging.getLogger(__name__)


class ChainDiscovery:
    """
    Discovers closed swap loops.

    Uses a directed graph where:
    - Nodes are token symbols (SOL, USDC, BONK, etc.)
    - Edges are swappable pairs, added in both directions

    Finds simple cycles of a fixed hop count through the start token.
    """

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        """
        Initialize chain discovery.

        Args:
            tokens: Symbol to mint registry.
        """
        self._tokens = tokens if tokens is not None else dict(TOKENS)
        self._graph: nx.DiGraph = nx.DiGraph()
        self._chains: list[CandidateChain] = []

    def build_graph(self, pairs: Iterable[tuple[str, str]]) -> int:
        """
        Build the token graph.

        Pairs with a token missing from the registry are skipped.

        Returns:
            Number of edges added.
        """
        self._graph.clear()

        for base, quote in pairs:
            if base not in self._tokens or quote not in self._tokens:
                logger.warning(f"Skipping pair {base}/{quote}: unknown token")
                continue
            if base == quote:
                continue
            self._graph.add_edge(base, quote)
            self._graph.add_edge(quote, base)

        logger.info(
            f"Built graph with {self._graph.number_of_nodes()} tokens, "
            f"{self._graph.number_of_edges()} edges"
        )

        return int(self._graph.number_of_edges())

    def find_chains(
        self,
        start: str = "SOL",
        hops: int = DEFAULT_MAX_HOPS,
        max_chains: int = DEFAULT_MAX_CHAINS,
    ) -> list[CandidateChain]:
        """
        Enumerate loops start -> ... -> start with exactly `hops` hops.

        Both directions of a loop are kept since their quotes differ.

        Args:
            start: Starting/ending token symbol.
            hops: Number of swaps in the loop.
            max_chains: Maximum loops to return.

        Returns:
            Candidate chains in discovery order.
        """
        if hops < 2:
            raise ValueError(f"A loop needs at least 2 hops, got {hops}")

        if start not in self._graph:
            logger.warning(f"Start token {start} not in graph")
            return []

        chains: list[CandidateChain] = []
        seen: set[tuple[str, ...]] = set()

        for intermediates in self._walk(start, (), hops - 1):
            if not self._graph.has_edge(intermediates[-1], start):
                continue

            if intermediates in seen:
                continue
            seen.add(intermediates)

            chains.append(self._build_chain(start, intermediates))
            if len(chains) >= max_chains:
                break

        self._chains = chains
        logger.info(f"Found {len(chains)} {hops}-hop chains from {start}")

        return chains

    def _walk(
        self,
        start: str,
        prefix: tuple[str, ...],
        remaining: int,
    ) -> Iterator[tuple[str, ...]]:
        """Yield simple paths of `remaining` more tokens that avoid the start."""
        if remaining == 0:
            yield prefix
            return

        current = prefix[-1] if prefix else start
        for neighbor in self._graph.neighbors(current):
            if neighbor == start or neighbor in prefix:
                continue
            yield from self._walk(start, (*prefix, neighbor), remaining - 1)

    def _build_chain(self, start: str, intermediates: tuple[str, ...]) -> CandidateChain:
        """Create a catalog entry from symbols."""
        return CandidateChain(
            name="→".join([start, *intermediates, start]),
            start_token=self._tokens[start],
            intermediates=tuple(self._tokens[s] for s in intermediates),
        )

    def get_chains(self) -> list[CandidateChain]:
        """Get discovered chains."""
        return self._chains

    def get_tokens(self) -> set[str]:
        """Get all tokens in the graph."""
        return set(self._graph.nodes())

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying NetworkX graph."""
        return self._graph

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert chains to serializable format."""
        return {
            "chains": [
                {
                    "name": c.name,
                    "start": c.start_token,
                    "intermediates": list(c.intermediates),
                }
                for c in self._chains
            ]
        }
