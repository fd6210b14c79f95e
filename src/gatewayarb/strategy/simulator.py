"""
Chain simulation by sequential quoting.

Each hop is quoted with the previous hop's quoted output as its input.
Quoted outputs are not executed outputs, so a profitable simulation can
still lose money on-chain.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from gatewayarb.core.errors import NoRouteError, SimulationIncompleteError
from gatewayarb.core.types import Chain, Route, RouteQuoter
from gatewayarb.utils.math import floor_amount


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SimulationOutcome:
    """Chain on success, otherwise the failing hop and why."""

    chain: Chain | None
    failed_hop: int | None = None
    reason: str = ""

    @property
    def is_complete(self) -> bool:
        """Whether every hop was quoted."""
        return self.chain is not None

    def unwrap(self) -> Chain:
        """
        Return the chain or raise the matching error.

        Raises:
            NoRouteError: The first hop could not be quoted.
            SimulationIncompleteError: A later hop could not be quoted.
        """
        if self.chain is not None:
            return self.chain
        hop = self.failed_hop or 0
        if hop == 0:
            raise NoRouteError(self.reason or "no route")
        raise SimulationIncompleteError(f"hop {hop}: {self.reason}", hop_index=hop)


class ChainSimulator:
    """Builds closed chains from a start token and ordered intermediates."""

    def __init__(self, quoter: RouteQuoter, slippage_bps: int) -> None:
        """
        Initialize the simulator.

        Args:
            quoter: Single-hop quote source.
            slippage_bps: Slippage tolerance used for every simulation quote.
        """
        self._quoter = quoter
        self._slippage_bps = slippage_bps

    async def simulate(
        self,
        start_token: str,
        intermediates: Sequence[str],
        amount: int,
    ) -> Chain | None:
        """
        Quote every hop of the loop.

        Returns:
            Closed chain, or None if any hop could not be quoted.
        """
        outcome = await self.simulate_outcome(start_token, intermediates, amount)
        return outcome.chain

    async def simulate_outcome(
        self,
        start_token: str,
        intermediates: Sequence[str],
        amount: int,
    ) -> SimulationOutcome:
        """
        Quote every hop of the loop, reporting where it stopped.

        Hops are [intermediates..., start_token]. Partial chains are
        discarded, never retried within the call.
        """
        running = floor_amount(amount)
        if running <= 0:
            return SimulationOutcome(chain=None, failed_hop=0, reason="non-positive amount")

        hops = [*intermediates, start_token]
        routes: list[Route] = []
        current = start_token

        for index, target in enumerate(hops):
            route = await self._quoter.quote(current, target, running, self._slippage_bps)
            if route is None:
                logger.debug(f"Hop {index} {current[:6]}->{target[:6]} unquoted")
                return SimulationOutcome(chain=None, failed_hop=index, reason="no route")

            routes.append(route)
            running = floor_amount(route.output_amount)
            current = target

            if running <= 0:
                return SimulationOutcome(chain=None, failed_hop=index, reason="zero output")

        try:
            chain = Chain(tuple(routes))
        except ValueError as e:
            # Quote service answered for a different pair than requested
            return SimulationOutcome(chain=None, failed_hop=len(routes) - 1, reason=str(e))

        return SimulationOutcome(chain=chain)
