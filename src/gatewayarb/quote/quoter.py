"""
Fail-soft route quoting.

Wraps the Jupiter client so that every transport or service failure,
including "no viable route", surfaces as an absent route.
"""

import logging

from gatewayarb.core.errors import QuoteClientError
from gatewayarb.core.types import Route
from gatewayarb.quote.client import JupiterClient


logger = logging.getLogger(__name__)


class JupiterQuoter:
    """RouteQuoter backed by the Jupiter quote endpoint."""

    def __init__(self, client: JupiterClient) -> None:
        self._client = client
        self._requests = 0
        self._misses = 0

    async def quote(
        self,
        input_token: str,
        output_token: str,
        amount: int,
        slippage_bps: int,
    ) -> Route | None:
        """
        Quote one hop.

        Returns:
            Route, or None when the service has no route or fails.
        """
        self._requests += 1

        try:
            response = await self._client.get_quote(
                input_token, output_token, amount, slippage_bps
            )
            route = Route(
                input_token=response.input_mint,
                output_token=response.output_mint,
                input_amount=response.in_amount_int,
                output_amount=response.out_amount_int,
                price_impact_pct=response.price_impact_pct,
                slippage_bps=response.slippage_bps,
                raw=response.model_dump(by_alias=True),
            )
        except (QuoteClientError, ValueError) as e:
            self._misses += 1
            logger.debug(f"No route {input_token[:6]}->{output_token[:6]} ({amount}): {e}")
            return None

        return route

    @property
    def stats(self) -> dict[str, int]:
        """Request and miss counters."""
        return {"requests": self._requests, "misses": self._misses}
