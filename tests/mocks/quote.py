"""
Mock quote service for testing.

Quotes hops from a fixed exchange-rate table without network calls.
"""

from collections.abc import Mapping
from fractions import Fraction
from typing import Any

from gatewayarb.core.types import Route
from gatewayarb.strategy.routes import TOKENS


SOL = TOKENS["SOL"]
USDC = TOKENS["USDC"]
USDT = TOKENS["USDT"]

# 0.1 SOL
TRADE_AMOUNT = 100_000_000

# SOL -> USDC -> USDT -> SOL returning 100_500_000 (+0.5%)
PROFITABLE_RATES = {
    (SOL, USDC): "20",
    (USDC, USDT): "1",
    (USDT, SOL): "0.05025",
}

# Same loop returning 99_000_000 (-1%)
LOSING_RATES = {
    (SOL, USDC): "20",
    (USDC, USDT): "1",
    (USDT, SOL): "0.0495",
}


def make_route(
    input_token: str,
    output_token: str,
    input_amount: int,
    output_amount: int,
    slippage_bps: int = 50,
) -> Route:
    """Build a route with a raw payload mirroring the quote service."""
    return Route(
        input_token=input_token,
        output_token=output_token,
        input_amount=input_amount,
        output_amount=output_amount,
        price_impact_pct=0.0,
        slippage_bps=slippage_bps,
        raw={"inputMint": input_token, "outputMint": output_token, "slippageBps": slippage_bps},
    )


class MockQuoter:
    """
    RouteQuoter backed by a rate table.

    Rates are exact fractions so outputs are reproducible; a pair missing
    from the table, or mapped to None, has no route.
    """

    def __init__(self, rates: Mapping[tuple[str, str], str | float | None]) -> None:
        """
        Initialize mock quoter.

        Args:
            rates: (input, output) -> output units per input unit.
        """
        self._rates = {
            pair: Fraction(str(rate)) if rate is not None else None for pair, rate in rates.items()
        }
        self.calls: list[tuple[str, str, int, int]] = []

    async def quote(
        self,
        input_token: str,
        output_token: str,
        amount: int,
        slippage_bps: int,
    ) -> Route | None:
        """Quote one hop from the table."""
        self.calls.append((input_token, output_token, amount, slippage_bps))

        rate = self._rates.get((input_token, output_token))
        if rate is None:
            return None

        output = int(amount * rate)
        return Route(
            input_token=input_token,
            output_token=output_token,
            input_amount=amount,
            output_amount=output,
            price_impact_pct=0.0,
            slippage_bps=slippage_bps,
            raw={
                "inputMint": input_token,
                "outputMint": output_token,
                "inAmount": str(amount),
                "outAmount": str(output),
                "slippageBps": slippage_bps,
            },
        )


class MockSwapSource:
    """SwapTransactionSource returning a fixed transaction."""

    def __init__(self, transaction: str | None = "dW5zaWduZWQ=") -> None:
        self._transaction = transaction
        self.requests: list[tuple[dict[str, Any], str]] = []

    async def get_swap_transaction(
        self,
        quote: Mapping[str, Any],
        user_public_key: str,
    ) -> str | None:
        """Record the request and return the configured transaction."""
        self.requests.append((dict(quote), user_public_key))
        return self._transaction


class MockSigner:
    """TransactionSigner that tags transactions instead of signing."""

    public_key = "MockWa11et1111111111111111111111111111111111"

    def __init__(self) -> None:
        self.signed: list[str] = []

    def sign(self, transaction: str) -> str:
        """Return a recognizable signed form."""
        self.signed.append(transaction)
        return f"signed:{transaction}"
