"""
Async Jupiter quote/swap API client.

Optimized for sequential scanning with:
- Connection pooling and keep-alive
- Fast JSON parsing with orjson
- Integrated rate limiting
- Short per-call timeouts
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
import orjson
from pydantic import ValidationError

from gatewayarb.config.constants import (
    DEFAULT_SLIPPAGE_BPS,
    ENDPOINT_QUOTE,
    ENDPOINT_SWAP,
    JUPITER_API_URL,
    QUOTE_TIMEOUT_SECONDS,
)
from gatewayarb.core.errors import QuoteClientError
from gatewayarb.quote.models import QuoteResponse, SwapResponse
from gatewayarb.quote.rate_limiter import RateLimiter


logger = logging.getLogger(__name__)

HTTP_TOO_MANY_REQUESTS = 429


def _retry_after(value: str | None) -> float | None:
    """Seconds from a Retry-After header, if numeric."""
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class JupiterClient:
    """
    Async Jupiter v6 API client.

    Features:
    - Single session with connection pooling
    - orjson for fast JSON parsing
    - Integrated rate limiting
    - Per-call timeout
    """

    def __init__(
        self,
        base_url: str = JUPITER_API_URL,
        timeout: float = QUOTE_TIMEOUT_SECONDS,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """
        Initialize the Jupiter client.

        Args:
            base_url: API base URL.
            timeout: Per-call timeout in seconds.
            rate_limiter: Optional rate limiter instance.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._rate_limiter = rate_limiter or RateLimiter()
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=20,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                json_serialize=lambda x: orjson.dumps(x).decode(),
            )

        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Context manager for making requests."""
        session = await self._get_session()
        try:
            yield session
        except (aiohttp.ClientError, TimeoutError) as e:
            raise QuoteClientError(f"Network error: {e}") from e

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST).
            endpoint: API endpoint.
            params: Query parameters.
            payload: JSON body.

        Returns:
            Parsed JSON response.

        Raises:
            QuoteClientError: On network, HTTP or parse errors.
        """
        await self._rate_limiter.acquire()

        if method not in ("GET", "POST"):
            raise QuoteClientError(f"Unsupported method: {method}")

        async with self._request_context() as session:
            async with session.request(
                method, f"{self._base_url}{endpoint}", params=params, json=payload
            ) as response:
                return await self._handle_response(response)

    async def _handle_response(self, response: aiohttp.ClientResponse) -> dict[str, Any]:
        """
        Parse a response body.

        A 429 pauses the shared rate limiter before raising.
        """
        if response.status == HTTP_TOO_MANY_REQUESTS:
            self._rate_limiter.backoff(_retry_after(response.headers.get("Retry-After")))
            raise QuoteClientError("Rate limited by quote service", code=response.status)

        body = await response.read()
        text = body.decode(errors="replace")

        try:
            data = orjson.loads(body) if body else None
        except orjson.JSONDecodeError as e:
            raise QuoteClientError(f"Invalid JSON response: {e}") from e

        if response.status >= 400:
            message = data.get("error", text) if isinstance(data, dict) else text
            raise QuoteClientError(f"API error {response.status}: {message}", code=response.status)

        if not isinstance(data, dict):
            raise QuoteClientError("Empty response")

        return data

    # =========================================================================
    # Quote Endpoints
    # =========================================================================

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> QuoteResponse:
        """
        Get the best route for a swap.

        Args:
            input_mint: Token being sold.
            output_mint: Token being bought.
            amount: Input amount in smallest units.
            slippage_bps: Slippage tolerance in basis points.

        Returns:
            Parsed quote.

        Raises:
            QuoteClientError: When no route exists or the request fails.
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(slippage_bps),
            "onlyDirectRoutes": "false",
            "maxAccounts": "64",
        }

        data = await self._request("GET", ENDPOINT_QUOTE, params=params)

        try:
            return QuoteResponse.model_validate(data)
        except ValidationError as e:
            raise QuoteClientError(f"Malformed quote: {e}") from e

    async def get_swap_transaction(
        self,
        quote: Mapping[str, Any],
        user_public_key: str,
    ) -> str | None:
        """
        Get a serialized swap transaction for a quoted route.

        Args:
            quote: Raw quote payload as returned by the quote endpoint.
            user_public_key: Wallet that will sign the transaction.

        Returns:
            Base64 transaction, or None if the service could not build one.
        """
        payload = {
            "quoteResponse": dict(quote),
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": True,
            "computeUnitPriceMicroLamports": "auto",
        }

        try:
            data = await self._request("POST", ENDPOINT_SWAP, payload=payload)
            return SwapResponse.model_validate(data).swap_transaction
        except (QuoteClientError, ValidationError) as e:
            logger.warning(f"Swap transaction unavailable: {e}")
            return None

    async def __aenter__(self) -> "JupiterClient":
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
