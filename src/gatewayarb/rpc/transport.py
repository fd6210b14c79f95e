"""
JSON-RPC 2.0 transport over aiohttp.

Shared by the relay gateway client and the standard Solana RPC client.
Request ids are monotonically increasing per transport.
"""

import itertools
import logging
from typing import Any

import aiohttp
import orjson

from gatewayarb.core.errors import ClientError


logger = logging.getLogger(__name__)


class JsonRpcTransport:
    """
    Minimal async JSON-RPC client.

    Subclasses set `error_class` so failures surface with the right type.
    """

    error_class: type[ClientError] = ClientError

    def __init__(
        self,
        url: str,
        timeout: float,
        api_key: str | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            url: JSON-RPC endpoint.
            timeout: Per-call timeout in seconds.
            api_key: Optional bearer token.
        """
        self._url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._api_key = api_key
        self._session: aiohttp.ClientSession | None = None
        self._ids = itertools.count(1)
        self._request_count = 0
        self._error_count = 0

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"

            connector = aiohttp.TCPConnector(
                limit=50,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout,
                headers=headers,
                json_serialize=lambda x: orjson.dumps(x).decode(),
            )

        return self._session

    async def close(self) -> None:
        """Close the transport session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def call(self, method: str, params: list[Any]) -> Any:
        """
        Invoke a JSON-RPC method.

        Args:
            method: Method name.
            params: Positional parameters.

        Returns:
            The `result` member of the response.

        Raises:
            ClientError subclass: On transport failure or an `error` member.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        self._request_count += 1
        session = await self._get_session()

        try:
            async with session.post(self._url, json=payload) as response:
                body = await response.read()
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as e:
            self._error_count += 1
            raise self.error_class(f"{method}: network error: {e}") from e

        try:
            data = orjson.loads(body) if body else {}
        except orjson.JSONDecodeError as e:
            self._error_count += 1
            raise self.error_class(f"{method}: invalid JSON ({status})", code=status) from e

        if not isinstance(data, dict):
            self._error_count += 1
            raise self.error_class(f"{method}: unexpected response shape", code=status)

        error = data.get("error")
        if error:
            self._error_count += 1
            if isinstance(error, dict):
                raise self.error_class(
                    f"{method}: {error.get('message', 'unknown error')}",
                    code=error.get("code"),
                )
            raise self.error_class(f"{method}: {error}")

        if status >= 400:
            self._error_count += 1
            raise self.error_class(f"{method}: HTTP {status}", code=status)

        return data.get("result")

    @property
    def stats(self) -> dict[str, int]:
        """Get transport statistics."""
        return {
            "requests": self._request_count,
            "errors": self._error_count,
        }

    async def __aenter__(self) -> "JsonRpcTransport":
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
