"""
Standard Solana JSON-RPC client.

Used for the direct (non-relay) delivery path, confirmation polling,
wallet balance checks and connectivity probes.
"""

import logging
from typing import Any

from gatewayarb.config.constants import (
    METHOD_GET_BALANCE,
    METHOD_GET_SIGNATURE_STATUSES,
    METHOD_GET_TRANSACTION,
    METHOD_GET_VERSION,
    METHOD_SEND_TRANSACTION,
    RPC_TIMEOUT_SECONDS,
    SOLANA_RPC_URL,
)
from gatewayarb.core.errors import RpcClientError
from gatewayarb.rpc.transport import JsonRpcTransport


logger = logging.getLogger(__name__)


class SolanaRpcClient(JsonRpcTransport):
    """Async client for a standard Solana RPC node."""

    error_class = RpcClientError

    def __init__(
        self,
        url: str = SOLANA_RPC_URL,
        timeout: float = RPC_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(url, timeout)

    async def send_transaction(self, transaction: str, skip_preflight: bool = True) -> str:
        """
        Submit a signed base64 transaction.

        Returns:
            Transaction signature.
        """
        result = await self.call(
            METHOD_SEND_TRANSACTION,
            [
                transaction,
                {
                    "encoding": "base64",
                    "skipPreflight": skip_preflight,
                    "maxRetries": 0,
                },
            ],
        )
        if not isinstance(result, str):
            raise RpcClientError(f"Unexpected sendTransaction result: {result!r}")
        return result

    async def get_signature_statuses(self, signatures: list[str]) -> list[dict[str, Any] | None]:
        """
        Look up confirmation status for signatures.

        Returns:
            One entry per signature; None for unknown signatures.
        """
        result = await self.call(
            METHOD_GET_SIGNATURE_STATUSES,
            [signatures, {"searchTransactionHistory": False}],
        )
        if not isinstance(result, dict):
            return [None] * len(signatures)
        value = result.get("value") or []
        return list(value)

    async def get_transaction_fee(self, signature: str) -> int:
        """
        Fee paid by a landed transaction in lamports.

        Returns 0 when the transaction is not yet available.
        """
        result = await self.call(
            METHOD_GET_TRANSACTION,
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": "confirmed",
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if not isinstance(result, dict):
            return 0
        meta = result.get("meta") or {}
        return int(meta.get("fee", 0))

    async def get_balance(self, public_key: str) -> int:
        """Wallet balance in lamports."""
        result = await self.call(METHOD_GET_BALANCE, [public_key, {"commitment": "confirmed"}])
        if isinstance(result, dict):
            return int(result.get("value", 0))
        return int(result or 0)

    async def get_version(self) -> str:
        """Node software version."""
        result = await self.call(METHOD_GET_VERSION, [])
        if isinstance(result, dict):
            return str(result.get("solana-core", "unknown"))
        return "unknown"
