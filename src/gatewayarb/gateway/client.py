"""
Relay gateway JSON-RPC client.

The gateway accepts a signed transaction and delivers it through a set of
enabled delivery methods, reporting which one landed it, the cost paid and
whether an incentive tip was refunded.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from gatewayarb.config.constants import (
    DEFAULT_DELIVERY_CHANNELS,
    GATEWAY_RPC_URL,
    GATEWAY_TIMEOUT_SECONDS,
    METHOD_GET_TRANSACTION,
    METHOD_OPTIMIZE_TRANSACTION,
    METHOD_SEND_TRANSACTION,
)
from gatewayarb.core.errors import GatewayClientError
from gatewayarb.core.types import DeliveryChannel
from gatewayarb.gateway.models import OptimizeResponse, SendResponse
from gatewayarb.rpc.transport import JsonRpcTransport


logger = logging.getLogger(__name__)


def _methods(channels: Iterable[DeliveryChannel | str] | None) -> list[str]:
    """Relay delivery method names for the given channels."""
    if channels is None:
        return list(DEFAULT_DELIVERY_CHANNELS)
    names = [DeliveryChannel(c).value for c in channels]
    return [n for n in names if n != DeliveryChannel.STANDARD.value]


class GatewayClient(JsonRpcTransport):
    """
    Async client for the relay gateway.

    Features:
    - Optional bearer authentication
    - JSON-RPC `error` objects raise GatewayClientError with the error code
    - 30 s default timeout
    """

    error_class = GatewayClientError

    def __init__(
        self,
        url: str = GATEWAY_RPC_URL,
        api_key: str | None = None,
        timeout: float = GATEWAY_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(url, timeout, api_key=api_key)

    async def optimize_transaction(
        self,
        transaction: str,
        cu_price: int | None = None,
        channels: Iterable[DeliveryChannel | str] | None = None,
        expire_in_slot: int | None = None,
    ) -> OptimizeResponse:
        """
        Ask the relay for compute budget and priority fee estimates.

        Args:
            transaction: Base64 transaction.
            cu_price: Compute unit price in micro-lamports.
            channels: Delivery methods the estimate should consider.
            expire_in_slot: Optional expiry slot.

        Returns:
            Optimized transaction and estimates.
        """
        options: dict[str, Any] = {"enabledDeliveryMethods": _methods(channels)}
        if cu_price is not None:
            options["cuPrice"] = cu_price
        if expire_in_slot is not None:
            options["expireInSlot"] = expire_in_slot

        result = await self.call(METHOD_OPTIMIZE_TRANSACTION, [transaction, options])

        try:
            return OptimizeResponse.model_validate(result)
        except ValidationError as e:
            raise GatewayClientError(f"Malformed optimize result: {e}") from e

    async def send_transaction(
        self,
        transaction: str,
        channels: Iterable[DeliveryChannel | str] | None = None,
        tip: int | None = None,
        delivery_delay_ms: int | None = None,
    ) -> SendResponse:
        """
        Deliver a signed transaction through the enabled methods.

        Args:
            transaction: Signed base64 transaction.
            channels: Delivery methods to enable.
            tip: Incentive tip in lamports for tipped methods.
            delivery_delay_ms: Optional stagger between methods.

        Returns:
            Landing details reported by the relay.
        """
        options: dict[str, Any] = {
            "encoding": "base64",
            "enabledDeliveryMethods": _methods(channels),
        }
        if tip:
            options["jitoTip"] = tip
        if delivery_delay_ms:
            options["deliveryDelay"] = delivery_delay_ms

        result = await self.call(METHOD_SEND_TRANSACTION, [transaction, options])

        # Some deployments answer with a bare signature
        if isinstance(result, str):
            return SendResponse(signature=result)

        try:
            return SendResponse.model_validate(result)
        except ValidationError as e:
            raise GatewayClientError(f"Malformed send result: {e}") from e

    async def get_transaction_status(self, signature: str) -> dict[str, Any] | None:
        """Look up a transaction by signature; None if unknown."""
        result = await self.call(METHOD_GET_TRANSACTION, [signature, {"encoding": "jsonParsed"}])
        return result if isinstance(result, dict) else None
