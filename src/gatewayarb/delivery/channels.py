"""
Delivery channel implementations.

Each channel takes a signed transaction and returns only once the
transaction has landed on that path, or raises.
"""

import asyncio
import logging

from gatewayarb.config.constants import CONFIRMATION_POLL_INTERVAL, CONFIRMED_STATUSES
from gatewayarb.core.errors import DeliveryError, RpcClientError
from gatewayarb.core.types import ChannelLanding, DeliveryChannel
from gatewayarb.gateway.client import GatewayClient
from gatewayarb.rpc.client import SolanaRpcClient


logger = logging.getLogger(__name__)


class GatewayChannel:
    """Delivery through the relay, restricted to one delivery method."""

    __slots__ = ("_client", "_method")

    def __init__(self, client: GatewayClient, method: DeliveryChannel) -> None:
        if not method.is_gateway:
            raise ValueError(f"{method.value} is not a relay delivery method")
        self._client = client
        self._method = method

    @property
    def name(self) -> DeliveryChannel:
        return self._method

    async def submit(self, transaction: str, tip: int | None) -> ChannelLanding:
        """
        Send through the relay and report its landing.

        The tip is attached only for tipped methods.
        """
        response = await self._client.send_transaction(
            transaction,
            channels=[self._method],
            tip=tip if self._method.is_tipped else None,
        )

        logger.debug(
            f"[{self._method.value}] landed {response.signature[:12]} "
            f"via {response.delivery_path} cost={response.actual_cost}"
        )

        return ChannelLanding(
            signature=response.signature,
            cost=response.actual_cost,
            refunded=response.jito_refunded,
        )


class StandardRpcChannel:
    """Direct submission to a Solana RPC node with confirmation polling."""

    __slots__ = ("_rpc", "_poll_interval")

    def __init__(
        self,
        rpc: SolanaRpcClient,
        poll_interval: float = CONFIRMATION_POLL_INTERVAL,
    ) -> None:
        self._rpc = rpc
        self._poll_interval = poll_interval

    @property
    def name(self) -> DeliveryChannel:
        return DeliveryChannel.STANDARD

    async def submit(self, transaction: str, tip: int | None) -> ChannelLanding:
        """
        Send and poll until confirmed.

        Runs until cancelled; the coordinator bounds the wait.

        Raises:
            DeliveryError: If the transaction landed with an error.
        """
        signature = await self._rpc.send_transaction(transaction)

        while True:
            try:
                statuses = await self._rpc.get_signature_statuses([signature])
            except RpcClientError as e:
                # The transaction may still land; keep polling
                logger.debug(f"[standard] status poll for {signature[:12]} failed: {e}")
                await asyncio.sleep(self._poll_interval)
                continue

            status = statuses[0] if statuses else None

            if status is not None:
                if status.get("err") is not None:
                    raise DeliveryError(f"Transaction {signature[:12]} failed: {status['err']}")
                if status.get("confirmationStatus") in CONFIRMED_STATUSES:
                    break

            await asyncio.sleep(self._poll_interval)

        fee = await self._rpc.get_transaction_fee(signature)
        return ChannelLanding(signature=signature, cost=fee, refunded=False)
