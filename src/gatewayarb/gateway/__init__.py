"""Relay gateway integration."""

from gatewayarb.gateway.client import GatewayClient
from gatewayarb.gateway.models import OptimizeResponse, SendResponse


__all__ = [
    "GatewayClient",
    "OptimizeResponse",
    "SendResponse",
]
