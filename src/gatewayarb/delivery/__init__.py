"""Multi-path transaction delivery."""

from gatewayarb.delivery.channels import GatewayChannel, StandardRpcChannel
from gatewayarb.delivery.coordinator import DeliveryCoordinator


__all__ = [
    "DeliveryCoordinator",
    "GatewayChannel",
    "StandardRpcChannel",
]
