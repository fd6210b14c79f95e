"""Core module containing type definitions, errors and the bot engine."""

from gatewayarb.core.errors import (
    ArbitrageError,
    ConfigurationError,
    DeliveryError,
    DeliveryTimeoutError,
    NoRouteError,
    NoSwapTransactionError,
    SimulationIncompleteError,
)
from gatewayarb.core.types import (
    Chain,
    DeliveryChannel,
    DeliveryResult,
    ExecutionResult,
    Opportunity,
    Route,
    TransactionMetric,
)


__all__ = [
    "ArbitrageError",
    "Chain",
    "ConfigurationError",
    "DeliveryChannel",
    "DeliveryError",
    "DeliveryResult",
    "DeliveryTimeoutError",
    "ExecutionResult",
    "NoRouteError",
    "NoSwapTransactionError",
    "Opportunity",
    "Route",
    "SimulationIncompleteError",
    "TransactionMetric",
]
