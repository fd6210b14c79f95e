"""
Exception hierarchy for the arbitrage engine.

Quote-layer failures are normally absorbed into "no route"; execution-layer
failures are converted into failed metrics. Only configuration errors are
allowed to stop the process.
"""


class ArbitrageError(Exception):
    """Base exception for engine errors."""


class NoRouteError(ArbitrageError):
    """The quote service found no route for a hop."""


class SimulationIncompleteError(ArbitrageError):
    """One hop of a chain could not be quoted."""

    def __init__(self, message: str, hop_index: int) -> None:
        super().__init__(message)
        self.hop_index = hop_index


class NoSwapTransactionError(ArbitrageError):
    """The swap service could not build a transaction."""


class DeliveryError(ArbitrageError):
    """The transaction did not land on any channel."""


class DeliveryTimeoutError(DeliveryError):
    """No channel landed the transaction within the delivery bound."""


class ConfigurationError(ArbitrageError):
    """Missing credential or malformed setting."""


# =============================================================================
# Transport Errors
# =============================================================================


class ClientError(Exception):
    """Base exception for external service clients."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class QuoteClientError(ClientError):
    """Quote/swap service request failed."""


class RpcClientError(ClientError):
    """Solana RPC request failed."""


class GatewayClientError(ClientError):
    """Relay gateway request failed or returned a JSON-RPC error."""
