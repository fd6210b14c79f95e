"""
Trading constants and configuration values.

This module contains all hardcoded values used throughout the arbitrage engine.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Service Endpoints
# =============================================================================

JUPITER_API_URL: Final[str] = "https://quote-api.jup.ag/v6"
GATEWAY_RPC_URL: Final[str] = "https://gateway.sanctum.so/v1/rpc"
SOLANA_RPC_URL: Final[str] = "https://api.mainnet-beta.solana.com"

# Jupiter endpoints
ENDPOINT_QUOTE: Final[str] = "/quote"
ENDPOINT_SWAP: Final[str] = "/swap"

# Gateway JSON-RPC methods
METHOD_OPTIMIZE_TRANSACTION: Final[str] = "optimizeTransaction"
METHOD_SEND_TRANSACTION: Final[str] = "sendTransaction"
METHOD_GET_TRANSACTION: Final[str] = "getTransaction"

# Solana JSON-RPC methods
METHOD_GET_SIGNATURE_STATUSES: Final[str] = "getSignatureStatuses"
METHOD_GET_BALANCE: Final[str] = "getBalance"
METHOD_GET_VERSION: Final[str] = "getVersion"


# =============================================================================
# Units
# =============================================================================

LAMPORTS_PER_SOL: Final[int] = 1_000_000_000


# =============================================================================
# Timeouts
# =============================================================================

QUOTE_TIMEOUT_SECONDS: Final[float] = 10.0
GATEWAY_TIMEOUT_SECONDS: Final[float] = 30.0
RPC_TIMEOUT_SECONDS: Final[float] = 10.0

# Upper bound for one delivery race
DELIVERY_TIMEOUT_SECONDS: Final[float] = 30.0

# Signature status polling on the standard RPC path
CONFIRMATION_POLL_INTERVAL: Final[float] = 0.4  # seconds
CONFIRMED_STATUSES: Final[frozenset[str]] = frozenset({"confirmed", "finalized"})


# =============================================================================
# Rate Limiting
# =============================================================================

# Jupiter public API budget (~600 req/min); stay at 80%
QUOTE_REQUESTS_PER_SECOND: Final[int] = 8

# Pause between candidate chain evaluations
DEFAULT_CANDIDATE_DELAY: Final[float] = 0.2  # seconds

# Pause between full scans
DEFAULT_SCAN_INTERVAL: Final[float] = 5.0  # seconds

# Pause between relay and standard RPC sends in comparison mode
COMPARE_PAUSE_SECONDS: Final[float] = 2.0


# =============================================================================
# Trading Constraints
# =============================================================================

# Minimum profit percentage to act on (0.01%)
DEFAULT_MIN_PROFIT_PERCENT: Final[float] = 0.01

# Slippage used for simulation quotes (0.5%)
DEFAULT_SLIPPAGE_BPS: Final[int] = 50

# Trade size per chain
DEFAULT_POSITION_SIZE_SOL: Final[float] = 0.1

# Incentive tip attached to accelerated delivery paths (0.00001 SOL)
DEFAULT_TIP_LAMPORTS: Final[int] = 10_000

# Adaptive slippage tiers: (minimum profit %, slippage bps), highest first
SLIPPAGE_TIERS: Final[tuple[tuple[float, int], ...]] = (
    (2.0, 100),
    (1.0, 75),
    (0.5, 50),
)
SLIPPAGE_FLOOR_BPS: Final[int] = 30

# Hop count of a triangular chain
DEFAULT_MAX_HOPS: Final[int] = 3
DEFAULT_MAX_CHAINS: Final[int] = 50


# =============================================================================
# Delivery
# =============================================================================

DEFAULT_DELIVERY_CHANNELS: Final[tuple[str, ...]] = ("rpc", "jito", "triton", "paladin")

# Marker signature for failed executions
FAILED_SIGNATURE: Final[str] = "failed"


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000
