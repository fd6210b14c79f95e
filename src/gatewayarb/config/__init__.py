"""Configuration module for the arbitrage engine."""

from gatewayarb.config.constants import (
    DEFAULT_TIP_LAMPORTS,
    GATEWAY_RPC_URL,
    JUPITER_API_URL,
    LAMPORTS_PER_SOL,
    SOLANA_RPC_URL,
)
from gatewayarb.config.settings import Settings, load_settings


__all__ = [
    "Settings",
    "load_settings",
    "DEFAULT_TIP_LAMPORTS",
    "GATEWAY_RPC_URL",
    "JUPITER_API_URL",
    "LAMPORTS_PER_SOL",
    "SOLANA_RPC_URL",
]
