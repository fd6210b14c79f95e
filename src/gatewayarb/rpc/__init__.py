"""Solana JSON-RPC transport and client."""

from gatewayarb.rpc.client import SolanaRpcClient
from gatewayarb.rpc.transport import JsonRpcTransport


__all__ = [
    "JsonRpcTransport",
    "SolanaRpcClient",
]
