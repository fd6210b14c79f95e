"""
Token registry and default candidate-chain catalog.
"""

from typing import Final

from gatewayarb.core.types import CandidateChain


# Mint addresses
TOKENS: Final[dict[str, str]] = {
    "SOL": "So11111111111111111111111111111111111111112",
    "USDC": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "USDT": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
    "BONK": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
    "JTO": "jtojtomepa8beP8AuQc6eXt5FriJwfFMwQx2v2f9mCL",
    "WIF": "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm",
}

SYMBOLS: Final[dict[str, str]] = {mint: symbol for symbol, mint in TOKENS.items()}


def symbol_of(mint: str) -> str:
    """Display symbol for a mint, falling back to a shortened address."""
    return SYMBOLS.get(mint, f"{mint[:4]}..{mint[-4:]}")


def mint_of(symbol: str) -> str:
    """
    Resolve a symbol to its mint.

    Raises:
        KeyError: Unknown symbol.
    """
    return TOKENS[symbol.upper()]


def candidate(*symbols: str) -> CandidateChain:
    """
    Build a catalog entry from a symbol loop.

    Example:
        >>> candidate("SOL", "USDC", "USDT").name
        'SOL→USDC→USDT→SOL'
    """
    start, *intermediates = symbols
    return CandidateChain(
        name="→".join([*symbols, start]),
        start_token=mint_of(start),
        intermediates=tuple(mint_of(s) for s in intermediates),
    )


DEFAULT_CANDIDATES: Final[tuple[CandidateChain, ...]] = (
    candidate("SOL", "USDC", "USDT"),
    candidate("SOL", "USDT", "USDC"),
    candidate("SOL", "USDC", "BONK"),
    candidate("SOL", "BONK", "USDC"),
    candidate("SOL", "USDC", "JTO"),
    candidate("SOL", "JTO", "USDC"),
    candidate("SOL", "USDC", "WIF"),
    candidate("SOL", "WIF", "USDC"),
)
