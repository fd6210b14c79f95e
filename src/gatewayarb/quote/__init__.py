"""Quote service integration module for Jupiter."""

from gatewayarb.quote.client import JupiterClient
from gatewayarb.quote.models import QuoteResponse, SwapResponse
from gatewayarb.quote.quoter import JupiterQuoter
from gatewayarb.quote.rate_limiter import RateLimiter, TokenBucket


__all__ = [
    "JupiterClient",
    "JupiterQuoter",
    "QuoteResponse",
    "RateLimiter",
    "SwapResponse",
    "TokenBucket",
]
