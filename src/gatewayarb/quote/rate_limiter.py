"""
Request budget for the Jupiter public API.

A token bucket paces quote and swap requests; a 429 answer pauses the
whole budget for the period the service asks for.
"""

import asyncio
from typing import Final

from gatewayarb.config.constants import QUOTE_REQUESTS_PER_SECOND
from gatewayarb.utils.time import monotonic_ms


DEFAULT_BURST_MULTIPLIER: Final[int] = 2
DEFAULT_BACKOFF_SECONDS: Final[float] = 1.0


class TokenBucket:
    """
    Token bucket refilled continuously at `refill_rate` tokens per second.

    Starts full; never holds more than `capacity` tokens.
    """

    __slots__ = ("capacity", "refill_rate", "tokens", "_stamp_ms", "_lock")

    def __init__(self, capacity: int, refill_rate: float) -> None:
        if capacity < 1 or refill_rate <= 0:
            raise ValueError(f"Invalid bucket: capacity={capacity}, rate={refill_rate}")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self.tokens = float(capacity)
        self._stamp_ms = monotonic_ms()
        self._lock = asyncio.Lock()

    def _top_up(self) -> None:
        now = monotonic_ms()
        gained = (now - self._stamp_ms) / 1000.0 * self.refill_rate
        self.tokens = min(float(self.capacity), self.tokens + gained)
        self._stamp_ms = now

    def _deficit_seconds(self, tokens: int) -> float:
        missing = tokens - self.tokens
        return missing / self.refill_rate if missing > 0 else 0.0

    async def acquire(self, tokens: int = 1) -> None:
        """Take tokens, sleeping until enough have accumulated."""
        async with self._lock:
            self._top_up()
            wait = self._deficit_seconds(tokens)
            if wait:
                await asyncio.sleep(wait)
                self._top_up()
            self.tokens -= tokens

    async def try_acquire(self, tokens: int = 1) -> bool:
        """Take tokens only if they are available now."""
        async with self._lock:
            self._top_up()
            if self._deficit_seconds(tokens):
                return False
            self.tokens -= tokens
            return True


class RateLimiter:
    """
    Shared pacing for every request to the quote service.

    Features:
    - Sustained rate with a burst allowance
    - Global pause after the service reports throttling
    """

    def __init__(self, requests_per_second: int = QUOTE_REQUESTS_PER_SECOND) -> None:
        """
        Initialize rate limiter.

        Args:
            requests_per_second: Sustained request rate.
        """
        self._bucket = TokenBucket(
            capacity=requests_per_second * DEFAULT_BURST_MULTIPLIER,
            refill_rate=float(requests_per_second),
        )
        self._paused_until_ms = 0.0
        self._throttled = 0

    async def acquire(self) -> None:
        """Wait for permission to send one request."""
        pause_ms = self._paused_until_ms - monotonic_ms()
        if pause_ms > 0:
            await asyncio.sleep(pause_ms / 1000.0)
        await self._bucket.acquire(1)

    async def try_acquire(self) -> bool:
        """Take a request slot if one is free right now."""
        if self.is_paused:
            return False
        return await self._bucket.try_acquire(1)

    def backoff(self, seconds: float | None = None) -> None:
        """
        Pause all requests after a throttling answer.

        Args:
            seconds: Pause requested by the service; a default when unknown.
        """
        delay = seconds if seconds and seconds > 0 else DEFAULT_BACKOFF_SECONDS
        self._paused_until_ms = max(self._paused_until_ms, monotonic_ms() + delay * 1000.0)
        self._throttled += 1

    @property
    def is_paused(self) -> bool:
        """Whether a throttling pause is in effect."""
        return monotonic_ms() < self._paused_until_ms

    @property
    def throttled(self) -> int:
        """Number of throttling answers seen."""
        return self._throttled

    @property
    def available(self) -> float:
        """Approximate number of available request tokens."""
        return self._bucket.tokens
