"""
Multi-path delivery coordinator.

Races one signed transaction across independent delivery channels and
returns the first confirmed landing. Losing channels are cancelled and
anything they report afterwards is ignored.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from gatewayarb.config.constants import DELIVERY_TIMEOUT_SECONDS
from gatewayarb.core.errors import DeliveryError, DeliveryTimeoutError
from gatewayarb.core.types import (
    Channel,
    ChannelLanding,
    ChannelState,
    DeliveryAttempt,
    DeliveryChannel,
    DeliveryResult,
    OptimizationEstimate,
)
from gatewayarb.gateway.client import GatewayClient
from gatewayarb.utils.time import monotonic_ms


logger = logging.getLogger(__name__)


class DeliveryCoordinator:
    """
    Races a transaction across delivery channels.

    Contract:
    - One task per selected channel, all started together
    - First successful landing wins; several landings observed in the same
      scheduler step are resolved by the smallest landing time
    - Remaining tasks are cancelled and marked cancelled
    - A failing channel never stops the race
    - Every channel failing raises DeliveryError; no winner within the
      timeout raises DeliveryTimeoutError
    """

    def __init__(
        self,
        channels: Iterable[Channel],
        gateway: GatewayClient | None = None,
        timeout: float = DELIVERY_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            channels: Available channels, keyed by their name.
            gateway: Relay client used for the optional optimize step.
            timeout: Upper bound on one race in seconds.
        """
        self._channels: dict[DeliveryChannel, Channel] = {c.name: c for c in channels}
        self._gateway = gateway
        self._timeout = timeout

        self._last_attempt: DeliveryAttempt | None = None
        self._sends = 0
        self._failures = 0
        self._timeouts = 0
        self._wins: Counter[DeliveryChannel] = Counter()

    @property
    def available_channels(self) -> tuple[DeliveryChannel, ...]:
        """Channels the coordinator can race."""
        return tuple(self._channels)

    @property
    def last_attempt(self) -> DeliveryAttempt | None:
        """Record of the most recent race."""
        return self._last_attempt

    async def send(
        self,
        transaction: str,
        tip: int | None,
        channels: Sequence[DeliveryChannel] | None = None,
        optimize: bool = False,
    ) -> DeliveryResult:
        """
        Deliver a signed transaction.

        Args:
            transaction: Signed base64 transaction.
            tip: Incentive tip in lamports for tipped channels.
            channels: Subset to race; all available channels when None.
            optimize: Request an advisory estimate from the relay alongside the race.

        Returns:
            Winning channel's landing.

        Raises:
            DeliveryError: Every channel failed.
            DeliveryTimeoutError: No channel landed within the timeout.
        """
        selected = tuple(channels) if channels else self.available_channels
        unknown = [c for c in selected if c not in self._channels]
        if not selected or unknown:
            raise DeliveryError(f"Unusable channel selection: {[c.value for c in unknown]}")

        self._sends += 1
        attempt = DeliveryAttempt(transaction=transaction, channels=selected)
        self._last_attempt = attempt

        # Advisory estimate runs beside the race and never delays it
        estimating = asyncio.create_task(self._optimize(transaction, selected)) if optimize else None

        start_ms = monotonic_ms()
        tasks = {
            asyncio.create_task(self._submit(self._channels[name], transaction, tip, start_ms)): name
            for name in selected
        }
        pending: set[asyncio.Task[tuple[ChannelLanding, int]]] = set(tasks)
        landed: list[tuple[int, DeliveryChannel, ChannelLanding]] = []

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        timed_out = False

        try:
            while pending and not landed:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    timed_out = True
                    break

                done, pending = await asyncio.wait(
                    pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
                )

                for task in sorted(done, key=lambda t: selected.index(tasks[t])):
                    name = tasks[task]
                    try:
                        landing, landing_time_ms = task.result()
                    except Exception as e:
                        attempt.mark(name, ChannelState.FAILED, f"{type(e).__name__}: {e}")
                        logger.info(f"[{name.value}] delivery failed: {e}")
                    else:
                        attempt.mark(name, ChannelState.LANDED)
                        landed.append((landing_time_ms, name, landing))
        finally:
            for task in pending:
                task.cancel()
                attempt.mark(tasks[task], ChannelState.CANCELLED)
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            if estimating is not None:
                attempt.optimization = await self._collect_estimate(estimating)
            attempt.elapsed_ms = int(monotonic_ms() - start_ms)

        if not landed:
            if timed_out:
                self._timeouts += 1
                raise DeliveryTimeoutError(
                    f"No channel landed within {self._timeout:.1f}s "
                    f"({len(selected)} channels)"
                )
            self._failures += 1
            details = "; ".join(f"{c.value}: {e}" for c, e in attempt.errors.items())
            raise DeliveryError(f"All channels failed: {details}")

        landing_time_ms, winner, landing = min(landed, key=lambda item: item[0])
        attempt.winner = winner
        attempt.landing = landing
        self._wins[winner] += 1

        logger.info(
            f"Landed {landing.signature[:12]} via {winner.value} in {landing_time_ms}ms "
            f"(cost={landing.cost}, refunded={landing.refunded})"
        )

        return DeliveryResult(
            signature=landing.signature,
            channel=winner,
            landing_time_ms=landing_time_ms,
            actual_cost=landing.cost,
            refunded=landing.refunded,
        )

    @staticmethod
    async def _submit(
        channel: Channel,
        transaction: str,
        tip: int | None,
        start_ms: float,
    ) -> tuple[ChannelLanding, int]:
        """Run one channel and stamp its landing time from race start."""
        landing = await channel.submit(transaction, tip)
        return landing, int(monotonic_ms() - start_ms)

    @staticmethod
    async def _collect_estimate(
        estimating: asyncio.Task[OptimizationEstimate | None],
    ) -> OptimizationEstimate | None:
        """Take the estimate if it arrived before the race ended, else drop it."""
        if estimating.done():
            return estimating.result()

        estimating.cancel()
        await asyncio.gather(estimating, return_exceptions=True)
        logger.debug("Optimize estimate not ready before the race ended")
        return None

    async def _optimize(
        self,
        transaction: str,
        selected: Sequence[DeliveryChannel],
    ) -> OptimizationEstimate | None:
        """Advisory estimate; failures are logged and ignored."""
        if self._gateway is None:
            return None

        methods = [c for c in selected if c.is_gateway]
        try:
            response = await self._gateway.optimize_transaction(transaction, channels=methods)
        except Exception as e:
            logger.warning(f"Optimize step failed, sending as-is: {type(e).__name__}: {e}")
            return None

        estimate = OptimizationEstimate(
            compute_units=response.compute_units,
            priority_fee=response.priority_fee,
            estimated_cost=response.estimated_cost,
        )
        logger.debug(
            f"Optimize estimate: cu={estimate.compute_units} "
            f"fee={estimate.priority_fee} cost={estimate.estimated_cost}"
        )
        return estimate

    @property
    def stats(self) -> dict[str, object]:
        """Get coordinator statistics."""
        return {
            "sends": self._sends,
            "failures": self._failures,
            "timeouts": self._timeouts,
            "wins": {c.value: n for c, n in self._wins.items()},
        }
