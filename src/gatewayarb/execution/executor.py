"""
Opportunity execution.

Turns a detected opportunity into a landed transaction: refresh the first
leg's quote at the adaptive slippage, fetch the swap transaction, sign it
and race it through the delivery coordinator. Every attempt produces
exactly one transaction metric.
"""

import logging
from collections.abc import Sequence

from gatewayarb.config.constants import DEFAULT_TIP_LAMPORTS, FAILED_SIGNATURE
from gatewayarb.core.errors import NoSwapTransactionError
from gatewayarb.core.types import (
    DeliveryChannel,
    DeliveryResult,
    ExecutionResult,
    ExecutionStatus,
    MetricsSink,
    Opportunity,
    Route,
    RouteQuoter,
    SwapTransactionSource,
    TransactionMetric,
    TransactionSigner,
)
from gatewayarb.delivery.coordinator import DeliveryCoordinator
from gatewayarb.utils.math import format_profit
from gatewayarb.utils.time import LatencyTimer, get_timestamp_ms


logger = logging.getLogger(__name__)


class Executor:
    """
    Executes opportunities end to end.

    Features:
    - Adaptive slippage applied through a fresh first-leg quote
    - Multi-path delivery with a fixed incentive tip
    - One metric per attempt, success or failure
    - Never raises; failures are returned as results
    """

    def __init__(
        self,
        quoter: RouteQuoter,
        swap_source: SwapTransactionSource,
        signer: TransactionSigner,
        coordinator: DeliveryCoordinator,
        metrics: MetricsSink,
        tip: int = DEFAULT_TIP_LAMPORTS,
        channels: Sequence[DeliveryChannel] | None = None,
        optimize: bool = False,
    ) -> None:
        """
        Initialize executor.

        Args:
            quoter: Quote source for the first-leg refresh.
            swap_source: Swap transaction builder.
            signer: Wallet signer.
            coordinator: Delivery coordinator.
            metrics: Metrics sink.
            tip: Incentive tip in lamports for tipped channels.
            channels: Channels to race; coordinator defaults when None.
            optimize: Request an advisory relay estimate before sending.
        """
        self._quoter = quoter
        self._swap_source = swap_source
        self._signer = signer
        self._coordinator = coordinator
        self._metrics = metrics
        self._tip = tip
        self._channels = tuple(channels) if channels else None
        self._optimize = optimize

        # Statistics
        self._total_executions = 0
        self._successful_executions = 0
        self._failed_executions = 0
        self._metric_errors = 0

    async def execute(
        self,
        opportunity: Opportunity,
        channels: Sequence[DeliveryChannel] | None = None,
    ) -> ExecutionResult:
        """
        Execute one opportunity.

        Args:
            opportunity: Opportunity to execute.
            channels: Per-call channel override, e.g. standard RPC only.

        Returns:
            ExecutionResult with outcome and the recorded metric.
        """
        self._total_executions += 1
        selected = tuple(channels) if channels else self._channels

        logger.info(
            f"Executing {opportunity.name} "
            f"(expected {format_profit(opportunity.profit_pct)}, "
            f"slippage {opportunity.slippage_bps}bps)"
        )

        try:
            with LatencyTimer() as timer:
                route = await self._refresh_first_leg(opportunity)

                transaction = await self._swap_source.get_swap_transaction(
                    route.raw, self._signer.public_key
                )
                if transaction is None:
                    raise NoSwapTransactionError(
                        f"No swap transaction for {opportunity.name}"
                    )

                signed = self._signer.sign(transaction)

                delivery = await self._coordinator.send(
                    signed, self._tip, channels=selected, optimize=self._optimize
                )
        except Exception as e:
            return self._fail(opportunity, selected, e)

        self._successful_executions += 1
        metric = self._success_metric(delivery)
        self._record(metric)

        logger.info(
            f"Execution succeeded: {delivery.signature} via {delivery.channel.value} "
            f"in {timer.latency_ms:.0f}ms"
        )

        return ExecutionResult(
            opportunity=opportunity,
            status=ExecutionStatus.SUCCESS,
            metric=metric,
            delivery=delivery,
        )

    async def _refresh_first_leg(self, opportunity: Opportunity) -> Route:
        """Re-quote the first leg at the adaptive slippage, else reuse the scan."""
        leg = opportunity.first_leg
        if leg.slippage_bps == opportunity.slippage_bps:
            return leg

        route = await self._quoter.quote(
            leg.input_token, leg.output_token, leg.input_amount, opportunity.slippage_bps
        )
        if route is None:
            logger.warning(f"First-leg re-quote failed for {opportunity.name}, using scanned route")
            return leg
        return route

    def _record(self, metric: TransactionMetric) -> None:
        """Hand a metric to the sink; a sink failure never loses the result."""
        try:
            self._metrics.record(metric)
        except Exception as e:
            self._metric_errors += 1
            logger.error(f"Failed to record metric {metric.signature}: {type(e).__name__}: {e}")

    def _success_metric(self, delivery: DeliveryResult) -> TransactionMetric:
        """Metric for a landed transaction."""
        return TransactionMetric(
            signature=delivery.signature,
            timestamp_ms=get_timestamp_ms(),
            used_gateway=delivery.channel.is_gateway,
            success=True,
            cost=delivery.actual_cost,
            channel=delivery.channel,
            landing_time_ms=delivery.landing_time_ms,
            refunded=delivery.refunded,
        )

    def _fail(
        self,
        opportunity: Opportunity,
        channels: Sequence[DeliveryChannel] | None,
        error: Exception,
    ) -> ExecutionResult:
        """Record and return a failed attempt."""
        self._failed_executions += 1
        selected = channels or self._coordinator.available_channels

        metric = TransactionMetric(
            signature=FAILED_SIGNATURE,
            timestamp_ms=get_timestamp_ms(),
            used_gateway=any(c.is_gateway for c in selected),
            success=False,
            cost=0,
        )
        self._record(metric)

        logger.error(f"Execution of {opportunity.name} failed: {type(error).__name__}: {error}")

        return ExecutionResult(
            opportunity=opportunity,
            status=ExecutionStatus.FAILED,
            metric=metric,
            error_kind=type(error).__name__,
            error_message=str(error),
        )

    @property
    def stats(self) -> dict[str, int | float]:
        """Get execution statistics."""
        return {
            "total": self._total_executions,
            "successful": self._successful_executions,
            "failed": self._failed_executions,
            "metric_errors": self._metric_errors,
            "success_rate": (
                self._successful_executions / self._total_executions * 100
                if self._total_executions > 0
                else 0.0
            ),
        }
