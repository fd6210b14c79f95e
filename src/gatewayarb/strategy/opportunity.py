"""
Opportunity detection.

Drives the chain simulator over the candidate catalog, computes profit per
chain, filters by the minimum-profit threshold and ranks the survivors.
Every discarded candidate is recorded in the scan report with its reason.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from gatewayarb.config.constants import (
    DEFAULT_CANDIDATE_DELAY,
    DEFAULT_MIN_PROFIT_PERCENT,
    SLIPPAGE_FLOOR_BPS,
    SLIPPAGE_TIERS,
)
from gatewayarb.core.errors import NoRouteError, SimulationIncompleteError
from gatewayarb.core.types import (
    CandidateChain,
    CandidateOutcome,
    CandidateStatus,
    Opportunity,
    ScanReport,
)
from gatewayarb.strategy.simulator import ChainSimulator
from gatewayarb.utils.math import format_profit
from gatewayarb.utils.time import get_timestamp_ms


logger = logging.getLogger(__name__)


def profit_percentage(initial: int, final: int) -> float:
    """
    Profit of a round trip in percent.

    Example:
        >>> profit_percentage(100_000_000, 100_500_000)
        0.5

    Raises:
        ValueError: If initial is not positive.
    """
    if initial <= 0:
        raise ValueError(f"Initial amount must be positive, got {initial}")
    return (final - initial) / initial * 100


def adaptive_slippage(profit_pct: float) -> int:
    """
    Slippage tolerance in bps for a given profit margin.

    Tier boundaries are inclusive: 2.0 -> 100, 1.0 -> 75, 0.5 -> 50.
    """
    for threshold, bps in SLIPPAGE_TIERS:
        if profit_pct >= threshold:
            return bps
    return SLIPPAGE_FLOOR_BPS


@dataclass
class DetectorStats:
    """Cumulative statistics across scans."""

    scans: int = 0
    candidates_evaluated: int = 0
    opportunities_found: int = 0
    best_profit_pct: float | None = None
    last_scan_ms: int = 0

    def record(self, report: ScanReport) -> None:
        """Fold one scan report into the totals."""
        self.scans += 1
        self.candidates_evaluated += len(report.outcomes)
        self.last_scan_ms = report.duration_ms

        for outcome in report.outcomes:
            if outcome.status == CandidateStatus.ACCEPTED:
                self.opportunities_found += 1
            if outcome.profit_pct is not None and (
                self.best_profit_pct is None or outcome.profit_pct > self.best_profit_pct
            ):
                self.best_profit_pct = outcome.profit_pct


class OpportunityDetector:
    """
    Scans the candidate catalog for profitable closed chains.

    Features:
    - Sequential evaluation with an inter-candidate pause
    - Inclusive minimum-profit threshold
    - Descending-profit ordering, stable by catalog order
    - Per-candidate outcomes for observability
    """

    def __init__(
        self,
        simulator: ChainSimulator,
        candidates: Sequence[CandidateChain],
        trade_amount: int,
        min_profit_percent: float = DEFAULT_MIN_PROFIT_PERCENT,
        candidate_delay: float = DEFAULT_CANDIDATE_DELAY,
    ) -> None:
        """
        Initialize the detector.

        Args:
            simulator: Chain simulator.
            candidates: Catalog of chains to evaluate.
            trade_amount: Input amount in smallest units of each start token.
            min_profit_percent: Inclusive threshold in percent.
            candidate_delay: Pause between candidates in seconds.
        """
        self._simulator = simulator
        self._candidates = tuple(candidates)
        self._trade_amount = trade_amount
        self._min_profit_percent = min_profit_percent
        self._candidate_delay = candidate_delay
        self._stats = DetectorStats()

    @property
    def candidates(self) -> tuple[CandidateChain, ...]:
        """Configured catalog."""
        return self._candidates

    @property
    def stats(self) -> DetectorStats:
        """Cumulative scan statistics."""
        return self._stats

    async def scan(self) -> list[Opportunity]:
        """
        Run one scan.

        Returns:
            Opportunities at or above the threshold, best first.
        """
        report = await self.scan_report()
        return report.opportunities

    async def scan_report(self) -> ScanReport:
        """Run one scan and return every candidate's outcome."""
        report = ScanReport(started_ms=get_timestamp_ms())

        for index, candidate in enumerate(self._candidates):
            if index and self._candidate_delay > 0:
                await asyncio.sleep(self._candidate_delay)

            outcome = await self._evaluate(candidate)
            report.outcomes.append(outcome)

            if outcome.status == CandidateStatus.ACCEPTED:
                logger.info(f"Opportunity {candidate.name}: {format_profit(outcome.profit_pct or 0.0)}")
            else:
                logger.debug(f"Discarded {candidate.name}: {outcome.status.value} {outcome.reason}")

        report.finished_ms = get_timestamp_ms()
        self._stats.record(report)

        logger.info(
            f"Scan complete: {len(report.opportunities)}/{len(report.outcomes)} "
            f"candidates profitable in {report.duration_ms}ms"
        )

        return report

    async def _evaluate(self, candidate: CandidateChain) -> CandidateOutcome:
        """Simulate one candidate and classify the result."""
        result = await self._simulator.simulate_outcome(
            candidate.start_token, candidate.intermediates, self._trade_amount
        )

        try:
            chain = result.unwrap()
        except NoRouteError as e:
            return CandidateOutcome(
                candidate=candidate,
                status=CandidateStatus.NO_ROUTE,
                failed_hop=0,
                reason=str(e),
            )
        except SimulationIncompleteError as e:
            return CandidateOutcome(
                candidate=candidate,
                status=CandidateStatus.SIMULATION_INCOMPLETE,
                failed_hop=e.hop_index,
                reason=str(e),
            )

        profit = profit_percentage(chain.input_amount, chain.final_output)

        if profit < self._min_profit_percent:
            return CandidateOutcome(
                candidate=candidate,
                status=CandidateStatus.BELOW_THRESHOLD,
                profit_pct=profit,
                reason=f"{format_profit(profit)} < {self._min_profit_percent}%",
            )

        opportunity = Opportunity(
            name=candidate.name,
            chain=chain,
            input_amount=chain.input_amount,
            final_output=chain.final_output,
            profit_pct=profit,
            slippage_bps=adaptive_slippage(profit),
            timestamp_ms=get_timestamp_ms(),
        )

        return CandidateOutcome(
            candidate=candidate,
            status=CandidateStatus.ACCEPTED,
            opportunity=opportunity,
            profit_pct=profit,
        )
