"""
CLI reporter for session and delivery performance.

Renders box-drawn summaries of detector activity and gateway versus
standard RPC delivery statistics.
"""

import sys
from typing import TextIO

from gatewayarb.core.types import ExecutionResult
from gatewayarb.strategy.opportunity import DetectorStats
from gatewayarb.telemetry.metrics import MetricsSummary
from gatewayarb.utils.math import format_profit, lamports_to_sol
from gatewayarb.utils.time import format_duration_ms


class SessionReporter:
    """
    Text reporter for the bot.

    Displays:
    - Per-execution result panel
    - Detector activity
    - Success rates, cost and latency by delivery class
    """

    # Box drawing characters
    BOX_TL = "\u2554"  # ╔
    BOX_TR = "\u2557"  # ╗
    BOX_BL = "\u255a"  # ╚
    BOX_BR = "\u255d"  # ╝
    BOX_H = "\u2550"  # ═
    BOX_V = "\u2551"  # ║
    BOX_LT = "\u2560"  # ╠
    BOX_RT = "\u2563"  # ╣

    def __init__(self, width: int = 60, output: TextIO | None = None) -> None:
        """
        Initialize reporter.

        Args:
            width: Panel width in characters.
            output: Output stream (default: stdout).
        """
        self._width = width
        self._output = output or sys.stdout

    def _pad(self, text: str, width: int) -> str:
        """Pad text to width."""
        return text.ljust(width)[:width]

    def _line(self, content: str = "") -> str:
        """Create a line with borders."""
        return f"{self.BOX_V}{self._pad('  ' + content, self._width - 2)}{self.BOX_V}"

    def _divider(self) -> str:
        """Create a horizontal divider."""
        return f"{self.BOX_LT}{self.BOX_H * (self._width - 2)}{self.BOX_RT}"

    def _top(self) -> str:
        return f"{self.BOX_TL}{self.BOX_H * (self._width - 2)}{self.BOX_TR}"

    def _bottom(self) -> str:
        return f"{self.BOX_BL}{self.BOX_H * (self._width - 2)}{self.BOX_BR}"

    def _write(self, lines: list[str]) -> None:
        self._output.write("\n".join(lines))
        self._output.write("\n")
        self._output.flush()

    def render_execution(self, result: ExecutionResult) -> str:
        """Render one execution outcome."""
        metric = result.metric
        status = "SUCCESS" if result.is_success else "FAILED"
        route = "Gateway" if metric.used_gateway else "Standard RPC"

        lines = [self._top(), self._line(f"{status}  {route}  {result.opportunity.name}"), self._divider()]
        lines.append(self._line(f"Signature: {metric.signature[:44]}"))
        if metric.channel is not None:
            lines.append(self._line(f"Delivery:  {metric.channel.value.upper()}"))
        lines.append(self._line(f"Cost:      {lamports_to_sol(metric.cost):.6f} SOL"))
        if metric.landing_time_ms is not None:
            lines.append(self._line(f"Landing:   {format_duration_ms(metric.landing_time_ms)}"))
        if metric.refunded:
            lines.append(self._line("Tip refunded"))
        if result.error_kind:
            lines.append(self._line(f"Error:     {result.error_kind}: {result.error_message}"[:80]))
        lines.append(self._bottom())

        return "\n".join(lines)

    def render_summary(self, summary: MetricsSummary, detector: DetectorStats | None = None) -> str:
        """Render the delivery performance report."""
        lines = [self._top(), self._line("DELIVERY PERFORMANCE REPORT"), self._divider()]

        if detector is not None:
            best = format_profit(detector.best_profit_pct) if detector.best_profit_pct is not None else "---"
            lines.append(self._line(f"Scans: {detector.scans}  Candidates: {detector.candidates_evaluated}"))
            lines.append(self._line(f"Opportunities: {detector.opportunities_found}  Best: {best}"))
            lines.append(self._divider())

        lines.append(self._line(f"Total transactions: {summary.total}"))
        lines.append(self._divider())

        lines.append(self._line("SUCCESS RATES"))
        lines.append(
            self._line(f"Gateway:      {summary.gateway_success_rate:5.1f}% ({summary.gateway_total} txs)")
        )
        lines.append(
            self._line(f"Standard RPC: {summary.standard_success_rate:5.1f}% ({summary.standard_total} txs)")
        )
        lines.append(self._line(f"Improvement:  {summary.success_rate_improvement:+5.1f}%"))
        lines.append(self._divider())

        lines.append(self._line("COST"))
        lines.append(self._line(f"Gateway avg:  {lamports_to_sol(summary.avg_gateway_cost):.6f} SOL"))
        lines.append(self._line(f"Standard avg: {lamports_to_sol(summary.avg_standard_cost):.6f} SOL"))
        lines.append(self._line(f"Savings:      {summary.cost_savings_pct:+5.1f}%"))
        lines.append(self._line(f"Tip refunds:  {summary.refunds}"))
        lines.append(self._divider())

        lines.append(self._line("LATENCY"))
        gateway_latency = format_duration_ms(summary.avg_gateway_latency_ms)
        standard_latency = format_duration_ms(summary.avg_standard_latency_ms)
        lines.append(self._line(f"Gateway avg:  {gateway_latency}"))
        lines.append(self._line(f"Standard avg: {standard_latency}"))
        lines.append(self._line(f"Improvement:  {summary.latency_improvement_pct:+5.1f}%"))

        if summary.wins_by_channel:
            lines.append(self._divider())
            wins = "  ".join(f"{c}={n}" for c, n in sorted(summary.wins_by_channel.items()))
            lines.append(self._line(f"Wins: {wins}"))

        lines.append(self._bottom())
        return "\n".join(lines)

    def print_execution(self, result: ExecutionResult) -> None:
        """Print one execution outcome."""
        self._write([self.render_execution(result)])

    def print_summary(self, summary: MetricsSummary, detector: DetectorStats | None = None) -> None:
        """Print the performance report."""
        self._write(["", self.render_summary(summary, detector)])
