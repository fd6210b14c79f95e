"""
Transaction metrics collection.

Records one metric per execution attempt and aggregates gateway versus
standard delivery performance. Appends are lock-protected so concurrent
executions can share a sink.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import orjson

from gatewayarb.core.types import TransactionMetric
from gatewayarb.utils.math import safe_divide


logger = logging.getLogger(__name__)


@dataclass
class MetricsSummary:
    """Aggregated delivery statistics."""

    total: int = 0
    gateway_total: int = 0
    standard_total: int = 0
    gateway_successes: int = 0
    standard_successes: int = 0
    avg_gateway_cost: float = 0.0  # lamports
    avg_standard_cost: float = 0.0  # lamports
    avg_gateway_latency_ms: float = 0.0
    avg_standard_latency_ms: float = 0.0
    refunds: int = 0
    wins_by_channel: dict[str, int] = field(default_factory=dict)

    @property
    def gateway_success_rate(self) -> float:
        """Gateway success rate in percent."""
        return safe_divide(self.gateway_successes, self.gateway_total) * 100

    @property
    def standard_success_rate(self) -> float:
        """Standard RPC success rate in percent."""
        return safe_divide(self.standard_successes, self.standard_total) * 100

    @property
    def success_rate_improvement(self) -> float:
        """Gateway minus standard success rate, in percentage points."""
        return self.gateway_success_rate - self.standard_success_rate

    @property
    def cost_savings_pct(self) -> float:
        """Gateway cost saving relative to standard RPC; 0 without a standard baseline."""
        return safe_divide(self.avg_standard_cost - self.avg_gateway_cost, self.avg_standard_cost) * 100

    @property
    def latency_improvement_pct(self) -> float:
        """Gateway latency reduction relative to standard RPC; 0 without a baseline."""
        return (
            safe_divide(self.avg_standard_latency_ms - self.avg_gateway_latency_ms, self.avg_standard_latency_ms)
            * 100
        )

    @property
    def failures(self) -> int:
        """Failed attempts across both classes."""
        return self.total - self.gateway_successes - self.standard_successes


def _average(values: list[int]) -> float:
    return safe_divide(sum(values), len(values))


def summarize(metrics: list[TransactionMetric]) -> MetricsSummary:
    """
    Aggregate metrics into a summary.

    Averages are over all metrics of a class; failed attempts count as
    zero cost and zero latency.
    """
    gateway = [m for m in metrics if m.used_gateway]
    standard = [m for m in metrics if not m.used_gateway]

    wins = Counter(m.channel.value for m in metrics if m.success and m.channel is not None)

    return MetricsSummary(
        total=len(metrics),
        gateway_total=len(gateway),
        standard_total=len(standard),
        gateway_successes=sum(1 for m in gateway if m.success),
        standard_successes=sum(1 for m in standard if m.success),
        avg_gateway_cost=_average([m.cost for m in gateway]),
        avg_standard_cost=_average([m.cost for m in standard]),
        avg_gateway_latency_ms=_average([m.landing_time_ms or 0 for m in gateway]),
        avg_standard_latency_ms=_average([m.landing_time_ms or 0 for m in standard]),
        refunds=sum(1 for m in gateway if m.refunded),
        wins_by_channel=dict(wins),
    )


class InMemoryMetricsSink:
    """Append-only in-memory metrics store."""

    def __init__(self) -> None:
        self._metrics: list[TransactionMetric] = []
        self._lock = threading.Lock()

    def record(self, metric: TransactionMetric) -> None:
        """Append one metric."""
        with self._lock:
            self._metrics.append(metric)
            self._on_record(metric)

        status = "SUCCESS" if metric.success else "FAILED"
        route = metric.channel.value if metric.channel else ("gateway" if metric.used_gateway else "standard")
        logger.info(f"Metric {status} [{route}] sig={metric.signature} cost={metric.cost}")

    def _on_record(self, metric: TransactionMetric) -> None:
        """Hook called under the lock after each append."""

    @property
    def metrics(self) -> list[TransactionMetric]:
        """Snapshot of recorded metrics."""
        with self._lock:
            return list(self._metrics)

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def summary(self) -> MetricsSummary:
        """Aggregate statistics over all recorded metrics."""
        return summarize(self.metrics)


class JsonLinesMetricsSink(InMemoryMetricsSink):
    """
    Metrics sink that also appends every record to a JSON-lines file.

    One object per line, in record order.
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the sink.

        Args:
            path: Destination file; parent directories are created.
        """
        super().__init__()
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Destination file."""
        return self._path

    def _on_record(self, metric: TransactionMetric) -> None:
        """Append the metric as one line."""
        line = orjson.dumps(metric.to_dict(), option=orjson.OPT_APPEND_NEWLINE)
        with self._path.open("ab") as f:
            f.write(line)


def read_metrics_file(path: Path) -> list[dict[str, object]]:
    """Load every record from a JSON-lines metrics file."""
    return [orjson.loads(line) for line in path.read_bytes().splitlines() if line.strip()]
