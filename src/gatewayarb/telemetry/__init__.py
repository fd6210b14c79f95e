"""Telemetry module for logging, metrics, and reporting."""

from gatewayarb.telemetry.logger import AsyncLogger, JsonLineFormatter, SecretFilter, setup_logging
from gatewayarb.telemetry.metrics import (
    InMemoryMetricsSink,
    JsonLinesMetricsSink,
    MetricsSummary,
    read_metrics_file,
    summarize,
)
from gatewayarb.telemetry.reporter import SessionReporter


__all__ = [
    "AsyncLogger",
    "InMemoryMetricsSink",
    "JsonLineFormatter",
    "JsonLinesMetricsSink",
    "MetricsSummary",
    "SecretFilter",
    "SessionReporter",
    "read_metrics_file",
    "setup_logging",
    "summarize",
]
