"""Chain simulation, opportunity detection and candidate discovery."""

from gatewayarb.strategy.graph import ChainDiscovery
from gatewayarb.strategy.opportunity import (
    DetectorStats,
    OpportunityDetector,
    adaptive_slippage,
    profit_percentage,
)
from gatewayarb.strategy.routes import DEFAULT_CANDIDATES, TOKENS
from gatewayarb.strategy.simulator import ChainSimulator, SimulationOutcome


__all__ = [
    "DEFAULT_CANDIDATES",
    "TOKENS",
    "ChainDiscovery",
    "ChainSimulator",
    "DetectorStats",
    "OpportunityDetector",
    "SimulationOutcome",
    "adaptive_slippage",
    "profit_percentage",
]
