"""
Type definitions for the arbitrage engine.

This module contains all dataclasses, enums and Protocol definitions used
throughout the application. Value objects are frozen and use slots=True
for memory efficiency and faster attribute access.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


# =============================================================================
# Enums
# =============================================================================


class DeliveryChannel(str, Enum):
    """Independent transaction delivery path."""

    RPC = "rpc"
    JITO = "jito"
    TRITON = "triton"
    PALADIN = "paladin"
    NOZOMI = "nozomi"
    STANDARD = "standard"

    @property
    def is_gateway(self) -> bool:
        """Whether the channel is routed through the relay gateway."""
        return self is not DeliveryChannel.STANDARD

    @property
    def is_tipped(self) -> bool:
        """Whether the channel takes an incentive tip."""
        return self in (DeliveryChannel.JITO, DeliveryChannel.NOZOMI)


class ChannelState(str, Enum):
    """State of one channel within a delivery race."""

    PENDING = "pending"
    LANDED = "landed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CandidateStatus(str, Enum):
    """Outcome of evaluating one catalog entry."""

    ACCEPTED = "accepted"
    NO_ROUTE = "no_route"
    SIMULATION_INCOMPLETE = "simulation_incomplete"
    BELOW_THRESHOLD = "below_threshold"


class ExecutionStatus(str, Enum):
    """Outcome of one execution attempt."""

    SUCCESS = "success"
    FAILED = "failed"


# =============================================================================
# Quote Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Route:
    """
    Single hop quote.

    Amounts are integral smallest-unit quantities. The raw quote payload is
    kept so a swap transaction can be requested for the same route.
    """

    input_token: str
    output_token: str
    input_amount: int
    output_amount: int
    price_impact_pct: float
    slippage_bps: int
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __repr__(self) -> str:
        return (
            f"{self.input_token[:4]}->{self.output_token[:4]}"
            f"({self.input_amount}->{self.output_amount})"
        )


@dataclass(slots=True, frozen=True)
class Chain:
    """
    Closed loop of swap hops returning to the starting token.

    Validated on construction: contiguous hops, last output equals first input.
    """

    routes: tuple[Route, ...]

    def __post_init__(self) -> None:
        """Check contiguity and closure."""
        if not self.routes:
            raise ValueError("Chain requires at least one route")

        for current, following in zip(self.routes, self.routes[1:]):
            if current.output_token != following.input_token:
                raise ValueError(
                    f"Discontiguous chain: {current.output_token} != {following.input_token}"
                )

        if self.routes[0].input_token != self.routes[-1].output_token:
            raise ValueError("Chain is not closed")

    def __len__(self) -> int:
        return len(self.routes)

    @property
    def start_token(self) -> str:
        """Token the chain starts and ends in."""
        return self.routes[0].input_token

    @property
    def input_amount(self) -> int:
        """Amount fed into the first hop."""
        return self.routes[0].input_amount

    @property
    def final_output(self) -> int:
        """Amount returned by the last hop."""
        return self.routes[-1].output_amount

    @property
    def tokens(self) -> tuple[str, ...]:
        """Token path including the closing token."""
        return tuple(r.input_token for r in self.routes) + (self.routes[-1].output_token,)


@dataclass(slots=True, frozen=True)
class CandidateChain:
    """Catalog entry: start token plus ordered intermediate tokens."""

    name: str
    start_token: str
    intermediates: tuple[str, ...]


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Opportunity:
    """
    Detected circular arbitrage opportunity.

    Contains everything needed to request the first leg's swap.
    """

    name: str
    chain: Chain
    input_amount: int
    final_output: int
    profit_pct: float
    slippage_bps: int
    timestamp_ms: int

    @property
    def first_leg(self) -> Route:
        """Hop executed on-chain."""
        return self.chain.routes[0]

    @property
    def profit_amount(self) -> int:
        """Simulated profit in smallest units of the start token."""
        return self.final_output - self.input_amount


@dataclass(slots=True, frozen=True)
class CandidateOutcome:
    """Result of evaluating one candidate during a scan."""

    candidate: CandidateChain
    status: CandidateStatus
    opportunity: Opportunity | None = None
    profit_pct: float | None = None
    failed_hop: int | None = None
    reason: str = ""


@dataclass(slots=True)
class ScanReport:
    """All candidate outcomes of one scan."""

    outcomes: list[CandidateOutcome] = field(default_factory=list)
    started_ms: int = 0
    finished_ms: int = 0

    @property
    def opportunities(self) -> list[Opportunity]:
        """Accepted opportunities, best profit first, stable by scan order."""
        accepted = [o.opportunity for o in self.outcomes if o.opportunity is not None]
        return sorted(accepted, key=lambda o: o.profit_pct, reverse=True)

    @property
    def rejected(self) -> list[CandidateOutcome]:
        """Outcomes that did not produce an opportunity."""
        return [o for o in self.outcomes if o.status != CandidateStatus.ACCEPTED]

    @property
    def duration_ms(self) -> int:
        """Wall time spent on the scan."""
        return self.finished_ms - self.started_ms


# =============================================================================
# Delivery Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ChannelLanding:
    """Confirmed landing reported by a single channel."""

    signature: str
    cost: int = 0  # lamports
    refunded: bool = False


@dataclass(slots=True, frozen=True)
class OptimizationEstimate:
    """Advisory compute budget estimate from the relay."""

    compute_units: int
    priority_fee: int
    estimated_cost: int = 0


@dataclass(slots=True)
class DeliveryAttempt:
    """
    Transient record of one delivery race.

    Lives for the duration of a single coordinator send.
    """

    transaction: str
    channels: tuple[DeliveryChannel, ...]
    states: dict[DeliveryChannel, ChannelState] = field(default_factory=dict)
    errors: dict[DeliveryChannel, str] = field(default_factory=dict)
    winner: DeliveryChannel | None = None
    landing: ChannelLanding | None = None
    elapsed_ms: int = 0
    optimization: OptimizationEstimate | None = None

    def __post_init__(self) -> None:
        """Start every channel as pending."""
        for channel in self.channels:
            self.states.setdefault(channel, ChannelState.PENDING)

    def mark(self, channel: DeliveryChannel, state: ChannelState, error: str = "") -> None:
        """Move a channel to a new state."""
        self.states[channel] = state
        if error:
            self.errors[channel] = error


@dataclass(slots=True, frozen=True)
class DeliveryResult:
    """Outcome of a successful delivery race."""

    signature: str
    channel: DeliveryChannel
    landing_time_ms: int
    actual_cost: int  # lamports
    refunded: bool


# =============================================================================
# Execution Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class TransactionMetric:
    """Durable outcome record handed to a metrics sink."""

    signature: str
    timestamp_ms: int
    used_gateway: bool
    success: bool
    cost: int  # lamports
    channel: DeliveryChannel | None = None
    landing_time_ms: int | None = None
    refunded: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serializable representation."""
        return {
            "signature": self.signature,
            "timestamp": self.timestamp_ms,
            "usedGateway": self.used_gateway,
            "deliveryMethod": self.channel.value if self.channel else None,
            "success": self.success,
            "cost": self.cost,
            "landingTime": self.landing_time_ms,
            "refunded": self.refunded,
        }


@dataclass(slots=True)
class ExecutionResult:
    """Result of executing one opportunity."""

    opportunity: Opportunity
    status: ExecutionStatus
    metric: TransactionMetric
    delivery: DeliveryResult | None = None
    error_kind: str = ""
    error_message: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution was successful."""
        return self.status == ExecutionStatus.SUCCESS


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class RouteQuoter(Protocol):
    """Quote source for single hops. Never raises; absence is None."""

    async def quote(
        self,
        input_token: str,
        output_token: str,
        amount: int,
        slippage_bps: int,
    ) -> Route | None:
        """Quote one hop."""
        ...


class SwapTransactionSource(Protocol):
    """Builds a submittable transaction for a quoted route."""

    async def get_swap_transaction(
        self,
        quote: Mapping[str, Any],
        user_public_key: str,
    ) -> str | None:
        """Return a base64 transaction or None."""
        ...


class Channel(Protocol):
    """One delivery path."""

    @property
    def name(self) -> DeliveryChannel:
        """Channel identifier."""
        ...

    async def submit(self, transaction: str, tip: int | None) -> ChannelLanding:
        """Submit and wait for confirmed landing."""
        ...


class TransactionSigner(Protocol):
    """Signs base64 transactions with the held credential."""

    @property
    def public_key(self) -> str:
        """Signer address."""
        ...

    def sign(self, transaction: str) -> str:
        """Return the signed base64 transaction."""
        ...


class MetricsSink(Protocol):
    """Append-only destination for transaction metrics."""

    def record(self, metric: TransactionMetric) -> None:
        """Append one metric."""
        ...

    def summary(self) -> Any:
        """Aggregate statistics."""
        ...

