"""
Main bot orchestrator.

Wires the quote, detection, signing, delivery and telemetry components
together and runs the scan -> execute -> report loop.
"""

import asyncio
import logging
import signal
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from gatewayarb.config.constants import COMPARE_PAUSE_SECONDS
from gatewayarb.config.settings import Settings
from gatewayarb.core.errors import (
    ConfigurationError,
    GatewayClientError,
    QuoteClientError,
    RpcClientError,
)
from gatewayarb.core.types import (
    CandidateChain,
    Channel,
    DeliveryChannel,
    ExecutionResult,
    MetricsSink,
    ScanReport,
)
from gatewayarb.delivery.channels import GatewayChannel, StandardRpcChannel
from gatewayarb.delivery.coordinator import DeliveryCoordinator
from gatewayarb.execution.executor import Executor
from gatewayarb.execution.signer import TransactionSigner
from gatewayarb.gateway.client import GatewayClient
from gatewayarb.quote.client import JupiterClient
from gatewayarb.quote.quoter import JupiterQuoter
from gatewayarb.rpc.client import SolanaRpcClient
from gatewayarb.strategy.graph import ChainDiscovery
from gatewayarb.strategy.opportunity import OpportunityDetector
from gatewayarb.strategy.routes import DEFAULT_CANDIDATES, TOKENS
from gatewayarb.strategy.simulator import ChainSimulator
from gatewayarb.telemetry.logger import AsyncLogger, setup_logging
from gatewayarb.telemetry.metrics import InMemoryMetricsSink, JsonLinesMetricsSink
from gatewayarb.telemetry.reporter import SessionReporter
from gatewayarb.utils.math import lamports_to_sol
from gatewayarb.utils.time import LatencyTimer


logger = logging.getLogger(__name__)

# All-zero signature; looking it up proves the relay answers without side effects
PROBE_SIGNATURE = "1" * 64


@dataclass(slots=True, frozen=True)
class ConnectivityStatus:
    """Result of probing one external service."""

    name: str
    ok: bool
    detail: str


@dataclass
class BotStats:
    """Loop counters."""

    scans: int = 0
    scan_errors: int = 0
    opportunities_found: int = 0
    executions: int = 0
    successful_trades: int = 0

    @property
    def success_rate(self) -> float:
        """Successful trades per execution in percent."""
        return self.successful_trades / self.executions * 100 if self.executions else 0.0


class ArbitrageBot:
    """
    Bot lifecycle orchestrator.

    Manages:
    - Client construction from settings
    - Candidate catalog selection
    - The single-flight scan/execute loop
    - Graceful shutdown that never abandons an in-flight delivery
    """

    def __init__(
        self,
        settings: Settings,
        *,
        detector: OpportunityDetector | None = None,
        executor: Executor | None = None,
        metrics: MetricsSink | None = None,
        reporter: SessionReporter | None = None,
    ) -> None:
        """
        Initialize the bot.

        Components passed in are used as-is; the rest are built by setup().

        Args:
            settings: Application settings.
            detector: Opportunity detector.
            executor: Opportunity executor.
            metrics: Metrics sink.
            reporter: Session reporter.
        """
        self._settings = settings
        self._stop_event = asyncio.Event()
        self._running = False

        # Core components
        self._detector = detector
        self._executor = executor
        self._metrics = metrics
        self._reporter = reporter or SessionReporter()

        # Clients (initialized in setup)
        self._quote_client: JupiterClient | None = None
        self._rpc: SolanaRpcClient | None = None
        self._gateway: GatewayClient | None = None
        self._signer: TransactionSigner | None = None
        self._async_logger: AsyncLogger | None = None

        # State
        self._inflight: asyncio.Future[ExecutionResult] | None = None
        self._stats = BotStats()

    # =========================================================================
    # Setup
    # =========================================================================

    async def setup(self, configure_logging: bool = True) -> None:
        """
        Build every component from settings.

        Raises:
            ConfigurationError: On an unusable credential or catalog.
        """
        if configure_logging:
            api_key = self._settings.gateway_api_key
            self._async_logger = setup_logging(
                level=self._settings.log_level,
                log_file=self._settings.log_file,
                secrets=[
                    self._settings.private_key.get_secret_value(),
                    api_key.get_secret_value() if api_key else "",
                ],
            )

        logger.info("Initializing arbitrage bot...")

        self._signer = TransactionSigner.from_base58(self._settings.private_key.get_secret_value())

        self._quote_client = JupiterClient(
            base_url=self._settings.quote_api_url,
            timeout=self._settings.quote_timeout_seconds,
        )
        self._rpc = SolanaRpcClient(url=self._settings.solana_rpc_url)
        api_key = self._settings.gateway_api_key
        self._gateway = GatewayClient(
            url=self._settings.gateway_rpc_url,
            api_key=api_key.get_secret_value() if api_key else None,
        )

        quoter = JupiterQuoter(self._quote_client)

        if self._detector is None:
            candidates = self._build_candidates()
            simulator = ChainSimulator(quoter, slippage_bps=self._settings.max_slippage_bps)
            self._detector = OpportunityDetector(
                simulator=simulator,
                candidates=candidates,
                trade_amount=self._settings.trade_amount,
                min_profit_percent=self._settings.min_profit_percent,
                candidate_delay=self._settings.candidate_delay_seconds,
            )

        if self._metrics is None:
            metrics_file = self._settings.metrics_file
            self._metrics = JsonLinesMetricsSink(metrics_file) if metrics_file else InMemoryMetricsSink()

        if self._executor is None:
            # Standard RPC stays available for comparison runs even when not raced
            names = self._settings.channels
            if DeliveryChannel.STANDARD not in names:
                names = (*names, DeliveryChannel.STANDARD)
            coordinator = DeliveryCoordinator(
                channels=self._build_channels(names),
                gateway=self._gateway,
                timeout=self._settings.delivery_timeout_seconds,
            )
            self._executor = Executor(
                quoter=quoter,
                swap_source=self._quote_client,
                signer=self._signer,
                coordinator=coordinator,
                metrics=self._metrics,
                tip=self._settings.jito_tip_lamports,
                channels=self._settings.channels,
                optimize=self._settings.optimize_before_send,
            )

        logger.info(
            f"Wallet {self._signer.public_key} on {self._settings.solana_network}, "
            f"{len(self._detector.candidates)} candidates, "
            f"channels={','.join(c.value for c in self._settings.channels)}"
        )

    def _build_candidates(self) -> list[CandidateChain]:
        """Discovered chains when pairs are configured, else the default catalog."""
        pairs = self._settings.pairs
        if not pairs:
            return list(DEFAULT_CANDIDATES)

        discovery = ChainDiscovery(TOKENS)
        discovery.build_graph(pairs)
        chains = discovery.find_chains(
            start="SOL",
            hops=self._settings.max_hops,
            max_chains=self._settings.max_chains,
        )
        if not chains:
            raise ConfigurationError(
                f"Candidate pairs form no {self._settings.max_hops}-hop loop through SOL"
            )
        return chains

    def _build_channels(self, names: tuple[DeliveryChannel, ...]) -> list[Channel]:
        """One channel object per configured delivery channel."""
        channels: list[Channel] = []
        for name in names:
            if name is DeliveryChannel.STANDARD:
                channels.append(StandardRpcChannel(self._rpc))  # type: ignore[arg-type]
            else:
                channels.append(GatewayChannel(self._gateway, name))  # type: ignore[arg-type]
        return channels

    # =========================================================================
    # Operations
    # =========================================================================

    async def check_balance(self) -> bool:
        """
        Verify the wallet can fund one trade.

        Returns:
            True if the balance covers the position size.
        """
        if self._rpc is None or self._signer is None:
            return True

        lamports = await self._rpc.get_balance(self._signer.public_key)
        logger.info(f"Wallet balance: {lamports_to_sol(lamports):.6f} SOL")

        if lamports < self._settings.trade_amount:
            logger.error(
                f"Insufficient balance: required {self._settings.position_size_sol} SOL, "
                f"available {lamports_to_sol(lamports):.6f} SOL"
            )
            return False
        return True

    async def check_connectivity(self) -> list[ConnectivityStatus]:
        """Probe the quote service, standard RPC and relay gateway."""
        results: list[ConnectivityStatus] = []

        if self._quote_client is not None:
            try:
                quote = await self._quote_client.get_quote(
                    TOKENS["SOL"], TOKENS["USDC"], self._settings.trade_amount
                )
                results.append(ConnectivityStatus("quote", True, f"{quote.out_amount} USDC units"))
            except QuoteClientError as e:
                results.append(ConnectivityStatus("quote", False, str(e)))

        if self._rpc is not None:
            try:
                version = await self._rpc.get_version()
                results.append(ConnectivityStatus("rpc", True, f"solana-core {version}"))
            except RpcClientError as e:
                results.append(ConnectivityStatus("rpc", False, str(e)))

        if self._gateway is not None:
            keyed = "key set" if self._settings.gateway_api_key else "no key"
            try:
                await self._gateway.get_transaction_status(PROBE_SIGNATURE)
                results.append(ConnectivityStatus("gateway", True, keyed))
            except GatewayClientError as e:
                # A JSON-RPC error still proves the relay is answering
                answered = e.code is not None and e.code not in (401, 403)
                results.append(ConnectivityStatus("gateway", answered, f"{keyed}: {e}"))

        return results

    async def scan_once(self) -> ScanReport:
        """Run a single scan without executing."""
        if self._detector is None:
            raise RuntimeError("Bot is not set up")
        return await self._detector.scan_report()

    async def run_once(
        self,
        channels: tuple[DeliveryChannel, ...] | None = None,
    ) -> ExecutionResult | None:
        """
        One loop iteration: scan, then execute the best opportunity.

        The execution is shielded so cancelling the caller never abandons
        a delivery race.

        Args:
            channels: Channels to race; the configured set when None.
        """
        if self._detector is None or self._executor is None:
            raise RuntimeError("Bot is not set up")

        self._stats.scans += 1
        with LatencyTimer() as timer:
            report = await self._detector.scan_report()
        opportunities = report.opportunities
        logger.debug(f"Scanned {len(report.outcomes)} candidates in {timer.latency_ms:.0f}ms")

        if not opportunities:
            logger.info("No opportunities found")
            return None

        self._stats.opportunities_found += len(opportunities)
        best = opportunities[0]

        self._inflight = asyncio.ensure_future(self._executor.execute(best, channels=channels))
        result = await asyncio.shield(self._inflight)
        self._inflight = None

        self._stats.executions += 1
        if result.is_success:
            self._stats.successful_trades += 1

        self._reporter.print_execution(result)
        logger.info(
            f"Scans: {self._stats.scans} | Opportunities: {self._stats.opportunities_found} | "
            f"Trades: {self._stats.successful_trades}/{self._stats.executions} "
            f"({self._stats.success_rate:.1f}%)"
        )

        return result

    async def run(self, check_balance: bool = True, install_signals: bool = True) -> None:
        """
        Run the scan loop until stopped.

        Args:
            check_balance: Refuse to start on an underfunded wallet.
            install_signals: Stop on SIGINT/SIGTERM.
        """
        if install_signals:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.stop)

        if check_balance and not await self.check_balance():
            logger.error("Please fund the wallet before starting")
            return

        self._running = True
        interval = self._settings.scan_interval_seconds
        logger.info(f"Starting scan loop (interval {interval:.1f}s)")

        try:
            while not self._stop_event.is_set():
                try:
                    await self.run_once()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    self._stats.scan_errors += 1
                    logger.error(f"Loop iteration failed: {type(e).__name__}: {e}")

                await self._pause(interval)
        finally:
            self._running = False

    async def compare(
        self,
        iterations: int,
        pause: float = COMPARE_PAUSE_SECONDS,
    ) -> list[ExecutionResult]:
        """
        Alternate relay-only and standard-RPC-only executions.

        Each round scans and sends the best opportunity through the
        configured relay channels, then scans again and sends through the
        standard RPC alone. Rounds without an opportunity send nothing.

        Args:
            iterations: Number of relay/standard rounds.
            pause: Seconds to wait after each send.

        Returns:
            Every execution result, in order.
        """
        relay = tuple(c for c in self._settings.channels if c.is_gateway)
        if not relay:
            raise ConfigurationError("Comparison needs at least one relay delivery channel")

        rounds = (("gateway", relay), ("standard", (DeliveryChannel.STANDARD,)))
        results: list[ExecutionResult] = []
        logger.info(f"Running {iterations} rounds of gateway vs standard RPC")

        for i in range(1, iterations + 1):
            for label, channels in rounds:
                if self._stop_event.is_set():
                    return results

                logger.info(f"[{i}/{iterations}] {label} send")
                try:
                    result = await self.run_once(channels=channels)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    self._stats.scan_errors += 1
                    logger.error(f"{label} round {i} failed: {type(e).__name__}: {e}")
                    result = None

                if result is not None:
                    results.append(result)
                await self._pause(pause)

        return results

    async def _pause(self, seconds: float) -> None:
        """Sleep unless a stop is requested first."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except TimeoutError:
            pass

    def stop(self) -> None:
        """Request the loop to stop after the current iteration."""
        if not self._stop_event.is_set():
            logger.info("Stop requested")
        self._stop_event.set()

    async def shutdown(self, report: bool = True) -> None:
        """Wait for any in-flight execution, report and release resources."""
        logger.info("Shutting down bot...")
        self.stop()

        if self._inflight is not None and not self._inflight.done():
            logger.info("Waiting for in-flight delivery to finish")
            await asyncio.wait([self._inflight])
        self._inflight = None

        if report and self._metrics is not None:
            detector_stats = self._detector.stats if self._detector else None
            self._reporter.print_summary(self._metrics.summary(), detector_stats)

        for client in (self._quote_client, self._rpc, self._gateway):
            if client is not None:
                await client.close()

        logger.info("Bot shutdown complete")

        if self._async_logger:
            self._async_logger.stop()
            self._async_logger = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """Check if the loop is running."""
        return self._running

    @property
    def stats(self) -> BotStats:
        """Loop counters."""
        return self._stats

    @property
    def detector(self) -> OpportunityDetector | None:
        """Opportunity detector."""
        return self._detector

    @property
    def metrics(self) -> MetricsSink | None:
        """Metrics sink."""
        return self._metrics


@asynccontextmanager
async def create_bot(settings: Settings) -> AsyncIterator[ArbitrageBot]:
    """
    Create and manage bot lifecycle.

    Usage:
        async with create_bot(settings) as bot:
            await bot.run()
    """
    bot = ArbitrageBot(settings)

    try:
        await bot.setup()
        yield bot
    finally:
        await bot.shutdown()
