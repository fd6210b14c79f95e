"""
Entry point for the arbitrage bot.

Usage:
    python -m gatewayarb run
    python -m gatewayarb scan --top 5
    python -m gatewayarb check
    python -m gatewayarb compare --iterations 3
    gatewayarb run  # if installed via pip
"""

import asyncio

import typer

from gatewayarb import __version__
from gatewayarb.config.constants import COMPARE_PAUSE_SECONDS
from gatewayarb.config.settings import Settings, load_settings
from gatewayarb.core.engine import ArbitrageBot, create_bot
from gatewayarb.core.errors import ConfigurationError
from gatewayarb.strategy.routes import symbol_of
from gatewayarb.utils.math import format_profit


# Try to use uvloop for better performance
try:
    import uvloop

    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


app = typer.Typer(
    name="gatewayarb",
    help="Circular swap arbitrage with multi-path transaction delivery.",
    add_completion=False,
    no_args_is_help=True,
)


def _run(coro: object) -> object:
    """Run a coroutine on uvloop when available."""
    if UVLOOP_ENABLED:
        return uvloop.run(coro)  # type: ignore[arg-type]
    return asyncio.run(coro)  # type: ignore[arg-type]


def _load() -> Settings:
    """Load settings or exit with status 1."""
    try:
        return load_settings()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        typer.echo("\nMake sure you have a .env file with at least:", err=True)
        typer.echo("  PRIVATE_KEY=<base58 wallet secret>", err=True)
        typer.echo("  GATEWAY_API_KEY=<relay key>", err=True)
        raise typer.Exit(1) from e


def _banner(settings: Settings) -> None:
    typer.echo(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     GATEWAY ARBITRAGE BOT v{__version__:<29}      ║
║                                                               ║
║     Circular swaps with multi-path delivery                   ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )
    typer.echo("Configuration:")
    typer.echo(f"  Network:        {settings.solana_network}")
    typer.echo(f"  Gateway:        {settings.gateway_rpc_url}")
    typer.echo(f"  Min profit:     {settings.min_profit_percent}%")
    typer.echo(f"  Position size:  {settings.position_size_sol} SOL")
    typer.echo(f"  Channels:       {settings.delivery_channels}")
    typer.echo(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
    typer.echo()


@app.command()
def run(
    skip_balance_check: bool = typer.Option(
        False,
        "--skip-balance-check",
        help="Start even if the wallet cannot fund one trade",
    ),
) -> None:
    """Scan continuously and execute the best opportunity each round."""
    settings = _load()
    _banner(settings)

    async def main() -> None:
        async with create_bot(settings) as bot:
            await bot.run(check_balance=not skip_balance_check)

    try:
        _run(main())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user")


@app.command()
def scan(
    top: int = typer.Option(5, "--top", min=1, max=50, help="Number of results to show"),
    show_rejected: bool = typer.Option(
        False,
        "--show-rejected",
        help="Also list discarded candidates and why",
    ),
) -> None:
    """Run one scan and print the best opportunities without executing."""
    settings = _load()

    async def main() -> None:
        bot = ArbitrageBot(settings)
        try:
            await bot.setup()
            report = await bot.scan_once()
        finally:
            await bot.shutdown(report=False)

        opportunities = report.opportunities
        typer.echo(f"\n{len(opportunities)} of {len(report.outcomes)} candidates profitable")

        for i, opp in enumerate(opportunities[:top], 1):
            path = " -> ".join(symbol_of(t) for t in opp.chain.tokens)
            typer.echo(f"  {i}. {path}  {format_profit(opp.profit_pct)}  slippage={opp.slippage_bps}bps")

        if show_rejected:
            for outcome in report.rejected:
                typer.echo(f"  - {outcome.candidate.name}: {outcome.status.value} {outcome.reason}")

    try:
        _run(main())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def compare(
    iterations: int = typer.Option(3, "--iterations", "-n", min=1, max=100, help="Relay/standard rounds to run"),
    pause: float = typer.Option(
        COMPARE_PAUSE_SECONDS,
        "--pause",
        min=0.0,
        help="Seconds to wait after each send",
    ),
    skip_balance_check: bool = typer.Option(
        False,
        "--skip-balance-check",
        help="Start even if the wallet cannot fund one trade",
    ),
) -> None:
    """Alternate gateway and standard RPC sends, then print the comparison."""
    settings = _load()
    _banner(settings)

    async def main() -> None:
        async with create_bot(settings) as bot:
            if not skip_balance_check and not await bot.check_balance():
                typer.echo("Wallet cannot fund one trade", err=True)
                return
            results = await bot.compare(iterations, pause=pause)
            typer.echo(f"\n{len(results)} sends completed over {iterations} rounds")

    try:
        _run(main())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user")


@app.command()
def check() -> None:
    """Check configuration and reachability of quote, RPC and relay services."""
    settings = _load()

    async def main() -> bool:
        bot = ArbitrageBot(settings)
        try:
            await bot.setup(configure_logging=False)
            statuses = await bot.check_connectivity()
        finally:
            await bot.shutdown(report=False)

        for status in statuses:
            mark = "OK  " if status.ok else "FAIL"
            typer.echo(f"  [{mark}] {status.name:<8} {status.detail}")
        return all(s.ok for s in statuses)

    try:
        healthy = _run(main())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e

    if not healthy:
        raise typer.Exit(2)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
