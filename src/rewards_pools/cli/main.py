"""CLI for rewards pools."""

import asyncio
import json
import logging
from decimal import Decimal
from enum import StrEnum

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.traceback import install

from rewards_pools.core.models import Summary
from rewards_pools.core.units import format_units
from rewards_pools.data import PoolRegistry, load_registry
from rewards_pools.pools import COHORTS, RewardsPool, from_pool
from rewards_pools.rpc.provider import ApeConnection

install(show_locals=False)

app = typer.Typer(
    name="rewards-pools",
    help="Inspect rewards pools and stake into them",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


class Cohort(StrEnum):
    """Registry cohorts selectable from the command line."""

    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"
    WEEK_ONE = "week-one"
    WEEK_TWO = "week-two"
    PAST = "past"


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _connect(registry: PoolRegistry, network: str | None, account: str | None = None) -> ApeConnection:
    """
    Connect to the registry's chain.

    Raises
    ------
    typer.Exit
        If connection fails

    """
    connection = ApeConnection(
        chain=registry.chain,
        network=network or registry.network,
        account_alias=account,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(f"Connecting to {registry.chain}:{connection.network}...", total=None)
        try:
            connection.connect()
            progress.update(task, description=f"✓ Connected to {registry.chain}")
            return connection
        except Exception as e:
            progress.stop()
            console.print(f"[bold red]Failed to connect to {registry.chain}:[/bold red] {e}")
            console.print("[yellow]Make sure you have set WEB3_INFURA_PROJECT_ID environment variable[/yellow]")
            raise typer.Exit(code=1) from e


@app.command()
def list_pools(
    cohort: Cohort = typer.Option(Cohort.ALL, "--cohort", "-c", help="Registry cohort to list"),
) -> None:
    """List pools in the registry (no network access)."""
    registry = load_registry()
    descriptors = {
        Cohort.ALL: registry.pools,
        Cohort.ACTIVE: registry.active_pools,
        Cohort.INACTIVE: registry.inactive_pools,
        Cohort.WEEK_ONE: registry.week_one_pools,
        Cohort.WEEK_TWO: registry.week_two_pools,
        Cohort.PAST: registry.all_past_pools,
    }[cohort]

    table = Table(title=f"Rewards Pools ({cohort.value})", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Address", style="blue")
    table.add_column("Staked", style="green")
    table.add_column("Reward", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("Active")

    for descriptor in descriptors:
        table.add_row(
            descriptor.name or descriptor.asset.name,
            descriptor.address,
            descriptor.asset.symbol,
            descriptor.reward_asset.symbol,
            descriptor.pool_type or "harvest",
            "✓" if descriptor.active else "-",
        )

    console.print(table)


@app.command()
def summary(
    address: str = typer.Argument(..., help="Wallet address to query"),
    cohort: Cohort = typer.Option(Cohort.ACTIVE, "--cohort", "-c", help="Registry cohort to summarize"),
    network: str | None = typer.Option(None, "--network", "-n", help="Network name (default from registry)"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Summarize a wallet's position in every pool of a cohort."""
    _setup_logging(debug)
    registry = load_registry()
    connection = _connect(registry, network)

    try:
        pools = COHORTS[cohort.value](connection, registry)
        summaries = asyncio.run(_collect_summaries(pools, address, connection))

        if format == OutputFormat.JSON:
            _output_json(summaries)
        else:
            _output_table(address, pools, summaries)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1) from e
    finally:
        connection.disconnect()


async def _collect_summaries(pools: list[RewardsPool], address: str, connection: ApeConnection) -> list[Summary]:
    try:
        return await asyncio.gather(*(pool.summary(address) for pool in pools))
    finally:
        await connection.pricing.aclose()


@app.command()
def stake(
    pool_address: str = typer.Argument(..., help="Pool contract address"),
    account: str = typer.Option(..., "--account", "-a", help="Ape account alias to sign with"),
    amount: int = typer.Option(0, "--amount", help="Raw amount to stake (0 stakes the whole balance)"),
    approve_forever: bool = typer.Option(False, "--approve-forever", help="Approve unlimited spending"),
    network: str | None = typer.Option(None, "--network", "-n", help="Network name (default from registry)"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Approve and stake the pool's asset from an Ape account."""
    _setup_logging(debug)
    registry = load_registry()
    descriptor = registry.get(pool_address)
    if descriptor is None:
        console.print(f"[bold red]Unknown pool:[/bold red] {pool_address}")
        raise typer.Exit(1)

    connection = _connect(registry, network, account)
    try:
        pool = from_pool(descriptor, connection, registry)
        receipt = asyncio.run(pool.approve_and_stake(amount, approve_forever))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1) from e
    finally:
        connection.disconnect()

    if receipt is None:
        console.print("[yellow]Balance is below the requested amount, nothing staked[/yellow]")
        return
    console.print(f"[bold green]✓ Staked in {pool.name}[/bold green] (tx {getattr(receipt, 'txn_hash', receipt)})")


def _output_table(address: str, pools: list[RewardsPool], summaries: list[Summary]) -> None:
    """Output summaries as rich table."""
    if not summaries:
        console.print("\n[yellow]No pools in this cohort[/yellow]")
        return

    table = Table(
        title=f"Pools for {address[:10]}...{address[-8:]}",
        show_header=True,
        header_style="bold magenta",
    )

    table.add_column("Pool", style="cyan")
    table.add_column("Staked", style="white", justify="right")
    table.add_column("Wallet", style="white", justify="right")
    table.add_column("Earned", style="yellow", justify="right")
    table.add_column("Share", style="blue", justify="right")
    table.add_column("USD Value", style="bold green", justify="right")

    total = Decimal("0")
    for pool, item in zip(pools, summaries, strict=True):
        decimals = pool.lptoken.decimals
        table.add_row(
            pool.name + ("" if item.is_active else " [dim](inactive)[/dim]"),
            format_units(item.staked_balance, decimals),
            format_units(item.unstaked_balance, decimals),
            format_units(item.earned_rewards, pool.reward.decimals),
            item.percentage_ownership,
            f"${item.usd_value_of:,.2f}",
        )
        total += item.usd_value_of

    console.print("\n")
    console.print(table)
    console.print(f"\n[bold]Total Value:[/bold] [bold green]${total:,.2f}[/bold green]\n")


def _output_json(summaries: list[Summary]) -> None:
    """Output summaries as JSON."""
    data = [item.to_dict() for item in summaries]
    console.print(json.dumps(data, indent=2))


if __name__ == "__main__":
    app()
