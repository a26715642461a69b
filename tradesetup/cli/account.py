"""User and saved-analysis commands for TradeSetup CLI."""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradesetup.cli.analyze import get_settings, make_source, render_setup
from tradesetup.config import Settings
from tradesetup.db.store import DataStore
from tradesetup.errors import UserNotFoundError
from tradesetup.models import AnalysisType, Plan, UserStats
from tradesetup.sources import MockSource
from tradesetup.tools import (
    analyze_chart,
    get_user_analyses,
    get_user_stats,
    initialize_user,
    reset_user_quota,
    update_user_plan,
)

console = Console()


def _get_data_store(settings: Settings) -> DataStore:
    return DataStore(settings.storage.db_path)


def _context_settings(ctx: click.Context) -> Settings:
    return get_settings((ctx.obj or {}).get("config_path"))


def _print_user(user: UserStats) -> None:
    console.print(Panel(
        f"[bold]User:[/bold] {user.user_id} {user.email}\n"
        f"[bold]Plan:[/bold] {user.plan.value}"
        f"{' (admin)' if user.is_admin else ''}\n"
        f"[bold]Today:[/bold] {user.analyses_used_today}/{user.daily_limit} "
        f"([green]{user.quota_remaining} remaining[/green])\n"
        f"[bold]Total analyses:[/bold] {user.total_analyses}",
        title="[bold]User Stats[/bold]",
        border_style="blue",
    ))


@click.group()
def user() -> None:
    """Manage users and their daily analysis quota."""


@user.command("init")
@click.argument("user_id")
@click.option("--email", default="", help="Contact email")
@click.pass_context
def user_init(ctx: click.Context, user_id: str, email: str) -> None:
    """Create USER_ID on the free plan (no-op if it exists)."""
    store = _get_data_store(_context_settings(ctx))
    _print_user(initialize_user(store, user_id, email))


@user.command("show")
@click.argument("user_id")
@click.pass_context
def user_show(ctx: click.Context, user_id: str) -> None:
    """Show quota usage for USER_ID."""
    store = _get_data_store(_context_settings(ctx))
    stats = get_user_stats(store, user_id)
    if stats is None:
        console.print(f"[red]User not found: {user_id}[/red]")
        raise SystemExit(1)
    _print_user(stats)


@user.command("plan")
@click.argument("user_id")
@click.argument("plan", type=click.Choice([p.value for p in Plan]))
@click.pass_context
def user_plan(ctx: click.Context, user_id: str, plan: str) -> None:
    """Change the plan of USER_ID."""
    store = _get_data_store(_context_settings(ctx))
    try:
        _print_user(update_user_plan(store, user_id, Plan(plan)))
    except UserNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


@user.command("reset")
@click.argument("user_id")
@click.pass_context
def user_reset(ctx: click.Context, user_id: str) -> None:
    """Reset today's quota for USER_ID."""
    store = _get_data_store(_context_settings(ctx))
    try:
        _print_user(reset_user_quota(store, user_id))
    except UserNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


@click.command()
@click.argument("user_id")
@click.argument("symbol")
@click.option("--upload", is_flag=True, default=False, help="Record as an uploaded-chart analysis")
@click.option("--image", "chart_image_url", default=None, help="Reference to a stored chart image")
@click.option("--offline", is_flag=True, default=False, help="Use synthetic candles instead of Binance")
@click.option("--seed", type=int, default=None, help="Seed for synthetic candles")
@click.pass_context
def run(
    ctx: click.Context,
    user_id: str,
    symbol: str,
    upload: bool,
    chart_image_url: Optional[str],
    offline: bool,
    seed: Optional[int],
) -> None:
    """Run and save an analysis of SYMBOL for USER_ID, using one quota unit.

    \b
    Examples:
      tradesetup run alice BTC/USDT
      tradesetup run alice ETH/USDT --upload --image charts/eth.png
    """
    settings = _context_settings(ctx)
    store = _get_data_store(settings)
    symbol = symbol.upper()

    with make_source(settings, offline, seed) as source:
        result = analyze_chart(
            store,
            user_id,
            AnalysisType.UPLOAD if upload else AnalysisType.LIVE,
            symbol,
            source=source,
            fallback=MockSource(seed=seed),
            chart_image_url=chart_image_url,
            macd_signal=settings.engine.macd_signal,
        )

    if not result.success:
        console.print(Panel(
            f"[red]{result.error}[/red]",
            title="[bold red]Analysis Failed[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    analysis = result.analysis
    console.print(render_setup(symbol, analysis.setup, analysis.timeframe))
    console.print(
        f"[dim]Saved as {analysis.id} - {result.quota_remaining} analyses left today[/dim]"
    )


@click.command()
@click.argument("user_id")
@click.option("--limit", "-n", default=10, show_default=True, help="Number of analyses")
@click.pass_context
def history(ctx: click.Context, user_id: str, limit: int) -> None:
    """Show recent saved analyses for USER_ID."""
    store = _get_data_store(_context_settings(ctx))
    analyses = get_user_analyses(store, user_id, limit)

    if not analyses:
        console.print(f"[dim]No analyses found for {user_id}[/dim]")
        return

    table = Table(title=f"Analyses for {user_id}", show_header=True, header_style="bold")
    table.add_column("Created")
    table.add_column("Symbol")
    table.add_column("Type")
    table.add_column("Trend")
    table.add_column("Conf.", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("R/R", justify="right")

    for analysis in analyses:
        setup = analysis.setup
        table.add_row(
            analysis.created_at.strftime("%Y-%m-%d %H:%M"),
            analysis.symbol,
            analysis.analysis_type.value,
            setup.trend.value,
            str(setup.confidence),
            f"{setup.entry:,.2f}",
            f"{setup.risk_reward:.2f}" if setup.has_defined_risk_reward else "-",
        )

    console.print(table)
