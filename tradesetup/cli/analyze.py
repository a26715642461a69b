"""Analyze commands for TradeSetup CLI.

Computes indicators and a trade setup for a trading pair and displays
them without saving anything.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradesetup.analysis import generate_setup
from tradesetup.config import Settings, load_config
from tradesetup.errors import ConfigError, MarketDataError, TradeSetupError
from tradesetup.indicators import compute_indicators
from tradesetup.models import IndicatorBundle, TradeSetup, Trend
from tradesetup.sources import SUPPORTED_PAIRS, BinanceSource, MarketDataSource, MockSource
from tradesetup.tools.analysis import fetch_market_data

console = Console()

TREND_COLORS = {
    Trend.BULLISH: "green",
    Trend.BEARISH: "red",
    Trend.SIDEWAYS: "yellow",
}


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings, exiting with a readable message on error."""
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(Panel(
            f"[red]{e}[/red]",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)


def make_source(settings: Settings, offline: bool, seed: Optional[int]) -> MarketDataSource:
    """Pick the live Binance source or the synthetic one."""
    if offline:
        return MockSource(seed=seed)
    market = settings.market
    return BinanceSource(
        base_url=market.base_url,
        interval=market.interval,
        limit=market.limit,
        timeout=market.timeout,
    )


def _price(value: float) -> str:
    return f"${value:,.2f}"


def render_indicators(price: float, indicators: IndicatorBundle) -> Table:
    """Build a table of indicator values."""
    table = Table(title="Technical Indicators", show_header=True, header_style="bold")
    table.add_column("Indicator")
    table.add_column("Value", justify="right")
    table.add_column("Note", style="dim")

    def note(name: str) -> str:
        return "fallback" if indicators.is_fallback(name) else ""

    rsi_color = "red" if indicators.rsi > 70 else "green" if indicators.rsi < 30 else "white"
    table.add_row("Price", _price(price), "")
    table.add_row("RSI (14)", f"[{rsi_color}]{indicators.rsi:.2f}[/{rsi_color}]", note("rsi"))
    table.add_row("SMA 20", _price(indicators.sma20), note("sma20"))
    table.add_row("SMA 50", _price(indicators.sma50), note("sma50"))
    table.add_row("EMA 20", _price(indicators.ema20), note("ema20"))
    table.add_row(
        "MACD",
        f"{indicators.macd.value:.4f} / {indicators.macd.signal:.4f} / {indicators.macd.histogram:.4f}",
        note("macd"),
    )
    table.add_row(
        "Bollinger",
        f"{_price(indicators.bollinger.lower)} - {_price(indicators.bollinger.upper)}",
        note("bollinger"),
    )
    table.add_row(
        "Support / Resistance",
        f"{_price(indicators.support)} / {_price(indicators.resistance)}",
        note("levels"),
    )
    return table


def render_setup(symbol: str, setup: TradeSetup, timeframe: str = "1H") -> Panel:
    """Build a panel describing a trade setup."""
    color = TREND_COLORS[setup.trend]
    risk_reward = (
        f"{setup.risk_reward:.2f}" if setup.has_defined_risk_reward else "undefined"
    )
    lines = [
        f"[bold]Trend:[/bold] [{color}]{setup.trend.value.upper()}[/{color}]"
        f"   [bold]Confidence:[/bold] {setup.confidence}%",
        f"[bold]Entry:[/bold] {_price(setup.entry)}",
        f"[bold]Stop Loss:[/bold] {_price(setup.stop_loss)}",
        f"[bold]Take Profit 1:[/bold] {_price(setup.take_profit_1)}",
        f"[bold]Take Profit 2:[/bold] {_price(setup.take_profit_2)}",
        f"[bold]Risk/Reward:[/bold] {risk_reward}",
        "",
        "[bold]Reasoning:[/bold]",
    ]
    lines.extend(f"  • {line}" for line in setup.reasoning)
    return Panel(
        "\n".join(lines),
        title=f"[bold]{symbol} ({timeframe})[/bold]",
        border_style=color,
    )


@click.command()
@click.argument("symbol")
@click.option("--offline", is_flag=True, default=False, help="Use synthetic candles instead of Binance")
@click.option("--seed", type=int, default=None, help="Seed for synthetic candles")
@click.option(
    "--legacy-macd",
    is_flag=True,
    default=False,
    help="Use the single-value MACD signal line (signal equals MACD)",
)
@click.pass_context
def analyze(
    ctx: click.Context, symbol: str, offline: bool, seed: Optional[int], legacy_macd: bool
) -> None:
    """Compute indicators and a trade setup for SYMBOL.

    SYMBOL is a trading pair (e.g., BTC/USDT). Nothing is saved.

    \b
    Examples:
      tradesetup analyze BTC/USDT
      tradesetup analyze ETH/USDT --offline --seed 7
    """
    settings = get_settings((ctx.obj or {}).get("config_path"))
    symbol = symbol.upper()
    macd_signal = "single" if legacy_macd else settings.engine.macd_signal

    fallback = None if offline else MockSource(seed=seed)

    try:
        with make_source(settings, offline, seed) as source:
            market_data = fetch_market_data(symbol, source, fallback)
        indicators = compute_indicators(market_data.candles, macd_signal=macd_signal)
        setup = generate_setup(market_data.price, indicators)
    except (MarketDataError, TradeSetupError) as e:
        console.print(Panel(
            f"[red]{e}[/red]",
            title="[bold red]Analysis Failed[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    console.print(f"[dim]Based on {len(market_data.candles)} candles[/dim]")
    console.print(render_indicators(market_data.price, indicators))
    console.print(render_setup(symbol, setup))


@click.command()
def pairs() -> None:
    """List supported trading pairs."""
    for pair in SUPPORTED_PAIRS:
        console.print(pair)
