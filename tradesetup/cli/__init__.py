"""CLI commands for TradeSetup.

This package provides the command-line interface for TradeSetup,
including indicator analysis, saved analyses and user quota commands.
"""

from tradesetup.cli.main import cli, main

__all__ = ["cli", "main"]
