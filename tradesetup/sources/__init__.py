"""Market data sources for TradeSetup."""

from tradesetup.sources.base import SUPPORTED_PAIRS, MarketDataSource
from tradesetup.sources.binance import BinanceSource
from tradesetup.sources.mock import MockSource

__all__ = [
    "SUPPORTED_PAIRS",
    "MarketDataSource",
    "BinanceSource",
    "MockSource",
]
