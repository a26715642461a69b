"""Base market data source interface for TradeSetup."""

from abc import ABC, abstractmethod

from tradesetup.models import MarketData

SUPPORTED_PAIRS = [
    "BTC/USDT", "ETH/USDT", "BNB/USDT", "ADA/USDT", "XRP/USDT",
    "SOL/USDT", "DOT/USDT", "DOGE/USDT", "AVAX/USDT", "MATIC/USDT",
    "LINK/USDT", "UNI/USDT", "LTC/USDT", "ATOM/USDT", "FTM/USDT",
]


class MarketDataSource(ABC):
    """Abstract base class for market data sources.

    Implementations supply a chronologically ordered candle series and a
    current price per symbol. They do not retry; the caller decides what
    to do on failure.
    """

    @abstractmethod
    def get_market_data(self, symbol: str) -> MarketData:
        """Get the current price, 24h statistics and recent candles.

        Args:
            symbol: Trading pair (e.g., "BTC/USDT").

        Returns:
            MarketData with candles ordered oldest first.

        Raises:
            MarketDataError: If the data cannot be retrieved.
        """
        pass

    def get_supported_pairs(self) -> list[str]:
        """List the trading pairs offered for analysis."""
        return list(SUPPORTED_PAIRS)

    def close(self) -> None:
        """Release any resources held by the source."""

    def __enter__(self) -> "MarketDataSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
