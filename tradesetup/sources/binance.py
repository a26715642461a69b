"""Binance spot REST market data source."""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from tradesetup.errors import MarketDataError
from tradesetup.models import Candle, MarketData
from tradesetup.sources.base import MarketDataSource

logger = logging.getLogger(__name__)


def to_exchange_symbol(symbol: str) -> str:
    """Convert a display pair like 'BTC/USDT' to the exchange form 'BTCUSDT'."""
    return symbol.replace("/", "").upper()


def parse_kline(row: list[Any]) -> Candle:
    """Parse one kline row ``[openTime, open, high, low, close, volume, ...]``."""
    return Candle(
        timestamp=int(row[0]),
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )


class BinanceSource(MarketDataSource):
    """Fetches ticker statistics and hourly klines from the Binance REST API."""

    BASE_URL = "https://api.binance.com/api/v3"

    def __init__(
        self,
        base_url: str = BASE_URL,
        interval: str = "1h",
        limit: int = 100,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the source.

        Args:
            base_url: REST API base URL.
            interval: Kline interval (e.g., "1h").
            limit: Number of klines to request.
            timeout: Request timeout in seconds.
            client: Optional preconfigured httpx client (used in tests).
        """
        self.interval = interval
        self.limit = limit
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise MarketDataError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            raise MarketDataError(f"Invalid JSON from {path}: {e}") from e

    def get_market_data(self, symbol: str) -> MarketData:
        """Get ticker statistics and recent klines for a symbol."""
        pair = to_exchange_symbol(symbol)
        logger.debug("Fetching %s %s klines for %s", self.limit, self.interval, pair)

        ticker = self._get("/ticker/24hr", {"symbol": pair})
        klines = self._get(
            "/klines", {"symbol": pair, "interval": self.interval, "limit": self.limit}
        )

        try:
            candles = tuple(parse_kline(row) for row in klines)
            return MarketData(
                symbol=symbol,
                price=float(ticker["lastPrice"]),
                change_24h=float(ticker["priceChangePercent"]),
                volume_24h=float(ticker["volume"]),
                high_24h=float(ticker["highPrice"]),
                low_24h=float(ticker["lowPrice"]),
                candles=candles,
            )
        except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
            raise MarketDataError(f"Unexpected market data for {pair}: {e}") from e
