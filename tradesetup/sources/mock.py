"""Synthetic market data source used when live data is unavailable."""

import random
import time
from typing import Optional

from tradesetup.models import Candle, MarketData
from tradesetup.sources.base import MarketDataSource

HOUR_MS = 3_600_000


def base_price_for(symbol: str) -> float:
    if "BTC" in symbol:
        return 45000.0
    if "ETH" in symbol:
        return 2800.0
    return 1.0


class MockSource(MarketDataSource):
    """Generates a random walk of hourly candles around a symbol's base price.

    The output is deterministic for a given ``seed`` and ``end_time``.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        count: int = 100,
        end_time: Optional[int] = None,
    ):
        """Initialize the source.

        Args:
            seed: Seed for the random generator (None for nondeterministic).
            count: Number of candles to generate.
            end_time: Open time of the last candle in epoch ms (default now).
        """
        self.seed = seed
        self.count = count
        self.end_time = end_time

    def get_market_data(self, symbol: str) -> MarketData:
        rng = random.Random(self.seed)
        base = base_price_for(symbol)
        end_time = self.end_time if self.end_time is not None else int(time.time() * 1000)

        candles = []
        for i in range(self.count - 1, -1, -1):
            open_ = base + (rng.random() - 0.5) * base * 0.02
            close = open_ + (rng.random() - 0.5) * open_ * 0.01
            body = abs(open_ - close)
            high = max(open_, close) + rng.random() * body
            low = min(open_, close) - rng.random() * body
            candles.append(
                Candle(
                    timestamp=end_time - i * HOUR_MS,
                    open=open_,
                    high=high,
                    low=low,
                    close=close,
                    volume=rng.random() * 1_000_000,
                )
            )

        return MarketData(
            symbol=symbol,
            price=candles[-1].close,
            change_24h=(rng.random() - 0.5) * 10,
            volume_24h=rng.random() * 50_000_000,
            high_24h=max(c.high for c in candles),
            low_24h=min(c.low for c in candles),
            candles=tuple(candles),
        )
