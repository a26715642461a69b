"""Candle (OHLCV) data model."""

from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator

from tradesetup.errors import InvalidSeriesError


class Candle(BaseModel):
    """Represents a single OHLCV candle."""

    timestamp: int = Field(..., ge=0, description="Candle open time (epoch milliseconds)")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: float = Field(..., ge=0, description="Traded volume")

    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def _check_range(self) -> "Candle":
        if self.low > min(self.open, self.close):
            raise ValueError(
                f"low {self.low} is above open/close ({self.open}, {self.close})"
            )
        if self.high < max(self.open, self.close):
            raise ValueError(
                f"high {self.high} is below open/close ({self.open}, {self.close})"
            )
        return self

    @property
    def opened_at(self) -> datetime:
        """Candle open time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


# A series is ordered oldest first.
Series = Sequence[Candle]


def validate_series(candles: Series) -> None:
    """Check the series-level contract.

    Args:
        candles: Candles ordered oldest first.

    Raises:
        InvalidSeriesError: If the series is empty or its timestamps are
            not strictly increasing.
    """
    if not candles:
        raise InvalidSeriesError("Candle series is empty")

    for i in range(1, len(candles)):
        prev, curr = candles[i - 1].timestamp, candles[i].timestamp
        if curr <= prev:
            raise InvalidSeriesError(
                f"Timestamps must be strictly increasing: "
                f"index {i} has {curr} after {prev}"
            )
