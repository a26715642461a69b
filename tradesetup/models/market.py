"""Market data snapshot model."""

from pydantic import BaseModel, Field

from tradesetup.models.candle import Candle


class MarketData(BaseModel):
    """Current ticker statistics plus recent candle history for a symbol."""

    symbol: str = Field(..., min_length=1, description="Trading pair (e.g., 'BTC/USDT')")
    price: float = Field(..., gt=0, description="Last traded price")
    change_24h: float = Field(default=0.0, description="24h price change percent")
    volume_24h: float = Field(default=0.0, ge=0, description="24h traded volume")
    high_24h: float = Field(default=0.0, ge=0, description="24h high")
    low_24h: float = Field(default=0.0, ge=0, description="24h low")
    candles: tuple[Candle, ...] = Field(..., min_length=1, description="Candles, oldest first")

    model_config = {"frozen": True, "allow_inf_nan": False}
