"""Indicator bundle data models."""

from pydantic import BaseModel, Field


class MACD(BaseModel):
    """MACD line, signal line and histogram at the latest bar."""

    value: float = Field(..., description="EMA(12) - EMA(26)")
    signal: float = Field(..., description="Signal line")
    histogram: float = Field(..., description="value - signal")

    model_config = {"frozen": True}


class BollingerBands(BaseModel):
    """Bollinger envelope at the latest bar."""

    upper: float = Field(..., description="Upper band")
    middle: float = Field(..., description="Middle band (SMA)")
    lower: float = Field(..., description="Lower band")

    model_config = {"frozen": True}


class IndicatorBundle(BaseModel):
    """Fixed set of indicators computed from one candle series."""

    rsi: float = Field(..., ge=0, le=100, description="RSI(14)")
    macd: MACD
    sma20: float = Field(..., description="20-period simple moving average")
    sma50: float = Field(..., description="50-period simple moving average")
    ema20: float = Field(..., description="20-period exponential moving average")
    bollinger: BollingerBands
    support: float = Field(..., description="Lowest low of the last 20 bars")
    resistance: float = Field(..., description="Highest high of the last 20 bars")
    fallbacks: tuple[str, ...] = Field(
        default=(), description="Indicators that degraded to their fallback value"
    )

    model_config = {"frozen": True}

    def is_fallback(self, name: str) -> bool:
        """Whether the named indicator used its insufficient-history fallback."""
        return name in self.fallbacks
