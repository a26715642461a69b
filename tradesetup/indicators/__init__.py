"""Technical indicators module."""

from tradesetup.indicators.technical import (
    IndicatorResult,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_macd_history,
    calculate_rsi,
    calculate_sma,
    calculate_support_resistance,
    compute_indicators,
)

__all__ = [
    "IndicatorResult",
    "calculate_bollinger_bands",
    "calculate_ema",
    "calculate_macd",
    "calculate_macd_history",
    "calculate_rsi",
    "calculate_sma",
    "calculate_support_resistance",
    "compute_indicators",
]
