"""Data models for TradeSetup."""

from tradesetup.models.candle import Candle, Series, validate_series
from tradesetup.models.indicators import MACD, BollingerBands, IndicatorBundle
from tradesetup.models.setup import Trend, TradeSetup
from tradesetup.models.market import MarketData
from tradesetup.models.user import DAILY_LIMITS, Plan, UserStats
from tradesetup.models.analysis import Analysis, AnalysisResult, AnalysisType

__all__ = [
    "Candle",
    "Series",
    "validate_series",
    "MACD",
    "BollingerBands",
    "IndicatorBundle",
    "Trend",
    "TradeSetup",
    "MarketData",
    "DAILY_LIMITS",
    "Plan",
    "UserStats",
    "Analysis",
    "AnalysisResult",
    "AnalysisType",
]
