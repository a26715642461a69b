"""Analysis orchestration tools.

Glues a market data source, the indicator engine, the setup generator,
persistence and the user quota together. Errors are reported in the
returned ``AnalysisResult`` rather than raised.
"""

import logging
from datetime import datetime
from typing import Optional

from tradesetup.analysis import generate_setup
from tradesetup.db.store import DataStore
from tradesetup.errors import MarketDataError
from tradesetup.indicators import compute_indicators
from tradesetup.indicators.technical import MacdSignalMode
from tradesetup.models import Analysis, AnalysisResult, AnalysisType, MarketData
from tradesetup.sources import BinanceSource, MarketDataSource, MockSource
from tradesetup.tools.users import (
    utcnow,
    consume_analysis_quota,
    generate_id,
    get_user_stats,
)

logger = logging.getLogger(__name__)

LIVE_TIMEFRAME = "1H"
CANDLE_TIMEFRAME = "1h"
CACHE_LIMIT = 100
UPLOAD_TIMEFRAME = "Chart Analysis"
UPLOAD_REASONING = (
    "Analysis based on uploaded chart pattern recognition",
    "Support and resistance levels identified from chart structure",
)


def fetch_market_data(
    symbol: str,
    source: MarketDataSource,
    fallback: Optional[MarketDataSource] = None,
    store: Optional[DataStore] = None,
    timeframe: str = CANDLE_TIMEFRAME,
) -> MarketData:
    """Fetch market data, substituting cached or fallback data on failure.

    With a ``store``, candles from a successful fetch are cached, and a
    failed fetch is answered from the cache before trying ``fallback``.
    Fallback candles are never cached.

    Raises:
        MarketDataError: If the source fails and neither the cache nor a
            fallback can answer.
    """
    try:
        market_data = source.get_market_data(symbol)
    except MarketDataError as e:
        cached = []
        if store is not None:
            cached = store.get_candles(symbol, timeframe, CACHE_LIMIT)
        if cached:
            logger.warning(
                "Market data unavailable for %s, using %d cached candles: %s",
                symbol, len(cached), e,
            )
            return MarketData(symbol=symbol, price=cached[-1].close, candles=tuple(cached))
        if fallback is None:
            raise
        logger.warning("Market data unavailable for %s, using fallback: %s", symbol, e)
        return fallback.get_market_data(symbol)

    if store is not None:
        store.save_candles(symbol, timeframe, list(market_data.candles))
    return market_data


def build_analysis(
    user_id: str,
    symbol: str,
    analysis_type: AnalysisType,
    market_data: MarketData,
    chart_image_url: str = "",
    macd_signal: MacdSignalMode = "rolling",
    now: Optional[datetime] = None,
) -> Analysis:
    """Run the indicator engine and setup generator on market data."""
    now = utcnow(now)
    indicators = compute_indicators(market_data.candles, macd_signal=macd_signal)
    setup = generate_setup(market_data.price, indicators)

    if analysis_type == AnalysisType.UPLOAD:
        timeframe = UPLOAD_TIMEFRAME
        setup = setup.model_copy(
            update={"reasoning": setup.reasoning + UPLOAD_REASONING}
        )
    else:
        timeframe = LIVE_TIMEFRAME

    return Analysis(
        id=generate_id("analysis", now),
        user_id=user_id,
        symbol=symbol,
        analysis_type=analysis_type,
        timeframe=timeframe,
        setup=setup,
        indicators=indicators,
        chart_image_url=chart_image_url,
        created_at=now,
    )


def analyze_chart(
    store: DataStore,
    user_id: str,
    analysis_type: AnalysisType,
    symbol: str,
    source: Optional[MarketDataSource] = None,
    fallback: Optional[MarketDataSource] = None,
    chart_image_url: Optional[str] = None,
    macd_signal: MacdSignalMode = "rolling",
    now: Optional[datetime] = None,
) -> AnalysisResult:
    """Produce, persist and account for one trade setup.

    Args:
        store: DataStore for users and analyses.
        user_id: Requesting user.
        analysis_type: live or upload.
        symbol: Trading pair (e.g., "BTC/USDT").
        source: Market data source (default: a BinanceSource closed after use).
        fallback: Source used when ``source`` fails and no candles are cached
            (default: unseeded MockSource).
        chart_image_url: Reference to an already stored chart image.
        macd_signal: MACD signal line mode.
        now: Clock override.

    Returns:
        AnalysisResult with the saved analysis, or an error message.
    """
    if source is None:
        with BinanceSource() as live:
            return analyze_chart(
                store, user_id, analysis_type, symbol, live, fallback,
                chart_image_url, macd_signal, now,
            )

    now = utcnow(now)
    try:
        user = get_user_stats(store, user_id, now)
        if user is None:
            return AnalysisResult(success=False, error="User not found", quota_remaining=0)

        if user.analyses_used_today >= user.daily_limit:
            return AnalysisResult(
                success=False, error="Daily analysis limit reached", quota_remaining=0
            )

        market_data = fetch_market_data(
            symbol, source, fallback or MockSource(), store=store
        )
        analysis = build_analysis(
            user_id=user_id,
            symbol=symbol,
            analysis_type=analysis_type,
            market_data=market_data,
            chart_image_url=chart_image_url or "",
            macd_signal=macd_signal,
            now=now,
        )

        store.save_analysis(analysis)
        consume_analysis_quota(store, user_id, now)

        logger.info(
            "Saved %s analysis %s for %s: %s (confidence %d)",
            analysis_type.value,
            analysis.id,
            symbol,
            analysis.setup.trend.value,
            analysis.setup.confidence,
        )

        return AnalysisResult(
            success=True,
            analysis=analysis,
            quota_remaining=user.daily_limit - (user.analyses_used_today + 1),
        )

    except Exception:
        logger.exception("Analysis failed for %s", symbol)
        return AnalysisResult(
            success=False, error="Analysis failed. Please try again.", quota_remaining=0
        )


def get_user_analyses(store: DataStore, user_id: str, limit: int = 10) -> list[Analysis]:
    """Get a user's most recent analyses, newest first."""
    return store.get_analyses(user_id, limit)
