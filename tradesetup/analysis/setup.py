"""Rule-based trade setup generation.

Turns the current price and an indicator bundle into a trend, price
levels, a confidence score, a risk/reward ratio and reasoning lines.
"""

import math
from typing import NamedTuple, Optional

from tradesetup.analysis.scoring import (
    BEARISH_CHECKS,
    BULLISH_CHECKS,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    SIDEWAYS_CONFIDENCE,
    score_confidence,
)
from tradesetup.errors import InvalidPriceError
from tradesetup.models import IndicatorBundle, TradeSetup, Trend


class Levels(NamedTuple):
    entry: float
    stop_loss: float
    take_profit_1: float
    take_profit_2: float


def classify_trend(price: float, indicators: IndicatorBundle) -> Trend:
    """Classify the trend; the first matching rule wins."""
    sma20, sma50, macd = indicators.sma20, indicators.sma50, indicators.macd

    if price > sma20 and sma20 > sma50 and macd.value > macd.signal:
        return Trend.BULLISH
    if price < sma20 and sma20 < sma50 and macd.value < macd.signal:
        return Trend.BEARISH
    return Trend.SIDEWAYS


def calculate_levels(trend: Trend, price: float, indicators: IndicatorBundle) -> Levels:
    """Compute entry, stop-loss and take-profit levels for a trend.

    Sideways setups trade the range: stop at support, first target at
    resistance.
    """
    support, resistance = indicators.support, indicators.resistance
    bands = indicators.bollinger

    if trend == Trend.BULLISH:
        return Levels(
            entry=price * 1.002,
            stop_loss=max(support, bands.lower, price * 0.95),
            take_profit_1=min(resistance, bands.upper, price * 1.08),
            take_profit_2=price * 1.15,
        )

    if trend == Trend.BEARISH:
        return Levels(
            entry=price * 0.998,
            stop_loss=min(resistance, bands.upper, price * 1.05),
            take_profit_1=max(support, bands.lower, price * 0.92),
            take_profit_2=price * 0.85,
        )

    return Levels(
        entry=price,
        stop_loss=support,
        take_profit_1=resistance,
        take_profit_2=resistance * 1.02,
    )


def calculate_confidence(trend: Trend, price: float, indicators: IndicatorBundle) -> int:
    if trend == Trend.BULLISH:
        return score_confidence(BULLISH_CHECKS, price, indicators)
    if trend == Trend.BEARISH:
        return score_confidence(BEARISH_CHECKS, price, indicators)
    return SIDEWAYS_CONFIDENCE


def calculate_risk_reward(
    entry: float, stop_loss: float, take_profit: float
) -> Optional[float]:
    """Reward-to-risk ratio of the first target.

    Returns:
        ``|take_profit - entry| / |entry - stop_loss|``, or None when the
        stop distance is zero and the ratio is undefined.
    """
    risk = abs(entry - stop_loss)
    if risk == 0:
        return None
    return abs(take_profit - entry) / risk


def build_reasoning(trend: Trend, price: float, indicators: IndicatorBundle) -> list[str]:
    """Human-readable explanation lines, in evaluation order."""
    rsi = indicators.rsi
    macd = indicators.macd
    support, resistance = indicators.support, indicators.resistance

    if trend == Trend.BULLISH:
        rsi_view = (
            "room for upward movement"
            if rsi < RSI_OVERBOUGHT
            else "potential overbought condition"
        )
        macd_view = "bullish crossover" if macd.value > macd.signal else "showing weakness"
        return [
            "Bullish trend identified with price above key moving averages",
            f"RSI at {rsi:.1f} indicates {rsi_view}",
            f"MACD {macd_view}",
            f"Strong support level identified at ${support:.2f}",
            f"Target resistance at ${resistance:.2f}",
        ]

    if trend == Trend.BEARISH:
        rsi_view = (
            "room for downward movement"
            if rsi > RSI_OVERSOLD
            else "potential oversold condition"
        )
        macd_view = "bearish crossover" if macd.value < macd.signal else "showing strength"
        return [
            "Bearish trend identified with price below key moving averages",
            f"RSI at {rsi:.1f} indicates {rsi_view}",
            f"MACD {macd_view}",
            f"Strong resistance level identified at ${resistance:.2f}",
            f"Target support at ${support:.2f}",
        ]

    return [
        "Sideways market identified - range trading opportunity",
        f"Price consolidating between support ${support:.2f} and resistance ${resistance:.2f}",
        f"RSI at {rsi:.1f} suggests neutral momentum",
        "Consider waiting for clearer directional bias",
        "Risk management crucial in ranging markets",
    ]


def generate_setup(current_price: float, indicators: IndicatorBundle) -> TradeSetup:
    """Generate a trade setup from the current price and indicators.

    Args:
        current_price: Latest close or ticker price.
        indicators: Bundle from ``compute_indicators``.

    Returns:
        TradeSetup. ``risk_reward`` is None when entry equals stop-loss.

    Raises:
        InvalidPriceError: If the price is not a positive finite number.
    """
    if not math.isfinite(current_price) or current_price <= 0:
        raise InvalidPriceError(f"Current price must be positive and finite, got {current_price}")

    trend = classify_trend(current_price, indicators)
    levels = calculate_levels(trend, current_price, indicators)

    return TradeSetup(
        trend=trend,
        entry=levels.entry,
        stop_loss=levels.stop_loss,
        take_profit_1=levels.take_profit_1,
        take_profit_2=levels.take_profit_2,
        confidence=calculate_confidence(trend, current_price, indicators),
        risk_reward=calculate_risk_reward(
            levels.entry, levels.stop_loss, levels.take_profit_1
        ),
        reasoning=tuple(build_reasoning(trend, current_price, indicators)),
    )
