"""Confidence checklists for trade setups.

Each trend has a table of independent checks. Every satisfied check adds
its weight; the total is clamped to the confidence range.
"""

from typing import Callable, NamedTuple, Sequence

from tradesetup.models import IndicatorBundle

MIN_CONFIDENCE = 25
MAX_CONFIDENCE = 95
SIDEWAYS_CONFIDENCE = 45

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30


class Check(NamedTuple):
    """One weighted condition of a confidence checklist."""

    label: str
    predicate: Callable[[float, IndicatorBundle], bool]
    weight: int


BULLISH_CHECKS: tuple[Check, ...] = (
    Check("RSI not overbought", lambda price, ind: ind.rsi < RSI_OVERBOUGHT, 20),
    Check("MACD bullish", lambda price, ind: ind.macd.value > ind.macd.signal, 25),
    Check("Price above SMA20", lambda price, ind: price > ind.sma20, 20),
    Check("SMA20 above SMA50", lambda price, ind: ind.sma20 > ind.sma50, 15),
    Check(
        "Price above Bollinger middle",
        lambda price, ind: price > ind.bollinger.middle,
        20,
    ),
)

BEARISH_CHECKS: tuple[Check, ...] = (
    Check("RSI not oversold", lambda price, ind: ind.rsi > RSI_OVERSOLD, 20),
    Check("MACD bearish", lambda price, ind: ind.macd.value < ind.macd.signal, 25),
    Check("Price below SMA20", lambda price, ind: price < ind.sma20, 20),
    Check("SMA20 below SMA50", lambda price, ind: ind.sma20 < ind.sma50, 15),
    Check(
        "Price below Bollinger middle",
        lambda price, ind: price < ind.bollinger.middle,
        20,
    ),
)


def clamp_confidence(total: int) -> int:
    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, total))


def score_confidence(
    checks: Sequence[Check], price: float, indicators: IndicatorBundle
) -> int:
    """Sum the weights of the satisfied checks and clamp to [25, 95]."""
    total = sum(check.weight for check in checks if check.predicate(price, indicators))
    return clamp_confidence(total)
