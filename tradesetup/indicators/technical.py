"""Technical indicator calculations for trade setup generation.

Every indicator is a small policy function over plain price lists. When
the input is shorter than the indicator's lookback, the function returns a
documented fallback value instead of failing, and flags the result as a
fallback so callers (and tests) can tell the degraded path apart from a
computed value.

All functions are pure: no I/O, no module state, no randomness.
"""

import math
from typing import Literal, NamedTuple, Optional, Sequence

from tradesetup.models import (
    MACD,
    BollingerBands,
    IndicatorBundle,
    Series,
    validate_series,
)

RSI_PERIOD = 14
SMA_SHORT_PERIOD = 20
SMA_LONG_PERIOD = 50
EMA_PERIOD = 20
MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9
BOLLINGER_PERIOD = 20
BOLLINGER_WIDTH = 2.0
LEVELS_LOOKBACK = 20

# Neutral RSI returned when there are not enough closes.
RSI_NEUTRAL = 50.0

MacdSignalMode = Literal["rolling", "single"]
MACD_SIGNAL_MODES = ("rolling", "single")


class IndicatorResult(NamedTuple):
    """A single indicator value tagged with how it was obtained."""

    value: float
    fallback: bool


class MacdResult(NamedTuple):
    value: float
    signal: float
    histogram: float
    fallback: bool


class BandsResult(NamedTuple):
    upper: float
    middle: float
    lower: float
    fallback: bool


class LevelsResult(NamedTuple):
    support: float
    resistance: float
    fallback: bool


def calculate_rsi(prices: Sequence[float], period: int = RSI_PERIOD) -> IndicatorResult:
    """Calculate the Relative Strength Index at the latest close.

    Uses a simple average of the gains and losses over the last ``period``
    price changes (not Wilder smoothing).

    Args:
        prices: Close prices, oldest first.
        period: RSI period (default 14).

    Returns:
        RSI in [0, 100]. Exactly 50 (fallback) when fewer than
        ``period + 1`` prices are available. A window without losses
        yields 100, or 50 when it has no gains either.
    """
    if len(prices) < period + 1:
        return IndicatorResult(RSI_NEUTRAL, True)

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = prices[-i] - prices[-i - 1]
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return IndicatorResult(100.0 if avg_gain > 0 else RSI_NEUTRAL, False)

    rs = avg_gain / avg_loss
    return IndicatorResult(100 - (100 / (1 + rs)), False)


def calculate_sma(prices: Sequence[float], period: int) -> IndicatorResult:
    """Calculate the Simple Moving Average of the last ``period`` prices.

    Falls back to the most recent price when the series is too short.
    """
    if len(prices) < period:
        return IndicatorResult(prices[-1], True)

    return IndicatorResult(sum(prices[-period:]) / period, False)


def calculate_ema(prices: Sequence[float], period: int) -> IndicatorResult:
    """Calculate the Exponential Moving Average at the latest price.

    The seed is the SMA of the *first* ``period`` prices, then the average
    is folded forward through the remaining prices in order. Falls back to
    the most recent price when the series is too short.

    Args:
        prices: Price values, oldest first.
        period: Number of periods for the EMA.

    Returns:
        Latest EMA value.
    """
    if len(prices) < period:
        return IndicatorResult(prices[-1], True)

    multiplier = 2 / (period + 1)
    ema = sum(prices[:period]) / period
    for price in prices[period:]:
        ema = (price * multiplier) + (ema * (1 - multiplier))

    return IndicatorResult(ema, False)


def _ema_path(prices: Sequence[float], period: int) -> list[float]:
    """EMA as ``calculate_ema`` would report it on every prefix of ``prices``."""
    multiplier = 2 / (period + 1)
    path = []
    ema = 0.0
    for i, price in enumerate(prices):
        count = i + 1
        if count < period:
            path.append(price)
        elif count == period:
            ema = sum(prices[:period]) / period
            path.append(ema)
        else:
            ema = (price * multiplier) + (ema * (1 - multiplier))
            path.append(ema)
    return path


def calculate_macd_history(
    prices: Sequence[float],
    fast: int = MACD_FAST_PERIOD,
    slow: int = MACD_SLOW_PERIOD,
) -> list[float]:
    """Calculate the MACD line bar by bar.

    Only bars where both EMAs are seeded are included, so the line starts
    at index ``max(fast, slow) - 1`` of ``prices``. Entry ``j`` equals the
    MACD value the engine reports for ``prices[:start + j + 1]``. Empty when
    there are fewer than ``max(fast, slow)`` prices.
    """
    start = max(fast, slow) - 1
    fast_path = _ema_path(prices, fast)
    slow_path = _ema_path(prices, slow)
    return [f - s for f, s in zip(fast_path[start:], slow_path[start:])]


def calculate_macd(
    prices: Sequence[float],
    history: Optional[Sequence[float]] = None,
    fast: int = MACD_FAST_PERIOD,
    slow: int = MACD_SLOW_PERIOD,
    signal: int = MACD_SIGNAL_PERIOD,
) -> MacdResult:
    """Calculate MACD (Moving Average Convergence Divergence).

    Without ``history`` the signal line is the EMA of a one-element
    sequence holding the current MACD value, which always falls back to
    that value: ``signal == macd`` and ``histogram == 0``. Pass the MACD
    line from ``calculate_macd_history`` to get a real signal line; with
    fewer than ``signal`` entries it falls back the same way.

    Args:
        prices: Close prices, oldest first.
        history: Optional MACD line, oldest first, ending at the current bar.
        fast: Fast EMA period (default 12).
        slow: Slow EMA period (default 26).
        signal: Signal line period (default 9).

    Returns:
        MacdResult. ``fallback`` is set when any EMA involved fell back.
    """
    fast_ema = calculate_ema(prices, fast)
    slow_ema = calculate_ema(prices, slow)
    macd = fast_ema.value - slow_ema.value

    signal_input = list(history) if history else [macd]
    signal_ema = calculate_ema(signal_input, signal)

    return MacdResult(
        value=macd,
        signal=signal_ema.value,
        histogram=macd - signal_ema.value,
        fallback=fast_ema.fallback or slow_ema.fallback or signal_ema.fallback,
    )


def calculate_bollinger_bands(
    prices: Sequence[float],
    period: int = BOLLINGER_PERIOD,
    width: float = BOLLINGER_WIDTH,
) -> BandsResult:
    """Calculate Bollinger Bands.

    Population standard deviation of the last ``period`` prices around the
    SMA middle band. With fewer prices the middle band is the SMA fallback
    (latest price) and the squared deviations of the prices available are
    still divided by ``period``.
    """
    middle = calculate_sma(prices, period)
    recent = prices[-period:]

    variance = sum((price - middle.value) ** 2 for price in recent) / period
    std_dev = math.sqrt(variance)

    return BandsResult(
        upper=middle.value + (std_dev * width),
        middle=middle.value,
        lower=middle.value - (std_dev * width),
        fallback=middle.fallback,
    )


def calculate_support_resistance(
    highs: Sequence[float],
    lows: Sequence[float],
    lookback: int = LEVELS_LOOKBACK,
) -> LevelsResult:
    """Lowest low and highest high over the last ``lookback`` bars.

    Uses every bar available when the series is shorter than ``lookback``.
    """
    return LevelsResult(
        support=min(lows[-lookback:]),
        resistance=max(highs[-lookback:]),
        fallback=len(lows) < lookback,
    )


def compute_indicators(
    series: Series,
    macd_signal: MacdSignalMode = "rolling",
) -> IndicatorBundle:
    """Compute the full indicator bundle for a candle series.

    Args:
        series: Candles ordered oldest first.
        macd_signal: ``"rolling"`` derives the MACD signal from the MACD line
            evaluated at every bar where both EMAs are seeded; ``"single"``
            keeps the one-element signal where ``signal == macd``.

    Returns:
        IndicatorBundle with the names of any degraded indicators in
        ``fallbacks``.

    Raises:
        InvalidSeriesError: If the series is empty or out of order.
        ValueError: If ``macd_signal`` is not a known mode.
    """
    if macd_signal not in MACD_SIGNAL_MODES:
        raise ValueError(
            f"Invalid MACD signal mode: {macd_signal}. Must be one of {list(MACD_SIGNAL_MODES)}"
        )
    validate_series(series)

    closes = [c.close for c in series]
    highs = [c.high for c in series]
    lows = [c.low for c in series]

    rsi = calculate_rsi(closes, RSI_PERIOD)
    sma20 = calculate_sma(closes, SMA_SHORT_PERIOD)
    sma50 = calculate_sma(closes, SMA_LONG_PERIOD)
    ema20 = calculate_ema(closes, EMA_PERIOD)

    history = calculate_macd_history(closes) if macd_signal == "rolling" else None
    macd = calculate_macd(closes, history)

    bands = calculate_bollinger_bands(closes, BOLLINGER_PERIOD, BOLLINGER_WIDTH)
    levels = calculate_support_resistance(highs, lows, LEVELS_LOOKBACK)

    flags = {
        "rsi": rsi.fallback,
        "sma20": sma20.fallback,
        "sma50": sma50.fallback,
        "ema20": ema20.fallback,
        "macd": macd.fallback,
        "bollinger": bands.fallback,
        "levels": levels.fallback,
    }

    return IndicatorBundle(
        rsi=rsi.value,
        macd=MACD(value=macd.value, signal=macd.signal, histogram=macd.histogram),
        sma20=sma20.value,
        sma50=sma50.value,
        ema20=ema20.value,
        bollinger=BollingerBands(
            upper=bands.upper, middle=bands.middle, lower=bands.lower
        ),
        support=levels.support,
        resistance=levels.resistance,
        fallbacks=tuple(sorted(name for name, used in flags.items() if used)),
    )
