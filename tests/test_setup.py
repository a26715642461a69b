"""Tests for trade setup generation."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradesetup.analysis import (
    BEARISH_CHECKS,
    BULLISH_CHECKS,
    Check,
    build_reasoning,
    calculate_levels,
    calculate_risk_reward,
    classify_trend,
    generate_setup,
    score_confidence,
)
from tradesetup.errors import InvalidPriceError
from tradesetup.indicators import compute_indicators
from tradesetup.models import MACD, BollingerBands, Candle, IndicatorBundle, Trend

HOUR_MS = 3_600_000


def make_bundle(**overrides) -> IndicatorBundle:
    """Indicator bundle that reads bullish at a price of 100."""
    values = {
        "rsi": 55.0,
        "macd": MACD(value=1.0, signal=0.5, histogram=0.5),
        "sma20": 98.0,
        "sma50": 95.0,
        "ema20": 97.0,
        "bollinger": BollingerBands(upper=106.0, middle=98.0, lower=94.0),
        "support": 90.0,
        "resistance": 110.0,
    }
    values.update(overrides)
    return IndicatorBundle(**values)


def make_bearish_bundle(**overrides) -> IndicatorBundle:
    values = {
        "rsi": 45.0,
        "macd": MACD(value=-1.0, signal=-0.5, histogram=-0.5),
        "sma20": 102.0,
        "sma50": 105.0,
        "bollinger": BollingerBands(upper=106.0, middle=102.0, lower=94.0),
    }
    values.update(overrides)
    return make_bundle(**values)


def make_candles(closes: list[float], spread: float = 1.0) -> list[Candle]:
    return [
        Candle(
            timestamp=1_700_000_000_000 + i * HOUR_MS,
            open=close,
            high=close + spread,
            low=max(0.0, close - spread),
            close=close,
            volume=500.0,
        )
        for i, close in enumerate(closes)
    ]


RISING = [100.0 + i for i in range(60)]
# Flat, then rising (or falling) by 1 per bar
RAMP = [100.0] * 30 + [101.0 + i for i in range(30)]
FALLING_RAMP = [100.0] * 30 + [99.0 - i for i in range(30)]


class TestTrendClassification:

    def test_bullish(self):
        assert classify_trend(100.0, make_bundle()) == Trend.BULLISH

    def test_bearish(self):
        assert classify_trend(100.0, make_bearish_bundle()) == Trend.BEARISH

    def test_macd_disagreement_is_sideways(self):
        bundle = make_bundle(macd=MACD(value=0.5, signal=1.0, histogram=-0.5))
        assert classify_trend(100.0, bundle) == Trend.SIDEWAYS

    def test_equal_macd_and_signal_is_sideways(self):
        bundle = make_bundle(macd=MACD(value=1.0, signal=1.0, histogram=0.0))
        assert classify_trend(100.0, bundle) == Trend.SIDEWAYS
        assert classify_trend(100.0, make_bearish_bundle(
            macd=MACD(value=-1.0, signal=-1.0, histogram=0.0)
        )) == Trend.SIDEWAYS

    def test_price_below_sma20_is_not_bullish(self):
        assert classify_trend(97.0, make_bundle()) == Trend.SIDEWAYS


class TestLevels:

    def test_bullish_levels(self):
        levels = calculate_levels(Trend.BULLISH, 100.0, make_bundle())
        assert levels.entry == pytest.approx(100.2)
        assert levels.stop_loss == 95.0  # max(support 90, lower 94, 95)
        assert levels.take_profit_1 == 106.0  # min(resistance 110, upper 106, 108)
        assert levels.take_profit_2 == pytest.approx(115.0)

    def test_bearish_levels(self):
        levels = calculate_levels(Trend.BEARISH, 100.0, make_bearish_bundle())
        assert levels.entry == pytest.approx(99.8)
        assert levels.stop_loss == 105.0  # min(resistance 110, upper 106, 105)
        assert levels.take_profit_1 == 94.0  # max(support 90, lower 94, 92)
        assert levels.take_profit_2 == pytest.approx(85.0)

    def test_sideways_levels_trade_the_range(self):
        levels = calculate_levels(Trend.SIDEWAYS, 100.0, make_bundle())
        assert levels.entry == 100.0
        assert levels.stop_loss == 90.0
        assert levels.take_profit_1 == 110.0
        assert levels.take_profit_2 == pytest.approx(112.2)


class TestConfidence:

    def test_all_bullish_checks_clamped_to_95(self):
        setup = generate_setup(100.0, make_bundle())
        assert setup.confidence == 95

    def test_overbought_rsi_drops_20(self):
        setup = generate_setup(100.0, make_bundle(rsi=75.0))
        assert setup.confidence == 80

    def test_price_below_bollinger_middle(self):
        bundle = make_bundle(
            rsi=75.0,
            bollinger=BollingerBands(upper=106.0, middle=101.0, lower=94.0),
        )
        assert generate_setup(100.0, bundle).confidence == 60

    def test_all_bearish_checks_clamped_to_95(self):
        assert generate_setup(100.0, make_bearish_bundle()).confidence == 95

    def test_oversold_rsi_drops_20_for_bearish(self):
        assert generate_setup(100.0, make_bearish_bundle(rsi=25.0)).confidence == 80

    def test_sideways_fixed_at_45(self):
        bundle = make_bundle(macd=MACD(value=0.5, signal=1.0, histogram=-0.5), rsi=10.0)
        assert generate_setup(100.0, bundle).confidence == 45

    def test_low_score_clamped_to_25(self):
        checks = (Check("always", lambda price, ind: True, 10),)
        assert score_confidence(checks, 100.0, make_bundle()) == 25

    def test_unclamped_score(self):
        checks = (
            Check("yes", lambda price, ind: True, 40),
            Check("no", lambda price, ind: False, 40),
            Check("yes again", lambda price, ind: True, 20),
        )
        assert score_confidence(checks, 100.0, make_bundle()) == 60

    def test_checklist_weights(self):
        assert [c.weight for c in BULLISH_CHECKS] == [20, 25, 20, 15, 20]
        assert [c.weight for c in BEARISH_CHECKS] == [20, 25, 20, 15, 20]


class TestRiskReward:

    def test_ratio(self):
        assert calculate_risk_reward(100.0, 95.0, 110.0) == 2.0

    def test_ratio_uses_absolute_distances(self):
        assert calculate_risk_reward(100.0, 105.0, 90.0) == 2.0

    def test_zero_stop_distance_is_undefined(self):
        assert calculate_risk_reward(100.0, 100.0, 110.0) is None

    def test_setup_ratio(self):
        setup = generate_setup(100.0, make_bundle())
        assert setup.risk_reward == pytest.approx((106.0 - 100.2) / (100.2 - 95.0))
        assert setup.has_defined_risk_reward


class TestReasoning:

    def test_bullish_lines(self):
        lines = build_reasoning(Trend.BULLISH, 100.0, make_bundle(rsi=55.34))
        assert lines == [
            "Bullish trend identified with price above key moving averages",
            "RSI at 55.3 indicates room for upward movement",
            "MACD bullish crossover",
            "Strong support level identified at $90.00",
            "Target resistance at $110.00",
        ]

    def test_bearish_lines(self):
        lines = build_reasoning(Trend.BEARISH, 100.0, make_bearish_bundle(rsi=25.0))
        assert lines == [
            "Bearish trend identified with price below key moving averages",
            "RSI at 25.0 indicates potential oversold condition",
            "MACD bearish crossover",
            "Strong resistance level identified at $110.00",
            "Target support at $90.00",
        ]

    def test_sideways_lines(self):
        lines = build_reasoning(Trend.SIDEWAYS, 100.0, make_bundle())
        assert lines[0] == "Sideways market identified - range trading opportunity"
        assert lines[1] == "Price consolidating between support $90.00 and resistance $110.00"
        assert lines[2] == "RSI at 55.0 suggests neutral momentum"
        assert len(lines) == 5

    def test_setup_carries_reasoning(self):
        setup = generate_setup(100.0, make_bundle())
        assert setup.reasoning[0].startswith("Bullish trend")


class TestGenerateSetup:

    @pytest.mark.parametrize("price", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_price_rejected(self, price: float):
        with pytest.raises(InvalidPriceError):
            generate_setup(price, make_bundle())

    def test_accelerating_rise_is_bullish(self):
        candles = make_candles(RAMP)
        setup = generate_setup(candles[-1].close, compute_indicators(candles))
        assert setup.trend == Trend.BULLISH
        # RSI is 100, so only the overbought check fails
        assert setup.confidence == 80

    def test_accelerating_fall_is_bearish(self):
        candles = make_candles(FALLING_RAMP)
        setup = generate_setup(candles[-1].close, compute_indicators(candles))
        assert setup.trend == Trend.BEARISH
        assert setup.confidence == 80

    def test_linear_rise_is_not_bearish(self):
        candles = make_candles(RISING)
        setup = generate_setup(candles[-1].close, compute_indicators(candles))
        assert setup.trend != Trend.BEARISH

    def test_rising_series_single_macd_is_sideways(self):
        candles = make_candles(RISING)
        indicators = compute_indicators(candles, macd_signal="single")
        setup = generate_setup(candles[-1].close, indicators)
        assert setup.trend == Trend.SIDEWAYS
        assert setup.confidence == 45

    def test_flat_series_has_undefined_risk_reward(self):
        candles = make_candles([100.0] * 60, spread=0.0)
        setup = generate_setup(100.0, compute_indicators(candles))
        assert setup.trend == Trend.SIDEWAYS
        assert setup.confidence == 45
        assert setup.entry == setup.stop_loss == setup.take_profit_1 == 100.0
        assert setup.risk_reward is None
        assert not setup.has_defined_risk_reward

    def test_flat_series_with_range(self):
        candles = make_candles([100.0] * 60, spread=1.0)
        setup = generate_setup(100.0, compute_indicators(candles))
        assert setup.stop_loss == 99.0
        assert setup.take_profit_1 == 101.0
        assert setup.risk_reward == 1.0

    @given(
        changes=st.lists(
            st.sampled_from([-0.03, -0.01, 0.0, 0.01, 0.03]), min_size=0, max_size=120
        )
    )
    @settings(max_examples=100, deadline=None)
    def test_setup_invariants(self, changes: list[float]):
        closes = [100.0]
        for change in changes:
            closes.append(closes[-1] * (1 + change))
        candles = make_candles(closes)

        first = generate_setup(closes[-1], compute_indicators(candles))
        second = generate_setup(closes[-1], compute_indicators(candles))

        assert first.model_dump_json() == second.model_dump_json()
        assert 25 <= first.confidence <= 95
        assert first.trend in (Trend.BULLISH, Trend.BEARISH, Trend.SIDEWAYS)
        if first.trend == Trend.SIDEWAYS:
            assert first.confidence == 45
        if first.risk_reward is not None:
            assert first.risk_reward >= 0
