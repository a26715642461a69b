"""Trade setup generation from indicator bundles."""

from tradesetup.analysis.scoring import (
    BEARISH_CHECKS,
    BULLISH_CHECKS,
    Check,
    score_confidence,
)
from tradesetup.analysis.setup import (
    Levels,
    build_reasoning,
    calculate_confidence,
    calculate_levels,
    calculate_risk_reward,
    classify_trend,
    generate_setup,
)

__all__ = [
    "BEARISH_CHECKS",
    "BULLISH_CHECKS",
    "Check",
    "score_confidence",
    "Levels",
    "build_reasoning",
    "calculate_confidence",
    "calculate_levels",
    "calculate_risk_reward",
    "classify_trend",
    "generate_setup",
]
