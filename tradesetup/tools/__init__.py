"""Orchestration tools for TradeSetup.

These tools combine market data sources, the indicator engine, the
setup generator and the SQLite store.
"""

from tradesetup.tools.analysis import (
    analyze_chart,
    build_analysis,
    fetch_market_data,
    get_user_analyses,
)
from tradesetup.tools.users import (
    consume_analysis_quota,
    get_all_users,
    get_user_stats,
    initialize_user,
    reset_user_quota,
    update_user_plan,
)

__all__ = [
    # Analysis tools
    "analyze_chart",
    "build_analysis",
    "fetch_market_data",
    "get_user_analyses",
    # User tools
    "consume_analysis_quota",
    "get_all_users",
    "get_user_stats",
    "initialize_user",
    "reset_user_quota",
    "update_user_plan",
]
