"""Tests for the SQLite data store."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradesetup.analysis import generate_setup
from tradesetup.db.store import DataStore
from tradesetup.indicators import compute_indicators
from tradesetup.models import Analysis, AnalysisType, Candle, Plan, UserStats

HOUR_MS = 3_600_000
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


def make_candles(closes: list[float]) -> list[Candle]:
    return [
        Candle(
            timestamp=1_700_000_000_000 + i * HOUR_MS,
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=1234.5,
        )
        for i, close in enumerate(closes)
    ]


def make_analysis(
    closes: list[float],
    analysis_id: str = "analysis_1",
    user_id: str = "alice",
    created_at: datetime = NOW,
) -> Analysis:
    candles = make_candles(closes)
    indicators = compute_indicators(candles)
    return Analysis(
        id=analysis_id,
        user_id=user_id,
        symbol="BTC/USDT",
        analysis_type=AnalysisType.LIVE,
        timeframe="1H",
        setup=generate_setup(candles[-1].close, indicators),
        indicators=indicators,
        created_at=created_at,
    )


class TestDatabaseSchemaCompleteness:

    def test_schema_completeness(self, temp_db: DataStore):
        tables = temp_db.get_tables()
        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_reopen_existing_database(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "test.db"
            DataStore(db_path)
            store = DataStore(db_path)
            assert set(DataStore.REQUIRED_TABLES) <= set(store.get_tables())


class TestCandles:

    def test_save_and_get_oldest_first(self, temp_db: DataStore):
        candles = make_candles([100.0 + i for i in range(30)])
        temp_db.save_candles("BTC/USDT", "1h", candles)
        assert temp_db.get_candles("BTC/USDT", "1h") == candles

    def test_limit_returns_most_recent(self, temp_db: DataStore):
        candles = make_candles([100.0 + i for i in range(30)])
        temp_db.save_candles("BTC/USDT", "1h", candles)
        assert temp_db.get_candles("BTC/USDT", "1h", limit=5) == candles[-5:]

    def test_upsert_on_same_timestamp(self, temp_db: DataStore):
        candles = make_candles([100.0, 101.0])
        temp_db.save_candles("BTC/USDT", "1h", candles)
        temp_db.save_candles("BTC/USDT", "1h", candles)
        assert len(temp_db.get_candles("BTC/USDT", "1h")) == 2


class TestAnalysisRoundTrip:
    """A saved analysis is reconstructed with every number unchanged."""

    def test_round_trip(self, temp_db: DataStore):
        analysis = make_analysis([100.0 + i * 0.37 for i in range(80)])
        temp_db.save_analysis(analysis)
        [restored] = temp_db.get_analyses("alice")
        assert restored == analysis

    def test_undefined_risk_reward_round_trip(self, temp_db: DataStore):
        candles = [
            Candle(timestamp=i, open=100, high=100, low=100, close=100, volume=0)
            for i in range(30)
        ]
        indicators = compute_indicators(candles)
        analysis = make_analysis([100.0]).model_copy(
            update={"setup": generate_setup(100.0, indicators), "indicators": indicators}
        )
        assert analysis.setup.risk_reward is None
        temp_db.save_analysis(analysis)
        [restored] = temp_db.get_analyses("alice")
        assert restored.setup.risk_reward is None

    @given(
        closes=st.lists(
            st.floats(min_value=0.001, max_value=1e6, allow_nan=False),
            min_size=1,
            max_size=80,
        )
    )
    @settings(max_examples=30, deadline=None)
    def test_numeric_fields_exact(self, closes: list[float]):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            analysis = make_analysis(closes)
            store.save_analysis(analysis)
            [restored] = store.get_analyses("alice")
            assert restored.setup == analysis.setup
            assert restored.indicators == analysis.indicators

    def test_newest_first_and_limit(self, temp_db: DataStore):
        closes = [100.0 + i for i in range(40)]
        for i in range(5):
            temp_db.save_analysis(
                make_analysis(closes, f"analysis_{i}", created_at=NOW + timedelta(minutes=i))
            )
        temp_db.save_analysis(make_analysis(closes, "analysis_bob", user_id="bob"))

        analyses = temp_db.get_analyses("alice", limit=3)
        assert [a.id for a in analyses] == ["analysis_4", "analysis_3", "analysis_2"]


class TestUsers:

    def test_save_and_get(self, temp_db: DataStore):
        user = UserStats(
            id="user_1",
            user_id="alice",
            email="alice@example.com",
            plan=Plan.PRO,
            daily_limit=999,
            created_at=NOW,
            last_quota_reset=NOW,
        )
        temp_db.save_user(user)
        assert temp_db.get_user("alice") == user
        assert temp_db.get_user("nobody") is None

    def test_update_in_place(self, temp_db: DataStore):
        user = UserStats(id="user_1", user_id="alice", created_at=NOW, last_quota_reset=NOW)
        temp_db.save_user(user)
        temp_db.save_user(user.model_copy(update={"analyses_used_today": 2, "last_analysis_at": NOW}))
        stored = temp_db.get_user("alice")
        assert stored.analyses_used_today == 2
        assert stored.last_analysis_at == NOW
        assert len(temp_db.get_users()) == 1
