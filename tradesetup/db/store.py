"""SQLite data store for TradeSetup."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from tradesetup.models import (
    Analysis,
    AnalysisType,
    Candle,
    IndicatorBundle,
    Plan,
    TradeSetup,
    UserStats,
)


class DataStore:
    """SQLite-based data store for TradeSetup."""

    REQUIRED_TABLES = [
        "candles",
        "analyses",
        "users",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Candles table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS candles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    symbol TEXT NOT NULL,
                    timeframe TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    open REAL NOT NULL,
                    high REAL NOT NULL,
                    low REAL NOT NULL,
                    close REAL NOT NULL,
                    volume REAL NOT NULL,
                    UNIQUE(symbol, timeframe, timestamp)
                )
            """)

            # Analyses table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS analyses (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    analysis_type TEXT NOT NULL,
                    timeframe TEXT NOT NULL,
                    trend TEXT NOT NULL,
                    confidence INTEGER NOT NULL,
                    setup_json TEXT NOT NULL,
                    indicators_json TEXT NOT NULL,
                    chart_image_url TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                )
            """)

            # Users table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL UNIQUE,
                    email TEXT NOT NULL DEFAULT '',
                    plan TEXT NOT NULL,
                    analyses_used_today INTEGER NOT NULL DEFAULT 0,
                    daily_limit INTEGER NOT NULL,
                    total_analyses INTEGER NOT NULL DEFAULT 0,
                    is_admin INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    last_analysis_at TEXT,
                    last_quota_reset TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Candles ====================

    def save_candles(
        self, symbol: str, timeframe: str, candles: list[Candle]
    ) -> None:
        """Save candles to the database.

        Args:
            symbol: Trading pair.
            timeframe: Candle timeframe (e.g., '1h').
            candles: List of candles to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO candles
                (symbol, timeframe, timestamp, open, high, low, close, volume)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        symbol,
                        timeframe,
                        candle.timestamp,
                        candle.open,
                        candle.high,
                        candle.low,
                        candle.close,
                        candle.volume,
                    )
                    for candle in candles
                ],
            )
            conn.commit()
        finally:
            conn.close()

    def get_candles(
        self, symbol: str, timeframe: str, limit: Optional[int] = None
    ) -> list[Candle]:
        """Get the most recent candles, ordered oldest first.

        Args:
            symbol: Trading pair.
            timeframe: Candle timeframe.
            limit: Maximum number of candles (None for all).

        Returns:
            List of candles.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT timestamp, open, high, low, close, volume
                FROM candles
                WHERE symbol = ? AND timeframe = ?
                ORDER BY timestamp DESC
                LIMIT ?
                """,
                (symbol, timeframe, -1 if limit is None else limit),
            )
            rows = cursor.fetchall()
            return [
                Candle(
                    timestamp=row["timestamp"],
                    open=row["open"],
                    high=row["high"],
                    low=row["low"],
                    close=row["close"],
                    volume=row["volume"],
                )
                for row in reversed(rows)
            ]
        finally:
            conn.close()

    # ==================== Analyses ====================

    def save_analysis(self, analysis: Analysis) -> None:
        """Save an analysis.

        The setup and indicator bundle are stored as JSON, which preserves
        every float exactly.

        Args:
            analysis: Analysis to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO analyses
                (id, user_id, symbol, analysis_type, timeframe, trend, confidence,
                 setup_json, indicators_json, chart_image_url, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    analysis.id,
                    analysis.user_id,
                    analysis.symbol,
                    analysis.analysis_type.value,
                    analysis.timeframe,
                    analysis.setup.trend.value,
                    analysis.setup.confidence,
                    analysis.setup.model_dump_json(by_alias=True),
                    analysis.indicators.model_dump_json(),
                    analysis.chart_image_url,
                    analysis.created_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_analyses(self, user_id: str, limit: int = 10) -> list[Analysis]:
        """Get a user's analyses, newest first.

        Args:
            user_id: Owning user.
            limit: Maximum number of analyses.

        Returns:
            List of analyses.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, user_id, symbol, analysis_type, timeframe,
                       setup_json, indicators_json, chart_image_url, created_at
                FROM analyses
                WHERE user_id = ?
                ORDER BY created_at DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
            return [
                Analysis(
                    id=row["id"],
                    user_id=row["user_id"],
                    symbol=row["symbol"],
                    analysis_type=AnalysisType(row["analysis_type"]),
                    timeframe=row["timeframe"],
                    setup=TradeSetup.model_validate_json(row["setup_json"]),
                    indicators=IndicatorBundle.model_validate_json(row["indicators_json"]),
                    chart_image_url=row["chart_image_url"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    # ==================== Users ====================

    def save_user(self, user: UserStats) -> None:
        """Insert or update a user's quota record.

        Args:
            user: User to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO users
                (id, user_id, email, plan, analyses_used_today, daily_limit,
                 total_analyses, is_admin, created_at, last_analysis_at, last_quota_reset)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.id,
                    user.user_id,
                    user.email,
                    user.plan.value,
                    user.analyses_used_today,
                    user.daily_limit,
                    user.total_analyses,
                    1 if user.is_admin else 0,
                    user.created_at.isoformat(),
                    user.last_analysis_at.isoformat() if user.last_analysis_at else None,
                    user.last_quota_reset.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def _row_to_user(self, row: sqlite3.Row) -> UserStats:
        return UserStats(
            id=row["id"],
            user_id=row["user_id"],
            email=row["email"],
            plan=Plan(row["plan"]),
            analyses_used_today=row["analyses_used_today"],
            daily_limit=row["daily_limit"],
            total_analyses=row["total_analyses"],
            is_admin=bool(row["is_admin"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            last_analysis_at=(
                datetime.fromisoformat(row["last_analysis_at"])
                if row["last_analysis_at"]
                else None
            ),
            last_quota_reset=datetime.fromisoformat(row["last_quota_reset"]),
        )

    def get_user(self, user_id: str) -> Optional[UserStats]:
        """Get a user by external user ID.

        Returns:
            The user, or None if not found.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def get_users(self, limit: int = 1000) -> list[UserStats]:
        """Get all users, newest first."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM users ORDER BY created_at DESC LIMIT ?", (limit,)
            )
            return [self._row_to_user(row) for row in cursor.fetchall()]
        finally:
            conn.close()
