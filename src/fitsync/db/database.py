"""Database connection and migration management."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, database_path: str) -> None:
        """Initialize database manager.

        Args:
            database_path: Path to SQLite database file (or ":memory:")
        """
        self.database_path = database_path
        self.conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    async def connect(self) -> None:
        """Connect to database."""
        if self.database_path != ":memory:":
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

        # Autocommit mode: transactions are opened explicitly by transaction()
        self.conn = await aiosqlite.connect(self.database_path, isolation_level=None)
        self.conn.row_factory = aiosqlite.Row

        await self.conn.execute("PRAGMA foreign_keys = ON")

    async def close(self) -> None:
        """Close database connection."""
        if self.conn:
            await self.conn.close()
            self.conn = None

    async def execute(
        self, sql: str, parameters: tuple[Any, ...] | dict[str, Any] = ()
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement.

        Args:
            sql: SQL statement
            parameters: Query parameters

        Returns:
            Database cursor
        """
        if not self.conn:
            raise RuntimeError("Database not connected")
        return await self.conn.execute(sql, parameters)

    async def fetch_all(
        self, sql: str, parameters: tuple[Any, ...] | dict[str, Any] = ()
    ) -> list[aiosqlite.Row]:
        """Execute a query and return every row."""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        await cursor.close()
        return list(rows)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Context manager for database transactions.

        Provides exclusive write access with nesting detection. If a
        transaction is already open, yields without starting a new one,
        so callers join the enclosing transaction instead of nesting.

        Yields:
            None

        Example:
            async with db.transaction():
                await db.execute(...)
        """
        if not self.conn:
            raise RuntimeError("Database not connected")

        if self._in_transaction:
            yield
            return

        async with self._write_lock:
            self._in_transaction = True
            await self.conn.execute("BEGIN")
            try:
                yield
                await self.conn.commit()
            except Exception:
                await self.conn.rollback()
                raise
            finally:
                self._in_transaction = False

    async def migrate(self) -> None:
        """Run database migrations."""
        try:
            cursor = await self.execute(
                "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
            )
            row = await cursor.fetchone()
            current_version = row[0] if row else 0
        except aiosqlite.OperationalError:
            current_version = 0

        if current_version < 1:
            await self._migrate_v1()

        if current_version < 2:
            await self._migrate_v2()

    async def _migrate_v1(self) -> None:
        """Initial database schema migration."""
        logger.info("Applying schema migration v1")
        async with self.transaction():
            await self.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at DATETIME NOT NULL
                )
            """)

            # profile_id columns carry no FOREIGN KEY so that orphaned
            # references can be stored and reported by the integrity check.
            await self.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS exercises (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    category TEXT NOT NULL DEFAULT 'strength',
                    muscle_groups TEXT DEFAULT '[]',
                    equipment TEXT DEFAULT '[]',
                    notes TEXT,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS exercise_templates (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    exercise_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    set_configuration TEXT DEFAULT '{}',
                    notes TEXT,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS training_plans (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT,
                    is_archived INTEGER NOT NULL DEFAULT 0,
                    current_session_index INTEGER NOT NULL DEFAULT 0,
                    last_used DATETIME,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS workout_sessions (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    training_plan_id TEXT,
                    name TEXT NOT NULL,
                    notes TEXT,
                    execution_count INTEGER NOT NULL DEFAULT 0,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS workout_logs (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    training_plan_id TEXT,
                    training_plan_name TEXT NOT NULL DEFAULT '',
                    session_id TEXT,
                    session_name TEXT NOT NULL DEFAULT '',
                    performed_group_ids TEXT DEFAULT '[]',
                    start_time DATETIME,
                    end_time DATETIME,
                    duration_seconds INTEGER,
                    total_volume REAL,
                    notes TEXT,
                    user_rating INTEGER,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS max_logs (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    exercise_id TEXT NOT NULL,
                    weight_entered_by_user REAL NOT NULL,
                    reps INTEGER NOT NULL,
                    date DATETIME,
                    notes TEXT,
                    estimated_1rm REAL NOT NULL DEFAULT 0,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS weight_records (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    date DATETIME NOT NULL,
                    weight REAL NOT NULL,
                    notes TEXT,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute("""
                CREATE TABLE IF NOT EXISTS height_records (
                    id TEXT PRIMARY KEY,
                    profile_id TEXT NOT NULL,
                    date DATETIME NOT NULL,
                    height REAL NOT NULL,
                    notes TEXT,
                    created_at DATETIME NOT NULL,
                    updated_at DATETIME NOT NULL
                )
            """)

            await self.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (1, datetime.now(timezone.utc).isoformat()),
            )

    async def _migrate_v2(self) -> None:
        """Indexes for per-profile lookups and age-based retention."""
        logger.info("Applying schema migration v2")
        async with self.transaction():
            for table in (
                "exercises",
                "exercise_templates",
                "training_plans",
                "workout_sessions",
                "workout_logs",
                "max_logs",
                "weight_records",
                "height_records",
            ):
                await self.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{table}_profile ON {table}(profile_id)"
                )

            await self.execute(
                "CREATE INDEX IF NOT EXISTS idx_workout_logs_start ON workout_logs(start_time)"
            )
            await self.execute(
                "CREATE INDEX IF NOT EXISTS idx_max_logs_date ON max_logs(date)"
            )
            await self.execute(
                "CREATE INDEX IF NOT EXISTS idx_workout_sessions_plan "
                "ON workout_sessions(training_plan_id)"
            )

            await self.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (2, datetime.now(timezone.utc).isoformat()),
            )

    @staticmethod
    def serialize_json(data: Any) -> str:
        """Serialize data to JSON string.

        Args:
            data: Data to serialize

        Returns:
            JSON string
        """
        return json.dumps(data, ensure_ascii=False)

    @staticmethod
    def deserialize_json(data: str | None, default: Any = None) -> Any:
        """Deserialize JSON string to data.

        Args:
            data: JSON string
            default: Value returned for empty input

        Returns:
            Deserialized data
        """
        return json.loads(data) if data else default
