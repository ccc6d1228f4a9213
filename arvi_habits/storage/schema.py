# arvi_habits/storage/schema.py
"""
Database schema definition for SQLite habit series persistence.

Provides DDL for tables, indexes, and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 1

SERIES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS habit_series (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    rank TEXT NOT NULL CHECK(rank IN ('bronze', 'silver', 'golden', 'diamond')),
    total_score INTEGER NOT NULL DEFAULT 0 CHECK(total_score >= 0),
    created_at TEXT NOT NULL,
    last_activity_at TEXT NOT NULL
)
"""

ACTIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS habit_actions (
    id TEXT PRIMARY KEY,
    series_id TEXT NOT NULL REFERENCES habit_series(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    name TEXT NOT NULL,
    description TEXT NOT NULL,
    difficulty TEXT NOT NULL CHECK(difficulty IN ('easy', 'moderate', 'challenging')),
    UNIQUE(series_id, position)
)
"""

USER_STATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS user_state (
    user_id TEXT PRIMARY KEY,
    active_series INTEGER NOT NULL DEFAULT 0 CHECK(active_series >= 0),
    updated_at TEXT NOT NULL
)
"""

# Listing a user's series newest first
SERIES_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_series_user_created ON habit_series(user_id, created_at)"
)


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def configure_connection(db: aiosqlite.Connection) -> None:
    """Per-connection pragmas (foreign keys and busy timeout are not persistent)."""
    await db.execute("PRAGMA busy_timeout=5000")
    await db.execute("PRAGMA foreign_keys=ON")


async def init_db(db_path: str) -> None:
    """
    Initialize database schema with WAL mode and optimal settings.

    Args:
        db_path: Path to SQLite database file

    Settings:
        - WAL mode: Concurrent reads + writes
        - synchronous=NORMAL: Good durability/performance balance
        - busy_timeout=5000ms: Retry on SQLITE_BUSY
        - foreign_keys=ON: Enforce constraints
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA synchronous=NORMAL")
        await configure_connection(db)

        await db.execute(SERIES_TABLE_SQL)
        await db.execute(ACTIONS_TABLE_SQL)
        await db.execute(USER_STATE_TABLE_SQL)
        await db.execute(SERIES_INDEX_SQL)

        current_version = await _get_schema_version(db)
        if current_version < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"New database initialized at v{SCHEMA_VERSION}")
        elif current_version > SCHEMA_VERSION:
            logger.warning(
                f"Database schema v{current_version} is newer than supported v{SCHEMA_VERSION}"
            )

        await db.commit()

        logger.info(f"Initialized database at {db_path} (schema v{SCHEMA_VERSION})")
