# arvi_habits/storage/sqlite.py
"""
SQLite-backed repositories.

Provides async persistence with WAL mode and IMMEDIATE transactions.
Both repositories share one database file. Database errors surface as
PersistenceError.
"""

import logging
from datetime import datetime, timezone

import aiosqlite

from arvi_habits.domain.difficulty import Difficulty
from arvi_habits.domain.habit_series import Action, HabitSeries
from arvi_habits.domain.ports import ArtifactRepository, UserStateRepository
from arvi_habits.domain.rank import Rank
from arvi_habits.errors import PersistenceError

from .schema import configure_connection, init_db

logger = logging.getLogger(__name__)


class _SQLiteRepository:
    """Shared connection handling. No persistent connections."""

    def __init__(self, db_path: str) -> None:
        """
        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path

    async def initialize(self) -> None:
        """
        Create tables if needed.

        Raises:
            PersistenceError: If the database cannot be initialized
        """
        try:
            await init_db(self._db_path)
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to initialize database {self._db_path}: {e}") from e

    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(self._db_path)


class SQLiteArtifactRepository(_SQLiteRepository, ArtifactRepository):
    """
    Habit series storage.

    A series and its actions are written in one IMMEDIATE transaction, so
    a failure never leaves a partial series behind.
    """

    async def create_from_validated(self, user_id: str, series: HabitSeries) -> HabitSeries:
        """
        Persist a new series and its actions atomically.

        Raises:
            PersistenceError: On duplicate ID or any database error
        """
        try:
            async with self._connect() as db:
                await configure_connection(db)
                await db.execute("BEGIN IMMEDIATE")
                try:
                    await db.execute(
                        """
                        INSERT INTO habit_series (
                            id, user_id, title, description, rank, total_score,
                            created_at, last_activity_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            series.id,
                            user_id,
                            series.title,
                            series.description,
                            series.rank.value,
                            series.total_score,
                            series.created_at.isoformat(),
                            series.last_activity_at.isoformat(),
                        ),
                    )
                    await db.executemany(
                        """
                        INSERT INTO habit_actions (
                            id, series_id, position, name, description, difficulty
                        ) VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        [
                            (
                                action.id,
                                series.id,
                                position,
                                action.name,
                                action.description,
                                action.difficulty.value,
                            )
                            for position, action in enumerate(series.actions)
                        ],
                    )
                    await db.commit()
                except Exception:
                    await db.rollback()
                    raise
        except aiosqlite.Error as e:
            logger.error(f"Failed to persist series {series.id}: {e}")
            raise PersistenceError(f"Failed to persist series {series.id}: {e}") from e

        logger.info(f"Persisted series {series.id} for user {user_id}")
        return series

    async def get(self, user_id: str, series_id: str) -> HabitSeries | None:
        """
        Get one series owned by the user.

        Returns:
            HabitSeries if found, None otherwise
        """
        try:
            async with self._connect() as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "SELECT * FROM habit_series WHERE id = ? AND user_id = ?",
                    (series_id, user_id),
                )
                row = await cursor.fetchone()
                if not row:
                    return None
                actions = await self._load_actions(db, series_id)
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to load series {series_id}: {e}") from e

        return self._row_to_series(row, actions)

    async def list_for_user(self, user_id: str) -> list[HabitSeries]:
        """
        List the user's series.

        Returns:
            Series ordered by creation time (newest first)
        """
        try:
            async with self._connect() as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "SELECT * FROM habit_series WHERE user_id = ? ORDER BY created_at DESC",
                    (user_id,),
                )
                rows = await cursor.fetchall()
                return [
                    self._row_to_series(row, await self._load_actions(db, row["id"]))
                    for row in rows
                ]
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to list series for {user_id}: {e}") from e

    @staticmethod
    async def _load_actions(db: aiosqlite.Connection, series_id: str) -> list[Action]:
        cursor = await db.execute(
            "SELECT * FROM habit_actions WHERE series_id = ? ORDER BY position",
            (series_id,),
        )
        rows = await cursor.fetchall()
        return [
            Action(
                id=row["id"],
                name=row["name"],
                description=row["description"],
                difficulty=Difficulty(row["difficulty"]),
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_series(row: aiosqlite.Row, actions: list[Action]) -> HabitSeries:
        return HabitSeries.rehydrate(
            series_id=row["id"],
            title=row["title"],
            description=row["description"],
            actions=actions,
            rank=Rank(row["rank"]),
            total_score=row["total_score"],
            created_at=datetime.fromisoformat(row["created_at"]),
            last_activity_at=datetime.fromisoformat(row["last_activity_at"]),
        )


class SQLiteUserStateRepository(_SQLiteRepository, UserStateRepository):
    """Per-user active series counters."""

    async def record_new_artifact(self, user_id: str) -> None:
        """
        Increment the user's active series counter.

        Raises:
            PersistenceError: On any database error
        """
        now = datetime.now(timezone.utc).isoformat()
        try:
            async with self._connect() as db:
                await configure_connection(db)
                await db.execute("BEGIN IMMEDIATE")
                await db.execute(
                    """
                    INSERT INTO user_state (user_id, active_series, updated_at)
                    VALUES (?, 1, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                        active_series = active_series + 1,
                        updated_at = excluded.updated_at
                    """,
                    (user_id, now),
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to update user state for {user_id}: {e}") from e

        logger.debug(f"Recorded new series for user {user_id}")

    async def active_series_count(self, user_id: str) -> int:
        try:
            async with self._connect() as db:
                cursor = await db.execute(
                    "SELECT active_series FROM user_state WHERE user_id = ?", (user_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to read user state for {user_id}: {e}") from e

        return row[0] if row else 0
