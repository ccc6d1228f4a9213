# tests/unit/test_storage.py
"""
Unit tests for the bundled repositories.

Tests SQLite persistence (round trip, ordering, ownership, atomic writes,
schema setup) and the in-memory implementations.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from arvi_habits.domain.difficulty import Difficulty
from arvi_habits.domain.habit_series import Action, HabitSeries
from arvi_habits.domain.rank import Rank
from arvi_habits.errors import PersistenceError
from arvi_habits.storage.memory import InMemoryArtifactRepository, InMemoryUserStateRepository
from arvi_habits.storage.schema import SCHEMA_VERSION
from arvi_habits.storage.sqlite import SQLiteArtifactRepository, SQLiteUserStateRepository

BASE_TIME = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


def _series(series_id="abc123def456", created_at=BASE_TIME, action_prefix=None, **kwargs):
    prefix = action_prefix or series_id
    actions = [
        Action(id=f"{prefix}_action_0", name="Walk", description="10 min", difficulty=Difficulty.LOW),
        Action(id=f"{prefix}_action_1", name="Read", description="5 pages", difficulty=Difficulty.MEDIUM),
        Action(id=f"{prefix}_action_2", name="Run", description="5 km", difficulty=Difficulty.HIGH),
    ]
    return HabitSeries.rehydrate(
        series_id, "Morning Focus", "Calm start", actions,
        created_at=created_at, last_activity_at=created_at, **kwargs,
    )


@pytest_asyncio.fixture
async def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "test_habits.db")
    await SQLiteArtifactRepository(path).initialize()
    return path


@pytest_asyncio.fixture
async def sqlite_artifacts(db_path: str) -> SQLiteArtifactRepository:
    return SQLiteArtifactRepository(db_path)


@pytest_asyncio.fixture
async def sqlite_user_state(db_path: str) -> SQLiteUserStateRepository:
    return SQLiteUserStateRepository(db_path)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class TestSchema:
    @pytest.mark.asyncio
    async def test_tables_and_version(self, db_path):
        async with aiosqlite.connect(db_path) as db:
            cursor = await db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row[0] for row in await cursor.fetchall()}
            cursor = await db.execute("SELECT version FROM schema_version")
            version = (await cursor.fetchone())[0]
            cursor = await db.execute("PRAGMA journal_mode")
            journal_mode = (await cursor.fetchone())[0]

        assert {"habit_series", "habit_actions", "user_state", "schema_version"} <= tables
        assert version == SCHEMA_VERSION
        assert journal_mode == "wal"

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, db_path, sqlite_artifacts):
        await sqlite_artifacts.create_from_validated("user-1", _series())
        await SQLiteArtifactRepository(db_path).initialize()

        assert await sqlite_artifacts.get("user-1", "abc123def456") is not None

    @pytest.mark.asyncio
    async def test_initialize_failure(self, tmp_path):
        repo = SQLiteArtifactRepository(str(tmp_path / "missing_dir" / "habits.db"))

        with pytest.raises(PersistenceError, match="Failed to initialize"):
            await repo.initialize()


# ---------------------------------------------------------------------------
# SQLiteArtifactRepository
# ---------------------------------------------------------------------------

class TestSQLiteArtifactRepository:
    @pytest.mark.asyncio
    async def test_create_and_get_roundtrip(self, sqlite_artifacts):
        series = _series(rank=Rank.SILVER, total_score=320)

        returned = await sqlite_artifacts.create_from_validated("user-1", series)
        loaded = await sqlite_artifacts.get("user-1", series.id)

        assert returned is series
        assert loaded == series
        assert loaded.created_at == BASE_TIME
        assert [a.difficulty for a in loaded.actions] == [
            Difficulty.LOW, Difficulty.MEDIUM, Difficulty.HIGH,
        ]

    @pytest.mark.asyncio
    async def test_get_missing(self, sqlite_artifacts):
        assert await sqlite_artifacts.get("user-1", "nope") is None

    @pytest.mark.asyncio
    async def test_get_scoped_to_owner(self, sqlite_artifacts):
        await sqlite_artifacts.create_from_validated("user-1", _series())

        assert await sqlite_artifacts.get("user-2", "abc123def456") is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, sqlite_artifacts):
        older = _series("older0000001")
        newer = _series("newer0000002", created_at=BASE_TIME + timedelta(hours=1))
        other_user = _series("other0000003")
        await sqlite_artifacts.create_from_validated("user-1", older)
        await sqlite_artifacts.create_from_validated("user-1", newer)
        await sqlite_artifacts.create_from_validated("user-2", other_user)

        listed = await sqlite_artifacts.list_for_user("user-1")

        assert [s.id for s in listed] == ["newer0000002", "older0000001"]
        assert all(len(s.actions) == 3 for s in listed)

    @pytest.mark.asyncio
    async def test_list_empty(self, sqlite_artifacts):
        assert await sqlite_artifacts.list_for_user("nobody") == []

    @pytest.mark.asyncio
    async def test_duplicate_raises_persistence_error(self, sqlite_artifacts):
        await sqlite_artifacts.create_from_validated("user-1", _series())

        with pytest.raises(PersistenceError, match="abc123def456") as exc_info:
            await sqlite_artifacts.create_from_validated("user-1", _series())

        assert isinstance(exc_info.value.__cause__, aiosqlite.IntegrityError)

    @pytest.mark.asyncio
    async def test_failed_write_leaves_no_partial_series(self, sqlite_artifacts):
        await sqlite_artifacts.create_from_validated("user-1", _series("first0000001"))
        # Same action IDs: series row inserts, action rows collide
        clashing = _series("second000002", action_prefix="first0000001")

        with pytest.raises(PersistenceError):
            await sqlite_artifacts.create_from_validated("user-1", clashing)

        assert await sqlite_artifacts.get("user-1", "second000002") is None
        assert [s.id for s in await sqlite_artifacts.list_for_user("user-1")] == ["first0000001"]


# ---------------------------------------------------------------------------
# SQLiteUserStateRepository
# ---------------------------------------------------------------------------

class TestSQLiteUserStateRepository:
    @pytest.mark.asyncio
    async def test_counts_start_at_zero(self, sqlite_user_state):
        assert await sqlite_user_state.active_series_count("user-1") == 0

    @pytest.mark.asyncio
    async def test_record_increments(self, sqlite_user_state):
        await sqlite_user_state.record_new_artifact("user-1")
        await sqlite_user_state.record_new_artifact("user-1")
        await sqlite_user_state.record_new_artifact("user-2")

        assert await sqlite_user_state.active_series_count("user-1") == 2
        assert await sqlite_user_state.active_series_count("user-2") == 1


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------

class TestInMemoryRepositories:
    @pytest.mark.asyncio
    async def test_artifact_roundtrip(self):
        repo = InMemoryArtifactRepository()
        series = _series()

        await repo.create_from_validated("user-1", series)

        assert await repo.get("user-1", series.id) is series
        assert await repo.get("user-2", series.id) is None

    @pytest.mark.asyncio
    async def test_duplicate(self):
        repo = InMemoryArtifactRepository()
        await repo.create_from_validated("user-1", _series())

        with pytest.raises(PersistenceError, match="already exists"):
            await repo.create_from_validated("user-1", _series())

    @pytest.mark.asyncio
    async def test_list_newest_first(self):
        repo = InMemoryArtifactRepository()
        await repo.create_from_validated("user-1", _series("older0000001"))
        await repo.create_from_validated(
            "user-1", _series("newer0000002", created_at=BASE_TIME + timedelta(days=1))
        )

        assert [s.id for s in await repo.list_for_user("user-1")] == [
            "newer0000002", "older0000001",
        ]
        assert await repo.list_for_user("nobody") == []

    @pytest.mark.asyncio
    async def test_user_state(self):
        repo = InMemoryUserStateRepository()

        await repo.record_new_artifact("user-1")

        assert await repo.active_series_count("user-1") == 1
        assert await repo.active_series_count("user-2") == 0
