# arvi_habits/storage/memory.py
"""
In-memory repositories.

Used by tests and ephemeral runs. Not persistent across process restarts.
"""

import logging
from collections import defaultdict

from arvi_habits.domain.habit_series import HabitSeries
from arvi_habits.domain.ports import ArtifactRepository, UserStateRepository
from arvi_habits.errors import PersistenceError

logger = logging.getLogger(__name__)


class InMemoryArtifactRepository(ArtifactRepository):
    """Dict-backed series storage keyed by user, then series ID."""

    def __init__(self) -> None:
        self._series: dict[str, dict[str, HabitSeries]] = defaultdict(dict)

    async def create_from_validated(self, user_id: str, series: HabitSeries) -> HabitSeries:
        """
        Store a new series.

        Raises:
            PersistenceError: If the series ID already exists for the user
        """
        if series.id in self._series[user_id]:
            raise PersistenceError(f"Series {series.id} already exists")

        self._series[user_id][series.id] = series
        logger.info(f"Stored series {series.id} for user {user_id}")
        return series

    async def get(self, user_id: str, series_id: str) -> HabitSeries | None:
        return self._series.get(user_id, {}).get(series_id)

    async def list_for_user(self, user_id: str) -> list[HabitSeries]:
        return sorted(
            self._series.get(user_id, {}).values(),
            key=lambda s: s.created_at,
            reverse=True,
        )


class InMemoryUserStateRepository(UserStateRepository):
    """Dict-backed per-user active series counters."""

    def __init__(self) -> None:
        self._active: dict[str, int] = {}

    async def record_new_artifact(self, user_id: str) -> None:
        self._active[user_id] = self._active.get(user_id, 0) + 1

    async def active_series_count(self, user_id: str) -> int:
        return self._active.get(user_id, 0)
