# arvi_habits/services.py
"""
Service wiring shared by the CLI and the MCP server.

Opens the SQLite repositories, builds the provider router and the
eligibility policy from config, and assembles the use case.
"""

import logging
from dataclasses import dataclass

from arvi_habits.config.loader import resolve_db_path
from arvi_habits.config.schema import ArviConfig
from arvi_habits.domain.eligibility import ActiveSeriesLimitPolicy, AllowAllPolicy
from arvi_habits.domain.ports import AIProvider, ArtifactRepository, DomainPolicy, UserStateRepository
from arvi_habits.pipeline.create_series import (
    CreateHabitSeriesUseCase,
    EventCallback,
    PipelineDependencies,
)
from arvi_habits.providers.factory import create_provider_router
from arvi_habits.storage.sqlite import SQLiteArtifactRepository, SQLiteUserStateRepository

logger = logging.getLogger(__name__)


@dataclass
class HabitServices:
    """Everything a surface needs to serve requests."""

    config: ArviConfig
    artifacts: ArtifactRepository
    user_state: UserStateRepository
    ai_provider: AIProvider

    def domain_policy(self) -> DomainPolicy:
        limit = self.config.pipeline.max_active_series
        if limit:
            return ActiveSeriesLimitPolicy(self.user_state, limit)
        return AllowAllPolicy()

    def use_case(self, event_callback: EventCallback | None = None) -> CreateHabitSeriesUseCase:
        """Build a use case, optionally reporting pipeline events."""
        return CreateHabitSeriesUseCase(
            PipelineDependencies(
                ai_provider=self.ai_provider,
                artifact_repository=self.artifacts,
                user_state_repository=self.user_state,
                domain_policy=self.domain_policy(),
            ),
            final_pass=self.config.pipeline.final_pass,
            event_callback=event_callback,
        )


async def open_services(config: ArviConfig) -> HabitServices:
    """
    Open the SQLite store and build the provider router.

    Args:
        config: Root ArviConfig

    Returns:
        HabitServices ready for use

    Raises:
        PersistenceError: If the database cannot be initialized
    """
    db_path = resolve_db_path(config)
    artifacts = SQLiteArtifactRepository(db_path)
    await artifacts.initialize()
    user_state = SQLiteUserStateRepository(db_path)

    logger.info(f"Services ready (db={db_path})")
    return HabitServices(
        config=config,
        artifacts=artifacts,
        user_state=user_state,
        ai_provider=create_provider_router(config),
    )
