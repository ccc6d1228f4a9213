# arvi_habits/domain/ports.py
"""
Collaborator interfaces consumed by the pipeline.

The pipeline depends only on these abstract classes. Concrete
implementations live in providers/ (AI vendors), storage/ (repositories)
and domain/eligibility.py (request policies).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arvi_habits.domain.habit_series import HabitSeries
    from arvi_habits.domain.policies import PassConfig
    from arvi_habits.models.requests import PipelineRequest
    from arvi_habits.providers.types import ProviderResponse


class AIProvider(ABC):
    """Executes one prompt against an AI backend."""

    @abstractmethod
    async def execute(
        self, user_id: str, messages: list[dict], pass_config: "PassConfig"
    ) -> "ProviderResponse":
        """
        Run a message envelope with the given pass configuration.

        Args:
            user_id: Requesting user (for accounting)
            messages: Ordered message dicts with "role" and "content"
            pass_config: Model and sampling settings

        Returns:
            Provider-agnostic response

        Raises:
            UnknownProviderError: If the model cannot be routed
            ProviderExecutionError: On a malformed envelope or any vendor or transport failure
        """


class ArtifactRepository(ABC):
    """Persistence for habit series."""

    @abstractmethod
    async def create_from_validated(self, user_id: str, series: "HabitSeries") -> "HabitSeries":
        """
        Persist a newly generated series atomically.

        Returns:
            The series as stored
        """

    @abstractmethod
    async def get(self, user_id: str, series_id: str) -> "HabitSeries | None":
        """Get one series owned by the user, or None."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> "list[HabitSeries]":
        """List the user's series, newest first."""


class UserStateRepository(ABC):
    """Per-user counters updated as a side effect of series creation."""

    @abstractmethod
    async def record_new_artifact(self, user_id: str) -> None:
        """Record that the user gained a new active series."""

    @abstractmethod
    async def active_series_count(self, user_id: str) -> int:
        """Number of active series recorded for the user."""


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of a domain pre-check."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "EligibilityDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "EligibilityDecision":
        return cls(allowed=False, reason=reason)


class DomainPolicy(ABC):
    """Decides whether a request may start before any AI call."""

    @abstractmethod
    async def check_eligibility(
        self, user_id: str, request: "PipelineRequest"
    ) -> EligibilityDecision:
        pass
