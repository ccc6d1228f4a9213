# arvi_habits/domain/habit_series.py
"""
HabitSeries domain entity.

A thematic collection of 3-5 habit actions. Instances are created only
through the factory classmethods:

- from_ai_output(): build a new series from validated AI output
- rehydrate(): rebuild a stored series from persistence

Both paths are independent; neither accepts the raw AI JSON shape.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from uuid import uuid4

from arvi_habits.domain.difficulty import Difficulty
from arvi_habits.domain.rank import Rank, rank_from_score

if TYPE_CHECKING:
    from arvi_habits.models.responses import HabitSeriesDTO
    from arvi_habits.validation.output import ValidatedAction, ValidatedArtifact


@dataclass(frozen=True)
class Action:
    """A single habit action within a series."""

    id: str
    name: str
    description: str
    difficulty: Difficulty

    @classmethod
    def from_ai_output(cls, validated: "ValidatedAction", action_id: str) -> "Action":
        return cls(
            id=action_id,
            name=validated.name,
            description=validated.description,
            difficulty=validated.difficulty,
        )


@dataclass(frozen=True)
class HabitSeries:
    """
    Habit series entity (NOT a DTO, NOT an AI artifact).

    Rank and score are domain-owned; AI output never decides them.
    """

    id: str
    title: str
    description: str
    actions: tuple[Action, ...]
    rank: Rank = Rank.BRONZE
    total_score: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_activity_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_ai_output(cls, series_id: str, validated: "ValidatedArtifact") -> "HabitSeries":
        """
        Create a new series from AI output that already passed validation.

        Args:
            series_id: Identifier for the new series
            validated: Output of validate_candidate()

        Returns:
            New HabitSeries with bronze rank and zero score
        """
        now = datetime.now(timezone.utc)
        actions = tuple(
            Action.from_ai_output(action, f"{series_id}_action_{index}")
            for index, action in enumerate(validated.actions)
        )
        return cls(
            id=series_id,
            title=validated.title,
            description=validated.description,
            actions=actions,
            rank=Rank.BRONZE,
            total_score=0,
            created_at=now,
            last_activity_at=now,
        )

    @classmethod
    def rehydrate(
        cls,
        series_id: str,
        title: str,
        description: str,
        actions: tuple[Action, ...] | list[Action],
        rank: Rank | None = None,
        total_score: int | None = None,
        created_at: datetime | None = None,
        last_activity_at: datetime | None = None,
    ) -> "HabitSeries":
        """
        Rebuild a series loaded from storage.

        Missing optional fields fall back to bronze rank, zero score and now().
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=series_id,
            title=title,
            description=description,
            actions=tuple(actions),
            rank=rank or Rank.BRONZE,
            total_score=total_score or 0,
            created_at=created_at or now,
            last_activity_at=last_activity_at or now,
        )

    def calculate_rank(self) -> Rank:
        """Rank implied by the current total score."""
        return rank_from_score(self.total_score)

    def to_dto(self) -> "HabitSeriesDTO":
        """Map the entity to its external representation."""
        from arvi_habits.models.responses import ActionDTO, HabitSeriesDTO

        return HabitSeriesDTO(
            id=self.id,
            title=self.title,
            description=self.description,
            actions=[
                ActionDTO(
                    name=action.name,
                    description=action.description,
                    difficulty=action.difficulty.value,
                )
                for action in self.actions
            ],
            rank=self.rank.value,
            total_score=self.total_score,
            created_at=self.created_at.isoformat(),
            last_activity_at=self.last_activity_at.isoformat(),
        )


def generate_series_id() -> str:
    """
    Generate a unique series ID.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]
