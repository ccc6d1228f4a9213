# arvi_habits/models/responses.py
"""
Pydantic response models for the external surfaces.

Field names are snake_case in Python; model_dump(by_alias=True) produces
the camelCase wire shape.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ActionDTO(BaseModel):
    """One habit action as exposed to clients."""

    name: str = Field(description="Short action name")
    description: str = Field(description="What the user does")
    difficulty: str = Field(description="easy, moderate or challenging")


class HabitSeriesDTO(BaseModel):
    """Habit series as exposed to clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Series identifier")
    title: str = Field(description="Series title")
    description: str = Field(description="Series description")
    actions: list[ActionDTO] = Field(description="3-5 habit actions")
    rank: str = Field(description="bronze, silver, golden or diamond")
    total_score: int = Field(alias="totalScore", description="Accumulated score")
    created_at: str = Field(alias="createdAt", description="ISO 8601 creation time")
    last_activity_at: str = Field(
        alias="lastActivityAt", description="ISO 8601 time of last activity"
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class CreateSeriesResponse(BaseModel):
    """Successful response of the create boundary."""

    status: Literal["success"] = "success"
    artifact: HabitSeriesDTO


class SeriesSummary(BaseModel):
    """Compact listing entry."""

    id: str
    title: str
    rank: str
    actions: int = Field(description="Number of actions")
    created_at: str = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class ListSeriesResponse(BaseModel):
    """Response from list_habit_series."""

    series: list[SeriesSummary] = Field(default_factory=list)
    total: int = 0
