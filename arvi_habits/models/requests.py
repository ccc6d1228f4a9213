# arvi_habits/models/requests.py
"""Pydantic request models for the series creation boundary."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PipelineRequest(BaseModel):
    """Request to generate one habit series from a user's test answers."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    language: Literal["en", "es"] = Field(description="Output language")
    test_data: dict[str, str] = Field(
        alias="testData",
        description="Question key -> free-text answer, in answer order",
    )
    assistant_context: str | None = Field(
        default=None,
        alias="assistantContext",
        description="Optional background context, reference only",
    )

    @field_validator("test_data")
    @classmethod
    def _require_answers(cls, value: dict[str, str]) -> dict[str, str]:
        if not value:
            raise ValueError("testData must contain at least one answer")
        return value
