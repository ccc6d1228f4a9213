# arvi_habits/models/__init__.py
"""
Data models for arvi-habits.

Pydantic request and response models for the external surfaces.
"""

from arvi_habits.models.requests import PipelineRequest
from arvi_habits.models.responses import (
    ActionDTO,
    CreateSeriesResponse,
    HabitSeriesDTO,
    ListSeriesResponse,
    SeriesSummary,
)

__all__ = [
    "PipelineRequest",
    # Response models
    "ActionDTO",
    "HabitSeriesDTO",
    "CreateSeriesResponse",
    "SeriesSummary",
    "ListSeriesResponse",
]
