# arvi_habits/tools/get_series.py
"""get_habit_series tool implementation."""

import logging

from fastmcp.exceptions import ToolError

from arvi_habits.domain.ports import ArtifactRepository
from arvi_habits.errors import HabitPipelineError
from arvi_habits.validation.sanitize import sanitize_identifier

from .create_series import to_tool_error

logger = logging.getLogger(__name__)


async def get_habit_series(user_id: str, series_id: str, repository: ArtifactRepository) -> dict:
    """
    Retrieve one habit series.

    Args:
        user_id: Owner of the series
        series_id: Series identifier from create_habit_series
        repository: Series storage

    Returns:
        HabitSeriesDTO as dict (camelCase keys)

    Raises:
        ToolError: If an ID is invalid, the series is not found, or storage fails
    """
    try:
        cleaned_user = sanitize_identifier(user_id, "user ID")
        cleaned_id = sanitize_identifier(series_id, "series ID")
        series = await repository.get(cleaned_user, cleaned_id)
    except HabitPipelineError as e:
        raise to_tool_error(e) from e

    if series is None:
        raise ToolError(
            f"Series '{cleaned_id}' not found. Use list_habit_series to see available series."
        )
    return series.to_dto().to_wire()
