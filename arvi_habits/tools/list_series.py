# arvi_habits/tools/list_series.py
"""list_habit_series tool implementation."""

import logging

from arvi_habits.domain.ports import ArtifactRepository
from arvi_habits.errors import HabitPipelineError
from arvi_habits.models.responses import ListSeriesResponse, SeriesSummary
from arvi_habits.validation.sanitize import sanitize_identifier

from .create_series import to_tool_error

logger = logging.getLogger(__name__)


async def list_habit_series(user_id: str, repository: ArtifactRepository) -> dict:
    """
    List a user's habit series, newest first.

    Args:
        user_id: Owner of the series
        repository: Series storage

    Returns:
        ListSeriesResponse as dict (camelCase keys)

    Raises:
        ToolError: If the user ID is invalid or storage fails
    """
    try:
        cleaned_user = sanitize_identifier(user_id, "user ID")
        series = await repository.list_for_user(cleaned_user)
    except HabitPipelineError as e:
        raise to_tool_error(e) from e

    summaries = [
        SeriesSummary(
            id=s.id,
            title=s.title,
            rank=s.rank.value,
            actions=len(s.actions),
            created_at=s.created_at.isoformat(),
        )
        for s in series
    ]
    response = ListSeriesResponse(series=summaries, total=len(summaries))
    return response.model_dump(by_alias=True)
