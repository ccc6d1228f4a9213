# arvi_habits/tools/create_series.py
"""
create_habit_series tool implementation.

Runs the full pipeline synchronously and returns the persisted series.
"""

import logging

from fastmcp.exceptions import ToolError

from arvi_habits.api import handle_create_request
from arvi_habits.errors import HabitPipelineError
from arvi_habits.pipeline.create_series import CreateHabitSeriesUseCase
from arvi_habits.validation.sanitize import sanitize_identifier

logger = logging.getLogger(__name__)


def to_tool_error(error: HabitPipelineError) -> ToolError:
    """Render a pipeline error as "<kind>: <message>"."""
    return ToolError(f"{error.kind}: {error}")


async def create_habit_series(
    user_id: str,
    language: str,
    test_data: dict[str, str],
    assistant_context: str | None,
    use_case: CreateHabitSeriesUseCase,
) -> dict:
    """
    Generate and persist a new habit series.

    Args:
        user_id: Requesting user
        language: Output language ("en" or "es")
        test_data: Question key -> free-text answer
        assistant_context: Optional background context
        use_case: Configured CreateHabitSeriesUseCase

    Returns:
        {"status": "success", "artifact": {...}}

    Raises:
        ToolError: On any pipeline failure
    """
    payload = {"language": language, "testData": test_data}
    if assistant_context:
        payload["assistantContext"] = assistant_context

    try:
        cleaned_user = sanitize_identifier(user_id, "user ID")
        return await handle_create_request(cleaned_user, payload, use_case)
    except HabitPipelineError as e:
        logger.warning(f"create_habit_series failed: {e.kind}: {e}")
        raise to_tool_error(e) from e
