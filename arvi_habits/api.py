# arvi_habits/api.py
"""
Request boundary for series creation.

Turns an external payload into a PipelineRequest, runs the use case and
wraps the result in the success envelope.
"""

import logging
from typing import Any

from pydantic import ValidationError

from arvi_habits.errors import InvalidPayloadError
from arvi_habits.models.requests import PipelineRequest
from arvi_habits.models.responses import CreateSeriesResponse
from arvi_habits.pipeline.create_series import CreateHabitSeriesUseCase

logger = logging.getLogger(__name__)


def parse_request(payload: Any) -> PipelineRequest:
    """
    Build a PipelineRequest from a wire payload.

    Args:
        payload: Dict with "language", "testData" and optional "assistantContext"

    Returns:
        Validated PipelineRequest

    Raises:
        InvalidPayloadError: If the payload is not a dict or fails validation
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid payload: expected an object")

    try:
        return PipelineRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "payload"
        raise InvalidPayloadError(f"Invalid payload: {location}: {first['msg']}") from e


async def handle_create_request(
    user_id: str, payload: Any, use_case: CreateHabitSeriesUseCase
) -> dict:
    """
    Create a habit series for a user.

    Args:
        user_id: Requesting user
        payload: Wire payload (see parse_request)
        use_case: Configured CreateHabitSeriesUseCase

    Returns:
        {"status": "success", "artifact": <camelCase series dict>}

    Raises:
        InvalidPayloadError: If user_id or payload is invalid
        HabitPipelineError: Any failure raised by the use case
    """
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidPayloadError("Invalid payload: user_id is required")

    request = parse_request(payload)
    dto = await use_case.execute(user_id, request)

    logger.info(f"Created series {dto.id} for user {user_id}")
    return CreateSeriesResponse(artifact=dto).model_dump(by_alias=True)
