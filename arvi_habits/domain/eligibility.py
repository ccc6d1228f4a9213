# arvi_habits/domain/eligibility.py
"""Bundled DomainPolicy implementations."""

import logging
from typing import TYPE_CHECKING

from arvi_habits.domain.ports import DomainPolicy, EligibilityDecision, UserStateRepository

if TYPE_CHECKING:
    from arvi_habits.models.requests import PipelineRequest

logger = logging.getLogger(__name__)


class AllowAllPolicy(DomainPolicy):
    """Allows every request."""

    async def check_eligibility(
        self, user_id: str, request: "PipelineRequest"
    ) -> EligibilityDecision:
        return EligibilityDecision.allow()


class ActiveSeriesLimitPolicy(DomainPolicy):
    """
    Denies users who already reached their active series limit.

    A limit of 0 means unlimited.
    """

    def __init__(self, user_state: UserStateRepository, max_active: int) -> None:
        if max_active < 0:
            raise ValueError(f"max_active must be >= 0, got {max_active}")
        self._user_state = user_state
        self._max_active = max_active

    async def check_eligibility(
        self, user_id: str, request: "PipelineRequest"
    ) -> EligibilityDecision:
        if self._max_active == 0:
            return EligibilityDecision.allow()

        active = await self._user_state.active_series_count(user_id)
        if active >= self._max_active:
            logger.info(
                f"User {user_id} at active series limit ({active}/{self._max_active})"
            )
            return EligibilityDecision.deny(
                f"active series limit reached ({active}/{self._max_active})"
            )
        return EligibilityDecision.allow()
