# arvi_habits/pipeline/create_series.py
"""
Habit series creation use case.

Runs the fixed three-pass AI pipeline, validates the result and persists
it. Every stage is terminal on failure: the caller receives exactly one
HabitPipelineError and nothing is persisted before validation succeeds.

Pass order never depends on pass content:
    creative -> structure -> json_conversion -> parse -> validate -> persist
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from arvi_habits.domain.habit_series import HabitSeries, generate_series_id
from arvi_habits.domain.policies import (
    CREATIVE_PASS,
    NORMALIZE_PASS,
    PIPELINE_PASSES,
    STRUCTURE_PASS,
    config_for,
    is_final,
)
from arvi_habits.domain.ports import (
    AIProvider,
    ArtifactRepository,
    DomainPolicy,
    UserStateRepository,
)
from arvi_habits.errors import (
    ConfigurationError,
    ContractViolationError,
    EligibilityDeniedError,
    HabitPipelineError,
    InvalidPayloadError,
    MalformedOutputError,
    MissingDependencyError,
)
from arvi_habits.models.requests import PipelineRequest
from arvi_habits.models.responses import HabitSeriesDTO
from arvi_habits.prompts.builders import (
    build_creative_prompt,
    build_normalize_prompt,
    build_structure_prompt,
)
from arvi_habits.providers.types import ProviderResponse
from arvi_habits.validation.output import HABIT_SERIES_CONTRACT, validate_candidate

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, dict[str, Any]], Any]


@dataclass
class PipelineDependencies:
    """Collaborators injected into the use case."""

    ai_provider: AIProvider | None
    artifact_repository: ArtifactRepository | None
    user_state_repository: UserStateRepository | None
    domain_policy: DomainPolicy | None

    def missing(self) -> list[str]:
        """Names of dependencies that were not wired."""
        return [name for name, value in vars(self).items() if value is None]


@dataclass
class _Totals:
    tokens_used: int = 0
    resource_cost: int = 0

    def add(self, response: ProviderResponse) -> None:
        self.tokens_used += response.tokens_used
        self.resource_cost += response.resource_cost


class CreateHabitSeriesUseCase:
    """
    Orchestrates habit series generation for one request.

    Example:
        use_case = CreateHabitSeriesUseCase(PipelineDependencies(
            ai_provider=router,
            artifact_repository=artifacts,
            user_state_repository=user_state,
            domain_policy=AllowAllPolicy(),
        ))
        dto = await use_case.execute("user-1", request)
    """

    def __init__(
        self,
        dependencies: PipelineDependencies,
        *,
        final_pass: str = STRUCTURE_PASS,
        id_factory: Callable[[], str] = generate_series_id,
        event_callback: EventCallback | None = None,
    ) -> None:
        """
        Initialize the use case.

        Args:
            dependencies: AI provider, repositories and domain policy
            final_pass: Pass whose content is persist-eligible
            id_factory: Generates new series identifiers
            event_callback: Optional callback(event_name, payload), sync or async

        Raises:
            ConfigurationError: If final_pass is not a pipeline pass
        """
        if final_pass not in PIPELINE_PASSES:
            raise ConfigurationError(
                f"final_pass must be one of {', '.join(PIPELINE_PASSES)}, got '{final_pass}'"
            )
        self._deps = dependencies
        self._final_pass = final_pass
        self._id_factory = id_factory
        self._event_callback = event_callback

    async def _emit(self, event: str, **payload: Any) -> None:
        logger.info(event, extra={"event": event, "data": payload})
        if self._event_callback:
            result_or_coro = self._event_callback(event, payload)
            if hasattr(result_or_coro, "__await__"):
                await result_or_coro

    async def _emit_quietly(self, event: str, **payload: Any) -> None:
        """Emit an event that must not change the outcome; callback failures are logged only."""
        try:
            await self._emit(event, **payload)
        except Exception as e:
            logger.warning(f"Event callback failed on {event}: {e}")

    def _check_entry(self, request: PipelineRequest | None) -> None:
        missing = self._deps.missing()
        if missing:
            raise MissingDependencyError(f"Missing dependencies: {', '.join(missing)}")

        if request is None or not getattr(request, "language", None):
            raise InvalidPayloadError("Invalid payload: language is required")
        if not getattr(request, "test_data", None):
            raise InvalidPayloadError("Invalid payload: testData must not be empty")

    async def _run_pass(
        self, user_id: str, pass_id: str, messages: list[dict], totals: _Totals
    ) -> ProviderResponse:
        pass_config = config_for(pass_id)
        await self._emit("pass_started", pass_id=pass_id, model_id=pass_config.model_id)

        response = await self._deps.ai_provider.execute(user_id, messages, pass_config)
        totals.add(response)

        await self._emit(
            "pass_completed",
            pass_id=pass_id,
            model_id=response.model_id,
            tokens_used=response.tokens_used,
            resource_cost=response.resource_cost,
        )
        return response

    async def execute(self, user_id: str, request: PipelineRequest) -> HabitSeriesDTO:
        """
        Generate, validate and persist one habit series.

        Args:
            user_id: Requesting user
            request: Validated request (language, test answers, context)

        Returns:
            DTO of the persisted series

        Raises:
            HabitPipelineError: Subclass matching the first failing stage
        """
        self._check_entry(request)
        try:
            return await self._execute(user_id, request)
        except HabitPipelineError as e:
            await self._emit_quietly("pipeline_failed", user_id=user_id, kind=e.kind, error=str(e))
            raise

    async def _execute(self, user_id: str, request: PipelineRequest) -> HabitSeriesDTO:
        await self._emit("pipeline_started", user_id=user_id, language=request.language)

        decision = await self._deps.domain_policy.check_eligibility(user_id, request)
        if not decision.allowed:
            raise EligibilityDeniedError(decision.reason or "denied by domain policy")

        totals = _Totals()

        creative = await self._run_pass(
            user_id,
            CREATIVE_PASS,
            build_creative_prompt(
                request.language, request.test_data, request.assistant_context or ""
            ),
            totals,
        )
        structure = await self._run_pass(
            user_id,
            STRUCTURE_PASS,
            build_structure_prompt(request.language, creative.content),
            totals,
        )
        normalized = await self._run_pass(
            user_id,
            NORMALIZE_PASS,
            build_normalize_prompt(structure.content, HABIT_SERIES_CONTRACT),
            totals,
        )

        try:
            candidate = json.loads(normalized.content)
        except json.JSONDecodeError as e:
            raise MalformedOutputError(f"AI returned malformed JSON: {e}") from e

        result = validate_candidate(candidate)
        if not result.valid:
            raise ContractViolationError(result.reason)
        await self._emit("output_validated", actions=len(result.artifact.actions))

        # The normalized JSON carries the structure pass's content
        if not is_final(STRUCTURE_PASS, self._final_pass):
            raise ConfigurationError(
                f"Content from '{STRUCTURE_PASS}' is not persist-eligible "
                f"(final pass is '{self._final_pass}')"
            )

        series = HabitSeries.from_ai_output(self._id_factory(), result.artifact)
        persisted = await self._deps.artifact_repository.create_from_validated(user_id, series)
        await self._emit_quietly("artifact_persisted", user_id=user_id, series_id=persisted.id)

        try:
            await self._deps.user_state_repository.record_new_artifact(user_id)
        except Exception as e:
            # Persistence is the commit point; user state can be reconciled later
            logger.warning(f"User state update failed for {user_id}: {e}")
            await self._emit_quietly("side_effect_failed", user_id=user_id, error=str(e))

        await self._emit_quietly(
            "pipeline_completed",
            user_id=user_id,
            series_id=persisted.id,
            total_tokens=totals.tokens_used,
            total_resource_cost=totals.resource_cost,
        )
        return persisted.to_dto()
