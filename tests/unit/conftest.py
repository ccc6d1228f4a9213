# tests/unit/conftest.py
"""Shared fixtures: a scripted AI provider and in-memory repositories."""

import json

import pytest

from arvi_habits.domain.eligibility import AllowAllPolicy
from arvi_habits.domain.ports import AIProvider
from arvi_habits.models.requests import PipelineRequest
from arvi_habits.pipeline.create_series import CreateHabitSeriesUseCase, PipelineDependencies
from arvi_habits.providers.types import ProviderResponse
from arvi_habits.storage.memory import InMemoryArtifactRepository, InMemoryUserStateRepository

CREATIVE_TEXT = "Morning Focus. A calm start. Actions: walk, read, plan."

STRUCTURE_TEXT = (
    "TITLE: Morning Focus\n"
    "DESCRIPTION: Build a calm start to the day.\n"
    "ACTION 1\nNAME: Walk\nDESCRIPTION: Walk 10 minutes\nDIFFICULTY: easy\n"
    "ACTION 2\nNAME: Read\nDESCRIPTION: Read 5 pages\nDIFFICULTY: moderate\n"
    "ACTION 3\nNAME: Plan\nDESCRIPTION: Plan the day\nDIFFICULTY: challenging"
)

VALID_JSON = json.dumps({
    "title": "Morning Focus",
    "description": "Build a calm start to the day.",
    "actions": [
        {"name": "Walk", "description": "Walk 10 minutes", "difficulty": "easy"},
        {"name": "Read", "description": "Read 5 pages", "difficulty": "moderate"},
        {"name": "Plan", "description": "Plan the day", "difficulty": "challenging"},
    ],
})

SERIES_ID = "abc123def456"


class ScriptedProvider(AIProvider):
    """
    AIProvider returning canned content per model ID.

    Records every call as (model_id, messages). Accounting values are
    fixed per model so totals are predictable.
    """

    def __init__(self, responses: dict[str, str] | None = None) -> None:
        self.responses = {
            "gemini-2.5-flash": CREATIVE_TEXT,
            "gemini-2.5-pro": STRUCTURE_TEXT,
            "gpt-4o-mini": VALID_JSON,
        }
        self.responses.update(responses or {})
        self.accounting = {
            "gemini-2.5-flash": (40, 2),
            "gemini-2.5-pro": (30, 1),
            "gpt-4o-mini": (50, 0),
        }
        self.calls: list[tuple[str, list[dict]]] = []

    @property
    def models_called(self) -> list[str]:
        return [model_id for model_id, _ in self.calls]

    async def execute(self, user_id, messages, pass_config):
        self.calls.append((pass_config.model_id, messages))
        tokens, cost = self.accounting.get(pass_config.model_id, (0, 0))
        return ProviderResponse(
            content=self.responses[pass_config.model_id],
            model_id=pass_config.model_id,
            tokens_used=tokens,
            resource_cost=cost,
        )


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def artifacts() -> InMemoryArtifactRepository:
    return InMemoryArtifactRepository()


@pytest.fixture
def user_state() -> InMemoryUserStateRepository:
    return InMemoryUserStateRepository()


@pytest.fixture
def dependencies(provider, artifacts, user_state) -> PipelineDependencies:
    return PipelineDependencies(
        ai_provider=provider,
        artifact_repository=artifacts,
        user_state_repository=user_state,
        domain_policy=AllowAllPolicy(),
    )


@pytest.fixture
def use_case(dependencies) -> CreateHabitSeriesUseCase:
    return CreateHabitSeriesUseCase(dependencies, id_factory=lambda: SERIES_ID)


@pytest.fixture
def request_en() -> PipelineRequest:
    return PipelineRequest(
        language="en",
        test_data={"sleep": "6 hours", "stress": "high"},
    )
