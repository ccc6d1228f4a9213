# arvi_habits/prompts/builders.py
"""
Message builders for the three habit series passes.

Pure functions: no network, no persistence, no validation. Each returns
a message list ready for an AIProvider:

1. build_creative_prompt(): free-form, human-readable series (NOT JSON)
2. build_structure_prompt(): deterministic consolidation into a fixed layout
3. build_normalize_prompt(): conversion of that layout to strict JSON

Difficulty labels come from the Difficulty enum so the prompts cannot drift
from what the output validator accepts.
"""

import json
from collections.abc import Mapping
from typing import Any

from arvi_habits.domain.difficulty import Difficulty, difficulty_labels
from arvi_habits.prompts.loader import load_prompt, template_name
from arvi_habits.validation.output import HABIT_SERIES_CONTRACT, MAX_ACTIONS, MIN_ACTIONS

SUPPORTED_LANGUAGES = ("en", "es")

_TEST_DATA_LABEL = {
    "en": "Test data",
    "es": "Datos del test",
}

_CONTEXT_HEADER = {
    "en": "BACKGROUND CONTEXT (for reference only, do not reply to this):",
    "es": "CONTEXTO DE FONDO (solo como referencia, no respondas a esto):",
}


def _check_language(language: str) -> None:
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Unsupported language '{language}'. Expected one of: {', '.join(SUPPORTED_LANGUAGES)}"
        )


def _messages(system_content: str, user_content: str) -> list[dict]:
    return [
        {"role": "system", "content": system_content},
        {"role": "user", "content": user_content},
    ]


def flatten_test_data(test_data: Mapping[str, str]) -> str:
    """Flatten answers into "key: value; key: value", preserving input order."""
    return "; ".join(f"{key}: {value}" for key, value in test_data.items())


def build_creative_prompt(
    language: str,
    test_data: Mapping[str, str],
    assistant_context: str | None = "",
) -> list[dict]:
    """
    Build the creative pass messages.

    Args:
        language: Output language ("en" or "es")
        test_data: User test answers, question key -> free-text answer
        assistant_context: Optional background context, reference only

    Returns:
        [system, user] message list

    Raises:
        ValueError: If the language is not supported
    """
    _check_language(language)

    context_section = ""
    if assistant_context and assistant_context.strip():
        context_section = (
            f"\n---\n{_CONTEXT_HEADER[language]}\n{assistant_context.strip()}\n---\n"
        )

    system_prompt = load_prompt(template_name("creative", language)).format(
        context_section=context_section,
        low=Difficulty.LOW.value,
        medium=Difficulty.MEDIUM.value,
        high=Difficulty.HIGH.value,
    )
    user_prompt = f"{_TEST_DATA_LABEL[language]}: {flatten_test_data(test_data)}"
    return _messages(system_prompt, user_prompt)


def build_structure_prompt(language: str, raw_text: str) -> list[dict]:
    """
    Build the structure pass messages from the creative pass output.

    Args:
        language: Output language ("en" or "es")
        raw_text: Creative pass content

    Returns:
        [system, user] message list
    """
    _check_language(language)
    system_prompt = load_prompt(template_name("structure", language)).format(
        difficulties=", ".join(difficulty_labels()),
    )
    return _messages(system_prompt, raw_text)


def build_normalize_prompt(
    content: str, contract: dict[str, Any] = HABIT_SERIES_CONTRACT
) -> list[dict]:
    """
    Build the normalization pass messages.

    Language-independent: the contract keys are fixed and field text is
    copied verbatim.

    Args:
        content: Structure pass content
        contract: Target structural contract (JSON-schema-like dict)

    Returns:
        [system, user] message list
    """
    system_prompt = load_prompt(template_name("normalize")).format(
        contract=json.dumps(contract, indent=2, ensure_ascii=False),
        min_actions=MIN_ACTIONS,
        max_actions=MAX_ACTIONS,
        difficulties=", ".join(difficulty_labels()),
    )
    return _messages(system_prompt, content)
