# arvi_habits/validation/output.py
"""
Defensive validation of the normalization pass output.

AI output is untrusted. validate_candidate() is the runtime contract: it
checks shape only (no content-quality judgement), stops at the first
violation, and reports a field-specific reason. Hand-written rather than
schema-driven so failure messages stay exact and the check order stays
deterministic.
"""

from dataclasses import dataclass
from typing import Any

from arvi_habits.domain.difficulty import Difficulty, difficulty_labels

MIN_ACTIONS = 3
MAX_ACTIONS = 5

# Schema-like structure used ONLY to guide the normalization prompt.
# Not enforced at runtime; validate_candidate() is the enforcement.
HABIT_SERIES_CONTRACT: dict[str, Any] = {
    "type": "object",
    "required": ["title", "description", "actions"],
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "actions": {
            "type": "array",
            "minItems": MIN_ACTIONS,
            "maxItems": MAX_ACTIONS,
            "items": {
                "type": "object",
                "required": ["name", "description", "difficulty"],
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "difficulty": {"type": "string", "enum": difficulty_labels()},
                },
            },
        },
    },
}


@dataclass(frozen=True)
class ValidatedAction:
    name: str
    description: str
    difficulty: Difficulty


@dataclass(frozen=True)
class ValidatedArtifact:
    """
    Candidate that passed every structural check.

    Strings are trimmed; actions keep their original order.
    """

    title: str
    description: str
    actions: tuple[ValidatedAction, ...]


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of validate_candidate(): artifact on success, reason on failure."""

    valid: bool
    artifact: ValidatedArtifact | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, artifact: ValidatedArtifact) -> "ValidationResult":
        return cls(valid=True, artifact=artifact)

    @classmethod
    def fail(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _validate_action(index: int, action: Any) -> ValidatedAction | str:
    """Check one action; returns the validated action or a violation reason."""
    if not isinstance(action, dict):
        return f"actions[{index}] is not an object"

    for field_name in ("name", "description", "difficulty"):
        if not _non_empty_str(action.get(field_name)):
            return f"actions[{index}].{field_name} invalid"

    difficulty = Difficulty.parse(action["difficulty"])
    if difficulty is None:
        return (
            f"actions[{index}].difficulty must be one of "
            f"{', '.join(difficulty_labels())} (got {action['difficulty'].strip()!r})"
        )

    return ValidatedAction(
        name=action["name"].strip(),
        description=action["description"].strip(),
        difficulty=difficulty,
    )


def validate_candidate(candidate: Any) -> ValidationResult:
    """
    Validate parsed normalization output against the habit series contract.

    Check order (first failure wins):
    1. candidate is an object
    2. title, then description, are non-empty strings
    3. actions is an array of 3-5 entries
    4. each action, in order: object with non-empty name, description,
       difficulty; difficulty is a known label

    Args:
        candidate: Result of json.loads() on the normalization pass output

    Returns:
        ValidationResult with the ValidatedArtifact or the first violation
    """
    if not isinstance(candidate, dict):
        return ValidationResult.fail("Output is not an object")

    if not _non_empty_str(candidate.get("title")):
        return ValidationResult.fail("Invalid or missing title")

    if not _non_empty_str(candidate.get("description")):
        return ValidationResult.fail("Invalid or missing description")

    actions = candidate.get("actions")
    if not isinstance(actions, list):
        return ValidationResult.fail("actions must be an array")

    if not MIN_ACTIONS <= len(actions) <= MAX_ACTIONS:
        return ValidationResult.fail(
            f"actions length out of bounds (got {len(actions)}, "
            f"expected {MIN_ACTIONS}-{MAX_ACTIONS})"
        )

    validated_actions = []
    for index, action in enumerate(actions):
        checked = _validate_action(index, action)
        if isinstance(checked, str):
            return ValidationResult.fail(checked)
        validated_actions.append(checked)

    return ValidationResult.ok(
        ValidatedArtifact(
            title=candidate["title"].strip(),
            description=candidate["description"].strip(),
            actions=tuple(validated_actions),
        )
    )
