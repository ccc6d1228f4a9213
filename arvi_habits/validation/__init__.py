# arvi_habits/validation/__init__.py
"""Input sanitization and AI output validation."""

from .output import (
    HABIT_SERIES_CONTRACT,
    ValidatedAction,
    ValidatedArtifact,
    ValidationResult,
    validate_candidate,
)
from .sanitize import sanitize_identifier, sanitize_user_input

__all__ = [
    "sanitize_user_input",
    "sanitize_identifier",
    "validate_candidate",
    "ValidationResult",
    "ValidatedArtifact",
    "ValidatedAction",
    "HABIT_SERIES_CONTRACT",
]
