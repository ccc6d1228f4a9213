# arvi_habits/domain/difficulty.py
"""
Action difficulty levels.

Shared by the prompt builders and the output validator so generation and
validation use the same labels.
"""

from enum import Enum


class Difficulty(str, Enum):
    """Difficulty label of a habit action."""

    LOW = "easy"
    MEDIUM = "moderate"
    HIGH = "challenging"

    @classmethod
    def parse(cls, value: str) -> "Difficulty | None":
        """
        Match a label case-insensitively, ignoring surrounding whitespace.

        Returns:
            The matching Difficulty, or None if the label is unknown
        """
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


def difficulty_labels() -> list[str]:
    """All difficulty labels, easiest first."""
    return [d.value for d in Difficulty]
