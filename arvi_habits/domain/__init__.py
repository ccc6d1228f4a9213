# arvi_habits/domain/__init__.py
"""
Domain layer: habit series entity, value objects, policies and ports.

Exports:
    - HabitSeries, Action: entity and its actions
    - Difficulty, Rank: value enums
    - config_for, is_final, PassConfig: pass policies
"""

from arvi_habits.domain.difficulty import Difficulty
from arvi_habits.domain.habit_series import Action, HabitSeries, generate_series_id
from arvi_habits.domain.policies import (
    CREATIVE_PASS,
    NORMALIZE_PASS,
    PIPELINE_PASSES,
    STRUCTURE_PASS,
    PassConfig,
    config_for,
    is_final,
)
from arvi_habits.domain.rank import Rank, rank_from_score

__all__ = [
    "Action",
    "HabitSeries",
    "generate_series_id",
    "Difficulty",
    "Rank",
    "rank_from_score",
    "PassConfig",
    "config_for",
    "is_final",
    "CREATIVE_PASS",
    "STRUCTURE_PASS",
    "NORMALIZE_PASS",
    "PIPELINE_PASSES",
]
