# arvi_habits/pipeline/__init__.py
"""Habit series creation pipeline."""

from .create_series import CreateHabitSeriesUseCase, PipelineDependencies

__all__ = ["CreateHabitSeriesUseCase", "PipelineDependencies"]
