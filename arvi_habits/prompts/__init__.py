# arvi_habits/prompts/__init__.py
"""Prompt templates and builders for the three habit series passes."""

from .builders import (
    SUPPORTED_LANGUAGES,
    build_creative_prompt,
    build_normalize_prompt,
    build_structure_prompt,
    flatten_test_data,
)
from .loader import load_prompt

__all__ = [
    "load_prompt",
    "SUPPORTED_LANGUAGES",
    "build_creative_prompt",
    "build_structure_prompt",
    "build_normalize_prompt",
    "flatten_test_data",
]
