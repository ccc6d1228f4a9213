# arvi_habits/providers/__init__.py
"""AI provider adapters and the model-id router."""

from .base import BaseProviderAdapter
from .factory import create_provider_router
from .gemini_adapter import GeminiAdapter, calculate_gemini_energy, calculate_gemini_tokens
from .openai_adapter import OpenAIAdapter
from .router import PROVIDER_FAMILIES, ProviderRouter, family_for
from .types import ProviderResponse, validate_messages

__all__ = [
    "BaseProviderAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "PROVIDER_FAMILIES",
    "ProviderResponse",
    "ProviderRouter",
    "calculate_gemini_energy",
    "calculate_gemini_tokens",
    "create_provider_router",
    "family_for",
    "validate_messages",
]
