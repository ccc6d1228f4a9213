# arvi_habits/providers/factory.py
"""Factory for creating the configured provider router."""

import logging

from arvi_habits.config.schema import ArviConfig
from arvi_habits.domain.ports import AIProvider

from .gemini_adapter import GeminiAdapter
from .openai_adapter import OpenAIAdapter
from .router import ProviderRouter

logger = logging.getLogger(__name__)


def create_provider_router(config: ArviConfig) -> ProviderRouter:
    """
    Create a ProviderRouter with one adapter per configured family.

    Families without an API key stay unwired, so routing to them raises
    UnknownProviderError instead of failing at the vendor.

    Args:
        config: Root ArviConfig

    Returns:
        ProviderRouter over the wired adapters
    """
    adapters: dict[str, AIProvider] = {}

    openai_config = config.providers.openai
    if openai_config.api_key:
        adapters["openai"] = OpenAIAdapter(
            api_key=openai_config.api_key, timeout=openai_config.timeout
        )

    gemini_config = config.providers.gemini
    if gemini_config.api_key:
        adapters["gemini"] = GeminiAdapter(
            api_key=gemini_config.api_key, timeout=gemini_config.timeout
        )

    if not adapters:
        logger.warning("No provider API keys configured; every pass will be unroutable")
    else:
        logger.info(f"Provider router wired for: {', '.join(sorted(adapters))}")

    return ProviderRouter(adapters)
