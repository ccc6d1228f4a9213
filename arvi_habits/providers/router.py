# arvi_habits/providers/router.py
"""
Provider router: maps a model identifier to its vendor adapter.

Routing is a fixed, ordered prefix table. The first exact, case-sensitive
prefix match wins. There is no fallback provider and no caching, so an
unroutable model fails before any adapter code runs.
"""

import logging

from arvi_habits.domain.policies import PassConfig
from arvi_habits.domain.ports import AIProvider
from arvi_habits.errors import UnknownProviderError

from .types import ProviderResponse

logger = logging.getLogger(__name__)

PROVIDER_FAMILIES: tuple[tuple[str, str], ...] = (
    ("gpt-", "openai"),
    ("o1-", "openai"),
    ("gemini-", "gemini"),
)


def family_for(model_id: str, families: tuple[tuple[str, str], ...] = PROVIDER_FAMILIES) -> str:
    """
    Resolve the provider family for a model identifier.

    Args:
        model_id: Model identifier, e.g. "gpt-4o-mini"
        families: Ordered (prefix, family) table

    Returns:
        Family name

    Raises:
        UnknownProviderError: If the id is empty, not a string, or matches no prefix
    """
    if not isinstance(model_id, str) or not model_id:
        raise UnknownProviderError(f"Invalid model identifier: {model_id!r}", model_id=None)

    for prefix, family in families:
        if model_id.startswith(prefix):
            return family

    raise UnknownProviderError(f"Unknown model provider for: {model_id}", model_id=model_id)


class ProviderRouter(AIProvider):
    """
    AIProvider that delegates each call to the adapter of the model's family.

    Holds no prompt semantics and no accounting.
    """

    def __init__(
        self,
        adapters: dict[str, AIProvider],
        families: tuple[tuple[str, str], ...] = PROVIDER_FAMILIES,
    ) -> None:
        """
        Args:
            adapters: Family name -> adapter instance
            families: Ordered (prefix, family) table
        """
        self._adapters = dict(adapters)
        self._families = families

    @property
    def families(self) -> list[str]:
        """Families with a wired adapter."""
        return sorted(self._adapters)

    def resolve_adapter(self, model_id: str) -> AIProvider:
        """
        Find the adapter for a model identifier.

        Raises:
            UnknownProviderError: If the id does not route to a wired adapter
        """
        family = family_for(model_id, self._families)
        adapter = self._adapters.get(family)
        if adapter is None:
            raise UnknownProviderError(
                f"Provider family '{family}' is not configured (model: {model_id})",
                model_id=model_id,
            )
        return adapter

    async def execute(
        self, user_id: str, messages: list[dict], pass_config: PassConfig
    ) -> ProviderResponse:
        adapter = self.resolve_adapter(pass_config.model_id)
        logger.debug(f"Routing model={pass_config.model_id} to {type(adapter).__name__}")
        return await adapter.execute(user_id, messages, pass_config)
