# arvi_habits/providers/base.py
"""
Base class for vendor adapters.

Adapters are strictly infrastructural. They translate a message envelope
into one vendor call, normalize the response, and do token and resource
cost accounting. They never build prompts, pick models, or apply domain
rules.
"""

import asyncio
import logging
from abc import abstractmethod

from arvi_habits.domain.policies import PassConfig
from arvi_habits.domain.ports import AIProvider
from arvi_habits.errors import ProviderExecutionError
from arvi_habits.validation.sanitize import sanitize_user_input

from .types import ProviderResponse, estimate_tokens, validate_messages

logger = logging.getLogger(__name__)


def sanitize_messages(messages: list[dict]) -> list[dict]:
    """Sanitize user messages; system and assistant messages are trusted."""
    return [
        {**message, "content": sanitize_user_input(message["content"])}
        if message["role"] == "user"
        else message
        for message in messages
    ]


class BaseProviderAdapter(AIProvider):
    """
    Template for a single-attempt, time-bounded vendor call.

    Subclasses implement _call() and the accounting hooks. execute():
    1. Validates the envelope and sanitizes user messages
    2. Awaits _call() under the configured timeout
    3. Computes tokens and resource cost
    4. Wraps envelope errors and any vendor/transport failure in ProviderExecutionError

    No retries: retry policy, if any, belongs to the caller.
    """

    family: str = "base"
    chars_per_token: float = 4.0

    def __init__(self, timeout: float = 60.0) -> None:
        """
        Args:
            timeout: Upper bound in seconds for one vendor call
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    @abstractmethod
    async def _call(self, messages: list[dict], pass_config: PassConfig) -> str | None:
        """
        Perform the vendor call.

        Args:
            messages: Sanitized message envelope
            pass_config: Model and sampling settings

        Returns:
            Response text (None or empty is treated as a failure)
        """

    @abstractmethod
    def resource_cost(self, prompt_text: str, response_text: str) -> int:
        """Deterministic resource cost for one call."""

    def render_prompt(self, messages: list[dict]) -> str:
        """Text the cost formula measures as the prompt."""
        return "\n\n".join(message["content"] for message in messages)

    def estimate_tokens(self, text: str | None) -> int:
        return estimate_tokens(text, self.chars_per_token)

    async def execute(
        self, user_id: str, messages: list[dict], pass_config: PassConfig
    ) -> ProviderResponse:
        model_id = pass_config.model_id
        try:
            validate_messages(messages)
        except ValueError as e:
            raise ProviderExecutionError(
                f"Invalid message envelope for '{model_id}': {e}", model_id=model_id
            ) from e
        sanitized = sanitize_messages(messages)

        logger.info(
            f"[{self.family}] Calling model={model_id}, messages={len(sanitized)}, user={user_id}"
        )

        try:
            content = await asyncio.wait_for(
                self._call(sanitized, pass_config), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"[{self.family}] model={model_id} timed out after {self._timeout}s")
            raise ProviderExecutionError(
                f"{self.family} call to '{model_id}' timed out after {self._timeout}s",
                model_id=model_id,
            ) from e
        except Exception as e:
            logger.error(f"[{self.family}] model={model_id} call failed: {e}")
            raise ProviderExecutionError(
                f"{self.family} provider error: {e}", model_id=model_id
            ) from e

        if not content:
            raise ProviderExecutionError(
                f"{self.family} returned an empty response for '{model_id}'",
                model_id=model_id,
            )

        prompt_text = self.render_prompt(sanitized)
        response = ProviderResponse(
            content=content,
            model_id=model_id,
            tokens_used=self.estimate_tokens(content),
            resource_cost=self.resource_cost(prompt_text, content),
        )
        logger.info(
            f"[{self.family}] Response received: {len(content)} chars, "
            f"tokens={response.tokens_used}, cost={response.resource_cost}"
        )
        return response
