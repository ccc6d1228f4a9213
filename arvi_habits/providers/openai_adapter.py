# arvi_habits/providers/openai_adapter.py
"""OpenAI adapter using the chat completions API."""

import logging

import httpx
from openai import AsyncOpenAI

from arvi_habits.domain.policies import PassConfig

from .base import BaseProviderAdapter

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10.0

# Reasoning models reject temperature and system messages
_REASONING_PREFIXES = ("o1-",)


def is_reasoning_model(model_id: str) -> bool:
    return model_id.startswith(_REASONING_PREFIXES)


def _fold_system_message(messages: list[dict]) -> list[dict]:
    """Merge a leading system message into the first user message."""
    if not messages or messages[0]["role"] != "system":
        return messages

    system, rest = messages[0], messages[1:]
    for index, message in enumerate(rest):
        if message["role"] == "user":
            merged = {**message, "content": f"{system['content']}\n\n{message['content']}"}
            return [*rest[:index], merged, *rest[index + 1:]]
    return [{"role": "user", "content": system["content"]}, *rest]


class OpenAIAdapter(BaseProviderAdapter):
    """
    Adapter for the OpenAI family ("gpt-*", "o1-*").

    Used for structure-only transformation (JSON normalization), so its
    resource cost is the policy constant RESOURCE_COST = 0.
    """

    family = "openai"
    chars_per_token = 4.0
    RESOURCE_COST = 0

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize OpenAI adapter.

        Args:
            api_key: OpenAI API key
            timeout: Upper bound in seconds for one call
            client: Pre-built AsyncOpenAI client (tests)
        """
        super().__init__(timeout=timeout)
        # max_retries=0: the SDK retries by default, the pipeline is single-attempt
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=min(CONNECT_TIMEOUT, timeout)),
            max_retries=0,
        )

    async def _call(self, messages: list[dict], pass_config: PassConfig) -> str | None:
        model_id = pass_config.model_id
        kwargs: dict = {"model": model_id}

        if is_reasoning_model(model_id):
            kwargs["messages"] = _fold_system_message(messages)
            kwargs["max_completion_tokens"] = pass_config.max_output_tokens
        else:
            kwargs["messages"] = messages
            kwargs["temperature"] = pass_config.temperature
            kwargs["max_tokens"] = pass_config.max_output_tokens
            if pass_config.force_strict_json:
                kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**kwargs)

        choice = response.choices[0]
        logger.info(f"OpenAI finish_reason={choice.finish_reason}")
        return choice.message.content

    def resource_cost(self, prompt_text: str, response_text: str) -> int:
        return self.RESOURCE_COST
