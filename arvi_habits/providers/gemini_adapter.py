# arvi_habits/providers/gemini_adapter.py
"""
Gemini adapter using the google-genai SDK.

Gemini serves the creative and structure passes, the only calls that
consume internal energy units.
"""

import logging
import math

from google import genai
from google.genai import types

from arvi_habits.domain.policies import PassConfig

from .base import BaseProviderAdapter
from .types import estimate_tokens, round_half_up

logger = logging.getLogger(__name__)

GEMINI_CHARS_PER_TOKEN = 3.7
PROMPT_TOKEN_WEIGHT = 0.30
TOKENS_PER_ENERGY = 100


def calculate_gemini_tokens(text: str | None) -> int:
    """Estimate Gemini tokens: round(len(text) / 3.7)."""
    return estimate_tokens(text, GEMINI_CHARS_PER_TOKEN)


def calculate_gemini_energy(prompt: str, response: str) -> int:
    """
    Energy for one Gemini call.

    energy = ceil(round(response_tokens + prompt_tokens * 0.30) / 100)
    """
    tokens_prompt = calculate_gemini_tokens(prompt)
    tokens_response = calculate_gemini_tokens(response)
    total_tokens = round_half_up(tokens_response + tokens_prompt * PROMPT_TOKEN_WEIGHT)
    energy = math.ceil(total_tokens / TOKENS_PER_ENERGY)

    logger.debug(
        f"Gemini energy: prompt={tokens_prompt}t, response={tokens_response}t, "
        f"total={total_tokens}t -> energy={energy}"
    )
    return energy


class GeminiAdapter(BaseProviderAdapter):
    """Adapter for the Gemini family ("gemini-*")."""

    family = "gemini"
    chars_per_token = GEMINI_CHARS_PER_TOKEN

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        """
        Initialize Gemini adapter.

        Args:
            api_key: Gemini API key
            timeout: Upper bound in seconds for one call
            client: Pre-built genai.Client (tests)
        """
        super().__init__(timeout=timeout)
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def render_prompt(self, messages: list[dict]) -> str:
        """Flatten the envelope into a single Gemini prompt text."""
        parts = []
        for message in messages:
            if message["role"] == "system":
                parts.append(f"[SYSTEM INSTRUCTIONS]\n{message['content']}")
            elif message["role"] == "assistant":
                parts.append(f"[ASSISTANT]\n{message['content']}")
            else:
                parts.append(message["content"])
        return "\n\n".join(parts)

    async def _call(self, messages: list[dict], pass_config: PassConfig) -> str | None:
        prompt = self.render_prompt(messages)
        config = types.GenerateContentConfig(
            temperature=pass_config.temperature,
            max_output_tokens=pass_config.max_output_tokens,
            response_mime_type="application/json" if pass_config.force_strict_json else None,
        )
        response = await self._client.aio.models.generate_content(
            model=pass_config.model_id,
            contents=prompt,
            config=config,
        )
        return response.text

    def resource_cost(self, prompt_text: str, response_text: str) -> int:
        return calculate_gemini_energy(prompt_text, response_text)
