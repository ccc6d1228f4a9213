# arvi_habits/providers/types.py
"""Normalized provider types shared by all adapter implementations."""

import math
from dataclasses import dataclass

VALID_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ProviderResponse:
    """Provider-agnostic result of a single AI call."""

    content: str
    model_id: str
    tokens_used: int  # estimated from text length, vendor-specific divisor
    resource_cost: int  # internal "energy" units, not vendor billing

    def __post_init__(self) -> None:
        if self.tokens_used < 0 or self.resource_cost < 0:
            raise ValueError("tokens_used and resource_cost must be non-negative")


def validate_messages(messages: list[dict]) -> None:
    """
    Check the message envelope shape.

    At most one system message, and only in first position, followed by
    one or more user/assistant messages with string content.

    Raises:
        ValueError: If the envelope is malformed
    """
    if not isinstance(messages, list) or not messages:
        raise ValueError("Message envelope must be a non-empty list")

    for index, message in enumerate(messages):
        if not isinstance(message, dict):
            raise ValueError(f"messages[{index}] is not a dict")
        role = message.get("role")
        if role not in VALID_ROLES:
            raise ValueError(f"messages[{index}] has invalid role {role!r}")
        if not isinstance(message.get("content"), str):
            raise ValueError(f"messages[{index}] content must be a string")
        if role == "system" and index != 0:
            raise ValueError("System message must be the first message")

    conversation = messages[1:] if messages[0]["role"] == "system" else messages
    if not conversation:
        raise ValueError("Envelope needs at least one user or assistant message")


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero (non-negative inputs)."""
    return int(math.floor(value + 0.5))


def estimate_tokens(text: str | None, chars_per_token: float) -> int:
    """Estimate token count from character length."""
    if not text or not isinstance(text, str):
        return 0
    return round_half_up(len(text) / chars_per_token)
