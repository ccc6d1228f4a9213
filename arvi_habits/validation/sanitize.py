# arvi_habits/validation/sanitize.py
"""
Sanitization of untrusted user text before it reaches an AI provider.

Strips prompt-injection constructs (fake role headers, chat template
tokens, invisible characters) while leaving well-formed text unchanged.
sanitize_user_input() is idempotent.
"""

import logging
import re
import unicodedata

from arvi_habits.errors import InvalidPayloadError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 8000

# Zero-width and BOM characters used to hide injected instructions
_INVISIBLE_CHARS = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")

# C0/C1 control characters except tab and newline
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")

# Role headers and chat-template tokens that could impersonate trusted turns
_INJECTION_MARKERS = re.compile(
    r"\[\s*(?:system(?:\s+instructions)?|assistant|developer)\s*\]"
    r"|<\|[^|<>]{0,40}\|>"
    r"|<</?SYS>>"
    r"|</?(?:system|assistant)>",
    re.IGNORECASE,
)

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")

_IDENTIFIER = re.compile(r"[A-Za-z0-9_.-]{1,64}")


def _strip_markers(text: str) -> str:
    """Remove injection markers until none remain (removal can expose new ones)."""
    while True:
        cleaned = _INJECTION_MARKERS.sub("", text)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize_user_input(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Sanitize user-originated message content.

    Steps:
    1. NFKC normalization and CRLF -> LF
    2. Drop invisible and control characters (tab/newline kept)
    3. Remove role headers and chat-template tokens
    4. Collapse runs of blank lines, trim, truncate to max_length

    Args:
        text: Raw user text
        max_length: Maximum allowed length after cleaning

    Returns:
        Cleaned text (unchanged for ordinary input)
    """
    if not isinstance(text, str):
        return ""

    cleaned = unicodedata.normalize("NFKC", text)
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _INVISIBLE_CHARS.sub("", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)

    stripped = _strip_markers(cleaned)
    if stripped != cleaned:
        logger.warning("Removed injection markers from user input")
    cleaned = _EXCESS_BLANK_LINES.sub("\n\n", stripped).strip()

    if len(cleaned) > max_length:
        logger.warning(
            f"User input truncated from {len(cleaned)} to {max_length} characters"
        )
        cleaned = cleaned[:max_length].rstrip()

    return cleaned


def sanitize_identifier(value: str, label: str = "ID") -> str:
    """
    Validate a user or series identifier.

    Identifiers are 1-64 characters: letters, digits, hyphen, underscore, dot.

    Args:
        value: User-provided identifier
        label: Name used in the error message

    Returns:
        The identifier, stripped

    Raises:
        InvalidPayloadError: If the format is invalid
    """
    cleaned = value.strip() if isinstance(value, str) else ""
    if not _IDENTIFIER.fullmatch(cleaned):
        raise InvalidPayloadError(
            f"Invalid {label} '{value}': must be 1-64 letters, digits, '-', '_' or '.'"
        )
    return cleaned
