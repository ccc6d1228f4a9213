# arvi_habits/prompts/loader.py
"""Prompt template loading.

Templates are plain .txt files beside this module, named
``<pass>_<language>.txt`` for language-specific prompts and ``<pass>.txt``
for shared ones. Contents are cached for the life of the process.
"""

from functools import lru_cache
from pathlib import Path

_PROMPT_DIR = Path(__file__).parent


def template_name(base: str, language: str | None = None) -> str:
    """Return the template name for a pass, with the language suffix if given."""
    return f"{base}_{language}" if language else base


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Load a prompt template by name.

    Args:
        name: Template name without .txt (e.g. 'creative_en', 'normalize')

    Returns:
        Template text with {placeholders} unformatted

    Raises:
        FileNotFoundError: If no template has that name
    """
    path = _PROMPT_DIR / f"{name}.txt"
    if not path.is_file():
        raise FileNotFoundError(f"Prompt template '{name}' not found in {_PROMPT_DIR}")
    return path.read_text(encoding="utf-8")
