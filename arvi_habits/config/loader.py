# arvi_habits/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
"""

import logging
import os
from pathlib import Path

import yaml
from platformdirs import user_config_path
from pydantic import ValidationError

from arvi_habits.errors import ConfigurationError

from .schema import ArviConfig

logger = logging.getLogger(__name__)

APP_NAME = "arvi-habits"

# Environment variables that fill API keys missing from the YAML file
_API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def get_config_dir() -> Path:
    """Get the config directory, ensuring it exists."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    return get_config_dir() / "config.yaml"


def resolve_db_path(config: ArviConfig) -> str:
    """Return the configured SQLite path, or habits.db in the config directory."""
    if config.storage.db_path:
        return config.storage.db_path
    return str(get_config_dir() / "habits.db")


def _apply_env_keys(config: ArviConfig) -> ArviConfig:
    """Fill missing provider API keys from the environment."""
    for family, env_var in _API_KEY_ENV.items():
        provider = getattr(config.providers, family)
        if provider.api_key is None and os.environ.get(env_var):
            provider.api_key = os.environ[env_var]
            logger.info(f"Using {env_var} for provider '{family}'")
    return config


def load_config(path: Path | None = None) -> ArviConfig:
    """
    Load configuration from YAML file.

    If the config file doesn't exist, creates it with defaults.

    Args:
        path: Explicit config file path (defaults to the platform config dir)

    Returns:
        Validated ArviConfig

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        default_config = ArviConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        return _apply_env_keys(default_config)

    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Config root must be a mapping: {config_path}")

    try:
        config = ArviConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {config_path}: {e}") from e

    logger.info(f"Loaded config from {config_path}")
    return _apply_env_keys(config)
