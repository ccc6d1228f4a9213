# arvi_habits/config/__init__.py
"""Configuration system for arvi-habits."""

from .loader import get_config_path, load_config, resolve_db_path
from .schema import (
    ArviConfig,
    PipelineConfig,
    ProviderConfig,
    ProvidersConfig,
    StorageConfig,
)

__all__ = [
    "ArviConfig",
    "ProviderConfig",
    "ProvidersConfig",
    "PipelineConfig",
    "StorageConfig",
    "load_config",
    "get_config_path",
    "resolve_db_path",
]
