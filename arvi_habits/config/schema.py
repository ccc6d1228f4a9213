# arvi_habits/config/schema.py
"""
Pydantic configuration models for arvi-habits.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from arvi_habits.domain.policies import STRUCTURE_PASS


class ProviderConfig(BaseModel):
    """Credentials and limits for one AI vendor."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None,
        description="Vendor API key (None = family unavailable, falls back to env var)",
    )
    timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Upper bound in seconds for a single AI call",
    )


class ProvidersConfig(BaseModel):
    """Vendor configuration, one entry per provider family."""

    model_config = ConfigDict(extra="ignore")

    openai: ProviderConfig = Field(default_factory=ProviderConfig)
    gemini: ProviderConfig = Field(default_factory=ProviderConfig)


class PipelineConfig(BaseModel):
    """Habit series pipeline settings."""

    model_config = ConfigDict(extra="ignore")

    final_pass: Literal[
        "habit_series_creative", "habit_series_structure", "json_conversion"
    ] = Field(
        default=STRUCTURE_PASS,
        description="Pass whose content is persist-eligible once normalized",
    )
    max_active_series: int = Field(
        default=0,
        ge=0,
        description="Maximum persisted series per user (0 = unlimited)",
    )


class StorageConfig(BaseModel):
    """SQLite storage configuration."""

    model_config = ConfigDict(extra="ignore")

    db_path: str | None = Field(
        default=None,
        description="SQLite database path (None = habits.db in the config directory)",
    )


class ArviConfig(BaseModel):
    """Root configuration for arvi-habits."""

    model_config = ConfigDict(extra="ignore")

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Root logging level"
    )
