# arvi_habits/domain/policies.py
"""
Domain decision policies for habit series generation.

Pure functions, no side effects:
- is_final(): which pass produces persist-eligible content
- config_for(): per-pass model and sampling configuration

The series is generated in three passes. The creative pass is exploratory
and high-variance. The structure pass is deterministic and produces the
stable representation of the series. The json_conversion pass only
transforms the structure pass's content into the JSON contract, so "final"
is a property of the structure pass, not of the normalization step.
"""

from dataclasses import dataclass

CREATIVE_PASS = "habit_series_creative"
STRUCTURE_PASS = "habit_series_structure"
NORMALIZE_PASS = "json_conversion"

# Execution order of the pipeline (fixed, not user-configurable)
PIPELINE_PASSES = (CREATIVE_PASS, STRUCTURE_PASS, NORMALIZE_PASS)


@dataclass(frozen=True)
class PassConfig:
    """
    Model and sampling settings for a single pass.

    Attributes:
        model_id: Model identifier, routed to a provider family by prefix
        temperature: Sampling temperature in [0, 1]
        max_output_tokens: Upper bound on generated tokens
        force_strict_json: Ask the vendor for JSON-only output where supported
        description: Human-readable purpose of the pass
    """

    model_id: str
    temperature: float
    max_output_tokens: int
    force_strict_json: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be in [0, 1], got {self.temperature}")
        if self.max_output_tokens <= 0:
            raise ValueError(
                f"max_output_tokens must be positive, got {self.max_output_tokens}"
            )


HABIT_SERIES_AI_POLICIES: dict[str, PassConfig] = {
    CREATIVE_PASS: PassConfig(
        model_id="gemini-2.5-flash",
        temperature=0.8,
        max_output_tokens=1500,
        description="Habit series creative exploration pass",
    ),
    STRUCTURE_PASS: PassConfig(
        model_id="gemini-2.5-pro",
        temperature=0.0,
        max_output_tokens=1500,
        description="Habit series structural consolidation pass",
    ),
    NORMALIZE_PASS: PassConfig(
        model_id="gpt-4o-mini",
        temperature=0.0,
        max_output_tokens=1500,
        force_strict_json=True,
        description="Strict text-to-JSON normalization pass",
    ),
}


def config_for(pass_id: str) -> PassConfig:
    """
    Look up the configuration of a pipeline pass.

    Args:
        pass_id: One of PIPELINE_PASSES

    Returns:
        Immutable PassConfig for the pass

    Raises:
        KeyError: For an unknown pass identifier (programming error)
    """
    try:
        return HABIT_SERIES_AI_POLICIES[pass_id]
    except KeyError:
        raise KeyError(f"No AI policy configured for pass '{pass_id}'") from None


def is_final(pass_id: str, final_pass: str = STRUCTURE_PASS) -> bool:
    """
    Whether content originating from this pass is persist-eligible.

    Args:
        pass_id: Pass identifier to check
        final_pass: The configured final pass (structure pass by default)

    Returns:
        True only for the configured final pass
    """
    return pass_id == final_pass
