# arvi_habits/errors.py
"""
Error taxonomy for the habit series pipeline.

Every failure the pipeline can surface is one of these kinds. The CLI and
the MCP surface render them as "<kind>: <message>".
"""


class HabitPipelineError(Exception):
    """Base class for all pipeline failures."""

    kind = "pipeline_error"

    def __str__(self) -> str:
        return super().__str__() or self.kind


class InvalidPayloadError(HabitPipelineError):
    """Malformed or missing request fields. Client error, never retried."""

    kind = "invalid_payload"


class MissingDependencyError(HabitPipelineError):
    """A required collaborator was not wired (deployment bug)."""

    kind = "missing_dependency"


class ConfigurationError(HabitPipelineError):
    """Invalid configuration file or inconsistent pipeline settings."""

    kind = "configuration"


class EligibilityDeniedError(HabitPipelineError):
    """The domain policy refused the request before any AI call."""

    kind = "eligibility_denied"

    def __init__(self, reason: str):
        super().__init__(f"Request not allowed: {reason}")
        self.reason = reason


class UnknownProviderError(HabitPipelineError):
    """No provider family claims the model identifier."""

    kind = "unknown_provider"

    def __init__(self, message: str, model_id: object = None):
        super().__init__(message)
        self.model_id = model_id


class ProviderExecutionError(HabitPipelineError):
    """
    The external AI call failed (network, vendor error, timeout).

    The underlying exception is chained as __cause__.
    """

    kind = "provider_execution"

    def __init__(self, message: str, model_id: str | None = None):
        super().__init__(message)
        self.model_id = model_id


class MalformedOutputError(HabitPipelineError):
    """Normalization pass output is not parseable JSON."""

    kind = "malformed_output"


class ContractViolationError(HabitPipelineError):
    """Parsed output failed structural validation."""

    kind = "contract_violation"

    def __init__(self, reason: str):
        super().__init__(f"AI output validation failed: {reason}")
        self.reason = reason


class PersistenceError(HabitPipelineError):
    """Storage failure raised by the bundled repositories."""

    kind = "persistence"
