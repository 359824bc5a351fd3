"""
Error taxonomy for the request pipeline.

Input problems are raised before any provider is called. Everything that goes wrong
downstream is a PipelineError that names the stage it came from; the HTTP layer turns
both into JSON error bodies. Nothing here is retried.
"""

STAGE_DESCRIPTIONS: dict[str, str] = {
    "rewrite": "Failed to rewrite the question",
    "expand": "Failed to expand the search query",
    "embed": "Failed to embed the search query",
    "search": "Failed to search database",
    "extract": "Failed to extract case facts",
    "persist": "Failed to save case",
    "generate": "Failed to generate a response",
    "list": "Failed to list cases",
}


class InputValidationError(ValueError):
    """Raised when the request body is missing or carries malformed fields."""


class PipelineError(Exception):
    """Raised when a downstream stage (provider, database, parsing) fails."""

    kind = "Internal Server Error"

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"{STAGE_DESCRIPTIONS.get(stage, stage)}: {message}")


class SearchBackendError(PipelineError):
    """Raised when the hybrid_search procedure reports an error."""

    kind = "Database Error"

    def __init__(self, message: str):
        super().__init__("search", message)


class CaseStoreError(PipelineError):
    """Raised when the case table cannot be read or written."""

    kind = "Database Error"


class StructuredOutputError(PipelineError):
    """Raised when schema-constrained output does not parse into the expected model."""


class StageTimeoutError(PipelineError):
    """Raised when a provider does not answer within the stage timeout."""

    def __init__(self, stage: str, timeout: float):
        self.timeout = timeout
        super().__init__(stage, f"no response within {timeout:.0f}s")
