"""
Core Exceptions
Standardized exceptions for the service and the pipeline controller.

Errors raised by the HTTP layer carry the status code they map to; the
exception handler in main.py renders them as ``{"error": message}``.
"""


class ScriptwriterError(Exception):
    """Base exception for all application errors."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ScriptwriterError):
    """Required configuration (e.g. the generation credential) is missing."""
    status_code = 500


class InvalidRequestError(ScriptwriterError):
    """A request body is missing a required field or is malformed."""
    status_code = 400


class UpstreamServiceError(ScriptwriterError):
    """The external generation service failed or returned unusable output."""
    status_code = 502


class ComponentGenerationError(UpstreamServiceError):
    """Component generation failed; there is no fallback component set."""


class ScriptAssemblyError(UpstreamServiceError):
    """Final script assembly failed; there is no fallback script."""


class PipelineError(ScriptwriterError):
    """Base exception for pipeline controller errors."""


class InvalidTransitionError(PipelineError):
    """An event is not allowed in the controller's current stage."""


class PipelineBusyError(PipelineError):
    """A run is already in flight on this controller."""


class BackendError(PipelineError):
    """A stage call from the controller to its backend failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
