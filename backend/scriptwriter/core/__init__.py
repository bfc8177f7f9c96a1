"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Error taxonomy shared by the service and the controller
    - runtime.py: Environment guards (credential check, boolean env flags)

Usage:
    from scriptwriter.core import get_logger, ensure_generation_configured
"""

# Logging
from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_run_id,
    set_pipeline_stage,
    clear_context,
    LogTimer,
)

# Exceptions
from .exceptions import (
    ScriptwriterError,
    ConfigurationError,
    InvalidRequestError,
    UpstreamServiceError,
    ComponentGenerationError,
    ScriptAssemblyError,
    PipelineError,
    InvalidTransitionError,
    PipelineBusyError,
    BackendError,
)

# Runtime guards
from .runtime import (
    MISSING_CREDENTIAL_MESSAGE,
    parse_bool_env,
    is_generation_configured,
    ensure_generation_configured,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_run_id",
    "set_pipeline_stage",
    "clear_context",
    "LogTimer",
    # Exceptions
    "ScriptwriterError",
    "ConfigurationError",
    "InvalidRequestError",
    "UpstreamServiceError",
    "ComponentGenerationError",
    "ScriptAssemblyError",
    "PipelineError",
    "InvalidTransitionError",
    "PipelineBusyError",
    "BackendError",
    # Runtime guards
    "MISSING_CREDENTIAL_MESSAGE",
    "parse_bool_env",
    "is_generation_configured",
    "ensure_generation_configured",
]
