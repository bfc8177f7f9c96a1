"""
Runtime environment guards.
"""

from scriptwriter.config import get_gemini_api_key

from .exceptions import ConfigurationError

MISSING_CREDENTIAL_MESSAGE = "Gemini API key not configured"


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def is_generation_configured() -> bool:
    return get_gemini_api_key() is not None


def ensure_generation_configured() -> str:
    """Return the generation credential or fail before any other validation."""
    api_key = get_gemini_api_key()
    if api_key is None:
        raise ConfigurationError(MISSING_CREDENTIAL_MESSAGE)
    return api_key
