"""
LLM Provider Factory

Creates and caches provider instances. The cache is keyed by credential so a
rotated GEMINI_API_KEY takes effect without a restart.
"""

from typing import Dict, Optional, Tuple

from scriptwriter.config import get_gemini_api_key
from scriptwriter.core.exceptions import ConfigurationError
from scriptwriter.core.runtime import MISSING_CREDENTIAL_MESSAGE

from .base import LLMProvider, ProviderType
from .gemini_provider import GeminiProvider


# Cache for provider instances
_provider_cache: Dict[Tuple[ProviderType, str], LLMProvider] = {}


def get_llm_provider(
    provider_type: ProviderType = ProviderType.GEMINI,
    use_cache: bool = True,
    api_key: Optional[str] = None,
) -> LLMProvider:
    """Get an LLM provider instance

    Args:
        provider_type: Provider to use
        use_cache: Whether to cache and reuse provider instances
        api_key: Explicit credential; defaults to GEMINI_API_KEY

    Returns:
        LLMProvider instance

    Raises:
        ConfigurationError: If the credential is missing
        ValueError: If the provider type is unknown
    """
    if provider_type != ProviderType.GEMINI:
        raise ValueError(f"Unknown provider type: {provider_type}")

    api_key = api_key or get_gemini_api_key()
    if not api_key:
        raise ConfigurationError(MISSING_CREDENTIAL_MESSAGE)

    cache_key = (provider_type, api_key)
    if use_cache and cache_key in _provider_cache:
        return _provider_cache[cache_key]

    provider = GeminiProvider(api_key=api_key)

    if use_cache:
        _provider_cache[cache_key] = provider

    return provider


def clear_provider_cache():
    """Clear the provider cache"""
    _provider_cache.clear()
