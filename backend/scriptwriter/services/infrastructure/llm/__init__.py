"""
LLM Service - Abstraction layer for the external generation service

Usage:
    from scriptwriter.services.infrastructure.llm import GenerationEngine

    engine = GenerationEngine("final_script")
    result = await engine.generate("Your prompt here")
    if result.success:
        print(result.text)
"""

from .base import (
    LLMProvider,
    LLMResponse,
    LLMConfig,
    ProviderType,
    UsageStats,
)
from .factory import get_llm_provider, clear_provider_cache
from .gemini_provider import GeminiProvider
from .cost_tracker import CostTracker, PRICING, calculate_cost, get_cost_tracker
from .engine import GenerationEngine, GenerationResult

__all__ = [
    # Base classes
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "ProviderType",
    "UsageStats",
    # Providers
    "GeminiProvider",
    # Factory
    "get_llm_provider",
    "clear_provider_cache",
    # Cost tracking
    "CostTracker",
    "PRICING",
    "calculate_cost",
    "get_cost_tracker",
    # Engine
    "GenerationEngine",
    "GenerationResult",
]
