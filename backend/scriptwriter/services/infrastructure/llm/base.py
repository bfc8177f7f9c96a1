"""
Provider interface for text generation

A provider turns one prompt plus an LLMConfig into one LLMResponse. It knows
nothing about pipeline steps, retries or pricing; those live in
GenerationEngine and CostTracker.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ProviderType(str, Enum):
    GEMINI = "gemini"


# Finish reasons that mean the model stopped at the output token cap
TOKEN_LIMIT_FINISH_REASONS = frozenset({"MAX_TOKENS", "LENGTH"})


@dataclass
class LLMConfig:
    """Per-request generation settings, resolved from a step's ModelConfig"""
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    json_output: bool = False
    system_instruction: Optional[str] = None
    # Passed straight through to the SDK's request config
    extra_options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UsageStats:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    text: str
    model: str
    provider: ProviderType
    usage: Optional[UsageStats] = None
    finish_reason: Optional[str] = None
    raw_response: Any = None

    @property
    def truncated(self) -> bool:
        """True when generation stopped at the output token cap"""
        return (self.finish_reason or "").upper() in TOKEN_LIMIT_FINISH_REASONS


class LLMProvider(ABC):
    """
    A text generation backend.

    ``generate`` raises on transport, quota or service errors and returns an
    empty ``text`` when the model produced nothing; GenerationEngine decides
    what either means for the pipeline.
    """

    provider_type: ProviderType

    @abstractmethod
    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider has what it needs (e.g. a credential) to make calls"""

    @abstractmethod
    def list_models(self) -> List[str]:
        ...

    @property
    def name(self) -> str:
        return self.provider_type.value
