from typing import List, Optional, Union

import pytest

from scriptwriter import config
from scriptwriter.services.infrastructure.llm import (
    CostTracker,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    ProviderType,
    UsageStats,
    clear_provider_cache,
)


class FakeProvider(LLMProvider):
    """Scripted provider: each call pops the next reply (text or exception)."""

    provider_type = ProviderType.GEMINI

    def __init__(self, replies: Optional[List[Union[str, BaseException]]] = None, default: Optional[str] = None):
        self.replies = list(replies or [])
        self.default = default
        self.calls: List[tuple] = []

    def queue(self, *replies: Union[str, BaseException]) -> "FakeProvider":
        self.replies.extend(replies)
        return self

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        self.calls.append((prompt, config))
        if self.replies:
            reply = self.replies.pop(0)
        elif self.default is not None:
            reply = self.default
        else:
            raise RuntimeError("FakeProvider has no scripted reply")

        if isinstance(reply, BaseException):
            raise reply
        return LLMResponse(
            text=reply,
            model=config.model,
            provider=self.provider_type,
            usage=UsageStats(input_tokens=100, output_tokens=50),
        )

    def is_available(self) -> bool:
        return True

    def list_models(self) -> List[str]:
        return ["gemini-2.5-flash", "gemini-2.5-pro"]

    @property
    def prompts(self) -> List[str]:
        return [prompt for prompt, _ in self.calls]


@pytest.fixture(autouse=True)
def mock_generation_env(monkeypatch):
    """Every test gets a credential and no retry delay"""
    monkeypatch.setenv("GEMINI_API_KEY", "mock-key")
    monkeypatch.setattr(config, "GENERATION_BACKOFF_SECONDS", 0)
    clear_provider_cache()
    yield
    clear_provider_cache()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def cost_tracker():
    return CostTracker()
