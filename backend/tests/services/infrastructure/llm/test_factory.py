"""
Tests for the LLM provider factory and the Gemini provider wiring
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from scriptwriter.core import ConfigurationError
from scriptwriter.services.infrastructure.llm import (
    GeminiProvider,
    LLMConfig,
    LLMResponse,
    ProviderType,
    UsageStats,
    get_llm_provider,
)


class TestGetLLMProvider:
    def test_returns_cached_gemini_provider(self):
        with patch("scriptwriter.services.infrastructure.llm.gemini_provider.genai.Client") as client:
            first = get_llm_provider()
            second = get_llm_provider()

        assert isinstance(first, GeminiProvider)
        assert first is second
        client.assert_called_once_with(api_key="mock-key")

    def test_rotated_key_gets_new_provider(self, monkeypatch):
        with patch("scriptwriter.services.infrastructure.llm.gemini_provider.genai.Client"):
            first = get_llm_provider()
            monkeypatch.setenv("GEMINI_API_KEY", "rotated-key")
            second = get_llm_provider()

        assert first is not second
        assert second.api_key == "rotated-key"

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY")

        with pytest.raises(ConfigurationError, match="Gemini API key not configured"):
            get_llm_provider()

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            get_llm_provider(provider_type="ollama")


@pytest.mark.asyncio
class TestGeminiProvider:
    @pytest.fixture
    def provider(self):
        with patch("scriptwriter.services.infrastructure.llm.gemini_provider.genai.Client") as client_cls:
            provider = GeminiProvider(api_key="k")
            provider.client = client_cls.return_value
            yield provider

    async def test_generate_maps_response(self, provider):
        provider.client.models.generate_content.return_value = SimpleNamespace(
            text="  Hello  ",
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=3),
        )

        response = await provider.generate("Hi", LLMConfig(model="gemini-2.5-flash", json_output=True))

        assert response.text == "Hello"
        assert response.provider == ProviderType.GEMINI
        assert response.usage.input_tokens == 12
        assert response.usage.total_tokens == 15
        kwargs = provider.client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "Hi"
        assert kwargs["config"].response_mime_type == "application/json"

    async def test_generate_without_usage(self, provider):
        provider.client.models.generate_content.return_value = SimpleNamespace(text=None, usage_metadata=None)

        response = await provider.generate("Hi", LLMConfig(model="gemini-2.5-flash"))

        assert response.text == ""
        assert response.usage is None

    async def test_unavailable_provider_raises(self):
        provider = GeminiProvider.__new__(GeminiProvider)
        provider.api_key = None
        provider.client = None

        with pytest.raises(RuntimeError, match="not available"):
            await provider.generate("Hi", LLMConfig(model="gemini-2.5-flash"))

    async def test_available_models(self, provider):
        assert "gemini-2.5-pro" in provider.list_models()
        assert provider.name == "gemini"

    async def test_finish_reason_is_mapped(self, provider):
        provider.client.models.generate_content.return_value = SimpleNamespace(
            text='{"hooks": [',
            usage_metadata=None,
            candidates=[SimpleNamespace(finish_reason=SimpleNamespace(name="MAX_TOKENS"))],
        )

        response = await provider.generate("Hi", LLMConfig(model="gemini-2.5-flash"))

        assert response.finish_reason == "MAX_TOKENS"
        assert response.truncated is True


class TestLLMResponse:
    def test_not_truncated_without_reason(self):
        response = LLMResponse(text="ok", model="m", provider=ProviderType.GEMINI)

        assert response.truncated is False

    def test_usage_total(self):
        assert UsageStats(input_tokens=7, output_tokens=5).total_tokens == 12
