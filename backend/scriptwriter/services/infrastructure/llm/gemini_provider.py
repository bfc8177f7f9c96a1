"""
google-genai backed provider

The SDK client is synchronous; each call runs in a worker thread so the event
loop (and the engine's per-attempt timeout) stays responsive.
"""

import asyncio
from typing import Any, List, Optional

from google import genai
from google.genai import types

from scriptwriter.config import AVAILABLE_MODELS, get_gemini_api_key

from .base import LLMConfig, LLMProvider, LLMResponse, ProviderType, UsageStats


class GeminiProvider(LLMProvider):
    provider_type = ProviderType.GEMINI

    def __init__(self, api_key: Optional[str] = None):
        """
        Args:
            api_key: Overrides GEMINI_API_KEY; without either the provider is unavailable
        """
        self.api_key = api_key or get_gemini_api_key()
        self.client = genai.Client(api_key=self.api_key) if self.api_key else None

    def is_available(self) -> bool:
        return self.client is not None

    def list_models(self) -> List[str]:
        return list(AVAILABLE_MODELS)

    @staticmethod
    def _request_config(config: LLMConfig) -> types.GenerateContentConfig:
        options: dict[str, Any] = {"temperature": config.temperature}
        optional = {
            "max_output_tokens": config.max_tokens,
            "system_instruction": config.system_instruction,
            "response_mime_type": "application/json" if config.json_output else None,
        }
        options.update({key: value for key, value in optional.items() if value})
        options.update(config.extra_options)
        return types.GenerateContentConfig(**options)

    @staticmethod
    def _usage(response: Any) -> Optional[UsageStats]:
        metadata = getattr(response, "usage_metadata", None)
        if metadata is None:
            return None
        return UsageStats(
            input_tokens=getattr(metadata, "prompt_token_count", None) or 0,
            output_tokens=getattr(metadata, "candidates_token_count", None) or 0,
        )

    @staticmethod
    def _finish_reason(response: Any) -> Optional[str]:
        candidates = getattr(response, "candidates", None) or []
        reason = getattr(candidates[0], "finish_reason", None) if candidates else None
        if reason is None:
            return None
        return getattr(reason, "name", None) or str(reason)

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        if self.client is None:
            raise RuntimeError("Gemini provider is not available. Set GEMINI_API_KEY.")

        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=config.model,
            contents=prompt,
            config=self._request_config(config),
        )

        return LLMResponse(
            text=(response.text or "").strip(),
            model=config.model,
            provider=self.provider_type,
            usage=self._usage(response),
            finish_reason=self._finish_reason(response),
            raw_response=response,
        )
