"""
Tests for the content extractor
"""

import asyncio
from typing import Dict, List

import pytest

from scriptwriter.models import Source
from scriptwriter.services.infrastructure.llm import (
    GenerationEngine,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    ProviderType,
    UsageStats,
)
from scriptwriter.services.pipeline.scriptwriting import (
    EXTRACTION_ERROR_MESSAGE,
    ContentExtractor,
    fallback_extraction,
)
from scriptwriter.services.pipeline.scriptwriting.extraction import FALLBACK_SUFFIX


class TestFallbackExtraction:
    def test_expands_snippet(self):
        source = Source(id="s", title="T", link="L", snippet="Short snippet")

        fallback = fallback_extraction(source)

        assert fallback.extracted_text == f"Short snippet\n\n{FALLBACK_SUFFIX}"
        assert fallback.is_text_extracted is False
        assert fallback.text_extraction_error == EXTRACTION_ERROR_MESSAGE
        assert source.extracted_text is None


@pytest.mark.asyncio
class TestContentExtractor:
    @pytest.fixture
    def extractor(self, make_engine):
        return ContentExtractor(make_engine("content_extraction"))

    async def test_extracts_every_source_in_order(self, extractor, fake_provider, sources):
        fake_provider.default = "Detailed content"

        enriched = await extractor.extract(sources)

        assert len(enriched) == len(sources)
        assert [source.id for source in enriched] == [source.id for source in sources]
        assert all(source.is_text_extracted for source in enriched)
        assert all(source.extracted_text == "Detailed content" for source in enriched)
        assert all(source.text_extraction_error is None for source in enriched)

    async def test_failed_source_gets_fallback(self, extractor, fake_provider, sources):
        # Calls start in order, so the second reply belongs to the second source
        fake_provider.queue("Text 0", RuntimeError("boom"), "Text 2", "Text 3")

        enriched = await extractor.extract(sources)

        assert [source.is_text_extracted for source in enriched] == [True, False, True, True]
        assert enriched[1].extracted_text.startswith("Snippet 1\n\n")
        assert enriched[1].text_extraction_error == EXTRACTION_ERROR_MESSAGE
        assert enriched[3].extracted_text == "Text 3"

    async def test_all_failures_keep_length(self, extractor, fake_provider, sources):
        fake_provider.default = ""

        enriched = await extractor.extract(sources)

        assert len(enriched) == 4
        assert not any(source.is_text_extracted for source in enriched)
        assert all(source.extracted_text for source in enriched)

    async def test_already_extracted_source_is_kept(self, extractor, fake_provider):
        done = Source(title="T", link="L", snippet="S", extracted_text="Existing", is_text_extracted=True)

        enriched = await extractor.extract([done])

        assert enriched == [done]
        assert fake_provider.calls == []

    async def test_prompt_contains_source(self, extractor, fake_provider, sources):
        fake_provider.default = "ok"

        await extractor.extract(sources[:1])

        prompt = fake_provider.prompts[0]
        assert "Article 0" in prompt
        assert "https://example.com/0" in prompt
        assert "Snippet 0" in prompt

    async def test_empty_input(self, extractor):
        assert await extractor.extract([]) == []


class PacedProvider(LLMProvider):
    """Answers each source after its own delay; a source listed in ``failing`` raises."""

    provider_type = ProviderType.GEMINI

    def __init__(self, delays: Dict[str, float], failing=()):
        self.delays = delays
        self.failing = set(failing)
        self.finished: List[str] = []

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        title = next(title for title in self.delays if f"Title: {title}\n" in prompt)
        await asyncio.sleep(self.delays[title])
        self.finished.append(title)
        if title in self.failing:
            raise RuntimeError(f"{title} unavailable")
        return LLMResponse(
            text=f"Full text of {title}",
            model=config.model,
            provider=self.provider_type,
            usage=UsageStats(input_tokens=10, output_tokens=10),
        )

    def is_available(self) -> bool:
        return True

    def list_models(self) -> List[str]:
        return ["gemini-2.5-flash"]


@pytest.mark.asyncio
class TestConcurrentExtraction:
    async def test_late_finishers_keep_input_positions(self, sources, cost_tracker):
        provider = PacedProvider(
            {"Article 0": 0.06, "Article 1": 0.04, "Article 2": 0.0},
            failing={"Article 1"},
        )
        engine = GenerationEngine("content_extraction", provider=provider, cost_tracker=cost_tracker, max_retries=1)

        enriched = await ContentExtractor(engine).extract(sources[:3])

        assert provider.finished == ["Article 2", "Article 1", "Article 0"]
        assert [source.id for source in enriched] == ["source-0", "source-1", "source-2"]
        assert [source.is_text_extracted for source in enriched] == [True, False, True]
        assert enriched[0].extracted_text == "Full text of Article 0"
        assert enriched[2].extracted_text == "Full text of Article 2"

    async def test_timeout_stays_with_its_source(self, sources, cost_tracker):
        provider = PacedProvider({"Article 0": 0.0, "Article 1": 5.0, "Article 2": 0.0})
        engine = GenerationEngine(
            "content_extraction", provider=provider, cost_tracker=cost_tracker, timeout=0.05, max_retries=1,
        )

        enriched = await ContentExtractor(engine).extract(sources[:3])

        assert [source.id for source in enriched] == ["source-0", "source-1", "source-2"]
        assert [source.is_text_extracted for source in enriched] == [True, False, True]
        assert enriched[1].text_extraction_error == EXTRACTION_ERROR_MESSAGE
        assert enriched[1].extracted_text.startswith("Snippet 1\n\n")
