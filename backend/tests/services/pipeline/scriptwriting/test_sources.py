"""
Tests for the source gatherer
"""

import json

import pytest

from scriptwriter.services.pipeline.scriptwriting import SourceGatherer, fallback_sources


def _gathered(count):
    return json.dumps([
        {"title": f"Title {i}", "link": f"https://example.com/{i}", "snippet": f"Snippet {i}"}
        for i in range(count)
    ])


class TestFallbackSources:
    def test_two_fixed_sources(self):
        sources = fallback_sources("morning routine tips")

        assert [source.id for source in sources] == ["fallback-1", "fallback-2"]
        assert sources[0].title == "Research Guide: morning routine tips"
        assert sources[0].link == "https://example.com/research-guide"
        assert sources[1].title == "Best Practices and Tips"
        assert all(source.is_text_extracted is False for source in sources)

    def test_blank_idea_title(self):
        assert fallback_sources("")[0].title == "Research Guide: Video Topic"


@pytest.mark.asyncio
class TestSourceGatherer:
    @pytest.fixture
    def gatherer(self, make_engine):
        return SourceGatherer(make_engine("source_gathering"))

    async def test_gathers_sources(self, gatherer, fake_provider):
        fake_provider.queue(_gathered(5))

        sources = await gatherer.gather("morning routine tips")

        assert len(sources) == 5
        assert [source.id for source in sources] == [f"source-{i}" for i in range(5)]
        assert sources[2].snippet == "Snippet 2"
        assert all(source.extracted_text is None for source in sources)
        assert "morning routine tips" in fake_provider.prompts[0]

    async def test_fenced_array_is_accepted(self, gatherer, fake_provider):
        fake_provider.queue(f"```json\n{_gathered(4)}\n```")

        sources = await gatherer.gather("idea")

        assert len(sources) == 4

    async def test_call_failure_falls_back(self, gatherer, fake_provider):
        fake_provider.queue(RuntimeError("quota exceeded"))

        sources = await gatherer.gather("morning routine tips")

        assert len(sources) == 2
        assert sources[0].title == "Research Guide: morning routine tips"

    async def test_non_json_falls_back(self, gatherer, fake_provider):
        fake_provider.queue("Here are some great sources for you!")

        sources = await gatherer.gather("idea")

        assert [source.id for source in sources] == ["fallback-1", "fallback-2"]

    async def test_empty_array_falls_back(self, gatherer, fake_provider):
        fake_provider.queue("[]")

        assert len(await gatherer.gather("idea")) == 2

    async def test_invalid_entry_falls_back(self, gatherer, fake_provider):
        fake_provider.queue(json.dumps([{"title": "No link", "snippet": "x"}]))

        assert [source.id for source in await gatherer.gather("idea")] == ["fallback-1", "fallback-2"]

    async def test_non_url_link_falls_back(self, gatherer, fake_provider):
        fake_provider.queue(json.dumps([
            {"title": "Good", "link": "https://example.com/good", "snippet": "x"},
            {"title": "Bad", "link": "see the article above", "snippet": "y"},
        ]))

        assert [source.id for source in await gatherer.gather("idea")] == ["fallback-1", "fallback-2"]
