"""
Tests for the component generator
"""

import json

import pytest

from scriptwriter.core import ComponentGenerationError
from scriptwriter.models import Source
from scriptwriter.services.pipeline.scriptwriting import (
    NO_SOURCES_PLACEHOLDER,
    ComponentGenerator,
    build_sources_context,
)


class TestBuildSourcesContext:
    def test_uses_extracted_sources_only(self):
        sources = [
            Source(title="A", link="L", snippet="S", extracted_text="Alpha text"),
            Source(title="B", link="L", snippet="S"),
            Source(title="C", link="L", snippet="S", extracted_text="Gamma text"),
        ]

        context = build_sources_context(sources)

        assert context == "Source: A\nContent: Alpha text\n\nSource: C\nContent: Gamma text"

    def test_placeholder_without_text(self):
        assert build_sources_context([]) == NO_SOURCES_PLACEHOLDER
        assert build_sources_context([Source(title="B", link="L", snippet="S")]) == NO_SOURCES_PLACEHOLDER


@pytest.mark.asyncio
class TestComponentGenerator:
    @pytest.fixture
    def generator(self, make_engine):
        return ComponentGenerator(make_engine("component_generation"))

    async def test_generates_components(self, generator, fake_provider, components_json):
        fake_provider.queue(components_json)

        components = await generator.generate("morning routine tips", [])

        assert len(components.hooks) == 3
        assert components.golden_nuggets[0].title == "The 10-minute rule"
        prompt = fake_provider.prompts[0]
        assert "morning routine tips" in prompt
        assert NO_SOURCES_PLACEHOLDER in prompt

    async def test_prompt_includes_source_text(self, generator, fake_provider, components_json):
        fake_provider.queue(components_json)
        source = Source(title="Sleep study", link="L", snippet="S", extracted_text="People who wake early...")

        await generator.generate("idea", [source])

        assert "Source: Sleep study\nContent: People who wake early..." in fake_provider.prompts[0]

    async def test_missing_category_raises(self, generator, fake_provider, components_payload):
        del components_payload["wtas"]
        fake_provider.queue(json.dumps(components_payload))

        with pytest.raises(ComponentGenerationError, match="Malformed script components: wtas"):
            await generator.generate("idea", [])

    async def test_short_nugget_raises(self, generator, fake_provider, components_payload):
        components_payload["golden_nuggets"][0]["bullet_points"] = ["only", "two"]
        fake_provider.queue(json.dumps(components_payload))

        with pytest.raises(ComponentGenerationError, match="golden_nuggets.0.bullet_points"):
            await generator.generate("idea", [])

    async def test_unparseable_response_raises(self, generator, fake_provider):
        fake_provider.queue("I could not come up with anything.")

        with pytest.raises(ComponentGenerationError, match="Failed to generate script components"):
            await generator.generate("idea", [])

    async def test_call_failure_raises(self, generator, fake_provider):
        fake_provider.queue(RuntimeError("service unavailable"))

        with pytest.raises(ComponentGenerationError) as exc_info:
            await generator.generate("idea", [])

        assert exc_info.value.status_code == 502
        assert "service unavailable" in exc_info.value.message
