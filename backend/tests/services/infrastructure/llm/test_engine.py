"""
Tests for services/infrastructure/llm/engine.py
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from scriptwriter import config
from scriptwriter.services.infrastructure.llm import GenerationEngine


@pytest.mark.asyncio
class TestGenerationEngine:
    """Timeout, retry, and cost tracking around a provider"""

    @pytest.fixture
    def engine(self, fake_provider, cost_tracker):
        return GenerationEngine(
            "content_extraction",
            provider=fake_provider,
            cost_tracker=cost_tracker,
            max_retries=2,
        )

    async def test_generate_success(self, engine, fake_provider, cost_tracker):
        fake_provider.queue("  Expanded text  ")

        result = await engine.generate("Expand this", context={"source_index": 0})

        assert result.success is True
        assert result.text == "Expanded text"
        assert result.attempts == 1
        assert result.model == config.get_model_name("content_extraction")
        assert result.context == {"source_index": 0}
        assert cost_tracker.get_summary()["total_requests"] == 1
        assert cost_tracker.get_summary()["by_step"]["content_extraction"]["requests"] == 1

    async def test_step_config_reaches_provider(self, engine, fake_provider):
        fake_provider.queue("ok")

        await engine.generate("prompt", system_instruction="Be brief")

        _, llm_config = fake_provider.calls[0]
        step_config = config.get_model_config("content_extraction")
        assert llm_config.model == step_config.model_name
        assert llm_config.temperature == step_config.temperature
        assert llm_config.max_tokens == step_config.max_output_tokens
        assert llm_config.system_instruction == "Be brief"

    async def test_retries_after_exception(self, engine, fake_provider):
        fake_provider.queue(ConnectionError("reset by peer"), "second try")

        result = await engine.generate("prompt")

        assert result.success is True
        assert result.text == "second try"
        assert result.attempts == 2

    async def test_empty_response_is_a_failure(self, engine, fake_provider):
        fake_provider.queue("   ", "")

        result = await engine.generate("prompt")

        assert result.success is False
        assert result.error == "Empty response from generation service"
        assert len(fake_provider.calls) == 2

    async def test_all_attempts_fail(self, engine, fake_provider):
        fake_provider.queue(RuntimeError("a"), RuntimeError("b"))

        result = await engine.generate("prompt")

        assert result.success is False
        assert result.error == "RuntimeError: b"
        assert result.attempts == 2

    async def test_timeout(self, fake_provider, cost_tracker):
        async def slow_generate(prompt, llm_config):
            await asyncio.sleep(5)

        fake_provider.generate = slow_generate
        engine = GenerationEngine(
            "content_extraction",
            provider=fake_provider,
            cost_tracker=cost_tracker,
            timeout=0.01,
            max_retries=1,
        )

        result = await engine.generate("prompt")

        assert result.success is False
        assert result.error == "Request timed out after 0.01s"

    async def test_backoff_doubles(self, fake_provider, cost_tracker):
        fake_provider.queue(RuntimeError("1"), RuntimeError("2"), "third")
        engine = GenerationEngine(
            "content_extraction",
            provider=fake_provider,
            cost_tracker=cost_tracker,
            max_retries=3,
            backoff_seconds=0.5,
        )

        with patch("scriptwriter.services.infrastructure.llm.engine.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await engine.generate("prompt")

        assert result.success is True
        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    async def test_max_retries_floor(self, fake_provider, cost_tracker):
        engine = GenerationEngine("final_script", provider=fake_provider, cost_tracker=cost_tracker, max_retries=0)

        assert engine.max_retries == 1

    async def test_defaults_come_from_config(self, fake_provider, cost_tracker, monkeypatch):
        monkeypatch.setattr(config, "GENERATION_TIMEOUT_SECONDS", 7.0)
        monkeypatch.setattr(config, "GENERATION_MAX_RETRIES", 4)

        engine = GenerationEngine("final_script", provider=fake_provider, cost_tracker=cost_tracker)

        assert engine.timeout == 7.0
        assert engine.max_retries == 4
        assert engine.backoff_seconds == 0


@pytest.mark.asyncio
class TestGenerateJson:
    @pytest.fixture
    def engine(self, fake_provider, cost_tracker):
        return GenerationEngine(
            "component_generation",
            provider=fake_provider,
            cost_tracker=cost_tracker,
            max_retries=1,
        )

    async def test_parses_fenced_json(self, engine, fake_provider):
        fake_provider.queue('```json\n{"hooks": ["a"]}\n```')

        result = await engine.generate_json("prompt")

        assert result.success is True
        assert result.parsed.value == {"hooks": ["a"]}
        assert result.parsed.recovered is True

    async def test_unparseable_json(self, engine, fake_provider):
        fake_provider.queue("Sorry, I can't do that.")

        result = await engine.generate_json("prompt")

        assert result.success is False
        assert result.error.startswith("Unparseable JSON from generation service")
        assert result.parsed is not None

    async def test_truncated_json_is_flagged(self, engine, fake_provider):
        fake_provider.queue('{"hooks": ["a", "b"')

        result = await engine.generate_json("prompt")

        assert result.success is False
        assert result.error.endswith("(response looks truncated)")

    async def test_expect_array(self, engine, fake_provider):
        fake_provider.queue('{"title": "not a list"}')

        result = await engine.generate_json("prompt", expect_array=True)

        assert result.success is False
        assert "Expected a JSON array" in result.error

    async def test_call_failure_passes_through(self, engine, fake_provider):
        fake_provider.queue(RuntimeError("down"))

        result = await engine.generate_json("prompt")

        assert result.success is False
        assert result.error == "RuntimeError: down"
        assert result.parsed is None
