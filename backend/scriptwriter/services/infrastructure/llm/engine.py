"""
Generation Engine

Wraps an LLMProvider with the per-call policy every pipeline step shares:
timeout, bounded retry with exponential backoff, cost tracking and logging.
Upstream failures are reported in the returned GenerationResult, never raised.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from scriptwriter import config
from scriptwriter.config import ModelConfig, get_model_config
from scriptwriter.core import get_logger, LogTimer
from scriptwriter.services.infrastructure.parsing import JsonParseResult, parse_json_strict

from .base import LLMConfig, LLMProvider, UsageStats
from .cost_tracker import CostTracker, get_cost_tracker
from .factory import get_llm_provider


@dataclass
class GenerationResult:
    """Outcome of one engine call (after retries)"""
    success: bool
    text: str = ""
    error: Optional[str] = None
    model: Optional[str] = None
    attempts: int = 0
    usage: Optional[UsageStats] = None
    parsed: Optional[JsonParseResult] = None
    context: Dict[str, Any] = field(default_factory=dict)


class GenerationEngine:
    """
    Centralized engine for one pipeline step's LLM calls.

    Responsibilities:
    - Model config resolution per step
    - Timeout per attempt
    - Retry logic with exponential backoff
    - Cost tracking integration
    - Optional JSON recovery of the response text
    """

    def __init__(
        self,
        step: str,
        provider: Optional[LLMProvider] = None,
        cost_tracker: Optional[CostTracker] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ):
        """Initialize the engine.

        Args:
            step: Pipeline step name in config.models (e.g. "component_generation")
            provider: LLM provider; defaults to the cached Gemini provider
            cost_tracker: Tracker to record usage; defaults to the process-wide one
            timeout: Seconds per attempt (GENERATION_TIMEOUT_SECONDS)
            max_retries: Attempts per call (GENERATION_MAX_RETRIES)
            backoff_seconds: Base delay, doubled after each failed attempt
        """
        self.step = step
        self.model_config: ModelConfig = get_model_config(step)
        self.provider = provider or get_llm_provider()
        self.cost_tracker = cost_tracker or get_cost_tracker()
        self.timeout = timeout if timeout is not None else config.GENERATION_TIMEOUT_SECONDS
        self.max_retries = max(max_retries if max_retries is not None else config.GENERATION_MAX_RETRIES, 1)
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else config.GENERATION_BACKOFF_SECONDS
        )
        self.logger = get_logger(__name__, step=step)

    def _llm_config(self, system_instruction: Optional[str] = None) -> LLMConfig:
        return LLMConfig(
            model=self.model_config.model_name,
            temperature=self.model_config.temperature,
            max_tokens=self.model_config.max_output_tokens,
            json_output=self.model_config.json_output,
            system_instruction=system_instruction,
        )

    async def generate(
        self,
        prompt: str,
        context: Optional[Dict[str, Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate text for a prompt.

        An empty response counts as a failed attempt.

        Args:
            prompt: The prompt text
            context: Extra fields for log messages and the result

        Returns:
            GenerationResult; ``success`` is False once all attempts fail
        """
        context = context or {}
        llm_config = self._llm_config(system_instruction)
        last_error = "No attempts made"

        for attempt in range(1, self.max_retries + 1):
            try:
                with LogTimer(self.logger, f"{self.step} call (attempt {attempt})"):
                    response = await asyncio.wait_for(
                        self.provider.generate(prompt, llm_config),
                        timeout=self.timeout,
                    )
            except asyncio.TimeoutError:
                last_error = f"Request timed out after {self.timeout:g}s"
            except Exception as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                self.cost_tracker.track_usage(response.usage, llm_config.model, step=self.step)
                if response.truncated:
                    self.logger.warning(
                        f"{self.step}: response stopped at the output token limit",
                        extra={"max_tokens": llm_config.max_tokens, **context},
                    )
                if response.text and response.text.strip():
                    return GenerationResult(
                        success=True,
                        text=response.text.strip(),
                        model=llm_config.model,
                        attempts=attempt,
                        usage=response.usage,
                        context=context,
                    )
                last_error = "Empty response from generation service"

            self.logger.warning(
                f"{self.step} attempt {attempt}/{self.max_retries} failed: {last_error}",
                extra={"attempt": attempt, **context},
            )
            if attempt < self.max_retries and self.backoff_seconds > 0:
                await asyncio.sleep(self.backoff_seconds * 2 ** (attempt - 1))

        return GenerationResult(
            success=False,
            error=last_error,
            model=llm_config.model,
            attempts=self.max_retries,
            context=context,
        )

    async def generate_json(
        self,
        prompt: str,
        expect_array: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult:
        """Generate and recover a JSON payload.

        A response that does not parse is a failed result with ``parsed`` set
        so callers can see why.
        """
        result = await self.generate(prompt, context=context)
        if not result.success:
            return result

        parsed = parse_json_strict(result.text, expect_array=expect_array)
        result.parsed = parsed
        if not parsed.ok:
            result.success = False
            result.error = f"Unparseable JSON from generation service: {parsed.error}"
            if parsed.truncated:
                result.error += " (response looks truncated)"
        elif parsed.recovered:
            self.logger.info(f"{self.step}: recovered JSON from a non-clean response")
        return result
