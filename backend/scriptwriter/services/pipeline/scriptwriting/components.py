"""
Component Generator - hooks, bridges, golden nuggets and WTAs.

The response must match the ComponentSet schema exactly. There is no
fallback: made-up golden nuggets would pass as research-backed content, so
every failure raises ComponentGenerationError.
"""

from typing import Optional, Sequence

from pydantic import ValidationError

from scriptwriter.core import get_logger, ComponentGenerationError
from scriptwriter.models import ComponentSet, Source
from scriptwriter.services.infrastructure.llm import GenerationEngine

from .prompts import GENERATE_COMPONENTS

logger = get_logger(__name__, stage="component_generation")

NO_SOURCES_PLACEHOLDER = "No specific sources provided - use general knowledge and best practices."


def build_sources_context(sources: Sequence[Source]) -> str:
    """Prompt context from sources that have extracted text."""
    blocks = [
        f"Source: {source.title}\nContent: {source.extracted_text}"
        for source in sources
        if source.has_extracted_text
    ]
    return "\n\n".join(blocks) if blocks else NO_SOURCES_PLACEHOLDER


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


class ComponentGenerator:
    """Generates the option sets the user chooses from"""

    def __init__(self, engine: Optional[GenerationEngine] = None):
        self.engine = engine or GenerationEngine("component_generation")

    async def generate(self, video_idea: str, sources: Sequence[Source]) -> ComponentSet:
        """
        Generate component options for an idea.

        Raises:
            ComponentGenerationError: On call failure, timeout, unparseable
                JSON or a schema violation
        """
        prompt = GENERATE_COMPONENTS.format(
            video_idea=video_idea,
            sources_content=build_sources_context(sources),
        )
        result = await self.engine.generate_json(prompt, context={"video_idea": video_idea})
        if not result.success:
            logger.error(f"Component generation failed: {result.error}")
            raise ComponentGenerationError(f"Failed to generate script components: {result.error}")

        try:
            components = ComponentSet.model_validate(result.parsed.value)
        except ValidationError as e:
            detail = _describe_validation_error(e)
            logger.error(f"Component generation returned malformed components: {detail}")
            raise ComponentGenerationError(f"Malformed script components: {detail}") from e

        logger.info(
            "Generated components",
            extra={
                "hooks": len(components.hooks),
                "bridges": len(components.bridges),
                "golden_nuggets": len(components.golden_nuggets),
                "wtas": len(components.wtas),
            },
        )
        return components
