"""
Source Gatherer - video idea to candidate research sources.

Availability wins over accuracy here: any failure (call error, timeout,
unparseable or invalid JSON, empty array) yields the fixed two-source
fallback instead of an error.
"""

from typing import List, Optional

from pydantic import ValidationError

from scriptwriter.core import get_logger
from scriptwriter.models import GatheredSource, Source
from scriptwriter.services.infrastructure.llm import GenerationEngine

from .prompts import GATHER_SOURCES

logger = get_logger(__name__, stage="source_gathering")


def fallback_sources(video_idea: str) -> List[Source]:
    """The two placeholder sources used when gathering fails."""
    return [
        Source(
            id="fallback-1",
            title=f"Research Guide: {video_idea or 'Video Topic'}",
            link="https://example.com/research-guide",
            snippet=(
                "Comprehensive guide with expert insights, statistics, and actionable "
                "strategies for creating engaging content."
            ),
            is_text_extracted=False,
        ),
        Source(
            id="fallback-2",
            title="Best Practices and Tips",
            link="https://example.com/best-practices",
            snippet=(
                "Industry-leading practices and proven techniques used by successful "
                "content creators and experts."
            ),
            is_text_extracted=False,
        ),
    ]


class SourceGatherer:
    """Generates 4-6 research sources for a video idea"""

    def __init__(self, engine: Optional[GenerationEngine] = None):
        self.engine = engine or GenerationEngine("source_gathering")

    def _validate(self, payload: list) -> List[Source]:
        """Turn the parsed array into Sources; raises ValueError if unusable."""
        if not payload:
            raise ValueError("empty source array")

        gathered = [GatheredSource.model_validate(entry) for entry in payload]
        return [
            Source(
                id=f"source-{index}",
                title=entry.title,
                link=entry.link,
                snippet=entry.snippet,
                is_text_extracted=False,
            )
            for index, entry in enumerate(gathered)
        ]

    async def gather(self, video_idea: str) -> List[Source]:
        """Gather sources for an idea. Never raises for upstream failures."""
        result = await self.engine.generate_json(
            GATHER_SOURCES.format(video_idea=video_idea),
            expect_array=True,
            context={"video_idea": video_idea},
        )

        if not result.success:
            logger.warning(f"Source gathering failed, using fallback sources: {result.error}")
            return fallback_sources(video_idea)

        try:
            sources = self._validate(result.parsed.value)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Source gathering returned invalid sources, using fallback: {e}")
            return fallback_sources(video_idea)

        logger.info(f"Gathered {len(sources)} sources", extra={"source_count": len(sources)})
        return sources
