"""
Content Extractor - expands every source snippet into full detail.

One task per source, joined with asyncio.gather. A failed source gets an
expanded-snippet fallback; it never aborts its siblings, and the output keeps
the input's length and order.
"""

import asyncio
from typing import List, Optional, Sequence

from scriptwriter.core import get_logger, LogTimer
from scriptwriter.models import Source
from scriptwriter.services.infrastructure.llm import GenerationEngine

from .prompts import EXTRACT_CONTENT

logger = get_logger(__name__, stage="content_extraction")

EXTRACTION_ERROR_MESSAGE = "Content extraction failed, using expanded snippet"
FALLBACK_SUFFIX = (
    "This source provides valuable insights and detailed information relevant to the topic. "
    "The content includes expert analysis, practical tips, and actionable strategies that can "
    "be used to create engaging and informative video content."
)


def fallback_extraction(source: Source) -> Source:
    """Copy of ``source`` carrying the expanded-snippet fallback text."""
    return source.model_copy(update={
        "extracted_text": f"{source.snippet}\n\n{FALLBACK_SUFFIX}",
        "is_text_extracted": False,
        "text_extraction_error": EXTRACTION_ERROR_MESSAGE,
    })


class ContentExtractor:
    """Elaborates each source's snippet in parallel"""

    def __init__(self, engine: Optional[GenerationEngine] = None):
        self.engine = engine or GenerationEngine("content_extraction")

    async def _extract_one(self, index: int, source: Source) -> Source:
        if source.is_text_extracted and source.has_extracted_text:
            return source

        result = await self.engine.generate(
            EXTRACT_CONTENT.format(title=source.title, link=source.link, snippet=source.snippet),
            context={"source_index": index, "source_id": source.id},
        )
        if not result.success:
            logger.warning(
                f"Extraction failed for '{source.title}': {result.error}",
                extra={"source_index": index},
            )
            return fallback_extraction(source)

        return source.model_copy(update={
            "extracted_text": result.text,
            "is_text_extracted": True,
            "text_extraction_error": None,
        })

    async def extract(self, sources: Sequence[Source]) -> List[Source]:
        """Return enriched copies of ``sources`` in the same order."""
        with LogTimer(logger, f"content extraction for {len(sources)} sources"):
            enriched = await asyncio.gather(
                *(self._extract_one(index, source) for index, source in enumerate(sources))
            )

        extracted = sum(1 for source in enriched if source.is_text_extracted)
        logger.info(
            f"Extracted {extracted}/{len(enriched)} sources",
            extra={"extracted": extracted, "fallback": len(enriched) - extracted},
        )
        return list(enriched)
