"""
Backends the PipelineController runs its stages through.

    - LocalBackend: calls the stage services in process
    - HttpBackend: calls the scriptwriting HTTP service
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from scriptwriter.config import BACKEND_TIMEOUT_SECONDS, SCRIPTWRITER_API_URL
from scriptwriter.core import get_logger, BackendError
from scriptwriter.models import ComponentSet, SelectedComponents, Source, VoiceProfile
from scriptwriter.services.infrastructure.llm import CostTracker, GenerationEngine, LLMProvider

from .assembly import ScriptAssembler
from .components import ComponentGenerator
from .extraction import ContentExtractor
from .sources import SourceGatherer

logger = get_logger(__name__, component="backend")


class ScriptwritingBackend(Protocol):
    """The four stage operations the controller sequences"""

    async def gather_sources(self, video_idea: str) -> List[Source]: ...

    async def extract_content(self, sources: Sequence[Source]) -> List[Source]: ...

    async def generate_components(self, video_idea: str, sources: Sequence[Source]) -> ComponentSet: ...

    async def generate_final_script(
        self,
        video_idea: str,
        selected: SelectedComponents,
        voice_profile: Optional[VoiceProfile] = None,
    ) -> str: ...


class LocalBackend:
    """Runs every stage in this process"""

    def __init__(
        self,
        gatherer: Optional[SourceGatherer] = None,
        extractor: Optional[ContentExtractor] = None,
        generator: Optional[ComponentGenerator] = None,
        assembler: Optional[ScriptAssembler] = None,
    ):
        self.gatherer = gatherer or SourceGatherer()
        self.extractor = extractor or ContentExtractor()
        self.generator = generator or ComponentGenerator()
        self.assembler = assembler or ScriptAssembler()

    @classmethod
    def from_provider(
        cls,
        provider: LLMProvider,
        cost_tracker: Optional[CostTracker] = None,
        **engine_options: Any,
    ) -> "LocalBackend":
        """Build all four stages on one provider (engine_options go to each GenerationEngine)."""
        def engine(step: str) -> GenerationEngine:
            return GenerationEngine(step, provider=provider, cost_tracker=cost_tracker, **engine_options)

        return cls(
            gatherer=SourceGatherer(engine("source_gathering")),
            extractor=ContentExtractor(engine("content_extraction")),
            generator=ComponentGenerator(engine("component_generation")),
            assembler=ScriptAssembler(engine("final_script")),
        )

    async def gather_sources(self, video_idea: str) -> List[Source]:
        return await self.gatherer.gather(video_idea)

    async def extract_content(self, sources: Sequence[Source]) -> List[Source]:
        return await self.extractor.extract(sources)

    async def generate_components(self, video_idea: str, sources: Sequence[Source]) -> ComponentSet:
        return await self.generator.generate(video_idea, sources)

    async def generate_final_script(
        self,
        video_idea: str,
        selected: SelectedComponents,
        voice_profile: Optional[VoiceProfile] = None,
    ) -> str:
        return await self.assembler.assemble(video_idea, selected, voice_profile)


def _dump_sources(sources: Sequence[Source]) -> List[Dict[str, Any]]:
    return [source.model_dump(mode="json", by_alias=True, exclude_none=True) for source in sources]


class HttpBackend:
    """Runs every stage against the scriptwriting HTTP service"""

    def __init__(
        self,
        base_url: str = SCRIPTWRITER_API_URL,
        timeout: float = BACKEND_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpBackend":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON body; any transport error or non-2xx becomes BackendError."""
        try:
            response = await self.client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise BackendError(f"Scriptwriting service timed out on {path}") from e
        except httpx.HTTPError as e:
            raise BackendError(f"Could not reach scriptwriting service: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"{path} returned {response.status_code}: {message}")
            raise BackendError(message or f"{path} failed with HTTP {response.status_code}", response.status_code)

        if not isinstance(body, dict):
            raise BackendError(f"{path} returned a non-JSON response")
        return body

    def _parse_sources(self, path: str, body: Dict[str, Any]) -> List[Source]:
        try:
            return [Source.model_validate(entry) for entry in body["sources"]]
        except (KeyError, TypeError, ValidationError) as e:
            raise BackendError(f"{path} returned malformed sources: {e}") from e

    async def gather_sources(self, video_idea: str) -> List[Source]:
        body = await self._post("/gather-sources", {"videoIdea": video_idea})
        return self._parse_sources("/gather-sources", body)

    async def extract_content(self, sources: Sequence[Source]) -> List[Source]:
        body = await self._post("/extract-content", {"sources": _dump_sources(sources)})
        return self._parse_sources("/extract-content", body)

    async def generate_components(self, video_idea: str, sources: Sequence[Source]) -> ComponentSet:
        body = await self._post(
            "/generate-components",
            {"videoIdea": video_idea, "sources": _dump_sources(sources)},
        )
        try:
            return ComponentSet.model_validate(body)
        except ValidationError as e:
            raise BackendError(f"/generate-components returned malformed components: {e}") from e

    async def generate_final_script(
        self,
        video_idea: str,
        selected: SelectedComponents,
        voice_profile: Optional[VoiceProfile] = None,
    ) -> str:
        payload: Dict[str, Any] = {
            "videoIdea": video_idea,
            "selectedComponents": selected.model_dump(mode="json", by_alias=True, exclude_none=True),
        }
        if voice_profile is not None:
            payload["voiceProfile"] = voice_profile.model_dump(mode="json", by_alias=True, exclude_none=True)

        body = await self._post("/generate-final-script", payload)
        final_script = body.get("finalScript")
        if not isinstance(final_script, str) or not final_script.strip():
            raise BackendError("/generate-final-script returned no script")
        return final_script
