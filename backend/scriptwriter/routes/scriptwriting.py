"""
Scriptwriting routes

Every generation endpoint checks the Gemini credential before it reads the
request body. Bodies are parsed by hand so a malformed body is reported as
400 {"error": ...} rather than FastAPI's 422 detail format.
"""

from typing import Any, Dict, Type, TypeVar

from fastapi import APIRouter, Request
from pydantic import BaseModel, ValidationError

from ..core import get_logger, ensure_generation_configured, InvalidRequestError
from ..models import (
    AnalyzeScriptRequest,
    AnalyzeScriptResponse,
    ExtractContentRequest,
    FinalScriptResponse,
    GatherSourcesRequest,
    GenerateComponentsRequest,
    GenerateFinalScriptRequest,
    SourcesResponse,
)
from ..services.infrastructure.llm import GenerationEngine, get_llm_provider
from ..services.pipeline.scriptwriting import (
    ComponentGenerator,
    ContentExtractor,
    ScriptAssembler,
    SourceGatherer,
    analyze_script,
    export_script,
)

router = APIRouter(tags=["scriptwriting"])
logger = get_logger(__name__, service="api")

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _engine(step: str) -> GenerationEngine:
    return GenerationEngine(step, provider=get_llm_provider())


async def _read_json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequestError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return body


def _parse(model: Type[RequestModel], body: Dict[str, Any], message: str) -> RequestModel:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected {model.__name__}: {e.error_count()} validation error(s)")
        raise InvalidRequestError(message) from e


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/gather-sources")
async def gather_sources(request: Request):
    """Gather 4-6 research sources for a video idea (fallback sources on failure)"""
    ensure_generation_configured()
    body = await _read_json_object(request)
    if not str(body.get("videoIdea") or "").strip():
        raise InvalidRequestError("Video idea is required")
    payload = _parse(GatherSourcesRequest, body, "Video idea is required")

    sources = await SourceGatherer(_engine("source_gathering")).gather(payload.video_idea.strip())
    return _dump(SourcesResponse(sources=sources))


@router.post("/extract-content")
async def extract_content(request: Request):
    """Expand every source snippet into detailed content"""
    ensure_generation_configured()
    body = await _read_json_object(request)
    if not isinstance(body.get("sources"), list):
        raise InvalidRequestError("Sources array is required")
    payload = _parse(ExtractContentRequest, body, "Each source needs a title, link and snippet")

    sources = await ContentExtractor(_engine("content_extraction")).extract(payload.sources)
    return _dump(SourcesResponse(sources=sources))


@router.post("/generate-components")
async def generate_components(request: Request):
    """Generate hook, bridge, golden nugget and WTA options"""
    ensure_generation_configured()
    body = await _read_json_object(request)
    if not str(body.get("videoIdea") or "").strip():
        raise InvalidRequestError("Video idea is required")
    if body.get("sources") is None:
        body = {**body, "sources": []}
    payload = _parse(GenerateComponentsRequest, body, "Sources must be a list of sources")

    components = await ComponentGenerator(_engine("component_generation")).generate(
        payload.video_idea.strip(),
        payload.sources,
    )
    return _dump(components)


@router.post("/generate-final-script")
async def generate_final_script(request: Request):
    """Assemble the selected components into a final script"""
    ensure_generation_configured()
    body = await _read_json_object(request)
    if not str(body.get("videoIdea") or "").strip() or not body.get("selectedComponents"):
        raise InvalidRequestError("Video idea and selected components are required")
    payload = _parse(
        GenerateFinalScriptRequest,
        body,
        "All four components (hook, bridge, goldenNugget, wta) must be selected",
    )

    final_script = await ScriptAssembler(_engine("final_script")).assemble(
        payload.video_idea.strip(),
        payload.selected_components,
        payload.voice_profile,
    )
    return _dump(FinalScriptResponse(final_script=final_script))


@router.post("/analyze-script")
async def analyze_final_script(request: Request):
    """Compute script metrics and render it in an export format"""
    body = await _read_json_object(request)
    if not str(body.get("finalScript") or "").strip():
        raise InvalidRequestError("Final script is required")
    payload = _parse(AnalyzeScriptRequest, body, "Format must be one of: plain, markdown, json")

    return _dump(AnalyzeScriptResponse(
        analysis=analyze_script(payload.final_script),
        exported=export_script(payload.final_script, payload.format),
    ))
