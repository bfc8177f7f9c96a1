"""
Scriptwriting pipeline - video idea to finished script

Stages:
    - sources.py: SourceGatherer (fallback to two placeholder sources)
    - extraction.py: ContentExtractor (parallel, per-source fallback)
    - components.py: ComponentGenerator (strict schema, no fallback)
    - assembly.py: ScriptAssembler (no fallback)

Control:
    - state.py: PipelineState and the pure reducer
    - controller.py: PipelineController (async, single-flight)
    - backends.py: LocalBackend / HttpBackend

Post-processing:
    - analysis.py: analyze_script, create_script_outline, export_script
"""

from .sources import SourceGatherer, fallback_sources
from .extraction import ContentExtractor, fallback_extraction, EXTRACTION_ERROR_MESSAGE
from .components import ComponentGenerator, build_sources_context, NO_SOURCES_PLACEHOLDER
from .assembly import ScriptAssembler, build_final_script_prompt
from .analysis import analyze_script, create_script_outline, export_script
from .state import (
    ComponentSelection,
    PipelineState,
    Submitted,
    SourcesGathered,
    ContentExtracted,
    ComponentsGenerated,
    ComponentSelected,
    SelectionCleared,
    FinalScriptGenerated,
    StageFailed,
    StageRetried,
    ReturnedToSelection,
    Reset,
    reduce,
    resolve_selection,
)
from .backends import ScriptwritingBackend, LocalBackend, HttpBackend
from .controller import PipelineController

__all__ = [
    # Stages
    "SourceGatherer",
    "fallback_sources",
    "ContentExtractor",
    "fallback_extraction",
    "EXTRACTION_ERROR_MESSAGE",
    "ComponentGenerator",
    "build_sources_context",
    "NO_SOURCES_PLACEHOLDER",
    "ScriptAssembler",
    "build_final_script_prompt",
    # Post-processing
    "analyze_script",
    "create_script_outline",
    "export_script",
    # State
    "ComponentSelection",
    "PipelineState",
    "Submitted",
    "SourcesGathered",
    "ContentExtracted",
    "ComponentsGenerated",
    "ComponentSelected",
    "SelectionCleared",
    "FinalScriptGenerated",
    "StageFailed",
    "StageRetried",
    "ReturnedToSelection",
    "Reset",
    "reduce",
    "resolve_selection",
    # Control
    "ScriptwritingBackend",
    "LocalBackend",
    "HttpBackend",
    "PipelineController",
]
