"""
Models package - Pydantic schemas and pipeline enumerations
"""

from .scriptwriting import (
    CamelModel,
    Source,
    GatheredSource,
    GoldenNugget,
    ComponentCategory,
    ComponentSet,
    SelectedComponent,
    SelectedComponents,
    CoreIdentity,
    NegativeConstraints,
    PromptComponents,
    VoiceProfileDetails,
    VoiceProfile,
    GatherSourcesRequest,
    ExtractContentRequest,
    GenerateComponentsRequest,
    GenerateFinalScriptRequest,
    ExportFormat,
    AnalyzeScriptRequest,
    SourcesResponse,
    FinalScriptResponse,
    ScriptAnalysis,
    AnalyzeScriptResponse,
    MIN_NUGGET_BULLETS,
)
from .status import PipelineStage, IN_PROGRESS_STAGES, STAGE_LABELS, get_stage_label

__all__ = [
    "CamelModel",
    "Source",
    "GatheredSource",
    "GoldenNugget",
    "ComponentCategory",
    "ComponentSet",
    "SelectedComponent",
    "SelectedComponents",
    "CoreIdentity",
    "NegativeConstraints",
    "PromptComponents",
    "VoiceProfileDetails",
    "VoiceProfile",
    "GatherSourcesRequest",
    "ExtractContentRequest",
    "GenerateComponentsRequest",
    "GenerateFinalScriptRequest",
    "ExportFormat",
    "AnalyzeScriptRequest",
    "SourcesResponse",
    "FinalScriptResponse",
    "ScriptAnalysis",
    "AnalyzeScriptResponse",
    "MIN_NUGGET_BULLETS",
    "PipelineStage",
    "IN_PROGRESS_STAGES",
    "STAGE_LABELS",
    "get_stage_label",
]
