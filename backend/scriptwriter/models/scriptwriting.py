"""
Pydantic models for the scriptwriting API and pipeline data

Wire names are camelCase (videoIdea, extractedText, goldenNugget) except for
the component set, which keeps the snake_case keys the generation prompt asks
the model to return (golden_nuggets).
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


MIN_NUGGET_BULLETS = 3

_HTTP_URL = TypeAdapter(HttpUrl)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Pipeline Data ===

class Source(CamelModel):
    """A research reference; enriched copies replace the original positionally"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = None
    title: str
    link: str
    snippet: str
    extracted_text: Optional[str] = None
    is_text_extracted: bool = False
    text_extraction_error: Optional[str] = None

    @property
    def has_extracted_text(self) -> bool:
        return bool(self.extracted_text and self.extracted_text.strip())


class GatheredSource(BaseModel):
    """One entry of the source-gathering JSON array"""
    title: str = Field(min_length=1)
    link: str = Field(min_length=1)
    snippet: str = Field(min_length=1)

    @field_validator("link")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        link = value.strip()
        try:
            _HTTP_URL.validate_python(link)
        except ValidationError:
            raise ValueError(f"link must be an http(s) URL, got {link!r}") from None
        # Stored as written, not as the normalized HttpUrl
        return link


class GoldenNugget(BaseModel):
    """A titled insight with its supporting bullet points"""
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    bullet_points: Tuple[str, ...]

    @field_validator("bullet_points")
    @classmethod
    def _require_bullets(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not point.strip() for point in value):
            raise ValueError("bullet points must be non-empty")
        if len(value) < MIN_NUGGET_BULLETS:
            raise ValueError(
                f"golden nugget needs at least {MIN_NUGGET_BULLETS} bullet points, got {len(value)}"
            )
        return value

    def as_text(self) -> str:
        bullets = "\n".join(f"• {point}" for point in self.bullet_points)
        return f"{self.title}\n{bullets}"


class ComponentCategory(str, Enum):
    """The four component categories, valued by their selection slot name"""
    HOOK = "hook"
    BRIDGE = "bridge"
    GOLDEN_NUGGET = "goldenNugget"
    WTA = "wta"

    @property
    def options_field(self) -> str:
        """Name of the ComponentSet field holding this category's options"""
        return _OPTIONS_FIELDS[self]

    @property
    def slot_field(self) -> str:
        """Name of the selection field for this category"""
        return _SLOT_FIELDS[self]

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_OPTIONS_FIELDS = {
    ComponentCategory.HOOK: "hooks",
    ComponentCategory.BRIDGE: "bridges",
    ComponentCategory.GOLDEN_NUGGET: "golden_nuggets",
    ComponentCategory.WTA: "wtas",
}

_SLOT_FIELDS = {
    ComponentCategory.HOOK: "hook",
    ComponentCategory.BRIDGE: "bridge",
    ComponentCategory.GOLDEN_NUGGET: "golden_nugget",
    ComponentCategory.WTA: "wta",
}

_CATEGORY_LABELS = {
    ComponentCategory.HOOK: "HOOK",
    ComponentCategory.BRIDGE: "BRIDGE",
    ComponentCategory.GOLDEN_NUGGET: "GOLDEN NUGGET",
    ComponentCategory.WTA: "CALL TO ACTION",
}


class ComponentSet(BaseModel):
    """
    Generated component options for one run.

    Every category must be non-empty. Option counts are taken as returned;
    nothing is padded or truncated.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    hooks: Tuple[str, ...] = Field(min_length=1)
    bridges: Tuple[str, ...] = Field(min_length=1)
    golden_nuggets: Tuple[GoldenNugget, ...] = Field(min_length=1)
    wtas: Tuple[str, ...] = Field(min_length=1)

    # Descriptive fields the prompt asks for; optional on the wire
    video_topic: Optional[str] = None
    target_audience: Optional[str] = None
    core_problem_addressed: Optional[str] = None
    sources_analyzed: Optional[Union[str, List[str]]] = None

    @field_validator("hooks", "bridges", "wtas")
    @classmethod
    def _require_text(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not option.strip() for option in value):
            raise ValueError("options must be non-empty strings")
        return value

    def options(self, category: ComponentCategory) -> tuple:
        return getattr(self, category.options_field)

    def option_text(self, category: ComponentCategory, index: int) -> str:
        """Resolve one option to the text sent for assembly"""
        option = self.options(category)[index]
        if isinstance(option, GoldenNugget):
            return option.as_text()
        return option


# === Selection & Voice ===

class SelectedComponent(BaseModel):
    """A resolved selection as sent to the assembler"""
    title: Optional[str] = None
    content: str = Field(min_length=1)


class SelectedComponents(CamelModel):
    """One chosen option per category; all four are needed for assembly"""
    hook: Optional[SelectedComponent] = None
    bridge: Optional[SelectedComponent] = None
    golden_nugget: Optional[SelectedComponent] = None
    wta: Optional[SelectedComponent] = None

    @field_validator("hook", "bridge", "golden_nugget", "wta", mode="before")
    @classmethod
    def _coerce_slot(cls, value):
        # Accept bare option text and raw golden nuggets as well as {title, content}
        if isinstance(value, str):
            return {"content": value}
        if isinstance(value, dict) and "bullet_points" in value and "content" not in value:
            return {"title": value.get("title"), "content": GoldenNugget(**value).as_text()}
        return value

    def slot(self, category: ComponentCategory) -> Optional[SelectedComponent]:
        return getattr(self, category.slot_field)

    def is_complete(self) -> bool:
        return all(self.slot(category) is not None for category in ComponentCategory)

    def missing(self) -> List[str]:
        return [category.value for category in ComponentCategory if self.slot(category) is None]


class CoreIdentity(CamelModel):
    suggested_persona_name: Optional[str] = None
    dominant_tones: List[str] = Field(default_factory=list)
    secondary_tones: List[str] = Field(default_factory=list)
    unique_identifiers_or_quirks: List[str] = Field(default_factory=list)
    tone_exemplars: List[str] = Field(default_factory=list)


class NegativeConstraints(CamelModel):
    words_to_avoid: List[str] = Field(default_factory=list)
    tones_to_avoid: List[str] = Field(default_factory=list)


class PromptComponents(CamelModel):
    voice_dna_summary_directives: List[str] = Field(default_factory=list)
    consolidated_negative_constraints: Optional[NegativeConstraints] = None


class VoiceProfileDetails(CamelModel):
    core_identity: CoreIdentity = Field(default_factory=CoreIdentity)
    actionable_system_prompt_components: Optional[PromptComponents] = None


class VoiceProfile(CamelModel):
    """A creator's voice, applied as extra guidance to final assembly"""
    name: str = Field(min_length=1)
    voice_profile: VoiceProfileDetails = Field(default_factory=VoiceProfileDetails)


# === Request Models ===

class GatherSourcesRequest(CamelModel):
    """Request to gather research sources for an idea"""
    video_idea: str = Field(min_length=1)


class ExtractContentRequest(CamelModel):
    """Request to elaborate each source's snippet"""
    sources: List[Source]


class GenerateComponentsRequest(CamelModel):
    """Request to generate component options"""
    video_idea: str = Field(min_length=1)
    sources: List[Source] = Field(default_factory=list)


class GenerateFinalScriptRequest(CamelModel):
    """Request to assemble the selected components into a script"""
    video_idea: str = Field(min_length=1)
    selected_components: SelectedComponents
    voice_profile: Optional[VoiceProfile] = None

    @model_validator(mode="after")
    def _require_all_selections(self):
        missing = self.selected_components.missing()
        if missing:
            raise ValueError(f"All script components must be selected (missing: {', '.join(missing)})")
        return self


class ExportFormat(str, Enum):
    PLAIN = "plain"
    MARKDOWN = "markdown"
    JSON = "json"


class AnalyzeScriptRequest(CamelModel):
    """Request to analyze and export a finished script"""
    final_script: str = Field(min_length=1)
    format: ExportFormat = ExportFormat.PLAIN


# === Response Models ===

class SourcesResponse(CamelModel):
    sources: List[Source]


class FinalScriptResponse(CamelModel):
    final_script: str


class ScriptAnalysis(CamelModel):
    """Quick metrics for a finished script"""
    word_count: int
    estimated_duration_seconds: int = Field(alias="estimatedDuration")
    readability_score: int
    hook_strength: int


class AnalyzeScriptResponse(CamelModel):
    analysis: ScriptAnalysis
    exported: str
