"""
Pipeline state and its reducer.

``reduce(state, event)`` is the only way state changes. It is pure: it never
mutates its input and performs no I/O. Illegal events raise
InvalidTransitionError, and the caller keeps the state it passed in.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from scriptwriter.core.exceptions import InvalidTransitionError
from scriptwriter.models import (
    ComponentCategory,
    ComponentSet,
    GoldenNugget,
    PipelineStage,
    SelectedComponent,
    SelectedComponents,
    Source,
)


@dataclass(frozen=True)
class ComponentSelection:
    """Chosen option index per category (None = not chosen yet)"""
    hook: Optional[int] = None
    bridge: Optional[int] = None
    golden_nugget: Optional[int] = None
    wta: Optional[int] = None

    def get(self, category: ComponentCategory) -> Optional[int]:
        return getattr(self, category.slot_field)

    def with_choice(self, category: ComponentCategory, index: Optional[int]) -> "ComponentSelection":
        return replace(self, **{category.slot_field: index})

    def is_complete(self) -> bool:
        return all(self.get(category) is not None for category in ComponentCategory)


@dataclass(frozen=True)
class PipelineState:
    stage: PipelineStage = PipelineStage.IDLE
    video_idea: str = ""
    sources: Tuple[Source, ...] = ()
    components: Optional[ComponentSet] = None
    selected: ComponentSelection = field(default_factory=ComponentSelection)
    final_script: Optional[str] = None
    error_message: Optional[str] = None
    failed_stage: Optional[PipelineStage] = None
    run_id: Optional[str] = None


# === Events ===

@dataclass(frozen=True)
class Submitted:
    video_idea: str
    run_id: str


@dataclass(frozen=True)
class SourcesGathered:
    sources: Tuple[Source, ...]


@dataclass(frozen=True)
class ContentExtracted:
    sources: Tuple[Source, ...]


@dataclass(frozen=True)
class ComponentsGenerated:
    components: ComponentSet


@dataclass(frozen=True)
class ComponentSelected:
    category: ComponentCategory
    index: int


@dataclass(frozen=True)
class SelectionCleared:
    category: ComponentCategory


@dataclass(frozen=True)
class FinalScriptGenerated:
    final_script: str


@dataclass(frozen=True)
class StageFailed:
    message: str


@dataclass(frozen=True)
class StageRetried:
    pass


@dataclass(frozen=True)
class ReturnedToSelection:
    pass


@dataclass(frozen=True)
class Reset:
    pass


# Stages a new run may start from
_SUBMITTABLE = (PipelineStage.IDLE, PipelineStage.COMPLETE, PipelineStage.ERROR)


def _require_stage(state: PipelineState, event: object, *stages: PipelineStage) -> None:
    if state.stage not in stages:
        raise InvalidTransitionError(
            f"{type(event).__name__} is not allowed in stage '{state.stage.value}'"
        )


def _advance(state: PipelineState, stage: PipelineStage, **changes) -> PipelineState:
    """Move to a non-error stage; error fields are always cleared."""
    return replace(state, stage=stage, error_message=None, failed_stage=None, **changes)


def _select(state: PipelineState, selection: ComponentSelection) -> PipelineState:
    if selection.is_complete():
        return _advance(state, PipelineStage.GENERATING_FINAL_SCRIPT, selected=selection, final_script=None)
    return _advance(state, PipelineStage.SELECTING_COMPONENTS, selected=selection)


def reduce(state: PipelineState, event: object) -> PipelineState:
    """Apply one event and return the next state."""
    if isinstance(event, Reset):
        return PipelineState()

    if isinstance(event, Submitted):
        _require_stage(state, event, *_SUBMITTABLE)
        idea = event.video_idea.strip()
        if not idea:
            return state
        return PipelineState(stage=PipelineStage.GATHERING_SOURCES, video_idea=idea, run_id=event.run_id)

    if isinstance(event, SourcesGathered):
        _require_stage(state, event, PipelineStage.GATHERING_SOURCES)
        return _advance(state, PipelineStage.EXTRACTING_CONTENT, sources=tuple(event.sources))

    if isinstance(event, ContentExtracted):
        _require_stage(state, event, PipelineStage.EXTRACTING_CONTENT)
        if len(event.sources) != len(state.sources):
            raise InvalidTransitionError(
                f"Extraction returned {len(event.sources)} sources for {len(state.sources)}"
            )
        return _advance(state, PipelineStage.GENERATING_COMPONENTS, sources=tuple(event.sources))

    if isinstance(event, ComponentsGenerated):
        _require_stage(state, event, PipelineStage.GENERATING_COMPONENTS)
        if state.components is not None:
            raise InvalidTransitionError("Components were already generated for this run")
        return _advance(
            state,
            PipelineStage.SELECTING_COMPONENTS,
            components=event.components,
            selected=ComponentSelection(),
        )

    if isinstance(event, ComponentSelected):
        _require_stage(state, event, PipelineStage.SELECTING_COMPONENTS)
        options = state.components.options(event.category)
        if not 0 <= event.index < len(options):
            raise InvalidTransitionError(
                f"No {event.category.value} option at index {event.index} ({len(options)} available)"
            )
        return _select(state, state.selected.with_choice(event.category, event.index))

    if isinstance(event, SelectionCleared):
        _require_stage(state, event, PipelineStage.SELECTING_COMPONENTS)
        return _select(state, state.selected.with_choice(event.category, None))

    if isinstance(event, FinalScriptGenerated):
        _require_stage(state, event, PipelineStage.GENERATING_FINAL_SCRIPT)
        if not state.selected.is_complete():
            raise InvalidTransitionError("A final script needs all four selections")
        return _advance(state, PipelineStage.COMPLETE, final_script=event.final_script)

    if isinstance(event, StageFailed):
        if not state.stage.is_in_progress():
            raise InvalidTransitionError(
                f"StageFailed is not allowed in stage '{state.stage.value}'"
            )
        return replace(
            state,
            stage=PipelineStage.ERROR,
            error_message=event.message.strip() or "Unknown error",
            failed_stage=state.stage,
        )

    if isinstance(event, StageRetried):
        _require_stage(state, event, PipelineStage.ERROR)
        if state.failed_stage is None:
            raise InvalidTransitionError("There is no failed stage to retry")
        return _advance(state, state.failed_stage)

    if isinstance(event, ReturnedToSelection):
        if not (
            state.stage == PipelineStage.COMPLETE
            or (state.stage == PipelineStage.ERROR
                and state.failed_stage == PipelineStage.GENERATING_FINAL_SCRIPT)
        ):
            raise InvalidTransitionError(
                f"ReturnedToSelection is not allowed in stage '{state.stage.value}'"
            )
        return _advance(state, PipelineStage.SELECTING_COMPONENTS, final_script=None)

    raise InvalidTransitionError(f"Unknown event: {type(event).__name__}")


def resolve_selection(state: PipelineState) -> SelectedComponents:
    """Turn the selected indices into the option values sent for assembly."""
    if state.components is None:
        raise InvalidTransitionError("No components to select from")

    slots = {}
    for category in ComponentCategory:
        index = state.selected.get(category)
        if index is None:
            continue
        option = state.components.options(category)[index]
        title = option.title if isinstance(option, GoldenNugget) else None
        slots[category.slot_field] = SelectedComponent(
            title=title,
            content=state.components.option_text(category, index),
        )
    return SelectedComponents(**slots)
