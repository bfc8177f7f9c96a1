"""
Pipeline stage constants and enumerations.

Centralized stage definitions for the scriptwriting state machine.
"""

from enum import Enum


class PipelineStage(str, Enum):
    """Enumeration of all pipeline stages."""

    IDLE = "idle"
    GATHERING_SOURCES = "gathering_sources"
    EXTRACTING_CONTENT = "extracting_content"
    GENERATING_COMPONENTS = "generating_components"
    SELECTING_COMPONENTS = "selecting_components"
    GENERATING_FINAL_SCRIPT = "generating_final_script"
    COMPLETE = "complete"
    ERROR = "error"

    def is_terminal(self) -> bool:
        """Check if this stage ends a run (only reset or retry leave it)."""
        return self in (PipelineStage.COMPLETE, PipelineStage.ERROR)

    def is_in_progress(self) -> bool:
        """Check if this stage has a network call outstanding."""
        return self in IN_PROGRESS_STAGES

    def awaits_user(self) -> bool:
        """Check if the pipeline is parked waiting on user input."""
        return self in (PipelineStage.IDLE, PipelineStage.SELECTING_COMPONENTS)


IN_PROGRESS_STAGES = frozenset({
    PipelineStage.GATHERING_SOURCES,
    PipelineStage.EXTRACTING_CONTENT,
    PipelineStage.GENERATING_COMPONENTS,
    PipelineStage.GENERATING_FINAL_SCRIPT,
})


# Human-readable progress labels for a UI layer
STAGE_LABELS = {
    "idle": "Waiting for a video idea",
    "gathering_sources": "Gathering research sources",
    "extracting_content": "Extracting source content",
    "generating_components": "Generating script components",
    "selecting_components": "Choose your components",
    "generating_final_script": "Writing your script",
    "complete": "Script complete",
    "error": "Something went wrong",
}


def get_stage_label(stage: str) -> str:
    """
    Convert a stage value to its progress label.

    Args:
        stage: The stage string

    Returns:
        The label for UI/reporting
    """
    return STAGE_LABELS.get(stage, "Unknown")


__all__ = [
    "PipelineStage",
    "IN_PROGRESS_STAGES",
    "STAGE_LABELS",
    "get_stage_label",
]
