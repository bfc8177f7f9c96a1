"""
Model Configuration for Pipeline Steps

Each network-calling step of the scriptwriting pipeline has its own model
configuration so the steps can be tuned independently.

=== PIPELINE STEPS ===

    - source_gathering      : idea -> 4-6 research sources (JSON array)
    - content_extraction    : one call per source, 3-4 paragraphs of detail
    - component_generation  : hooks / bridges / golden nuggets / WTAs (JSON object)
    - final_script          : weave the four selected components into one script

=== OVERRIDES ===

Set SCRIPTWRITER_<STEP>_MODEL to swap the model used by a step, e.g.
SCRIPTWRITER_COMPONENT_GENERATION_MODEL=gemini-2.5-pro
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional


AVAILABLE_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash",
    "gemini-flash-lite-latest",
]


@dataclass(frozen=True)
class ModelConfig:
    """Generation settings for one pipeline step"""
    model_name: str
    temperature: float = 0.7
    max_output_tokens: Optional[int] = None
    json_output: bool = False  # request application/json from the service
    description: str = ""


@dataclass
class PipelineModels:
    """
    Model configuration for each step of the scriptwriting pipeline.

    Temperatures and token limits follow the values the dashboard has
    always used for these prompts.
    """

    source_gathering: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="gemini-2.5-flash",
        temperature=0.7,
        max_output_tokens=2048,
        json_output=True,
        description="Generate candidate research sources"
    ))

    content_extraction: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="gemini-2.5-flash",
        temperature=0.7,
        max_output_tokens=1024,
        description="Elaborate one source snippet into full detail"
    ))

    component_generation: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="gemini-2.5-flash",
        temperature=0.8,
        max_output_tokens=4096,
        json_output=True,
        description="Generate hook/bridge/golden nugget/WTA options"
    ))

    final_script: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name="gemini-2.5-pro",
        temperature=0.7,
        description="Assemble the selected components into a script"
    ))


# Default pipeline configuration
DEFAULT_PIPELINE_MODELS = PipelineModels()


def list_pipeline_steps() -> list[str]:
    """List all available pipeline step names"""
    return [
        "source_gathering",
        "content_extraction",
        "component_generation",
        "final_script",
    ]


def get_model_config(step: str) -> ModelConfig:
    """
    Get the model configuration for a specific pipeline step.

    Args:
        step: Pipeline step name (e.g., 'source_gathering')

    Returns:
        ModelConfig for the step, with any environment override applied

    Raises:
        ValueError: If the step is unknown
    """
    if step not in list_pipeline_steps():
        raise ValueError(f"Unknown pipeline step: {step}")

    config = getattr(DEFAULT_PIPELINE_MODELS, step)
    override = os.getenv(f"SCRIPTWRITER_{step.upper()}_MODEL")
    if override:
        return replace(config, model_name=override.strip())
    return config


def get_model_name(step: str) -> str:
    """Get the model name for a pipeline step"""
    return get_model_config(step).model_name
