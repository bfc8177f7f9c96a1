"""
Script Assembler - weaves the four selected components into one script.
"""

from typing import Optional

from scriptwriter.core import get_logger, ScriptAssemblyError
from scriptwriter.models import SelectedComponents, VoiceProfile
from scriptwriter.services.infrastructure.llm import GenerationEngine

from .prompts import FINAL_SCRIPT, build_voice_guidelines

logger = get_logger(__name__, stage="final_script")


def build_final_script_prompt(
    video_idea: str,
    selected: SelectedComponents,
    voice_profile: Optional[VoiceProfile] = None,
) -> str:
    return FINAL_SCRIPT.format(
        video_idea=video_idea,
        voice_guidelines=build_voice_guidelines(voice_profile),
        hook=selected.hook.content,
        bridge=selected.bridge.content,
        golden_nugget=selected.golden_nugget.content,
        wta=selected.wta.content,
    )


class ScriptAssembler:
    """Produces the final script text"""

    def __init__(self, engine: Optional[GenerationEngine] = None):
        self.engine = engine or GenerationEngine("final_script")

    async def assemble(
        self,
        video_idea: str,
        selected: SelectedComponents,
        voice_profile: Optional[VoiceProfile] = None,
    ) -> str:
        """
        Assemble the script, returned with outer whitespace trimmed.

        Raises:
            ScriptAssemblyError: If a selection is missing or the call fails
        """
        if not selected.is_complete():
            raise ScriptAssemblyError(
                f"All script components must be selected (missing: {', '.join(selected.missing())})"
            )

        result = await self.engine.generate(
            build_final_script_prompt(video_idea, selected, voice_profile),
            context={
                "video_idea": video_idea,
                "voice_profile": voice_profile.name if voice_profile else None,
            },
        )
        if not result.success:
            logger.error(f"Final script generation failed: {result.error}")
            raise ScriptAssemblyError(f"Failed to generate final script: {result.error}")

        logger.info("Final script generated", extra={"characters": len(result.text)})
        return result.text
