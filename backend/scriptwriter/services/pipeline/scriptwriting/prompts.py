"""
Scriptwriting prompts.

Used by: sources.py, extraction.py, components.py, assembly.py
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from scriptwriter.models import VoiceProfile

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass
class PromptTemplate:
    """
    A prompt template with {placeholders}.

    Only {word} placeholders named in format() are substituted, so literal
    JSON braces in the template need no escaping.
    """
    template: str
    description: str = ""

    def format(self, **kwargs) -> str:
        # Single pass, so substituted values are never re-scanned
        return _PLACEHOLDER.sub(
            lambda match: str(kwargs[match.group(1)]) if match.group(1) in kwargs else match.group(0),
            self.template,
        )

    def __str__(self) -> str:
        return f"PromptTemplate({self.description})"


GATHER_SOURCES = PromptTemplate(
    template="""You are a research assistant. For the video idea "{video_idea}", generate 4-6 relevant research sources that would help create an informative script.

For each source, provide:
- A realistic title for an article/resource
- A plausible URL (can be example.com based)
- A detailed snippet (2-3 sentences) with specific information relevant to the topic

Focus on sources that would provide:
- Statistics and data
- Expert insights
- How-to information
- Case studies or examples
- Current trends

Output as JSON array:
[
  {
    "title": "Article title here",
    "link": "https://example.com/article-url",
    "snippet": "Detailed snippet with specific information relevant to the video topic..."
  }
]""",
    description="Research sources for a video idea"
)


EXTRACT_CONTENT = PromptTemplate(
    template="""Based on this source information, generate detailed extracted content that would be found in the full article:

Title: {title}
URL: {link}
Snippet: {snippet}

Generate 3-4 paragraphs of detailed content that would logically be found in this article. Include:
- Specific data, statistics, or numbers when relevant
- Actionable advice or steps
- Expert quotes or insights
- Examples or case studies

Make it informative and relevant to the topic while maintaining the tone suggested by the title and snippet.""",
    description="Elaborate one source snippet"
)


SCRIPT_COMPONENTS_PROMPT = """You are an expert scriptwriter and content researcher specializing in short-form video scripts. Your task is to analyze multiple sources and create comprehensive script outlines with multiple creative options for each component.

CRITICAL FORMATTING REQUIREMENT: Golden nuggets MUST follow the exact expanded format shown below. Do NOT provide simple single-line tips.

Create script components that follow the proven Hook-Bridge-Golden Nugget-WTA format optimized for short-form video engagement and viewer retention.

Component Guidelines:
- HOOKS: Must grab attention in first 3 seconds, address a specific pain point
- BRIDGES: Smooth transitions that maintain engagement while setting up the value
- GOLDEN NUGGETS: **MANDATORY FORMAT** - Each golden nugget must be structured as a title followed by 3-5 detailed bullet points. Each bullet point must contain specific steps, tools, metrics, or frameworks.
- WTAs (Why To Act): Compelling calls-to-action that drive engagement and following

Output must be a single JSON object with this exact structure:
{
  "video_topic": "The specific video topic being addressed",
  "target_audience": "Content creators, coaches, business owners posting daily video content",
  "core_problem_addressed": "Which specific pain point this script solves",
  "hooks": [
    "Hook option 1 - attention-grabbing opener",
    "Hook option 2 - different angle/approach",
    "Hook option 3 - problem-focused opener",
    "Hook option 4 - curiosity-driven opener"
  ],
  "bridges": [
    "Bridge option 1 - smooth transition to main content",
    "Bridge option 2 - story-based transition",
    "Bridge option 3 - statistics/facts transition",
    "Bridge option 4 - relatable scenario transition"
  ],
  "golden_nuggets": [
    {
      "title": "Method Title 1",
      "bullet_points": [
        "Specific actionable step with tools and metrics",
        "Detailed implementation guide with examples",
        "Optimization strategy with measurable outcomes"
      ]
    }
  ],
  "wtas": [
    "WTA option 1 - engagement-focused CTA",
    "WTA option 2 - follow for more value CTA",
    "WTA option 3 - try this technique CTA",
    "WTA option 4 - share your results CTA"
  ],
  "sources_analyzed": "List the types/topics of sources referenced"
}"""


GENERATE_COMPONENTS = PromptTemplate(
    template=SCRIPT_COMPONENTS_PROMPT + """

Video Idea: "{video_idea}"

Research Sources:
{sources_content}

Based on this research, generate script components for the video idea. Focus on creating engaging, valuable content that addresses the target audience's needs and incorporates insights from the research sources.""",
    description="Hook/bridge/golden nugget/WTA options"
)


FINAL_SCRIPT = PromptTemplate(
    template="""You are an expert AI scriptwriter tasked with assembling a cohesive and engaging short-form video script.

Video Idea: "{video_idea}"{voice_guidelines}

Assemble the following user-selected components into a flowing script, in this order:

HOOK: {hook}
BRIDGE: {bridge}
GOLDEN NUGGET: {golden_nugget}
CALL TO ACTION: {wta}

Instructions:
1. Create a cohesive, engaging script that flows naturally
2. Integrate all selected components seamlessly
3. Ensure the script is conversational and engaging
4. Keep the tone appropriate for the target audience
5. Make sure the call-to-action feels natural and not forced

Format the response as a complete script ready for recording.""",
    description="Assemble the selected components"
)


DEFAULT_DIRECTIVES = [
    "Maintain an authentic, conversational tone",
    "Engage directly with the audience",
    "Deliver clear, valuable insights",
]


def _joined(values: List[str], fallback: str) -> str:
    return ", ".join(values) if values else fallback


def build_voice_guidelines(voice_profile: Optional[VoiceProfile]) -> str:
    """Render a voice profile as prompt guidance, or "" when there is none."""
    if voice_profile is None:
        return ""

    identity = voice_profile.voice_profile.core_identity
    components = voice_profile.voice_profile.actionable_system_prompt_components
    directives = (components.voice_dna_summary_directives if components else None) or DEFAULT_DIRECTIVES
    numbered = "\n".join(f"{i}. {directive}" for i, directive in enumerate(directives, start=1))

    guidelines = f"""

IMPORTANT: You must write this script in the specific voice and style of "{voice_profile.name}". Follow these voice guidelines carefully:

VOICE IDENTITY:
- Persona: {identity.suggested_persona_name or 'Content Creator'}
- Primary Tones: {_joined(identity.dominant_tones, 'Conversational')}
- Secondary Tones: {_joined(identity.secondary_tones, 'Engaging')}
- Unique Characteristics: {_joined(identity.unique_identifiers_or_quirks, 'Authentic and relatable')}

WRITING DIRECTIVES:
{numbered}"""

    constraints = components.consolidated_negative_constraints if components else None
    if constraints:
        if constraints.words_to_avoid:
            guidelines += f"\n\nAVOID THESE WORDS/PHRASES: {', '.join(constraints.words_to_avoid)}"
        if constraints.tones_to_avoid:
            guidelines += f"\nAVOID THESE TONES: {', '.join(constraints.tones_to_avoid)}"

    return guidelines
