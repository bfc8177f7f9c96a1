"""
Post-processing of finished scripts: quick metrics, outlines and export formats.
"""

import json
import math
import re
from datetime import datetime, UTC

from scriptwriter.models import ComponentCategory, ExportFormat, ScriptAnalysis, SelectedComponents

SPEAKING_RATE_WORDS_PER_SECOND = 2.5
HOOK_WINDOW_CHARS = 200
HOOK_INDICATORS = ["you", "your", "?", "!", "secret", "mistake", "why", "how"]

_SENTENCE_BREAK = re.compile(r"[.!?]+")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def analyze_script(script_text: str) -> ScriptAnalysis:
    """
    Compute quick metrics for a script.

    - words are whitespace-separated tokens; outer whitespace adds none
    - estimated duration assumes 2.5 spoken words per second
    - readability is 100 - 1.5 x average words per sentence, clamped to 0-100
    - hook strength is the share of engagement indicators present in the
      first 200 characters
    """
    words = len(script_text.split())
    sentences = len(_SENTENCE_BREAK.split(script_text))
    avg_words_per_sentence = words / sentences
    readability = max(0.0, min(100.0, 100 - avg_words_per_sentence * 1.5))

    hook_text = script_text[:HOOK_WINDOW_CHARS].lower()
    matches = sum(1 for indicator in HOOK_INDICATORS if indicator in hook_text)
    hook_strength = min(100.0, matches / len(HOOK_INDICATORS) * 100)

    return ScriptAnalysis(
        word_count=words,
        estimated_duration_seconds=math.ceil(words / SPEAKING_RATE_WORDS_PER_SECOND),
        readability_score=_round_half_up(readability),
        hook_strength=_round_half_up(hook_strength),
    )


def create_script_outline(selected: SelectedComponents) -> str:
    """Labelled HOOK / BRIDGE / GOLDEN NUGGET / CALL TO ACTION outline."""
    if not selected.is_complete():
        raise ValueError("All script components must be selected")

    return "\n\n".join(
        f"**{category.label}:**\n{selected.slot(category).content}"
        for category in ComponentCategory
    )


def export_script(script_text: str, format: ExportFormat | str = ExportFormat.PLAIN) -> str:
    """Render a script as plain text, markdown, or a JSON document with metadata."""
    format = ExportFormat(format)

    if format == ExportFormat.MARKDOWN:
        return "# Script\n\n" + script_text.replace("\n", "\n\n")

    if format == ExportFormat.JSON:
        return json.dumps(
            {
                "script": script_text,
                "metadata": analyze_script(script_text).model_dump(by_alias=True),
                "exportedAt": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            },
            indent=2,
        )

    return script_text
