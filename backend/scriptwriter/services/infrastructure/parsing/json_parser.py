"""
JSON recovery utilities for LLM responses.

Models asked for JSON still wrap it in markdown fences, emit invalid escape
sequences, or surround it with prose. These helpers recover the payload
without guessing at its shape; schema validation happens in the callers.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple


def strip_markdown_fences(text: str) -> str:
    """Remove ``` fence lines while keeping the fenced content."""
    text = text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines).strip()
    return text


_OPENER_FOR = {"}": "{", "]": "["}


class _BracketScanner:
    """Yields (index, bracket) for brackets outside JSON string literals.

    After iteration ``in_string`` tells whether the text ended inside a string.
    """

    def __init__(self, text: str):
        self.text = text
        self.in_string = False

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        escaped = False
        for index, ch in enumerate(self.text):
            if self.in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    self.in_string = False
            elif ch == '"':
                self.in_string = True
            elif ch in "{}[]":
                yield index, ch


def extract_largest_balanced_json(text: str, expect_array: bool = False) -> Optional[str]:
    """Longest top-level ``{...}`` (or ``[...]`` with expect_array) span in text.

    A mismatched closing bracket abandons the span being built.
    """
    if not text:
        return None

    opened: List[str] = []
    start = 0
    largest: Optional[str] = None

    for index, ch in _BracketScanner(text):
        if ch in "{[":
            if not opened:
                start = index
            opened.append(ch)
            continue
        if not opened:
            continue
        if opened[-1] != _OPENER_FOR[ch]:
            opened.clear()
            continue
        opened.pop()
        if opened:
            continue

        span = text[start:index + 1]
        if expect_array and not span.startswith("["):
            continue
        if largest is None or len(span) > len(largest):
            largest = span

    return largest


def looks_truncated_json(text: str) -> bool:
    """True when the payload ends with an open string or unclosed brackets (e.g. max tokens hit)."""
    if not text:
        return False

    scanner = _BracketScanner(text)
    opened: List[str] = []
    for _, ch in scanner:
        if ch in "{[":
            opened.append(ch)
        elif opened:
            if opened[-1] != _OPENER_FOR[ch]:
                return False
            opened.pop()

    return bool(opened) or scanner.in_string


# Valid escapes are consumed whole so an escaped backslash is never re-read
_ESCAPE_PATTERN = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})|\\')


def fix_json_escapes(text: str) -> str:
    """Escape lone backslashes while preserving valid JSON escapes.

    Valid JSON escapes: \\", \\\\, \\/, \\b, \\f, \\n, \\r, \\t, \\uXXXX
    """
    return _ESCAPE_PATTERN.sub(
        lambda match: match.group(0) if match.group(1) else "\\\\",
        text,
    )


def _candidates(text: str, expect_array: bool) -> Iterator[str]:
    """Yield progressively more aggressive readings of a JSON payload."""
    text = strip_markdown_fences(text)
    yield text
    yield fix_json_escapes(text)

    balanced = extract_largest_balanced_json(text, expect_array=expect_array)
    if balanced:
        yield balanced
        yield fix_json_escapes(balanced)


@dataclass
class JsonParseResult:
    """Outcome of a strict parse.

    ``recovered`` is True when the payload needed repair (fences, escapes, or
    extraction from surrounding prose) before it parsed.
    """
    value: Any = None
    error: Optional[str] = None
    recovered: bool = False
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_json_strict(text: Optional[str], expect_array: bool = False) -> JsonParseResult:
    """Parse a JSON object (or array) and report failure instead of defaulting.

    Args:
        text: Raw model output
        expect_array: Require a top-level array instead of an object

    Returns:
        JsonParseResult with either ``value`` or ``error`` set
    """
    if not text or not text.strip():
        return JsonParseResult(error="Empty response")

    expected = list if expect_array else dict
    original = text.strip()
    last_error = "No JSON payload found"

    for candidate in _candidates(original, expect_array):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = f"Invalid JSON: {e.msg} at line {e.lineno} column {e.colno}"
            continue
        if not isinstance(value, expected):
            last_error = f"Expected a JSON {'array' if expect_array else 'object'}, got {type(value).__name__}"
            continue
        return JsonParseResult(value=value, recovered=candidate != original)

    return JsonParseResult(error=last_error, truncated=looks_truncated_json(original))
