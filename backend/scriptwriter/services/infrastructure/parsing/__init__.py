"""
Parsing Module

Provides utilities for recovering JSON from LLM responses.

Usage:
    from scriptwriter.services.infrastructure.parsing import parse_json_strict
"""

from .json_parser import (
    parse_json_strict,
    JsonParseResult,
    looks_truncated_json,
    fix_json_escapes,
    extract_largest_balanced_json,
    strip_markdown_fences,
)

__all__ = [
    "parse_json_strict",
    "JsonParseResult",
    "looks_truncated_json",
    "fix_json_escapes",
    "extract_largest_balanced_json",
    "strip_markdown_fences",
]
