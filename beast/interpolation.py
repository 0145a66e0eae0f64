"""
`{{ expr }}` interpolation.

Single left-to-right pass: every match is evaluated once and substituted,
text between matches is copied unchanged and substituted output is never
scanned again.
"""

from __future__ import annotations

import re
from typing import Any, Callable

INTERPOLATION_PATTERN = re.compile(r"\{\{\s*(.*?)\s*\}\}", re.DOTALL)
INTERPOLATION_MARKER = "{{"


def has_interpolation(text: str) -> bool:
    return INTERPOLATION_MARKER in text


def to_text(value: Any) -> str:
    """Stringifies an evaluated value for output."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def interpolate(text: str, evaluate: Callable[[str], Any]) -> str:
    """
    Substitutes every `{{ expr }}` in `text`.

    Args:
        text: Source text
        evaluate: Evaluates one (trimmed) expression

    Returns:
        Text with all interpolations replaced
    """
    if not has_interpolation(text):
        return text
    return INTERPOLATION_PATTERN.sub(lambda m: to_text(evaluate(m.group(1).strip())), text)


__all__ = ["INTERPOLATION_PATTERN", "interpolate", "has_interpolation", "to_text"]
