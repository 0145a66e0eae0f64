"""
Utilities for creating files and directories in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping


def write(p: Path, text: str) -> Path:
    """
    Writes text to a file, creating parent directories if needed.

    Args:
        p: File path
        text: Content to write

    Returns:
        Path to the created file
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_components(root: Path, sources: Mapping[str, str]) -> Path:
    """
    Writes a components directory.

    Args:
        root: Components directory
        sources: Relative file path -> content (e.g. "cards/card.component.html")

    Returns:
        The components directory
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, text in sources.items():
        write(root / rel, text)
    return root


__all__ = ["write", "write_components"]
