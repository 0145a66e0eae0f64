from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Single place to look up the installed package version.
    Does not depend on other modules (to avoid import cycles).
    """
    for dist in ("beast-engine", "beast"):
        try:
            return metadata.version(dist)
        except Exception:
            continue
    return "0.0.0"

__all__ = ["tool_version"]
