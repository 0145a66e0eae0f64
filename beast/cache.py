"""
Resolved-value cache.

Per-render memo table mapping (scope, expression) to a Resolution. A
Resolution is an explicit present/absent wrapper, so a variable that
resolved to None is never confused with a cache miss or with an
expression the resolver could not handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple

from .scope import ScopeId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of a structural lookup."""
    found: bool
    value: Any = None

    UNRESOLVED: ClassVar[Resolution]

    @classmethod
    def of(cls, value: Any) -> Resolution:
        return cls(True, value)


Resolution.UNRESOLVED = Resolution(False)


CacheKey = Tuple[ScopeId, str]


class ResolvedValueCache:
    """
    Scope-keyed memo table for one render pass.

    Created fresh for every top-level render and cleared when it ends.
    Not thread-safe: it is private to the render that owns it.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, Resolution] = {}

    def lookup(self, scope: ScopeId, expression: str) -> Optional[Resolution]:
        """Returns the memoized Resolution or None when nothing was stored."""
        return self._entries.get((scope, expression))

    def store(self, scope: ScopeId, expression: str, resolution: Resolution) -> None:
        self._entries[(scope, expression)] = resolution

    def get_or_compute(
        self,
        scope: ScopeId,
        expression: str,
        compute: Callable[[], Resolution],
    ) -> Resolution:
        """
        Returns the memoized Resolution, computing and storing it on a miss.

        Args:
            scope: Scope the lookup happens in
            expression: Raw expression text
            compute: Producer called only on a cache miss

        Returns:
            Cached or freshly computed Resolution
        """
        key = (scope, expression)
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        resolution = compute()
        self._entries[key] = resolution
        logger.debug(f"Cached '{expression}' in scope {scope} (found={resolution.found})")
        return resolution

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["Resolution", "ResolvedValueCache"]
