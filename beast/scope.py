"""
Scope identifiers.

A scope identifier names one dynamic position of a render (a loop
iteration, a repeat iteration, a component inclusion) and is used as the
namespace of the resolved-value cache. It is a path of discrete markers,
so nested loops over the same collection never produce the same id.
Each marker carries the position of its directive within the render, which
keeps sibling loops and repeated inclusions apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Marker = Tuple[object, ...]


@dataclass(frozen=True)
class ScopeId:
    """Immutable, hashable path of iteration/inclusion markers."""
    markers: Tuple[Marker, ...] = ()

    @classmethod
    def root(cls) -> ScopeId:
        return cls()

    def child(self, *marker: object) -> ScopeId:
        """Returns the scope nested one level below this one."""
        return ScopeId(self.markers + (tuple(marker),))

    @property
    def depth(self) -> int:
        return len(self.markers)

    def __str__(self) -> str:
        parts = ["root"]
        for marker in self.markers:
            parts.append(":".join(str(m) for m in marker))
        return "/".join(parts)


__all__ = ["ScopeId"]
