"""
Variable environment of a render pass.

A Context is an ordered name -> value store plus one locale tag. It is the
input of a render and is mutated by `bs:var` assignments; loops render their
bodies inside a child Context so loop variables never leak outwards.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional

DEFAULT_LOCALE = "en"


class Context(MutableMapping):
    """
    Ordered binding store with a locale.

    Owned by the render call that created it; never shared between
    concurrent renders.
    """

    def __init__(self, bindings: Optional[Mapping[str, Any]] = None, locale: Optional[str] = None):
        self._bindings: Dict[str, Any] = dict(bindings or {})
        self.locale = locale or DEFAULT_LOCALE

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]], locale: Optional[str] = None) -> Context:
        """
        Coerces any mapping into a Context.

        An existing Context is returned unchanged.
        """
        if isinstance(mapping, Context):
            return mapping
        return cls(mapping, locale)

    def __getitem__(self, name: str) -> Any:
        return self._bindings[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._bindings[name] = value

    def __delitem__(self, name: str) -> None:
        del self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def copy(self) -> Context:
        """Returns an independent Context with the same bindings and locale."""
        return Context(self._bindings, self.locale)

    def child(self) -> Context:
        """Context for a nested scope: sees the parent's bindings, writes stay local."""
        return self.copy()

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._bindings)

    def __repr__(self) -> str:
        return f"Context({self._bindings!r}, locale={self.locale!r})"


__all__ = ["Context", "DEFAULT_LOCALE"]
