"""
Variable resolution.

Resolves an expression against a Context in two tiers: a pure literal parse
(`true`, `false`, numbers) and a structural dotted-path lookup through the
property reader table. Structural lookups are memoized per scope; anything
the resolver cannot handle is reported as UNRESOLVED so the caller can fall
back to full expression evaluation.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Mapping, Optional

from .cache import Resolution, ResolvedValueCache
from .properties import PropertyNotFound, read_property
from .scope import ScopeId

logger = logging.getLogger(__name__)

PATH_PATTERN = re.compile(r"^[A-Za-z_]\w*(?:\.\w+)*$")

_INT_PATTERN = re.compile(r"^[+-]?\d+[lL]?$")
_FLOAT_PATTERN = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")

# Called with the root variable name whenever a lookup reads the Context.
ReadWatcher = Callable[[str], None]


def is_variable_path(expression: str) -> bool:
    """True for bare dotted paths such as `user` or `user.address.city`."""
    return bool(PATH_PATTERN.match(expression))


def parse_literal(text: str) -> Resolution:
    """
    Parses boolean and numeric literals.

    This is a pure parse, independent of any Context, so its results are
    never cached.

    Args:
        text: Stripped expression text

    Returns:
        Resolution holding the typed value, or UNRESOLVED if `text` is not a literal
    """
    if text == "true":
        return Resolution.of(True)
    if text == "false":
        return Resolution.of(False)
    if _INT_PATTERN.match(text):
        return Resolution.of(int(text.rstrip("lL")))
    if _FLOAT_PATTERN.match(text):
        return Resolution.of(float(text))
    return Resolution.UNRESOLVED


class VariableResolver:
    """
    Structural resolver backed by a per-render ResolvedValueCache.
    """

    def __init__(self, cache: ResolvedValueCache, watcher: Optional[ReadWatcher] = None):
        """
        Args:
            cache: Memo table of the current render
            watcher: Optional hook notified about Context reads
        """
        self.cache = cache
        self.watcher = watcher

    def resolve(self, expression: str, context: Mapping, scope: ScopeId) -> Resolution:
        """
        Resolves `expression` in `scope`.

        Literals short-circuit without touching the cache. Every other
        expression is looked up at most once per scope: later calls return
        the memoized Resolution even if the Context changed meanwhile.

        Args:
            expression: Expression text
            context: Variable bindings
            scope: Scope of the lookup

        Returns:
            Resolution of the expression (UNRESOLVED on any structural miss)
        """
        expression = expression.strip()
        literal = parse_literal(expression)
        if literal.found:
            return literal

        return self.cache.get_or_compute(
            scope, expression, lambda: self._resolve_path(expression, context)
        )

    def _resolve_path(self, expression: str, context: Mapping) -> Resolution:
        if not is_variable_path(expression):
            return Resolution.UNRESOLVED

        root, *segments = expression.split(".")
        if root not in context:
            logger.debug(f"Variable '{root}' is not bound (expression '{expression}')")
            return Resolution.UNRESOLVED

        if self.watcher is not None:
            self.watcher(root)

        value = context[root]
        for segment in segments:
            if value is None:
                logger.debug(f"Cannot read '{segment}' of None in '{expression}'")
                return Resolution.UNRESOLVED
            try:
                value = read_property(value, segment)
            except PropertyNotFound as e:
                logger.debug(f"Error resolving variable '{expression}': {e}")
                return Resolution.UNRESOLVED
            except Exception as e:
                # exceptions raised by user getters count as misses
                logger.debug(f"Getter failed while resolving '{expression}': {e!r}")
                return Resolution.UNRESOLVED

        return Resolution.of(value)


__all__ = ["VariableResolver", "parse_literal", "is_variable_path", "PATH_PATTERN"]
