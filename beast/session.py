"""
Per-render arena.

A RenderSession owns everything that is private to one top-level render:
the resolved-value cache, the variable resolver and the expression bridge
bindings. It is passed explicitly through the interpreter and closed when
the render ends, so no state survives into the next render.
"""

from __future__ import annotations

import itertools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterator, List, Mapping, Optional, Set, Tuple

from .cache import Resolution, ResolvedValueCache
from .expressions import CompiledExpressionCache, ExpressionBridge
from .interpolation import interpolate
from .resolver import VariableResolver, is_variable_path
from .scope import ScopeId

logger = logging.getLogger(__name__)


def coerce_bool(value: Any) -> bool:
    """
    Boolean coercion of directive conditions.

    Booleans are used as is; anything else is parsed from its string form,
    so only a (case-insensitive) "true" is truthy.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


@dataclass
class _StaticFrame:
    name: str
    request_names: FrozenSet[str]


class RenderSession:
    """
    State of one render pass.

    Never shared between concurrent renders.
    """

    def __init__(self, expressions: Optional[CompiledExpressionCache] = None):
        self.cache = ResolvedValueCache()
        self.resolver = VariableResolver(self.cache, watcher=self._on_context_read)
        self.bridge = ExpressionBridge(expressions)
        self._static_frames: List[_StaticFrame] = []
        self._hazards: Set[Tuple[str, str]] = set()
        self._positions = itertools.count()

    # ======= Resolution and evaluation =======

    def resolve(self, expression: str, context: Mapping[str, Any], scope: ScopeId) -> Resolution:
        return self.resolver.resolve(expression, context, scope)

    def evaluate(self, expression: str, context: Mapping[str, Any], scope: ScopeId) -> Any:
        """
        Evaluates an expression: structural resolution first, full
        expression evaluation when the resolver cannot handle it.

        Raises:
            ExpressionError: If the evaluator fails
        """
        resolution = self.resolve(expression, context, scope)
        if resolution.found:
            return resolution.value
        return self.evaluate_script(expression, context)

    def evaluate_script(self, expression: str, context: Mapping[str, Any]) -> Any:
        """Evaluates with the expression evaluator only, after reflecting `context`."""
        self.bridge.reflect(context)
        return self.bridge.evaluate(expression)

    def condition(self, expression: str, context: Mapping[str, Any], scope: ScopeId) -> bool:
        """
        Evaluates an `if` condition.

        A bare variable path is tried through the resolver first; when it
        yields no value the full expression is evaluated.
        """
        expression = expression.strip()
        if is_variable_path(expression):
            resolution = self.resolve(expression, context, scope)
            if resolution.found and resolution.value is not None:
                return coerce_bool(resolution.value)
        return coerce_bool(self.evaluate_script(expression, context))

    def interpolate(self, text: str, context: Mapping[str, Any], scope: ScopeId) -> str:
        return interpolate(text, lambda expression: self.evaluate(expression, context, scope))

    def next_position(self) -> int:
        """
        Number of the next directive met by the walker.

        Unique within the render, so sibling directives over the same source
        never share a scope.
        """
        return next(self._positions)

    # ======= Static component tracking =======

    @contextmanager
    def static_component(self, name: str, context: Mapping[str, Any]) -> Iterator[None]:
        """
        Marks the rendering of a static component.

        Static outputs are cached for every later request, so reading
        request variables inside them is reported.
        """
        self._static_frames.append(_StaticFrame(name, frozenset(context.keys())))
        try:
            yield
        finally:
            self._static_frames.pop()

    def _on_context_read(self, variable: str) -> None:
        if not self._static_frames:
            return
        frame = self._static_frames[-1]
        if variable not in frame.request_names:
            return
        hazard = (frame.name, variable)
        if hazard in self._hazards:
            return
        self._hazards.add(hazard)
        logger.warning(
            f"Static component '{frame.name}' reads request variable '{variable}'; "
            f"its cached output will not follow later values"
        )

    def close(self) -> None:
        """Drops all per-render state."""
        self.cache.clear()
        self.bridge.clear()
        self._static_frames.clear()


__all__ = ["RenderSession", "coerce_bool"]
