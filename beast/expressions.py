"""
Expression bridge over the Jinja2 expression evaluator.

Expressions that are not plain variable paths (`count > 2`, `items | length`,
`[1, 2, 3]`) are compiled by a sandboxed Jinja2 environment and evaluated
against the bindings of the current render. Compiled expressions depend only
on their source text, so they are cached process-wide; the bindings live in a
per-render ExpressionBridge.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from jinja2 import ChainableUndefined, Environment
from jinja2.sandbox import SandboxedEnvironment

from .errors import ExpressionError

logger = logging.getLogger(__name__)

CompiledExpression = Callable[..., Any]


def create_environment() -> Environment:
    """
    Creates the sandboxed evaluator environment.

    Unknown names and chains of unknown attributes evaluate to undefined,
    which compiled expressions turn into None.
    """
    return SandboxedEnvironment(undefined=ChainableUndefined)


class CompiledExpressionCache:
    """
    Expression text -> compiled expression.

    Shared between renders and threads; holds no binding state. The cache
    is unbounded: memory grows with the number of distinct expression texts.
    """

    def __init__(self, environment: Optional[Environment] = None):
        self.environment = environment or create_environment()
        self._compiled: Dict[str, CompiledExpression] = {}
        self._lock = threading.Lock()

    def get(self, expression: str) -> CompiledExpression:
        """
        Returns the compiled form of `expression`, compiling it on first use.

        Raises:
            ExpressionError: If the expression does not compile
        """
        with self._lock:
            compiled = self._compiled.get(expression)
        if compiled is not None:
            return compiled

        try:
            compiled = self.environment.compile_expression(expression, undefined_to_none=True)
        except Exception as e:
            raise ExpressionError(expression, e) from e

        with self._lock:
            # concurrent compilations of the same text are equivalent
            compiled = self._compiled.setdefault(expression, compiled)
        logger.debug(f"Compiled expression '{expression}'")
        return compiled

    def clear(self) -> None:
        with self._lock:
            self._compiled.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._compiled)

    def __contains__(self, expression: object) -> bool:
        with self._lock:
            return expression in self._compiled


_shared_cache: Optional[CompiledExpressionCache] = None
_shared_lock = threading.Lock()


def get_shared_cache() -> CompiledExpressionCache:
    """Process-wide compiled expression cache."""
    global _shared_cache
    with _shared_lock:
        if _shared_cache is None:
            _shared_cache = CompiledExpressionCache()
        return _shared_cache


class ExpressionBridge:
    """
    Binding environment of one render pass.

    Not thread-safe: bindings are mutated in place, so each concurrent
    render needs its own bridge. The compiled expression cache may be shared.
    """

    def __init__(self, cache: Optional[CompiledExpressionCache] = None):
        self.cache = cache if cache is not None else get_shared_cache()
        self._bindings: Dict[str, Any] = {}

    @property
    def bindings(self) -> Mapping[str, Any]:
        return self._bindings

    def reflect(self, context: Mapping[str, Any]) -> None:
        """
        Mirrors the full Context into the binding environment.

        Previous bindings are dropped, so variables of a finished scope
        cannot leak into the next evaluation.
        """
        self._bindings = dict(context)

    def bind(self, name: str, value: Any) -> None:
        """Adds or replaces one live binding."""
        self._bindings[name] = value

    def evaluate(self, expression: str) -> Any:
        """
        Evaluates `expression` against the current bindings.

        Args:
            expression: Expression source text

        Returns:
            Evaluation result (None for undefined results)

        Raises:
            ExpressionError: On syntax errors, sandbox violations or runtime failures
        """
        expression = expression.strip()
        if not expression:
            raise ExpressionError(expression, ValueError("empty expression"))

        compiled = self.cache.get(expression)
        try:
            return compiled(**self._bindings)
        except Exception as e:
            raise ExpressionError(expression, e) from e

    def clear(self) -> None:
        self._bindings.clear()


__all__ = [
    "ExpressionBridge",
    "CompiledExpressionCache",
    "create_environment",
    "get_shared_cache",
]
