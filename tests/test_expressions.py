"""Tests for the expression bridge and the compiled expression cache."""

import pytest

from beast.errors import ExpressionError
from beast.expressions import CompiledExpressionCache, ExpressionBridge, get_shared_cache


@pytest.fixture
def bridge(expressions):
    return ExpressionBridge(expressions)


class TestCompiledExpressionCache:

    def test_compiles_once(self, expressions):
        first = expressions.get("a + 1")
        second = expressions.get("a + 1")

        assert first is second
        assert "a + 1" in expressions
        assert len(expressions) == 1

    def test_syntax_error(self, expressions):
        with pytest.raises(ExpressionError) as exc_info:
            expressions.get("1 +")

        assert exc_info.value.expression == "1 +"
        assert exc_info.value.cause is not None
        assert "1 +" not in expressions

    def test_clear(self, expressions):
        expressions.get("a")
        expressions.clear()
        assert len(expressions) == 0

    def test_shared_cache_is_singleton(self):
        assert get_shared_cache() is get_shared_cache()
        assert isinstance(get_shared_cache(), CompiledExpressionCache)


class TestExpressionBridge:

    def test_evaluate_with_bindings(self, bridge):
        bridge.reflect({"price": 5, "items": [1, 2, 3]})

        assert bridge.evaluate("price * 2") == 10
        assert bridge.evaluate("items | length") == 3
        assert bridge.evaluate("price > 2 and items") == [1, 2, 3]

    def test_unknown_names_are_none(self, bridge):
        """Undefined names and attribute chains on them evaluate to None."""
        assert bridge.evaluate("missing") is None
        assert bridge.evaluate("missing.deeper.still") is None

    def test_reflect_replaces_bindings(self, bridge):
        """Bindings of a previous reflect do not survive."""
        bridge.reflect({"a": 1})
        bridge.reflect({"b": 2})

        assert bridge.evaluate("a") is None
        assert bridge.evaluate("b") == 2
        assert dict(bridge.bindings) == {"b": 2}

    def test_bind_adds_single_binding(self, bridge):
        bridge.reflect({"a": 1})
        bridge.bind("b", 2)

        assert bridge.evaluate("a + b") == 3

    def test_runtime_error_is_wrapped(self, bridge):
        bridge.reflect({"a": 1, "b": 0})

        with pytest.raises(ExpressionError) as exc_info:
            bridge.evaluate("a / b")

        assert isinstance(exc_info.value.cause, ZeroDivisionError)

    def test_empty_expression(self, bridge):
        with pytest.raises(ExpressionError):
            bridge.evaluate("   ")

    def test_private_attributes_are_hidden(self, bridge):
        """The sandbox does not expose underscore attributes."""
        bridge.reflect({"s": "text"})
        assert bridge.evaluate("s.__class__") is None

    def test_clear(self, bridge):
        bridge.reflect({"a": 1})
        bridge.clear()
        assert bridge.evaluate("a") is None
