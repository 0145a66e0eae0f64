"""Tests for {{ expr }} interpolation."""

import pytest

from beast.interpolation import has_interpolation, interpolate, to_text


class TestToText:

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (2.5, "2.5"),
        ("x", "x"),
    ])
    def test_to_text(self, value, expected):
        assert to_text(value) == expected


class TestInterpolate:

    def test_multiple_markers(self):
        values = {"a": 1, "b": "two"}
        assert interpolate("{{ a }} and {{b}}!", values.get) == "1 and two!"

    def test_expression_is_trimmed(self):
        seen = []
        interpolate("{{   spaced  }}", lambda e: seen.append(e))
        assert seen == ["spaced"]

    def test_output_is_not_rescanned(self):
        """Substituted text is never interpolated again."""
        values = {"a": "{{ b }}", "b": "boom"}
        assert interpolate("{{ a }}", values.get) == "{{ b }}"

    def test_each_marker_evaluated_once(self):
        calls = []

        def evaluate(expression):
            calls.append(expression)
            return expression.upper()

        assert interpolate("{{ x }}-{{ y }}-{{ x }}", evaluate) == "X-Y-X"
        assert calls == ["x", "y", "x"]

    def test_multiline_expression(self):
        assert interpolate("{{ a\n }}", {"a": 1}.get) == "1"

    def test_text_without_markers_unchanged(self):
        assert not has_interpolation("plain { text }")
        assert interpolate("plain { text }", lambda e: pytest.fail("evaluated")) == "plain { text }"

    def test_none_renders_empty(self):
        assert interpolate("[{{ missing }}]", {}.get) == "[]"
