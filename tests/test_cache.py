"""Tests for the resolved-value cache."""

from beast.cache import Resolution, ResolvedValueCache
from beast.scope import ScopeId


class TestResolution:

    def test_explicit_none_is_found(self):
        """A resolved None is different from an unresolved lookup."""
        none_value = Resolution.of(None)

        assert none_value.found is True
        assert none_value.value is None
        assert Resolution.UNRESOLVED.found is False
        assert none_value != Resolution.UNRESOLVED


class TestResolvedValueCache:

    def test_get_or_compute_runs_once(self):
        """The producer is called only on the first lookup."""
        cache = ResolvedValueCache()
        scope = ScopeId.root()
        calls = []

        def compute():
            calls.append(1)
            return Resolution.of(42)

        assert cache.get_or_compute(scope, "answer", compute).value == 42
        assert cache.get_or_compute(scope, "answer", compute).value == 42
        assert len(calls) == 1
        assert (scope, "answer") in cache

    def test_misses_are_memoized(self):
        """UNRESOLVED results are cached like any other."""
        cache = ResolvedValueCache()
        scope = ScopeId.root()
        cache.get_or_compute(scope, "missing", lambda: Resolution.UNRESOLVED)

        assert cache.lookup(scope, "missing") is Resolution.UNRESOLVED

    def test_scopes_are_separate_namespaces(self):
        cache = ResolvedValueCache()
        a = ScopeId.root().child("for", "items", 0)
        b = ScopeId.root().child("for", "items", 1)
        cache.store(a, "item", Resolution.of("first"))
        cache.store(b, "item", Resolution.of("second"))

        assert cache.lookup(a, "item").value == "first"
        assert cache.lookup(b, "item").value == "second"
        assert cache.lookup(ScopeId.root(), "item") is None

    def test_clear(self):
        cache = ResolvedValueCache()
        cache.store(ScopeId.root(), "x", Resolution.of(1))
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0
