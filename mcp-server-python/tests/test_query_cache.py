"""Unit tests for the per-query cache."""

import pytest

from models.status import LicenseType
from utils.query_cache import (
    QueryCache,
    dashboard_query_key,
    detail_query_key,
    my_request_query_key,
)


class TestQueryKeys:
    """Tests for query key builders."""

    def test_detail_key(self):
        """Test the detail key shape and enum normalization."""
        assert detail_query_key(42, "new") == ("admin-license-request", "42", "new")
        assert detail_query_key("42", LicenseType.NEW) == detail_query_key(42, "new")

    def test_other_keys(self):
        """Test dashboard and citizen keys."""
        assert dashboard_query_key("stats") == ("dashboard", "stats")
        assert my_request_query_key(5) == ("license-request", "5")


class TestQueryCache:
    """Tests for QueryCache."""

    def test_fetch_loads_once(self):
        """Test that a second fetch is served from the cache."""
        cache = QueryCache()
        calls = []

        def loader():
            calls.append(1)
            return "value"

        key = ("q", 1)
        assert cache.fetch(key, loader) == "value"
        assert cache.fetch(key, loader) == "value"
        assert len(calls) == 1
        assert cache.load_count(key) == 1

    def test_invalidate_forces_reload(self):
        """Test that invalidation makes the next fetch reload."""
        cache = QueryCache()
        values = iter(["first", "second"])
        key = ("q", 1)

        assert cache.fetch(key, lambda: next(values)) == "first"
        assert cache.invalidate(key) is True
        assert cache.fetch(key, lambda: next(values)) == "second"
        assert cache.load_count(key) == 2
        assert cache.invalidation_count(key) == 1

    def test_invalidate_missing_key(self):
        """Test invalidating a key that is not cached."""
        cache = QueryCache()
        assert cache.invalidate(("missing",)) is False
        assert cache.invalidation_count(("missing",)) == 1

    def test_cached_none_counts_as_entry(self):
        """Test that a cached None is still an entry."""
        cache = QueryCache()
        cache.fetch(("q",), lambda: None)
        assert cache.peek(("q",), "missing") is None
        assert cache.invalidate(("q",)) is True

    def test_loader_errors_are_not_cached(self):
        """Test that a failing loader leaves nothing behind."""
        cache = QueryCache()

        def failing():
            raise RuntimeError("backend down")

        with pytest.raises(RuntimeError):
            cache.fetch(("q",), failing)
        assert cache.peek(("q",), "missing") == "missing"
        assert cache.load_count(("q",)) == 0
        assert cache.fetch(("q",), lambda: "ok") == "ok"

    def test_peek_does_not_load(self):
        """Test peek returns the default on a miss."""
        cache = QueryCache()
        assert cache.peek(("q",)) is None
        assert cache.peek(("q",), "fallback") == "fallback"
        cache.fetch(("q",), lambda: 3)
        assert cache.peek(("q",)) == 3

    def test_invalidate_prefix(self):
        """Test invalidating every dashboard panel at once."""
        cache = QueryCache()
        cache.fetch(dashboard_query_key("stats"), lambda: 1)
        cache.fetch(dashboard_query_key("timeline"), lambda: 2)
        cache.fetch(detail_query_key(1, "new"), lambda: 3)

        assert cache.invalidate_prefix(("dashboard",)) == 2
        assert cache.peek(detail_query_key(1, "new")) == 3
        assert cache.peek(dashboard_query_key("stats"), "missing") == "missing"
        assert cache.invalidation_count(dashboard_query_key("timeline")) == 1

    def test_clear(self):
        """Test clearing the cache."""
        cache = QueryCache()
        cache.fetch(("q",), lambda: 1)
        cache.clear()
        assert cache.peek(("q",), "missing") == "missing"
