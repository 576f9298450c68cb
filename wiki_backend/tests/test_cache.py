"""
Tests for the response cache.
"""

from datetime import datetime, timedelta

from wiki_backend.cache import create_cache, make_key


class TestResponseCache:
    """Tests for TTL and LRU behaviour."""

    def test_set_and_get(self):
        cache = create_cache(max_size=4, default_ttl=60)
        cache.set("k", [1, 2])
        assert cache.get("k") == [1, 2]

    def test_expired_entry_is_dropped(self):
        cache = create_cache(max_size=4, default_ttl=60)
        cache.set("k", "v")
        cache._cache["k"].expires_at = datetime.now() - timedelta(seconds=1)
        assert cache.get("k") is None
        assert cache.size == 0

    def test_least_recently_used_evicted(self):
        cache = create_cache(max_size=2, default_ttl=60)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_clear_returns_count(self):
        cache = create_cache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert cache.size == 0


class TestMakeKey:
    """Tests for cache key construction."""

    def test_parameter_order_does_not_matter(self):
        assert make_key("articles", sort="score", limit=10) == make_key(
            "articles", limit=10, sort="score"
        )

    def test_list_order_does_not_matter(self):
        assert make_key("articles", tags=["b", "a"]) == make_key("articles", tags=["a", "b"])

    def test_namespaces_differ(self):
        assert make_key("articles", limit=1) != make_key("ranking", limit=1)
