"""Tests for the question listing cache."""

from utils.response_cache import ResponseCache


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_miss_then_hit(self, clock):
        cache = ResponseCache(ttl_seconds=10, clock=clock)
        assert cache.get("/api/quiz/1") is None
        cache.set("/api/quiz/1", {"questions": []})
        assert cache.get("/api/quiz/1") == {"questions": []}

    def test_entries_expire(self, clock):
        cache = ResponseCache(ttl_seconds=10, clock=clock)
        cache.set("k", 1)
        clock.advance(9)
        assert cache.get("k") == 1
        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_invalidate_prefix(self, clock):
        cache = ResponseCache(clock=clock)
        cache.set("/api/quiz/1", 1)
        cache.set("/api/quiz/2?page=2&limit=5", 2)
        cache.set("/api/other", 3)
        assert cache.invalidate_prefix("/api/quiz/") == 2
        assert cache.get("/api/other") == 3
        assert len(cache) == 1

    def test_clear(self, clock):
        cache = ResponseCache(clock=clock)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0
