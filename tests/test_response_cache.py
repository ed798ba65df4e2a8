"""Tests for the TTL response cache"""

import pytest

from turfboard.services.response_cache import ResponseCache, get_response_cache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def response_cache(clock):
    return ResponseCache(ttl_seconds=5.0, clock=clock)


@pytest.mark.unit
class TestResponseCache:
    def test_miss_then_hit(self, response_cache):
        assert response_cache.get_all() is None
        response_cache.put_all([{"slug": "a"}])
        assert response_cache.get_all() == [{"slug": "a"}]
        assert response_cache.stats()["hits"] == 1
        assert response_cache.stats()["misses"] == 1

    def test_entries_expire_after_ttl(self, response_cache, clock):
        response_cache.put_all(["row"])
        response_cache.put("a", {"slug": "a"})

        clock.advance(4.9)
        assert response_cache.get_all() == ["row"]
        assert response_cache.get("a") == {"slug": "a"}

        clock.advance(0.1)
        assert response_cache.get_all() is None
        assert response_cache.get("a") is None
        # Expired entries are dropped, not kept around
        stats = response_cache.stats()
        assert stats["hasAll"] is False
        assert stats["slugEntries"] == 0

    def test_invalidate_slug_also_drops_all_rows(self, response_cache):
        response_cache.put_all(["row"])
        response_cache.put("a", {"slug": "a"})
        response_cache.put("b", {"slug": "b"})

        response_cache.invalidate("a")

        assert response_cache.get("a") is None
        assert response_cache.get_all() is None
        assert response_cache.get("b") == {"slug": "b"}

    def test_invalidate_all_is_idempotent(self, response_cache):
        response_cache.put_all(["row"])
        response_cache.put("a", {"slug": "a"})

        response_cache.invalidate_all()
        response_cache.invalidate_all()

        assert response_cache.get_all() is None
        assert response_cache.get("a") is None

    def test_zero_ttl_never_hits(self, clock):
        response_cache = ResponseCache(ttl_seconds=0, clock=clock)
        response_cache.put_all(["row"])
        assert response_cache.get_all() is None


class TestAppCache:
    def test_app_owns_one_cache(self, app):
        assert get_response_cache(app) is get_response_cache(app)
        assert get_response_cache() is app.extensions["response_cache"]

    def test_ttl_comes_from_config(self, app):
        assert get_response_cache(app).ttl_seconds == app.config["RESPONSE_CACHE_TTL_SECONDS"]
