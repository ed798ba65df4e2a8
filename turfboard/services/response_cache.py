# turfboard/services/response_cache.py
"""
Response Cache - short-lived memoization of login read results
"""

import time
from typing import Any, Callable, Dict, Optional, Tuple

from turfboard.utils.metrics import record_cache_invalidation, record_cache_lookup

DEFAULT_TTL_SECONDS = 5.0


class ResponseCache:
    """
    Time-bounded cache for the "all logins" snapshot and per-slug snapshots.

    The cache is advisory: a lost race costs at most one extra store read,
    so no locking is used. A write to one login calls invalidate(slug),
    which also drops the all-rows snapshot; batch writes call invalidate_all().
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._all: Optional[Tuple[float, Any]] = None
        self._by_slug: Dict[str, Tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0

    def _is_fresh(self, captured_at: float) -> bool:
        """Check if an entry captured at ``captured_at`` is still valid"""
        return self._clock() - captured_at < self.ttl_seconds

    def _record(self, scope: str, hit: bool) -> None:
        if hit:
            self.hits += 1
        else:
            self.misses += 1
        record_cache_lookup(scope, hit)

    def get_all(self) -> Optional[Any]:
        """Return the all-rows snapshot, or None on miss/expiry"""
        entry = self._all
        if entry is not None:
            captured_at, snapshot = entry
            if self._is_fresh(captured_at):
                self._record("all", True)
                return snapshot
            self._all = None
        self._record("all", False)
        return None

    def put_all(self, snapshot: Any) -> None:
        self._all = (self._clock(), snapshot)

    def get(self, slug: str) -> Optional[Any]:
        """Return the snapshot cached for ``slug``, or None on miss/expiry"""
        entry = self._by_slug.get(slug)
        if entry is not None:
            captured_at, snapshot = entry
            if self._is_fresh(captured_at):
                self._record("slug", True)
                return snapshot
            self._by_slug.pop(slug, None)
        self._record("slug", False)
        return None

    def put(self, slug: str, snapshot: Any) -> None:
        self._by_slug[slug] = (self._clock(), snapshot)

    def invalidate(self, slug: str) -> None:
        """Drop one slug entry and the all-rows snapshot that contains it"""
        self._by_slug.pop(slug, None)
        self._all = None

    def invalidate_all(self) -> None:
        """Clear every entry. Idempotent."""
        self._all = None
        self._by_slug.clear()
        record_cache_invalidation()

    def stats(self) -> dict:
        return {
            "ttlSeconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
            "slugEntries": len(self._by_slug),
            "hasAll": self._all is not None,
        }


def get_response_cache(app=None) -> ResponseCache:
    """Return the cache owned by the Flask app, creating it on first use."""
    if app is None:
        from flask import current_app

        app = current_app._get_current_object()
    cache = app.extensions.get("response_cache")
    if cache is None:
        cache = ResponseCache(ttl_seconds=float(app.config.get("RESPONSE_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS)))
        app.extensions["response_cache"] = cache
    return cache
