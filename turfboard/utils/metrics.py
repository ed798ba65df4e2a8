"""Prometheus metrics helpers for the turf API."""

from __future__ import annotations

from typing import Literal

from prometheus_client import Counter

_cache_lookups = Counter(
    "turfboard_response_cache_lookups_total",
    "Response cache lookups by scope and outcome.",
    ["scope", "outcome"],
)
_cache_invalidations = Counter(
    "turfboard_response_cache_invalidations_total",
    "Full response cache invalidations.",
)
_login_updates = Counter(
    "turfboard_login_updates_total",
    "Login counter updates by outcome.",
    ["outcome"],
)
_import_items = Counter(
    "turfboard_import_items_total",
    "Batch import items by status.",
    ["status"],
)


def record_cache_lookup(scope: Literal["all", "slug"], hit: bool) -> None:
    _cache_lookups.labels(scope=scope, outcome="hit" if hit else "miss").inc()


def record_cache_invalidation() -> None:
    _cache_invalidations.inc()


def record_login_update(outcome: Literal["updated", "invalid", "not_found", "forbidden", "error"]) -> None:
    _login_updates.labels(outcome=outcome).inc()


def record_import_item(status: Literal["created", "exists", "skipped"], amount: int = 1) -> None:
    if amount:
        _import_items.labels(status=status).inc(amount)
