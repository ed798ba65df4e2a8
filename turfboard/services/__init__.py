# turfboard/services/__init__.py
"""
Service layer: statistics, persistence and response caching
"""

from .login_store import ImportOutcome, LoginStore, validate_counts
from .response_cache import ResponseCache, get_response_cache
from .stats_service import AggregateStats, TurfStats, aggregate_stats, coerce_count, compute_stats, get_status

__all__ = [
    "LoginStore",
    "ImportOutcome",
    "validate_counts",
    "ResponseCache",
    "get_response_cache",
    "TurfStats",
    "AggregateStats",
    "compute_stats",
    "aggregate_stats",
    "coerce_count",
    "get_status",
]
