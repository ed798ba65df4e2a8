# turfboard/services/stats_service.py
"""
Turf Statistics - derived on/off turf metrics for a single login or an aggregate
"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Iterable, Mapping, Union

Number = Union[int, float]

# Off-turf should be at most 30% of the total
TARGET_OFF_RATIO = Fraction(3, 10)

# (inclusive upper bound on percent off, status); the last tier always matches
STATUS_TIERS = (
    (30.0, "ok"),
    (35.0, "adjust"),
    (math.inf, "over"),
)


@dataclass(frozen=True)
class TurfStats:
    """Derived statistics for one pair of counters"""

    on_turf: Number
    off_turf: Number
    total: Number
    percent_off: float
    needed_on: float
    gap_to_target: int
    status: str  # "ok", "adjust", "over"

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "percentOff": round(self.percent_off, 1),
            "gapToTarget": self.gap_to_target,
            "status": self.status,
        }


@dataclass(frozen=True)
class AggregateStats:
    """Statistics computed from the summed counters of many logins"""

    count: int
    on_turf: Number
    off_turf: Number
    stats: TurfStats

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "onTurf": self.on_turf,
            "offTurf": self.off_turf,
            "stats": self.stats.to_dict(),
        }


def coerce_count(value: Any) -> Number:
    """
    Normalize client input to a non-negative number.

    Numeric strings are parsed; anything non-numeric, NaN, infinite or
    negative becomes 0. Integral values are returned as ``int``.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number) if number.is_integer() else number


def get_status(percent_off: float) -> str:
    """Return the first tier whose threshold is >= percent_off"""
    for threshold, status in STATUS_TIERS:
        if percent_off <= threshold:
            return status
    return STATUS_TIERS[-1][1]


def compute_stats(on_turf: Number, off_turf: Number) -> TurfStats:
    """
    Compute total, percent off, on-turf still needed to reach the target
    ratio, and the status tier. Inputs must already be coerced.
    """
    total = on_turf + off_turf
    percent_off = (off_turf * 100 / total) if total else 0.0

    # required_total = off / ratio, so required_on = off * (1 - ratio) / ratio
    off_exact = Fraction(off_turf)
    needed_on = off_exact * (1 - TARGET_OFF_RATIO) / TARGET_OFF_RATIO
    gap_to_target = max(0, math.ceil(needed_on - Fraction(on_turf)))

    return TurfStats(
        on_turf=on_turf,
        off_turf=off_turf,
        total=total,
        percent_off=float(percent_off),
        needed_on=float(needed_on),
        gap_to_target=int(gap_to_target),
        status=get_status(percent_off),
    )


def aggregate_stats(rows: Iterable[Mapping[str, Any]]) -> AggregateStats:
    """
    Sum raw counters across serialized login rows and compute stats from the
    sums. This is deliberately not an average of per-row percentages.
    """
    count = 0
    total_on: Number = 0
    total_off: Number = 0
    for row in rows:
        count += 1
        total_on += coerce_count(row.get("onTurf"))
        total_off += coerce_count(row.get("offTurf"))
    return AggregateStats(
        count=count,
        on_turf=total_on,
        off_turf=total_off,
        stats=compute_stats(total_on, total_off),
    )
