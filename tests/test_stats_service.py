"""Tests for turf statistics: per-row stats, aggregates and input coercion"""

import math

import pytest

from turfboard.services.stats_service import aggregate_stats, coerce_count, compute_stats, get_status


@pytest.mark.unit
class TestComputeStats:
    def test_exactly_on_target(self):
        stats = compute_stats(70, 30)
        assert stats.total == 100
        assert stats.percent_off == 30.0
        assert stats.needed_on == pytest.approx(70.0)
        assert stats.gap_to_target == 0
        assert stats.status == "ok"

    def test_empty_row(self):
        stats = compute_stats(0, 0)
        assert stats.total == 0
        assert stats.percent_off == 0.0
        assert stats.gap_to_target == 0
        assert stats.status == "ok"

    def test_over_target(self):
        stats = compute_stats(60, 40)
        assert stats.percent_off == 40.0
        assert stats.needed_on == pytest.approx(93.333, rel=1e-4)
        assert stats.gap_to_target == 34
        assert stats.status == "over"

    def test_adjust_tier_is_inclusive_at_35(self):
        stats = compute_stats(65, 35)
        assert stats.percent_off == 35.0
        assert stats.status == "adjust"
        assert stats.gap_to_target == 17

    def test_only_off_turf(self):
        stats = compute_stats(0, 3)
        assert stats.percent_off == 100.0
        assert stats.gap_to_target == 7
        assert stats.status == "over"

    def test_gap_never_negative(self):
        assert compute_stats(500, 1).gap_to_target == 0

    def test_half_off_is_over(self):
        stats = compute_stats(50, 50)
        assert stats.percent_off == 50.0
        assert stats.status == "over"

    @pytest.mark.parametrize("on_turf, off_turf", [(0, 1), (1, 0), (3, 7), (999, 1), (12, 12)])
    def test_total_and_percent_bounds(self, on_turf, off_turf):
        stats = compute_stats(on_turf, off_turf)
        assert stats.total == on_turf + off_turf
        assert 0 <= stats.percent_off <= 100
        assert isinstance(stats.gap_to_target, int)
        assert stats.gap_to_target >= 0

    def test_to_dict_rounds_percent_for_display(self):
        data = compute_stats(2, 1).to_dict()
        assert data == {"total": 3, "percentOff": 33.3, "gapToTarget": 1, "status": "adjust"}


@pytest.mark.unit
class TestGetStatus:
    @pytest.mark.parametrize(
        "percent_off, expected",
        [(0, "ok"), (30.0, "ok"), (30.01, "adjust"), (35.0, "adjust"), (35.1, "over"), (100, "over")],
    )
    def test_tiers(self, percent_off, expected):
        assert get_status(percent_off) == expected


@pytest.mark.unit
class TestCoerceCount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("abc", 0),
            (None, 0),
            ("", 0),
            (-5, 0),
            (float("nan"), 0),
            (math.inf, 0),
            (True, 0),
            ("12", 12),
            ("  7 ", 7),
            (3.5, 3.5),
            (4.0, 4),
        ],
    )
    def test_values(self, value, expected):
        assert coerce_count(value) == expected

    def test_integral_floats_become_int(self):
        assert isinstance(coerce_count("8.0"), int)


@pytest.mark.unit
class TestAggregateStats:
    def test_sums_counts_instead_of_averaging_percentages(self):
        rows = [{"onTurf": 70, "offTurf": 30}, {"onTurf": 10, "offTurf": 10}]
        aggregate = aggregate_stats(rows)

        assert aggregate.count == 2
        assert aggregate.on_turf == 80
        assert aggregate.off_turf == 40
        assert aggregate.stats.percent_off == pytest.approx(33.333, rel=1e-4)
        # Averaging 30% and 50% would have said "over"
        assert aggregate.stats.status == "adjust"
        assert aggregate.stats.gap_to_target == 14

    def test_empty(self):
        data = aggregate_stats([]).to_dict()
        assert data["count"] == 0
        assert data["stats"]["status"] == "ok"

    def test_bad_row_values_count_as_zero(self):
        aggregate = aggregate_stats([{"onTurf": "x", "offTurf": None}, {"onTurf": 3}])
        assert aggregate.on_turf == 3
        assert aggregate.off_turf == 0
