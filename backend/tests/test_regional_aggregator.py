"""
Unit tests for services/regional_aggregator.py

Key invariants:
- Surface is split across a record's departments, by the FULL department
  count even under an active-department restriction
- An active department keeps multi-department records out of other buckets
- Price per hectare outliers are excluded from the distribution only
"""

import pytest

from models.app_state import SortState
from services.regional_aggregator import (
    compute_region_stats,
    credited_regions,
    region_ranking,
    region_table,
    sort_rows,
)


class TestAreaSplitting:

    def test_split_equally_without_active_region(self, make_record):
        record = make_record(price=1000, surface_ha=100, regions=["A", "B"])
        stats = compute_region_stats([record])
        assert stats["A"].total_ha == 50
        assert stats["B"].total_ha == 50

    def test_active_region_keeps_full_count_denominator(self, make_record):
        record = make_record(price=1000, surface_ha=100, regions=["A", "B"])
        stats = compute_region_stats([record], active_region="A")
        assert list(stats) == ["A"]
        assert stats["A"].total_ha == 50
        assert stats["A"].count == 1
        assert stats["A"].total_value == 1000

    def test_price_credited_in_full_to_each_region(self, make_record):
        record = make_record(price=1000, surface_ha=100, regions=["A", "B"])
        stats = compute_region_stats([record])
        assert stats["A"].total_value == 1000
        assert stats["B"].total_value == 1000


class TestActiveRegion:

    def test_records_without_active_region_contribute_nothing(self, make_record):
        records = [
            make_record(price=100, surface_ha=1, regions=["B"]),
            make_record(price=100, surface_ha=1, regions=["C", "B"]),
        ]
        assert compute_region_stats(records, active_region="A") == {}

    def test_credited_regions(self, make_record):
        record = make_record(regions=["A", "B", "C"])
        assert credited_regions(record) == ("A", "B", "C")
        assert credited_regions(record, "B") == ("B",)
        assert credited_regions(record, "Z") == ()

    def test_records_without_regions_are_skipped(self, make_record):
        stats = compute_region_stats([make_record(price=10, surface_ha=1, regions=[])])
        assert stats == {}


class TestPricePerHaStats:

    def test_outlier_excluded_from_distribution_but_counted(self, make_record):
        records = [
            make_record(price=150_000, surface_ha=1, regions=["A"]),  # 150,000/ha
            make_record(price=2_000, surface_ha=1, regions=["A"]),
            make_record(price=4_000, surface_ha=1, regions=["A"]),
        ]
        s = compute_region_stats(records)["A"]
        assert s.price_per_ha_values == [2000, 4000]
        assert s.avg_price_per_ha == 3000
        assert s.median_price_per_ha == 3000
        assert s.min_price_per_ha == 2000
        assert s.max_price_per_ha == 4000
        assert s.count == 3
        assert s.total_value == 156_000
        assert s.total_ha == 3

    def test_ceiling_is_exclusive(self, make_record):
        record = make_record(price=100_000, surface_ha=1, regions=["A"])
        assert compute_region_stats([record])["A"].price_per_ha_values == []

    def test_no_ratio_gives_zero_stats(self, make_record):
        record = make_record(price=0, surface_ha=10, regions=["A"], file_id="x")
        s = compute_region_stats([record])["A"]
        assert s.avg_price_per_ha == 0
        assert s.median_price_per_ha == 0
        assert s.min_price_per_ha == 0
        assert s.max_price_per_ha == 0
        assert s.avg_size == 10

    def test_median_even_count(self, make_record):
        records = [make_record(price=p, surface_ha=1, regions=["A"]) for p in (1, 2, 3, 4)]
        assert compute_region_stats(records)["A"].median_price_per_ha == 2.5


class TestPurity:

    def test_idempotent(self, make_record):
        records = [
            make_record(price=300, surface_ha=3, regions=["A", "B"]),
            make_record(price=500, surface_ha=2, regions=["B"]),
        ]
        first = {k: v.to_dict() for k, v in compute_region_stats(records).items()}
        second = {k: v.to_dict() for k, v in compute_region_stats(records).items()}
        assert first == second


class TestRankingAndTable:

    @pytest.fixture
    def stats(self, make_record):
        return compute_region_stats([
            make_record(price=3000, surface_ha=1, regions=["beta"]),
            make_record(price=1000, surface_ha=1, regions=["Alfa"]),
            make_record(price=0, surface_ha=1, regions=["Gamma"], file_id="g"),
            make_record(price=2000, surface_ha=1, regions=["Alfa"]),
        ])

    def test_ranking_skips_zero_average(self, stats):
        assert region_ranking(stats) == [
            {"name": "beta", "avgPxHa": 3000},
            {"name": "Alfa", "avgPxHa": 1500},
        ]

    def test_table_name_ascending_case_insensitive(self, stats):
        rows = region_table(stats, SortState("name", True))
        assert [r["name"] for r in rows] == ["Alfa", "beta", "Gamma"]

    def test_table_numeric_descending(self, stats):
        rows = region_table(stats, SortState("count", False))
        assert rows[0]["name"] == "Alfa"
        assert rows[0]["count"] == 2

    def test_sort_rows_missing_values_last(self):
        rows = [{"name": "a", "v": None}, {"name": "b", "v": 2}, {"name": "c", "v": 1}]
        assert [r["name"] for r in sort_rows(rows, SortState("v", True))] == ["c", "b", "a"]
