"""
Unit tests for services/dashboard_service.py

Covers the panel payloads and the on_selection_changed entry point:
- Every panel recomputed from the filtered subset
- Maps degrade to placeholders without boundaries
- Recomputing the same state gives the same data
"""

from datetime import date

import pytest

from constants import MISSING_CATEGORY_LABEL
from models.app_state import AppState, SortState
from models.filters import FilterSelection
from services.dashboard_service import (
    ALL_PANELS,
    DerivedContext,
    build_choropleth,
    build_histogram,
    count_by,
    on_selection_changed,
    query_timeline,
)
from utils.formatting import format_number

BOUNDARIES = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {"NAME_1": "A"}, "geometry": None},
        {"type": "Feature", "properties": {"NAME_1": "B"}, "geometry": None},
        {"type": "Feature", "properties": {"NAME_1": "Z"}, "geometry": None},
    ],
}


@pytest.fixture
def state(make_record):
    records = (
        make_record(price=3000, surface_ha=1, regions=["A"], year=2020,
                    transaction_type="Art. 5°", business_type="Compraventa",
                    occupancy_status="Libre", file_id="1"),
        make_record(price=4500, surface_ha=1, regions=["A", "B"], year=2021,
                    transaction_type="Directo", business_type="Compraventa",
                    occupancy_status="", file_id="2"),
        make_record(price=2000, surface_ha=1, regions=["B"], year=2020,
                    transaction_type="", business_type="", file_id="3"),
        make_record(price=2200, surface_ha=1, regions=["B"], year=2021, file_id="4"),
        make_record(price=0, surface_ha=5, regions=["C"], file_id="5"),
    )
    return AppState(records=records, boundaries=BOUNDARIES)


class TestOnSelectionChanged:

    def test_returns_all_panels(self, state):
        result = on_selection_changed(state)
        assert set(result["data"]) == set(ALL_PANELS)
        assert result["meta"]["panels_returned"] == ALL_PANELS
        assert result["meta"]["total_records"] == 5
        assert result["meta"]["total_records_matched"] == 5
        assert result["meta"]["boundaries_available"] is True

    def test_panel_subset_ignores_unknown_names(self, state):
        result = on_selection_changed(state, panels=["summary", "nope"])
        assert list(result["data"]) == ["summary"]
        assert result["meta"]["panels_returned"] == ["summary"]

    def test_selection_recorded_in_meta(self, state):
        narrowed = state.with_selection(FilterSelection(region="B", min_year=2021))
        meta = on_selection_changed(narrowed, panels=["summary"])["meta"]
        assert meta["filters_applied"] == {"region": "B", "minYear": 2021}
        assert meta["total_records_matched"] == 2

    def test_same_state_same_data(self, state):
        first = on_selection_changed(state)["data"]
        second = on_selection_changed(state)["data"]
        assert first == second

    def test_dataset_not_mutated(self, state):
        before = state.records
        on_selection_changed(state.with_selection(FilterSelection(region="A")))
        assert state.records == before


class TestSummary:

    def test_kpis(self, state):
        summary = on_selection_changed(state, panels=["summary"])["data"]["summary"]
        assert summary["filteredCount"] == 5
        assert summary["totalValue"] == 11700
        assert summary["totalSurface"] == 9
        assert summary["avgPxHa"] == pytest.approx(2925)
        assert summary["medianPxHa"] == pytest.approx(2600)
        assert summary["formatted"]["totalValue"] == "U$S 11.700"

    def test_empty_subset(self, state):
        narrowed = state.with_selection(FilterSelection(region="nowhere"))
        summary = on_selection_changed(narrowed, panels=["summary"])["data"]["summary"]
        assert summary["filteredCount"] == 0
        assert summary["avgPxHa"] == 0
        assert summary["totalCount"] == 5


class TestMaps:

    def test_features_joined_by_name(self, state):
        maps = on_selection_changed(state, panels=["maps"])["data"]["maps"]
        price = maps["price"]
        assert price["available"] is True
        by_name = {f["name"]: f for f in price["features"]}
        assert by_name["A"]["fill"] == "data"
        assert by_name["A"]["value"] == pytest.approx(3750)
        assert by_name["Z"]["fill"] == "unknown"
        assert by_name["Z"]["value"] is None
        # C has data but no boundary feature
        assert "C" not in by_name

    def test_placeholder_without_boundaries(self, state):
        no_maps = AppState(records=state.records, boundaries=None)
        data = on_selection_changed(no_maps)["data"]
        assert data["maps"] == {"price": {"available": False}, "count": {"available": False}}
        assert data["increment"]["map"] == {"available": False}
        # the rest still renders
        assert data["region_table"]["rows"]

    def test_build_choropleth_placeholder(self):
        assert build_choropleth(None, {}, "count", 1) == {"available": False}


class TestHistograms:

    def test_labels_and_open_ended_bin(self):
        bins = build_histogram([5, 15, 150], [0, 10, 20, 200_000_000], format_number)
        assert [b["count"] for b in bins] == [1, 1, 1]
        assert bins[0]["label"] == "0 – 10"
        assert bins[-1]["label"] == "20+"

    def test_price_per_ha_excludes_outliers(self, make_record):
        state = AppState(records=(
            make_record(price=150_000, surface_ha=1, regions=["A"]),
            make_record(price=2500, surface_ha=1, regions=["A"]),
        ))
        histograms = on_selection_changed(state, panels=["histograms"])["data"]["histograms"]
        assert sum(b["count"] for b in histograms["pricePerHa"]) == 1
        assert sum(b["count"] for b in histograms["price"]) == 2


class TestTimeline:

    def test_monthly_buckets_and_labels(self, make_record):
        records = (
            make_record(price=100, transaction_date=date(2021, 3, 15)),
            make_record(price=300, transaction_date=date(2021, 3, 2)),
            make_record(price=50, transaction_date=date(2020, 12, 1)),
            make_record(price=999),  # undated
        )
        timeline = query_timeline(DerivedContext(AppState(records=records)))
        assert timeline["months"] == ["2020-12", "2021-03"]
        assert timeline["labels"] == ["Dic 2020", "Mar 2021"]
        assert timeline["counts"] == [1, 2]
        assert timeline["values"] == [50, 400]
        assert timeline["countMA"] == [1, 1.5]


class TestBreakdowns:

    def test_missing_labels(self, state):
        breakdowns = on_selection_changed(state, panels=["breakdowns"])["data"]["breakdowns"]
        types = {row["label"]: row["count"] for row in breakdowns["transactionType"]}
        assert types["Otro"] == 3
        occupancy = {row["label"]: row["count"] for row in breakdowns["occupancyStatus"]}
        assert occupancy[MISSING_CATEGORY_LABEL] == 4

    def test_count_by_highest_first(self, make_record):
        records = [make_record(business_type=b) for b in ("x", "y", "y")]
        assert count_by(records, lambda r: r.business_type) == [
            {"label": "y", "count": 2},
            {"label": "x", "count": 1},
        ]


class TestRegionPanels:

    def test_table_follows_sort_state(self, state):
        sorted_state = state.with_region_sort(SortState("count", False))
        table = on_selection_changed(sorted_state, panels=["region_table"])["data"]["region_table"]
        assert table["sort"] == {"column": "count", "ascending": False}
        assert table["rows"][0]["name"] == "B"

    def test_ranking_skips_regions_without_price(self, state):
        ranking = on_selection_changed(state, panels=["region_ranking"])["data"]["region_ranking"]
        assert [r["name"] for r in ranking] == ["A", "B"]

    def test_top_transactions(self, state):
        top = on_selection_changed(state, panels=["top_transactions"])["data"]["top_transactions"]
        assert [t["fileId"] for t in top] == ["2", "1", "4", "3"]


class TestIncrementPanel:

    def test_payload(self, state):
        inc = on_selection_changed(state, panels=["increment"])["data"]["increment"]
        assert inc["years"] == [2020, 2021]
        assert inc["windowYears"] == 5
        # B: 2000 -> (4500 + 2200) / 2, A: 3000 -> 4500
        assert [r["name"] for r in inc["ranking"]] == ["B", "A"]
        assert inc["ranking"][0]["pctChange"] == pytest.approx(67.5)
        assert inc["ranking"][1]["pctChange"] == pytest.approx(50.0)
        # default sort: pctChange descending
        assert [r["name"] for r in inc["table"]["rows"]] == ["B", "A"]
        assert inc["trend"]["regions"] == ["A", "B"]
        assert inc["kpis"]["period"] == "2020–2021"

    def test_window_of_one_year_is_empty(self, state):
        inc = on_selection_changed(state.with_window(1), panels=["increment"])["data"]["increment"]
        assert inc["stats"] == []
        assert inc["kpis"]["best"] is None
        assert inc["map"] == {"available": False}

    def test_map_domain_always_contains_zero(self, make_record):
        records = (
            make_record(price=100, surface_ha=1, regions=["A"], year=2020),
            make_record(price=150, surface_ha=1, regions=["A"], year=2021),
        )
        state = AppState(records=records, boundaries=BOUNDARIES)
        inc_map = on_selection_changed(state, panels=["increment"])["data"]["increment"]["map"]
        assert inc_map["available"] is True
        assert inc_map["minValue"] == 0
        assert inc_map["maxValue"] == pytest.approx(50.0)

    def test_map_domain_for_small_declines(self, make_record):
        records = (
            make_record(price=100, surface_ha=1, regions=["A"], year=2020),
            make_record(price=90, surface_ha=1, regions=["A"], year=2021),
        )
        state = AppState(records=records, boundaries=BOUNDARIES)
        inc_map = on_selection_changed(state, panels=["increment"])["data"]["increment"]["map"]
        assert inc_map["minValue"] == pytest.approx(-10.0)
        assert inc_map["maxValue"] == 1

    def test_map_placeholder_with_single_year(self, make_record):
        records = (
            make_record(price=100, surface_ha=1, regions=["A"], year=2021),
            make_record(price=200, surface_ha=1, regions=["B"], year=2021),
        )
        state = AppState(records=records, boundaries=BOUNDARIES)
        inc = on_selection_changed(state, panels=["increment"])["data"]["increment"]
        assert inc["map"] == {"available": False}
