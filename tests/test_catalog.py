"""
Tests for the widget catalog.
"""
import pytest

from citiinsight.aggregate import load
from citiinsight.catalog import (
    CHART,
    TABLE,
    WIDGET_CATALOG,
    build_widget,
    catalog_menu,
    lookup,
)


@pytest.fixture
def agg(five_rows):
    return load(five_rows)


class TestCatalog:
    """Test catalog contents and lookup."""

    def test_fixed_ids_in_order(self):
        """Test the catalog's ids and order."""
        assert [w.id for w in WIDGET_CATALOG] == [
            "w_trips_by_month",
            "w_trips_by_dow",
            "w_duration_dist",
            "w_bike_type_split",
            "w_top_routes",
            "w_member_vs_casual_dow",
            "t_latest_local_trips",
            "t_top_stations_local",
        ]

    def test_ids_unique(self):
        """Test ids are unique."""
        ids = [w.id for w in WIDGET_CATALOG]
        assert len(ids) == len(set(ids))

    def test_kinds(self):
        """Test every definition is a chart or table."""
        assert all(w.kind in (CHART, TABLE) for w in WIDGET_CATALOG)
        assert lookup("t_latest_local_trips").kind == TABLE

    def test_lookup_unknown(self):
        """Test unknown ids return None."""
        assert lookup("w_nope") is None
        assert lookup(None) is None

    def test_menu(self):
        """Test the menu lists id, kind and title for every entry."""
        menu = catalog_menu()
        assert len(menu) == len(WIDGET_CATALOG)
        assert menu[0] == {"id": "w_trips_by_month", "kind": "chart", "title": "Trips by Month (Area)"}


class TestBuild:
    """Test payload builders."""

    def test_build_unknown(self, agg):
        """Test building an unknown id returns None."""
        assert build_widget("w_nope", agg) is None

    def test_every_widget_builds(self, agg):
        """Test every catalog entry builds a payload of its kind."""
        for w in WIDGET_CATALOG:
            payload = build_widget(w.id, agg)
            if w.kind == CHART:
                assert "chart_type" in payload and "data" in payload
            else:
                assert "columns" in payload and "rows" in payload

    def test_month_chart(self, agg):
        """Test the month chart carries the monthly view."""
        payload = build_widget("w_trips_by_month", agg)
        assert payload["chart_type"] == "area"
        assert payload["x_key"] == "name"
        assert payload["series"] == [{"key": "value", "label": "Trips"}]
        assert payload["data"] == [{"name": "2024-03", "value": 2}, {"name": "2024-04", "value": 1}]

    def test_stacked_series(self, agg):
        """Test the member/casual chart has two stacked series."""
        payload = build_widget("w_member_vs_casual_dow", agg)
        assert payload["chart_type"] == "stackedBar"
        assert [s["key"] for s in payload["series"]] == ["member", "casual"]
        assert len(payload["data"]) == 7

    def test_donut(self, agg):
        """Test the bike type split is a donut chart."""
        payload = build_widget("w_bike_type_split", agg)
        assert payload["chart_type"] == "pie"
        assert payload["donut"] is True

    def test_top_stations_table(self, agg):
        """Test the station table columns."""
        payload = build_widget("t_top_stations_local", agg)
        assert [c["key"] for c in payload["columns"]] == ["full_name", "value"]
        assert payload["rows"][0]["full_name"] == "Grove St PATH"

    def test_payload_is_a_copy(self, agg):
        """Test mutating a payload does not touch the aggregates."""
        payload = build_widget("w_trips_by_dow", agg)
        payload["data"][0]["value"] = 999
        assert agg.trips_by_dow[0]["value"] != 999
