"""
Widget catalog.

A fixed, ordered list of widget definitions. Each definition knows how to
turn an AggregateSet into a renderable chart or table payload.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .aggregate import AggregateSet

CHART = "chart"
TABLE = "table"
WIDGET_KINDS = (CHART, TABLE)

Payload = Dict[str, Any]


@dataclass(frozen=True)
class WidgetDefinition:
    id: str
    kind: str
    title: str
    build: Callable[[AggregateSet], Payload]

    def describe(self) -> Dict[str, str]:
        return {"id": self.id, "kind": self.kind, "title": self.title}


def _trips_series() -> List[Dict[str, str]]:
    return [{"key": "value", "label": "Trips"}]

def _chart(chart_type: str, data, series=None) -> Payload:
    return {
        "chart_type": chart_type,
        "data": [dict(d) for d in data],
        "x_key": "name",
        "series": series or _trips_series(),
    }

def _table(columns: List[Tuple[str, str]], rows) -> Payload:
    return {
        "columns": [{"key": k, "label": label} for k, label in columns],
        "rows": [dict(r) for r in rows],
    }


WIDGET_CATALOG: Tuple[WidgetDefinition, ...] = (
    WidgetDefinition(
        "w_trips_by_month", CHART, "Trips by Month (Area)",
        lambda agg: _chart("area", agg.trips_by_month),
    ),
    WidgetDefinition(
        "w_trips_by_dow", CHART, "Trips by Day of Week (Bar)",
        lambda agg: _chart("bar", agg.trips_by_dow),
    ),
    WidgetDefinition(
        "w_duration_dist", CHART, "Duration Distribution (Histogram)",
        lambda agg: _chart("bar", agg.duration_buckets),
    ),
    WidgetDefinition(
        "w_bike_type_split", CHART, "Bike Type Split (Donut)",
        lambda agg: {
            "chart_type": "pie",
            "data": [dict(d) for d in agg.rideable_split],
            "donut": True,
            "name_key": "name",
            "value_key": "value",
        },
    ),
    WidgetDefinition(
        "w_top_routes", CHART, "Top Routes (Bar)",
        lambda agg: _chart("bar", agg.top_routes),
    ),
    WidgetDefinition(
        "w_member_vs_casual_dow", CHART, "Member vs Casual by Day (Stacked)",
        lambda agg: _chart(
            "stackedBar",
            agg.dow_member_casual,
            [{"key": "member", "label": "Member"}, {"key": "casual", "label": "Casual"}],
        ),
    ),
    WidgetDefinition(
        "t_latest_local_trips", TABLE, "Latest Trips (Local CSV)",
        lambda agg: _table(
            [
                ("started_at", "Started"),
                ("start_station_name", "Start"),
                ("end_station_name", "End"),
                ("member_casual", "Rider"),
                ("rideable_type", "Bike"),
            ],
            agg.latest_trips,
        ),
    ),
    WidgetDefinition(
        "t_top_stations_local", TABLE, "Top Stations (Local CSV)",
        lambda agg: _table([("full_name", "Station"), ("value", "Trips")], agg.top_stations),
    ),
)

_BY_ID = {w.id: w for w in WIDGET_CATALOG}


def lookup(widget_id: str) -> Optional[WidgetDefinition]:
    return _BY_ID.get(widget_id) if isinstance(widget_id, str) else None

def build_widget(widget_id: str, aggregates: AggregateSet) -> Optional[Payload]:
    """Build a payload for ``widget_id``; None when the id is not in the catalog."""
    definition = lookup(widget_id)
    if definition is None:
        return None
    return definition.build(aggregates)

def catalog_menu() -> List[Dict[str, str]]:
    return [w.describe() for w in WIDGET_CATALOG]
