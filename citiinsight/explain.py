from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .aggregate import AggregateSet
from .catalog import CHART

INTRO = """
🚲 CitiInsight — Bike-Share Trips Dashboard
What I can do:
- Summarise the local trips export (peak hour, busiest day, top stations...)
- Preview or pin catalog widgets (charts and tables) to your dashboard
- Query the trips table for rows and pin the result as a table
Examples:
- "show widget menu"
- "add the trips by month chart"
- "latest 10 trips from Grove St"
Commands:
- menu           → widget catalog
- stats          → summary numbers
- widgets        → pinned widgets
- pin            → pin the last preview / query result
- remove <id>    → unpin a widget
- clear          → unpin everything
- exit           → quit
""".strip()

def format_summary(agg: AggregateSet) -> str:
    return "\n".join([
        f"Trips (clean):   {agg.clean_count:,}",
        f"Members:         {agg.members:,} ({agg.member_ratio:.1f}%)",
        f"Casual:          {agg.casual:,}",
        f"Avg duration:    {agg.avg_duration_min:.1f} min",
        f"Peak hour:       {agg.peak_hour}",
        f"Busiest day:     {agg.busiest_day}",
        f"Top station:     {agg.top_station}",
    ])

def format_menu(items: Iterable[Dict[str, str]]) -> str:
    df = pd.DataFrame(list(items), columns=["id", "kind", "title"])
    return df.to_markdown(index=False)

def payload_frame(payload: Dict[str, Any], kind: str) -> pd.DataFrame:
    """Flatten a chart or table payload into a DataFrame for display."""
    if kind == CHART:
        data = payload.get("data") or []
        if payload.get("chart_type") == "pie":
            keys = [payload.get("name_key", "name"), payload.get("value_key", "value")]
        else:
            keys = [payload.get("x_key", "name")] + [s["key"] for s in payload.get("series") or []]
        df = pd.DataFrame(data)
        return df[[k for k in keys if k in df.columns]] if not df.empty else pd.DataFrame(columns=keys)

    rows = payload.get("rows") or []
    columns: Optional[List[Dict[str, str]]] = payload.get("columns")
    df = pd.DataFrame(rows)
    if not columns:
        # no projection: first six columns, like the table renderer
        return df.iloc[:, :6]
    keys = [c["key"] for c in columns]
    df = df.reindex(columns=keys)
    return df.rename(columns={c["key"]: c["label"] for c in columns})

def format_payload(payload: Dict[str, Any], kind: str) -> str:
    df = payload_frame(payload, kind)
    if df.empty:
        return "No rows"
    return df.to_markdown(index=False)

def format_response(resp: Any) -> str:
    """Text rendering of a RouterResponse."""
    if not resp.ok:
        return f"⚠️  {resp.message}"
    if resp.kind == "menu":
        return f"{resp.title}\n{format_menu(resp.items or [])}"
    if resp.payload is not None and resp.widget_kind:
        body = format_payload(resp.payload, resp.widget_kind)
        return f"{resp.message}\n{body}"
    return resp.message

def format_widgets(instances: Iterable[Any]) -> str:
    rows = [
        {"id": w.id, "source": w.provenance, "kind": w.kind, "title": w.title, "created": w.created_at}
        for w in instances
    ]
    if not rows:
        return "No widgets pinned yet."
    return pd.DataFrame(rows).to_markdown(index=False)
