"""
Structured commands accepted by the command router.

Commands come from user shortcuts or from an external agent. Agent output
is untrusted, so ``parse_command`` checks the shape of every field before
anything is dispatched.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .catalog import WIDGET_KINDS
from .errors import CommandError
from .store import CUSTOM, PROVENANCES

SHOW_MENU = "show_menu"
ADD_WIDGET = "add_widget"
PREVIEW_WIDGET = "preview_widget"
PIN_PAYLOAD = "pin_payload"
REMOTE_QUERY = "remote_query"
TOOLS = (SHOW_MENU, ADD_WIDGET, PREVIEW_WIDGET, PIN_PAYLOAD, REMOTE_QUERY)

# names the original agent prompt used for the same actions
TOOL_ALIASES = {"supabase": REMOTE_QUERY}

FILTER_OPERATORS = ("eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "is", "in")

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 200


@dataclass(frozen=True)
class ShowMenu:
    tool: str = field(default=SHOW_MENU, init=False)


@dataclass(frozen=True)
class AddWidget:
    widget_id: str
    tool: str = field(default=ADD_WIDGET, init=False)


@dataclass(frozen=True)
class PreviewWidget:
    widget_id: str
    tool: str = field(default=PREVIEW_WIDGET, init=False)


@dataclass(frozen=True)
class PinPayload:
    kind: str
    title: str
    payload: Dict[str, Any]
    provenance: str = CUSTOM
    tool: str = field(default=PIN_PAYLOAD, init=False)


@dataclass(frozen=True)
class QueryFilter:
    column: str
    operator: str
    value: Any = None


@dataclass(frozen=True)
class OrderBy:
    column: str
    ascending: bool = False


@dataclass(frozen=True)
class RemoteQuery:
    table: str
    columns: Optional[Tuple[str, ...]] = None
    filters: Tuple[QueryFilter, ...] = ()
    order_by: Optional[OrderBy] = None
    limit: int = DEFAULT_LIMIT
    pin: bool = False
    tool: str = field(default=REMOTE_QUERY, init=False)


Command = Union[ShowMenu, AddWidget, PreviewWidget, PinPayload, RemoteQuery]
COMMAND_TYPES = (ShowMenu, AddWidget, PreviewWidget, PinPayload, RemoteQuery)


def clamp_limit(value: Any) -> int:
    """Row limit clamped to [1, 200]; absent, zero, NaN or non-numeric -> 10."""
    if value is None or isinstance(value, bool):
        return DEFAULT_LIMIT
    try:
        n = float(value)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    except OverflowError:
        # integers too large for a float
        return MAX_LIMIT if value > 0 else MIN_LIMIT
    if math.isnan(n) or n == 0:
        return DEFAULT_LIMIT
    if math.isinf(n):
        return MAX_LIMIT if n > 0 else MIN_LIMIT
    return max(MIN_LIMIT, min(int(n), MAX_LIMIT))

def _widget_id(data: Mapping[str, Any]) -> str:
    wid = data.get("widgetId", data.get("widget_id"))
    if not isinstance(wid, str) or not wid.strip():
        raise CommandError("Missing widgetId.", field="widgetId", value=wid)
    return wid.strip()

def _columns(raw: Any) -> Optional[Tuple[str, ...]]:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise CommandError("columns must be a list of column names.", field="columns", value=raw)
    cols = []
    for c in raw:
        if not isinstance(c, str) or not c.strip():
            raise CommandError("columns must be a list of column names.", field="columns", value=raw)
        cols.append(c.strip())
    return tuple(cols) or None

def _filters(raw: Any) -> Tuple[QueryFilter, ...]:
    if raw is None:
        return ()
    items = raw if isinstance(raw, (list, tuple)) else [raw]
    out = []
    for f in items:
        if not isinstance(f, Mapping):
            raise CommandError("Each filter must be an object.", field="filters", value=f)
        column, op = f.get("column"), f.get("operator")
        # incomplete filters are skipped, not rejected
        if not column or not op:
            continue
        op = str(op).strip().lower()
        if op not in FILTER_OPERATORS:
            raise CommandError(f"Unsupported filter operator: {op}", field="filters", value=op)
        out.append(QueryFilter(column=str(column).strip(), operator=op, value=f.get("value")))
    return tuple(out)

def _order_by(raw: Any) -> Optional[OrderBy]:
    if not isinstance(raw, Mapping) or not raw.get("column"):
        return None
    return OrderBy(column=str(raw["column"]).strip(), ascending=bool(raw.get("ascending")))

def _remote_query(data: Mapping[str, Any]) -> RemoteQuery:
    table = data.get("table")
    if not isinstance(table, str) or not table.strip():
        raise CommandError("Missing table in query.", field="table", value=table)
    return RemoteQuery(
        table=table.strip(),
        columns=_columns(data.get("columns")),
        filters=_filters(data.get("filters")),
        order_by=_order_by(data.get("orderBy", data.get("order_by"))),
        limit=clamp_limit(data.get("limit")),
        pin=bool(data.get("pin", False)),
    )

def _pin_payload(data: Mapping[str, Any]) -> PinPayload:
    kind = data.get("kind")
    if kind not in WIDGET_KINDS:
        raise CommandError(f"kind must be one of {', '.join(WIDGET_KINDS)}.", field="kind", value=kind)
    payload = data.get("payload")
    if not isinstance(payload, Mapping):
        raise CommandError("Missing payload.", field="payload", value=payload)
    provenance = data.get("provenance") or data.get("source") or CUSTOM
    if provenance not in PROVENANCES:
        raise CommandError(
            f"provenance must be one of {', '.join(PROVENANCES)}.", field="provenance", value=provenance
        )
    title = data.get("title")
    return PinPayload(
        kind=kind,
        title=title.strip() if isinstance(title, str) and title.strip() else "Pinned Widget",
        payload=dict(payload),
        provenance=provenance,
    )

def _typed_as_dict(cmd: Any) -> Dict[str, Any]:
    # typed commands are re-validated through the same checks as agent JSON
    if isinstance(cmd, (AddWidget, PreviewWidget)):
        return {"tool": cmd.tool, "widgetId": cmd.widget_id}
    if isinstance(cmd, PinPayload):
        return {
            "tool": cmd.tool, "kind": cmd.kind, "title": cmd.title,
            "payload": cmd.payload, "provenance": cmd.provenance,
        }
    if isinstance(cmd, RemoteQuery):
        return {
            "tool": cmd.tool,
            "table": cmd.table,
            "columns": cmd.columns,
            "filters": [
                {"column": f.column, "operator": f.operator, "value": f.value} if isinstance(f, QueryFilter) else f
                for f in (cmd.filters or ())
            ],
            "orderBy": (
                {"column": cmd.order_by.column, "ascending": cmd.order_by.ascending}
                if isinstance(cmd.order_by, OrderBy) else None
            ),
            "limit": cmd.limit,
            "pin": cmd.pin,
        }
    return {"tool": cmd.tool}

def parse_command(data: Any) -> Command:
    """Validate a JSON-like or typed command. Raises CommandError."""
    if isinstance(data, COMMAND_TYPES):
        data = _typed_as_dict(data)
    if not isinstance(data, Mapping):
        raise CommandError("Command must be a JSON object.", field="tool", value=data)

    raw_tool = data.get("tool")
    tool = TOOL_ALIASES.get(raw_tool, raw_tool) if isinstance(raw_tool, str) else None
    if isinstance(raw_tool, str) and raw_tool in TOOL_ALIASES and (data.get("action") or "select") != "select":
        tool = None

    if tool == SHOW_MENU:
        return ShowMenu()
    if tool == ADD_WIDGET:
        return AddWidget(_widget_id(data))
    if tool == PREVIEW_WIDGET:
        return PreviewWidget(_widget_id(data))
    if tool == PIN_PAYLOAD:
        return _pin_payload(data)
    if tool == REMOTE_QUERY:
        return _remote_query(data)
    raise CommandError(f"Unrecognized tool: {raw_tool!r}", field="tool", value=raw_tool)
