from __future__ import annotations

from typing import Any, List, Tuple

from ..commands import OrderBy, QueryFilter, RemoteQuery
from .safety import validate_identifier

COMPARISONS = {
    "eq": "=",
    "neq": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "like": "LIKE",
}

def _in_values(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        values = list(value)
    else:
        # row-store style "(a,b,c)" or plain "a,b,c"
        text = str(value if value is not None else "").strip()
        if text.startswith("(") and text.endswith(")"):
            text = text[1:-1]
        values = [v.strip().strip("'\"") for v in text.split(",") if v.strip()]
    if not values:
        raise ValueError("'in' filter needs at least one value.")
    return values

def filter_clause(f: QueryFilter) -> Tuple[str, List[Any]]:
    col = validate_identifier(f.column)
    op = f.operator

    if op in COMPARISONS:
        return f"{col} {COMPARISONS[op]} ?", [f.value]
    if op == "ilike":
        return f"LOWER({col}) LIKE LOWER(?)", [f.value]
    if op == "in":
        values = _in_values(f.value)
        marks = ", ".join("?" for _ in values)
        return f"{col} IN ({marks})", values
    if op == "is":
        v = str(f.value).strip().lower() if f.value is not None else "null"
        if v == "null":
            return f"{col} IS NULL", []
        if v == "true":
            return f"{col} IS 1", []
        if v == "false":
            return f"{col} IS 0", []
        raise ValueError("'is' filter accepts null, true or false.")
    raise ValueError(f"Unsupported filter operator: {op}")

def order_clause(order: OrderBy) -> str:
    direction = "ASC" if order.ascending else "DESC"
    return f"ORDER BY {validate_identifier(order.column)} {direction}"

def build_select(query: RemoteQuery) -> Tuple[str, List[Any]]:
    """Turn a query descriptor into a parameterised SELECT and its bound values."""
    table = validate_identifier(query.table)
    cols = ", ".join(validate_identifier(c) for c in query.columns) if query.columns else "*"

    lines = [f"SELECT {cols}", f"FROM {table}"]
    params: List[Any] = []

    clauses = []
    for f in query.filters:
        clause, values = filter_clause(f)
        clauses.append(clause)
        params.extend(values)
    if clauses:
        lines.append("WHERE " + "\n  AND ".join(clauses))

    if query.order_by is not None:
        lines.append(order_clause(query.order_by))

    limit = int(query.limit)
    lines.append(f"LIMIT {limit}")
    return "\n".join(lines) + ";", params
