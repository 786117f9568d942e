from __future__ import annotations

import re

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DANGEROUS_KEYWORDS = [
    "insert", "update", "delete", "drop", "alter", "create",
    "truncate", "grant", "revoke", "exec", "execute", "attach", "pragma",
]

def validate_identifier(name: str) -> str:
    """Table and column names are interpolated, so only plain identifiers pass."""
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name

def safe_select_only(sql: str) -> str:
    """Ensure SQL is SELECT/WITH only (no mutations)."""
    low = (sql or "").lower().strip()
    if not (low.startswith("select") or low.startswith("with")):
        raise ValueError("Only SELECT queries are allowed.")
    if ";" in low.rstrip(";"):
        raise ValueError("Only a single statement is allowed.")
    for kw in DANGEROUS_KEYWORDS:
        if re.search(rf"\b{kw}\b", low):
            raise ValueError("Unsafe SQL detected.")
    return sql
