"""
Row-store executor for CitiInsight.

This layer is:
- LLM-free
- Router-free
- Safe to expose via MCP

Every remote query the router runs goes through here.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd

from citiinsight.commands import RemoteQuery
from citiinsight.errors import RemoteQueryError
from citiinsight.sql.builder import build_select
from citiinsight.sql.executor import execute_sql_query
from citiinsight.sql.safety import safe_select_only

logger = logging.getLogger(__name__)


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # plain Python scalars and None instead of numpy types / NaN
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


class DirectQueryExecutor:
    """
    Executes query descriptors against the SQLite trips database.

    Used by:
    - CommandRouter (remote_query commands)
    - MCP server
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path) if db_path else None

    def execute_sql(self, sql: str, params: Sequence[Any] | None = None) -> dict:
        """
        Execute a safe SELECT-only SQL query.

        Returns:
            dict with success, rows, columns, row_count, dataframe
        """
        # 1. Safety check (raises ValueError if unsafe)
        safe_select_only(sql)

        # 2. Execute via the low-level executor
        df = execute_sql_query(sql, params, db_path=self.db_path)

        # 3. Return structured result (MCP-style)
        return {
            "success": True,
            "rows": _records(df) if df is not None else [],
            "row_count": len(df) if df is not None else 0,
            "columns": list(df.columns) if df is not None else [],
            "dataframe": df,
        }

    def execute_query(self, query: RemoteQuery) -> dict:
        """Build SQL for a query descriptor and run it. Raises RemoteQueryError."""
        try:
            sql, params = build_select(query)
            result = self.execute_sql(sql, params)
        except (ValueError, FileNotFoundError, pd.errors.DatabaseError) as e:
            raise RemoteQueryError(str(e)) from e
        logger.debug("Query on %s returned %d rows", query.table, result["row_count"])
        result["sql"] = sql
        return result

    def run_query(self, query: RemoteQuery) -> List[Dict[str, Any]]:
        """Router-facing contract: just the rows."""
        return self.execute_query(query)["rows"]
