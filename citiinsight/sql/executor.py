from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

def _default_db_path() -> Path:
    env = os.getenv("CITIINSIGHT_DB_PATH")
    if env:
        return Path(env).expanduser().resolve()
    # <project_root>/data/trips.sqlite
    return Path(__file__).resolve().parents[2] / "data" / "trips.sqlite"

def execute_sql_query(
    sql: str,
    params: Sequence[Any] | None = None,
    db_path: Path | None = None,
) -> pd.DataFrame:
    """Run one parameterised SELECT against the trips row store."""
    path = Path(db_path) if db_path else _default_db_path()
    if not path.exists():
        raise FileNotFoundError(
            f"Trips database not found at: {path}. "
            "Set CITIINSIGHT_DB_PATH or run scripts/create_sample_db.py"
        )
    bound = list(params or [])
    logger.debug("SQL on %s (%d params): %s", path.name, len(bound), sql)
    with sqlite3.connect(str(path)) as conn:
        return pd.read_sql_query(sql, conn, params=bound)
