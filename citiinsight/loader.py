from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .errors import LoadError

def _default_csv_path() -> Path:
    env = os.getenv("CITIINSIGHT_CSV_PATH")
    if env:
        return Path(env).expanduser().resolve()
    # project_root/data/trips_rows.csv
    return Path(__file__).resolve().parents[1] / "data" / "trips_rows.csv"

def read_trip_rows(csv_path: Path | None = None) -> List[Dict[str, Any]]:
    """Read the trips export into row mappings (column -> value)."""
    path = Path(csv_path) if csv_path else _default_csv_path()
    if not path.exists():
        raise LoadError(
            f"CSV file not found at: {path}. "
            "Set CITIINSIGHT_CSV_PATH or place the export at ./data/trips_rows.csv"
        )
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise LoadError("CSV parsed but contains no rows.")
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise LoadError(f"CSV parse error: {e}")
    if df.empty:
        raise LoadError("CSV parsed but contains no rows.")
    return df.to_dict(orient="records")
