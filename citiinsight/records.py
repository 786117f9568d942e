from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)

MAX_DURATION_MIN = 240.0

# Columns of the bike-share export
RIDE_ID = "ride_id"
STARTED_AT = "started_at"
ENDED_AT = "ended_at"
MEMBER_CASUAL = "member_casual"
RIDEABLE_TYPE = "rideable_type"
START_STATION = "start_station_name"
END_STATION = "end_station_name"


@dataclass(frozen=True)
class TripRecord:
    """One trip that passed sanitization."""
    ride_id: str
    started_at: datetime
    ended_at: datetime
    member_casual: str
    rideable_type: str
    start_station_name: str
    end_station_name: str

    @property
    def duration_min(self) -> float:
        return (self.ended_at - self.started_at).total_seconds() / 60.0

    @property
    def is_member(self) -> bool:
        return self.member_casual.lower() == "member"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False

def _text(value: Any, default: str = "") -> str:
    if _is_missing(value):
        return default
    return str(value).strip() or default

def parse_timestamp(value: Any) -> Optional[datetime]:
    """Lenient timestamp parsing. Returns None for anything unusable."""
    if _is_missing(value):
        return None
    if isinstance(value, datetime):
        return pd.Timestamp(value).to_pydatetime()
    text = str(value).strip()
    if not text:
        return None
    ts = pd.to_datetime(text, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()

def sanitize_record(raw: Mapping[str, Any]) -> Optional[TripRecord]:
    """
    Validate and normalize one raw row.

    Returns None when the row is rejected: missing id, unparseable
    timestamps, or a duration outside (0, 240] minutes.
    """
    if not isinstance(raw, Mapping):
        return None

    ride_id = _text(raw.get(RIDE_ID))
    if not ride_id:
        return None

    started = parse_timestamp(raw.get(STARTED_AT))
    ended = parse_timestamp(raw.get(ENDED_AT))
    if started is None or ended is None:
        return None

    try:
        duration = (ended - started).total_seconds() / 60.0
    except TypeError:
        # naive and aware timestamps in the same row
        return None
    if not (0 < duration <= MAX_DURATION_MIN):
        return None

    return TripRecord(
        ride_id=ride_id,
        started_at=started,
        ended_at=ended,
        member_casual=_text(raw.get(MEMBER_CASUAL)),
        rideable_type=_text(raw.get(RIDEABLE_TYPE), "unknown"),
        start_station_name=_text(raw.get(START_STATION), "Unknown"),
        end_station_name=_text(raw.get(END_STATION), "Unknown"),
    )

def sanitize_rows(rows: Iterable[Mapping[str, Any]]) -> List[TripRecord]:
    clean: List[TripRecord] = []
    seen = 0
    for raw in rows:
        seen += 1
        rec = sanitize_record(raw)
        if rec is not None:
            clean.append(rec)
    if seen != len(clean):
        logger.debug("Sanitizer dropped %d of %d rows", seen - len(clean), seen)
    return clean
