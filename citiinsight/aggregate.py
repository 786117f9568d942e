"""Reduce the cleaned trip set into the dashboard's named aggregate views.

Every view is recomputed from scratch on each load; there is no
incremental path.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import LoadError
from .records import TripRecord, sanitize_rows

logger = logging.getLogger(__name__)

DOW_SHORT = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DOW_FULL = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TOP_N = 12
LATEST_N = 12
NO_STATION = "N/A"

# (label, low, high); half-open except the last bin, which is closed at 240
DURATION_BINS: Tuple[Tuple[str, float, float], ...] = (
    ("0–5", 0, 5),
    ("5–10", 5, 10),
    ("10–15", 10, 15),
    ("15–20", 15, 20),
    ("20–30", 20, 30),
    ("30–60", 30, 60),
    ("60–120", 60, 120),
    ("120–240", 120, 240),
)


@dataclass(frozen=True)
class AggregateSet:
    clean_count: int
    members: int
    casual: int
    member_ratio: float
    avg_duration_min: float
    peak_hour: str
    busiest_day: str
    top_station: str

    hourly: Tuple[Dict[str, Any], ...]
    trips_by_dow: Tuple[Dict[str, Any], ...]
    dow_member_casual: Tuple[Dict[str, Any], ...]
    trips_by_month: Tuple[Dict[str, Any], ...]
    duration_buckets: Tuple[Dict[str, Any], ...]
    rideable_split: Tuple[Dict[str, Any], ...]
    top_stations: Tuple[Dict[str, Any], ...]
    top_routes: Tuple[Dict[str, Any], ...]
    rider_split: Tuple[Dict[str, Any], ...]
    latest_trips: Tuple[Dict[str, Any], ...]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def short_text(value: Any, max_len: int = 28) -> str:
    t = str(value if value is not None else "").strip()
    if not t:
        return "Unknown"
    return t[:max_len] + "…" if len(t) > max_len else t

def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"

def month_key(rec: TripRecord) -> str:
    return f"{rec.started_at.year:04d}-{rec.started_at.month:02d}"

def duration_bin(minutes: float) -> Optional[int]:
    """Index of the first bin containing ``minutes``, or None outside [0, 240]."""
    last = len(DURATION_BINS) - 1
    for i, (_, low, high) in enumerate(DURATION_BINS):
        if low <= minutes < high or (i == last and minutes == high):
            return i
    return None

def rank_counts(counts: Counter, limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Sort descending by count. Ties keep first-seen order (sorted() is stable)."""
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked if limit is None else ranked[:limit]

def _first_max_index(values: Sequence[int]) -> int:
    # max() returns the first maximal element, so the lowest index wins ties
    return max(range(len(values)), key=lambda i: values[i])

def _start_key(rec: TripRecord) -> float:
    # comparable across naive and aware timestamps
    return rec.started_at.timestamp()


def aggregate(records: Sequence[TripRecord]) -> AggregateSet:
    """Compute every aggregate view over an already-sanitized record set."""
    total = len(records)

    hourly = [0] * 24
    dow = [0] * 7
    dow_member = [0] * 7
    dow_casual = [0] * 7
    bins = [0] * len(DURATION_BINS)
    months: Counter = Counter()
    rideables: Counter = Counter()
    stations: Counter = Counter()
    routes: Counter = Counter()
    members = 0
    duration_sum = 0.0

    for rec in records:
        started = rec.started_at
        hourly[started.hour] += 1

        di = started.weekday()
        dow[di] += 1
        if rec.is_member:
            members += 1
            dow_member[di] += 1
        else:
            dow_casual[di] += 1

        months[month_key(rec)] += 1

        minutes = rec.duration_min
        duration_sum += minutes
        bi = duration_bin(minutes)
        if bi is not None:
            bins[bi] += 1

        rideables[rec.rideable_type] += 1
        stations[rec.start_station_name] += 1
        routes[f"{rec.start_station_name} → {rec.end_station_name}"] += 1

    top_stations = rank_counts(stations, TOP_N)
    top_routes = rank_counts(routes, TOP_N)
    peak = _first_max_index(hourly)
    busiest = _first_max_index(dow)
    casual = total - members

    latest = sorted(records, key=_start_key, reverse=True)[:LATEST_N]

    return AggregateSet(
        clean_count=total,
        members=members,
        casual=casual,
        member_ratio=(members / total * 100) if total else 0,
        avg_duration_min=(duration_sum / total) if total else 0,
        peak_hour=hour_label(peak),
        busiest_day=DOW_FULL[busiest],
        top_station=top_stations[0][0] if top_stations else NO_STATION,
        hourly=tuple({"name": hour_label(h), "value": hourly[h]} for h in range(24)),
        trips_by_dow=tuple({"name": DOW_SHORT[i], "value": dow[i]} for i in range(7)),
        dow_member_casual=tuple(
            {"name": DOW_SHORT[i], "member": dow_member[i], "casual": dow_casual[i]}
            for i in range(7)
        ),
        trips_by_month=tuple({"name": k, "value": months[k]} for k in sorted(months)),
        duration_buckets=tuple(
            {"name": label, "value": bins[i]} for i, (label, _, _) in enumerate(DURATION_BINS)
        ),
        rideable_split=tuple({"name": k, "value": v} for k, v in rank_counts(rideables)),
        top_stations=tuple(
            {"name": short_text(k, 16), "full_name": k, "value": v} for k, v in top_stations
        ),
        top_routes=tuple(
            {"name": short_text(k, 26), "full_name": k, "value": v} for k, v in top_routes
        ),
        rider_split=(
            {"name": "Member", "value": members},
            {"name": "Casual", "value": casual},
        ),
        latest_trips=tuple(
            {
                "started_at": r.started_at.isoformat(),
                "start_station_name": r.start_station_name,
                "end_station_name": r.end_station_name,
                "member_casual": r.member_casual,
                "rideable_type": r.rideable_type,
            }
            for r in latest
        ),
    )


def load(raw_rows: Iterable[Mapping[str, Any]]) -> AggregateSet:
    """
    Sanitize raw rows and aggregate them.

    Raises LoadError when there are no rows at all. Rows that fail
    sanitization are dropped silently; if every row is dropped the result
    is the all-zero AggregateSet.
    """
    rows = list(raw_rows) if raw_rows is not None else []
    if not rows:
        raise LoadError("Dataset contains no rows.")

    records = sanitize_rows(rows)
    logger.info("Loaded %d clean trips from %d rows", len(records), len(rows))
    return aggregate(records)
