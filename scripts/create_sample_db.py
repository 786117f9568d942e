#!/usr/bin/env python
"""
Create a sample trips database and CSV export for local runs.

Writes data/trips.sqlite (table `trips`) and data/trips_rows.csv with the
same rows, plus a handful of deliberately broken rows in the CSV.

Run with: python -m scripts.create_sample_db
"""

import random
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

import pandas as pd

STATIONS = [
    "Grove St PATH", "Hoboken Terminal - River St & Hudson Pl", "City Hall",
    "Newport PATH", "Exchange Place", "Hamilton Park", "Liberty Light Rail",
    "Journal Square", "Paulus Hook", "Harborside", "Van Vorst Park",
    "Washington St", "Marin Light Rail", "Christ Hospital",
]
RIDEABLE = ["classic_bike", "electric_bike", "docked_bike"]

def generate_trips(n_days: int = 90, seed: int = 7) -> pd.DataFrame:
    rng = random.Random(seed)
    start_date = datetime(2024, 1, 1)
    rows = []
    for day in range(n_days):
        current = start_date + timedelta(days=day)
        for _ in range(rng.randint(20, 80)):
            started = current.replace(hour=rng.randint(0, 23), minute=rng.randint(0, 59), second=rng.randint(0, 59))
            ended = started + timedelta(minutes=rng.choice([3, 7, 12, 18, 25, 45, 90, 150]) + rng.random())
            start_station = rng.choice(STATIONS)
            rows.append({
                "ride_id": f"{rng.getrandbits(64):016X}",
                "rideable_type": rng.choice(RIDEABLE),
                "started_at": started.strftime("%Y-%m-%d %H:%M:%S"),
                "ended_at": ended.strftime("%Y-%m-%d %H:%M:%S"),
                "start_station_name": start_station,
                "end_station_name": rng.choice(STATIONS),
                "member_casual": rng.choice(["member", "member", "casual"]),
            })
    return pd.DataFrame(rows)

def broken_rows() -> pd.DataFrame:
    return pd.DataFrame([
        {"ride_id": "", "rideable_type": "classic_bike", "started_at": "2024-01-02 08:00:00",
         "ended_at": "2024-01-02 08:10:00", "start_station_name": "City Hall",
         "end_station_name": "Grove St PATH", "member_casual": "member"},
        {"ride_id": "BROKEN1", "rideable_type": "classic_bike", "started_at": "2024-01-02 09:00:00",
         "ended_at": "2024-01-02 08:50:00", "start_station_name": "City Hall",
         "end_station_name": "Grove St PATH", "member_casual": "casual"},
        {"ride_id": "BROKEN2", "rideable_type": "electric_bike", "started_at": "garbage",
         "ended_at": "2024-01-02 10:00:00", "start_station_name": "",
         "end_station_name": "", "member_casual": "member"},
        {"ride_id": "BROKEN3", "rideable_type": "docked_bike", "started_at": "2024-01-03 06:00:00",
         "ended_at": "2024-01-03 11:00:00", "start_station_name": "Harborside",
         "end_station_name": "Harborside", "member_casual": "casual"},
    ])

def create_sample_database():
    data_dir = Path(__file__).resolve().parents[1] / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = data_dir / "trips.sqlite"
    csv_path = data_dir / "trips_rows.csv"

    print(f"Creating sample database at: {db_path}")
    df = generate_trips()

    with sqlite3.connect(str(db_path)) as conn:
        df.to_sql("trips", conn, if_exists="replace", index=False)
        count = conn.execute("SELECT COUNT(*) FROM trips").fetchone()[0]
        min_date, max_date = conn.execute("SELECT MIN(started_at), MAX(started_at) FROM trips").fetchone()

    pd.concat([df, broken_rows()], ignore_index=True).to_csv(csv_path, index=False)

    print(f"✅ Created {count:,} sample trips")
    print(f"   Date range: {min_date} to {max_date}")
    print(f"   Database: {db_path}")
    print(f"   CSV export: {csv_path}")


if __name__ == "__main__":
    create_sample_database()
