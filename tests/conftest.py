"""
Pytest configuration and shared fixtures.
"""
import sqlite3
from datetime import datetime, timedelta

import pytest


def make_row(ride_id="R1", start="2024-03-04 08:15:00", minutes=12.0, member="member",
             rideable="classic_bike", start_station="Grove St PATH", end_station="City Hall"):
    """Build one raw export row starting at ``start`` and lasting ``minutes``."""
    started = datetime.strptime(start, "%Y-%m-%d %H:%M:%S")
    ended = started + timedelta(minutes=minutes)
    return {
        "ride_id": ride_id,
        "rideable_type": rideable,
        "started_at": started.strftime("%Y-%m-%d %H:%M:%S"),
        "ended_at": ended.strftime("%Y-%m-%d %H:%M:%S.%f"),
        "start_station_name": start_station,
        "end_station_name": end_station,
        "member_casual": member,
    }


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def five_rows():
    """3 valid trips, one ending before it starts, one lasting 300 minutes."""
    return [
        make_row("A", "2024-03-04 08:00:00", 10),
        make_row("B", "2024-03-05 09:30:00", 25, member="casual"),
        make_row("C", "2024-04-06 17:45:00", 70, member="Member"),
        make_row("D", "2024-03-04 08:00:00", -5),
        make_row("E", "2024-03-04 08:00:00", 300),
    ]


@pytest.fixture
def trips_db(tmp_path, monkeypatch):
    """
    Create a temporary trips database with sample data.
    Sets CITIINSIGHT_DB_PATH environment variable.
    """
    db_path = tmp_path / "trips.sqlite"
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE trips (
            ride_id TEXT PRIMARY KEY,
            started_at TEXT NOT NULL,
            ended_at TEXT NOT NULL,
            start_station_name TEXT,
            end_station_name TEXT,
            member_casual TEXT,
            rideable_type TEXT,
            is_ebike INTEGER
        )
    """)
    sample_data = [
        ("T1", "2024-01-15 10:00:00", "2024-01-15 10:30:00", "Grove St PATH", "City Hall", "member", "classic_bike", 0),
        ("T2", "2024-01-15 11:00:00", "2024-01-15 11:45:00", "Newport PATH", "Grove St PATH", "casual", "electric_bike", 1),
        ("T3", "2024-01-16 09:00:00", "2024-01-16 09:20:00", "City Hall", "Harborside", "member", "classic_bike", 0),
        ("T4", "2024-01-16 14:00:00", "2024-01-16 14:25:00", "grove street", "Newport PATH", "member", "electric_bike", 1),
        ("T5", "2024-02-01 08:00:00", "2024-02-01 08:40:00", "Harborside", None, "casual", "docked_bike", None),
    ]
    conn.executemany("INSERT INTO trips VALUES (?, ?, ?, ?, ?, ?, ?, ?)", sample_data)
    conn.commit()
    conn.close()

    monkeypatch.setenv("CITIINSIGHT_DB_PATH", str(db_path))
    return db_path


@pytest.fixture
def sample_csv(tmp_path, five_rows):
    """Write the five sample rows as a CSV export."""
    import pandas as pd

    path = tmp_path / "trips_rows.csv"
    pd.DataFrame(five_rows).to_csv(path, index=False)
    return path


class FakeExecutor:
    """Row store stand-in: records queries and returns canned rows or raises."""

    def __init__(self, rows=None, error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.queries = []

    def run_query(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.rows)


@pytest.fixture
def fake_executor():
    return FakeExecutor(rows=[{"ride_id": "X1", "started_at": "2024-01-01 08:00:00"}])


# Markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "mcp: marks tests related to MCP functionality")


@pytest.fixture
def executor_factory():
    return FakeExecutor
