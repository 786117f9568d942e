"""
Tests for the MCP tool boundary.
Covers the query executor and the dashboard adapter.
"""
import pytest

from citiinsight.aggregate import load
from citiinsight.commands import OrderBy, QueryFilter, RemoteQuery
from citiinsight.errors import RemoteQueryError
from citiinsight.router import CommandRouter
from citiinsight.tools import DirectQueryExecutor, MCPDashboardAdapter


@pytest.mark.mcp
class TestDirectQueryExecutor:
    """Test the DirectQueryExecutor class."""

    @pytest.fixture
    def executor(self, trips_db):
        """Create executor instance (database from CITIINSIGHT_DB_PATH)."""
        return DirectQueryExecutor()

    def test_execute_sql_returns_dict(self, executor):
        """Test execute_sql returns the MCP-style result."""
        result = executor.execute_sql("SELECT 1 AS test")
        assert result["success"] is True
        assert result["rows"] == [{"test": 1}]
        assert result["row_count"] == 1
        assert result["columns"] == ["test"]

    def test_execute_sql_rejects_mutation(self, executor):
        """Test unsafe SQL never reaches the database."""
        with pytest.raises(ValueError):
            executor.execute_sql("DELETE FROM trips")

    def test_run_query_eq(self, executor):
        """Test an equality filter."""
        rows = executor.run_query(RemoteQuery(
            table="trips", filters=(QueryFilter("member_casual", "eq", "member"),),
        ))
        assert sorted(r["ride_id"] for r in rows) == ["T1", "T3", "T4"]

    def test_run_query_ilike(self, executor):
        """Test case-insensitive pattern matching."""
        rows = executor.run_query(RemoteQuery(
            table="trips", columns=("ride_id",),
            filters=(QueryFilter("start_station_name", "ilike", "%GROVE%"),),
        ))
        assert sorted(r["ride_id"] for r in rows) == ["T1", "T4"]
        assert set(rows[0]) == {"ride_id"}

    def test_run_query_order_and_limit(self, executor):
        """Test latest-first ordering with a limit."""
        rows = executor.run_query(RemoteQuery(
            table="trips", order_by=OrderBy("started_at", ascending=False), limit=2,
        ))
        assert [r["ride_id"] for r in rows] == ["T5", "T4"]

    def test_run_query_in_and_is(self, executor):
        """Test 'in' and 'is null' filters."""
        rows = executor.run_query(RemoteQuery(table="trips", filters=(QueryFilter("ride_id", "in", ["T1", "T2"]),)))
        assert len(rows) == 2
        rows = executor.run_query(RemoteQuery(table="trips", filters=(QueryFilter("end_station_name", "is", "null"),)))
        assert [r["ride_id"] for r in rows] == ["T5"]

    def test_rows_are_plain_python(self, executor):
        """Test NULLs come back as None, not NaN."""
        rows = executor.run_query(RemoteQuery(table="trips", filters=(QueryFilter("ride_id", "eq", "T5"),)))
        assert rows[0]["end_station_name"] is None
        assert rows[0]["is_ebike"] is None

    def test_execute_query_includes_sql(self, executor):
        """Test the generated SQL is reported back."""
        result = executor.execute_query(RemoteQuery(table="trips", limit=1))
        assert result["sql"].startswith("SELECT *")
        assert result["row_count"] == 1

    def test_missing_table(self, executor):
        """Test database errors become RemoteQueryError."""
        with pytest.raises(RemoteQueryError):
            executor.run_query(RemoteQuery(table="stations"))

    def test_bad_identifier(self, executor):
        """Test identifier failures become RemoteQueryError."""
        with pytest.raises(RemoteQueryError):
            executor.run_query(RemoteQuery(table="trips", columns=("ride_id; --",)))

    def test_missing_database(self, tmp_path):
        """Test a missing database file becomes RemoteQueryError."""
        executor = DirectQueryExecutor(tmp_path / "missing.sqlite")
        with pytest.raises(RemoteQueryError, match="not found"):
            executor.run_query(RemoteQuery(table="trips"))


@pytest.mark.mcp
@pytest.mark.integration
class TestRouterWithDatabase:
    """Test remote_query dispatch against a real SQLite file."""

    def test_dispatch_remote_query(self, trips_db, five_rows):
        """Test the router wraps database rows as a table."""
        router = CommandRouter(aggregates=load(five_rows), executor=DirectQueryExecutor())
        resp = router.dispatch({
            "tool": "remote_query",
            "table": "trips",
            "columns": ["started_at", "start_station_name", "member_casual"],
            "filters": [{"column": "start_station_name", "operator": "ilike", "value": "%Grove%"}],
            "orderBy": {"column": "started_at", "ascending": False},
            "limit": 10,
        })
        assert resp.ok is True
        assert resp.title == "Query results (2 rows)"
        assert [r["start_station_name"] for r in resp.payload["rows"]] == ["grove street", "Grove St PATH"]

    def test_dispatch_missing_table(self, trips_db, five_rows):
        """Test database errors are reported, not raised."""
        router = CommandRouter(aggregates=load(five_rows), executor=DirectQueryExecutor())
        resp = router.dispatch({"tool": "remote_query", "table": "stations", "pin": True})
        assert resp.ok is False
        assert resp.message.startswith("Query failed")
        assert router.store.list() == ()


@pytest.mark.mcp
class TestMCPDashboardAdapter:
    """Test the MCPDashboardAdapter class."""

    @pytest.fixture
    def adapter(self, five_rows, fake_executor):
        router = CommandRouter(aggregates=load(five_rows), executor=fake_executor)
        return MCPDashboardAdapter(router)

    def test_dispatch(self, adapter):
        """Test structured commands return dicts."""
        out = adapter.dispatch({"tool": "add_widget", "widgetId": "w_trips_by_dow"})
        assert out["ok"] is True
        assert len(adapter.list_widgets()) == 1

    def test_analyze_shortcut(self, adapter):
        """Test free text goes through the shortcut matcher."""
        out = adapter.analyze("show widget menu")
        assert out["kind"] == "menu"

    def test_analyze_without_model(self, adapter):
        """Test free text needing the agent reports it is disabled."""
        out = adapter.analyze("add the monthly chart")
        assert out["ok"] is False
        assert "AI is disabled" in out["message"]

    def test_remove_and_clear(self, adapter):
        """Test unpinning through the adapter."""
        wid = adapter.dispatch({"tool": "add_widget", "widgetId": "w_trips_by_dow"})["widget_id"]
        assert adapter.remove_widget(wid)["success"] is True
        assert adapter.remove_widget(wid)["success"] is False
        adapter.dispatch({"tool": "add_widget", "widgetId": "w_trips_by_dow"})
        adapter.clear_widgets()
        assert adapter.list_widgets() == []
