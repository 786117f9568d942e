"""
Tests for SQL safety checks.
"""
import pytest

from citiinsight.sql.safety import safe_select_only, validate_identifier


class TestSafeSelectOnly:
    """Test the SELECT-only guard."""

    def test_allows_select(self):
        """Test plain SELECTs pass through unchanged."""
        sql = "SELECT * FROM trips LIMIT 10;"
        assert safe_select_only(sql) == sql

    def test_allows_with(self):
        """Test CTEs are allowed."""
        assert safe_select_only("WITH t AS (SELECT 1) SELECT * FROM t")

    def test_allows_keyword_substrings(self):
        """Test column names containing keywords are not flagged."""
        assert safe_select_only("SELECT created_at, updated_by FROM trips")

    @pytest.mark.parametrize("sql", [
        "DELETE FROM trips",
        "UPDATE trips SET ride_id = 'x'",
        "DROP TABLE trips",
        "",
        None,
    ])
    def test_rejects_non_select(self, sql):
        """Test mutations are rejected."""
        with pytest.raises(ValueError):
            safe_select_only(sql)

    @pytest.mark.parametrize("sql", [
        "SELECT * FROM trips; DROP TABLE trips",
        "SELECT * FROM trips WHERE ride_id IN (SELECT 1); delete from trips",
        "WITH x AS (DELETE FROM trips RETURNING *) SELECT * FROM x",
        "SELECT * FROM pragma_table_info('trips') WHERE 1; PRAGMA writable_schema",
    ])
    def test_rejects_hidden_mutations(self, sql):
        """Test stacked statements and embedded mutations are rejected."""
        with pytest.raises(ValueError):
            safe_select_only(sql)


class TestValidateIdentifier:
    """Test identifier validation."""

    @pytest.mark.parametrize("name", ["trips", "started_at", "_private", "Col2"])
    def test_valid(self, name):
        """Test plain identifiers pass."""
        assert validate_identifier(name) == name

    @pytest.mark.parametrize("name", ["", "2col", "a b", "a;b", "a-b", "trips.ride_id", None, 3])
    def test_invalid(self, name):
        """Test anything else is refused."""
        with pytest.raises(ValueError):
            validate_identifier(name)
