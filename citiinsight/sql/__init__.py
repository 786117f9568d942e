"""SQL backend for remote trip queries."""
from .executor import execute_sql_query
from .builder import build_select
from .safety import safe_select_only, validate_identifier

__all__ = ["execute_sql_query", "build_select", "safe_select_only", "validate_identifier"]
