"""
Tools module for CitiInsight (MCP boundary).
"""

from .executor import DirectQueryExecutor
from .agent_adapter import MCPDashboardAdapter

__all__ = [
    "DirectQueryExecutor",
    "MCPDashboardAdapter",
]
