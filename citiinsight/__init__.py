# CitiInsight - Bike-Share Trips Dashboard
"""
CitiInsight - trip aggregation and widget dashboard with an agent-driven command router.
"""

__version__ = "0.1.0"

from .aggregate import AggregateSet, aggregate, load
from .agent_core import handle_message, open_dashboard
from .catalog import WIDGET_CATALOG, build_widget, lookup
from .records import TripRecord, sanitize_record
from .router import CommandRouter, RouterResponse
from .store import WidgetInstance, WidgetStore
from .tools.executor import DirectQueryExecutor
from .tools.agent_adapter import MCPDashboardAdapter

__all__ = [
    "__version__",
    "AggregateSet",
    "aggregate",
    "load",
    "handle_message",
    "open_dashboard",
    "WIDGET_CATALOG",
    "build_widget",
    "lookup",
    "TripRecord",
    "sanitize_record",
    "CommandRouter",
    "RouterResponse",
    "WidgetInstance",
    "WidgetStore",
    "DirectQueryExecutor",
    "MCPDashboardAdapter",
]
