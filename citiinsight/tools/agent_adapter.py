"""
Agent adapter for MCP.

Bridges MCP tool calls to the command router and the widget store.
This is the entry point for external MCP clients.
"""
from __future__ import annotations

from typing import Any, Dict, List

from citiinsight.router import CommandRouter


class MCPDashboardAdapter:
    """
    Adapter that lets an MCP client drive the dashboard.

    Structured commands go straight to the router; free text goes through
    agent_core.handle_message (shortcuts, then the optional LLM).
    """

    def __init__(self, router: CommandRouter, model: Any = None):
        self.router = router
        self.model = model

    def analyze(self, text: str) -> dict:
        """
        Handle a free-text message.
        Imports lazily to avoid circular imports.
        """
        from citiinsight.agent_core import handle_message
        return handle_message(text, self.router, self.model).to_dict()

    def dispatch(self, command: Dict[str, Any]) -> dict:
        return self.router.dispatch(command).to_dict()

    def list_widgets(self) -> List[dict]:
        return [w.to_dict() for w in self.router.store.list()]

    def remove_widget(self, widget_id: str) -> dict:
        removed = self.router.store.remove(widget_id)
        return {"success": removed, "widget_id": widget_id}

    def clear_widgets(self) -> dict:
        self.router.store.clear()
        return {"success": True}
