"""
MCP Server for CitiInsight.

Exposes the dashboard's command router as tools over a simple JSON-lines
protocol on stdin/stdout (one request per line):

    {"method": "tools/list"}
    {"method": "tools/call", "params": {"name": "dispatch_command", "arguments": {...}}}

Run with: python -m scripts.mcp_server --serve
"""

import json
import logging
import os
import sys
from typing import Any, Dict, List

from dotenv import load_dotenv

from citiinsight.agent_core import open_dashboard
from citiinsight.errors import LoadError
from citiinsight.llm import configure_model
from citiinsight.router import CommandRouter
from citiinsight.tools.agent_adapter import MCPDashboardAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# MCP Tool Definitions
# =============================================================================
MCP_TOOLS = [
    {
        "name": "ask_dashboard",
        "description": (
            "Send a free-text message to the bike-share dashboard agent. "
            "Example: 'show widget menu' or 'latest 10 trips from Grove St'"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"text": {"type": "string", "description": "User message"}},
            "required": ["text"],
        },
    },
    {
        "name": "dispatch_command",
        "description": (
            "Dispatch a structured command. tool is one of show_menu, preview_widget, "
            "add_widget, pin_payload, remote_query."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {"command": {"type": "object", "description": "Command object with a 'tool' field"}},
            "required": ["command"],
        },
    },
    {
        "name": "list_widgets",
        "description": "List widgets pinned to the dashboard, newest first",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "remove_widget",
        "description": "Unpin a widget by id",
        "inputSchema": {
            "type": "object",
            "properties": {"widget_id": {"type": "string"}},
            "required": ["widget_id"],
        },
    },
    {
        "name": "clear_widgets",
        "description": "Unpin every widget",
        "inputSchema": {"type": "object", "properties": {}},
    },
]


# =============================================================================
# MCP Handler Class
# =============================================================================
class CitiInsightMCPHandler:
    """Routes MCP tool calls to the dashboard adapter."""

    def __init__(self, router: CommandRouter, model: Any = None):
        self.adapter = MCPDashboardAdapter(router, model)

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return list of available MCP tools."""
        return MCP_TOOLS

    def handle_tool_call(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle an MCP tool call.

        Returns:
            Tool result as dict with 'success', 'result', and optionally 'error'
        """
        try:
            if tool_name == "ask_dashboard":
                return self._wrap(self.adapter.analyze(arguments.get("text", "")))
            if tool_name == "dispatch_command":
                return self._wrap(self.adapter.dispatch(arguments.get("command") or {}))
            if tool_name == "list_widgets":
                return {"success": True, "result": self.adapter.list_widgets()}
            if tool_name == "remove_widget":
                out = self.adapter.remove_widget(arguments.get("widget_id", ""))
                return {"success": out["success"], "result": out}
            if tool_name == "clear_widgets":
                return {"success": True, "result": self.adapter.clear_widgets()}
            return {"success": False, "error": f"Unknown tool: {tool_name}"}
        except Exception as e:
            logger.exception("Tool call %s failed", tool_name)
            return {"success": False, "error": str(e)}

    @staticmethod
    def _wrap(response: Dict[str, Any]) -> Dict[str, Any]:
        if response.get("ok"):
            return {"success": True, "result": response}
        return {"success": False, "error": response.get("message"), "result": response}


# =============================================================================
# MCP Server (stdio transport)
# =============================================================================
def serve(handler: CitiInsightMCPHandler) -> None:
    print("CitiInsight MCP Server started", file=sys.stderr)
    print(f"Available tools: {[t['name'] for t in handler.list_tools()]}", file=sys.stderr)

    for line in sys.stdin:
        if not line.strip():
            continue
        try:
            request = json.loads(line.strip())
            if request.get("method") == "tools/list":
                response = {"tools": handler.list_tools()}
            elif request.get("method") == "tools/call":
                params = request.get("params", {})
                response = handler.handle_tool_call(params.get("name", ""), params.get("arguments", {}))
            else:
                response = {"error": f"Unknown method: {request.get('method')}"}
        except json.JSONDecodeError:
            response = {"error": "Invalid JSON"}
        print(json.dumps(response, default=str))
        sys.stdout.flush()


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=os.getenv("CITIINSIGHT_LOG_LEVEL", "WARNING").upper(), stream=sys.stderr)
    try:
        router = open_dashboard()
    except LoadError as e:
        print(f"Could not load the trips export: {e}", file=sys.stderr)
        sys.exit(1)

    handler = CitiInsightMCPHandler(router, configure_model())
    if "--serve" in sys.argv:
        serve(handler)
        return

    print("Available tools:")
    for tool in handler.list_tools():
        print(f"  - {tool['name']}: {tool['description'][:60]}...")
    print("\nTo run as MCP server: python -m scripts.mcp_server --serve")


if __name__ == "__main__":
    main()
