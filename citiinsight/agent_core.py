"""
Non-interactive core logic for CitiInsight.

This module:
- Loads the trips export and wires up the command router
- Turns one free-text message into one router response
- Contains NO input() or print()
- Routes ALL row queries through the tool executor boundary
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from .aggregate import load
from .llm import ask_agent, parse_agent_reply, shortcut_command
from .loader import read_trip_rows
from .router import CommandRouter, RouterResponse
from .store import WidgetStore
from .tools.executor import DirectQueryExecutor

logger = logging.getLogger(__name__)

AI_DISABLED = "AI is disabled (OPENAI_API_KEY missing). Try “show widget menu”, or set the key to enable the agent."


def open_dashboard(
    csv_path: Path | None = None,
    db_path: Path | None = None,
    store: Optional[WidgetStore] = None,
) -> CommandRouter:
    """
    Load the trips export once and return a router bound to its aggregates.

    Raises LoadError when the export is missing, unparseable or empty.
    """
    aggregates = load(read_trip_rows(csv_path))
    return CommandRouter(
        aggregates=aggregates,
        store=store,
        executor=DirectQueryExecutor(db_path),
    )


def handle_message(text: str, router: CommandRouter, model: Any = None) -> RouterResponse:
    """Shortcut match first, then the optional LLM agent, then dispatch."""
    q = (text or "").strip()
    if not q:
        return RouterResponse(ok=False, kind="error", message="Empty message.")

    command = shortcut_command(q)
    if command is not None:
        return router.dispatch(command)

    if model is None:
        return RouterResponse(ok=False, kind="error", message=AI_DISABLED)

    try:
        raw = ask_agent(model, q)
    except Exception as e:
        logger.warning("Agent call failed: %s", e)
        return RouterResponse(ok=False, kind="error", message=f"Agent error: {e}")

    data = parse_agent_reply(raw)
    if data is None:
        return RouterResponse(ok=True, kind="text", message=raw)
    return router.dispatch(data)
