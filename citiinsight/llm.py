from __future__ import annotations

import os
import json
import re
from typing import Any, Dict, Optional

from .catalog import catalog_menu
from .commands import SHOW_MENU

AGENT_SYSTEM_PROMPT = """
You are an agent for a bike-share trips dashboard. You can:
(A) Query the trips table for rows (tables)
(B) Preview or add NEW widgets to the dashboard (from local CSV aggregates)

Return ONLY JSON or plain text. No markdown.

Local Widget Catalog (these can be added to dashboard):
{catalog}

Actions you may return:

1) Add a widget to dashboard:
{{"tool": "add_widget", "widgetId": "w_trips_by_month"}}

2) Preview a widget in chat:
{{"tool": "preview_widget", "widgetId": "w_trips_by_month"}}

3) Show widget menu:
{{"tool": "show_menu"}}

4) Row query (tables). Use table="trips" by default.
You can provide:
- columns: ["ride_id","started_at","start_station_name",...]
- filters: one or array of {{"column", "operator", "value"}}; operators: eq, neq, gt, gte, lt, lte, like, ilike, is, in
- orderBy: {{"column", "ascending"}}
- limit: number (1-200)

Example:
{{"tool": "remote_query", "table": "trips",
 "columns": ["started_at","start_station_name","member_casual"],
 "filters": [{{"column":"start_station_name","operator":"ilike","value":"%Grove%"}}],
 "orderBy": {{"column":"started_at","ascending": false}},
 "limit": 10}}

If user asks for "latest trips", use orderBy started_at desc and a limit.
""".strip()

MENU_SHORTCUTS = ("show widget", "widget menu", "options")

def _openai_client() -> Optional[Any]:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None
    from openai import OpenAI
    return OpenAI(api_key=api_key)

def _openai_model_name() -> str:
    return os.getenv("CITIINSIGHT_MODEL", "gpt-4o-mini")

class _OpenAIModelShim:
    def __init__(self, client: Any):
        self._client = client

    class _Resp:
        def __init__(self, text: str):
            self.text = text

    def generate_content(self, prompt: str) -> Any:
        try:
            resp = self._client.responses.create(
                model=_openai_model_name(),
                temperature=0,
                input=prompt,
            )
            return self._Resp(resp.output_text or "")
        except Exception:
            # older deployments only expose chat completions; let that error propagate
            resp = self._client.chat.completions.create(
                model=_openai_model_name(),
                temperature=0,
                messages=[{"role": "user", "content": prompt}],
            )
            return self._Resp(resp.choices[0].message.content or "")

def configure_model() -> Optional[Any]:
    client = _openai_client()
    if client is None:
        return None
    return _OpenAIModelShim(client)

def shortcut_command(user_input: str) -> Optional[Dict[str, Any]]:
    """Fixed user shortcuts that never need a model."""
    t = (user_input or "").strip().lower()
    if t == "menu" or any(k in t for k in MENU_SHORTCUTS):
        return {"tool": SHOW_MENU}
    return None

def build_prompt(user_input: str) -> str:
    catalog = json.dumps(catalog_menu())
    return AGENT_SYSTEM_PROMPT.format(catalog=catalog) + f'\n\nUser request:\n"{user_input}"'

def strip_code_fences(text: str) -> str:
    return re.sub(r"^```(?:json)?\s*|\s*```$", "", (text or "").strip(), flags=re.I).strip()

def parse_agent_reply(text: str) -> Optional[Dict[str, Any]]:
    """A JSON object reply becomes a command dict; anything else stays plain text (None)."""
    cleaned = strip_code_fences(text)
    if not cleaned.startswith("{"):
        return None
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None

def ask_agent(model: Any, user_input: str) -> str:
    """Raw model reply. Transport errors propagate to the caller."""
    response = model.generate_content(build_prompt(user_input))
    return (response.text or "").strip()
