from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env")

from .agent_core import handle_message, open_dashboard
from .commands import PinPayload
from .errors import LoadError
from .explain import INTRO, format_response, format_summary, format_widgets
from .llm import configure_model
from .router import RouterResponse

def _configure_logging() -> None:
    level = os.getenv("CITIINSIGHT_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def run_agent():
    _configure_logging()

    try:
        router = open_dashboard()
    except LoadError as e:
        print(f"\n🚫 Could not load the trips export: {e}\n")
        return

    model = configure_model()
    print("\n" + INTRO + "\n")
    if model is None:
        print("ℹ️  Agent OFF (no OPENAI_API_KEY). Shortcuts and commands still work.\n")
    else:
        print("✅ Agent routing is enabled (OpenAI).\n")

    print(format_summary(router.aggregates) + "\n")
    print(format_response(router.dispatch({"tool": "show_menu"})) + "\n")

    last_pinnable: Optional[PinPayload] = None

    while True:
        try:
            q = input("Ask a question: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n👋 Goodbye!\n")
            break

        if not q:
            continue

        low = q.lower()
        if low in ("exit", "quit", "bye", "q"):
            print("\n👋 Goodbye!\n")
            break

        if low == "help":
            print("\n" + INTRO + "\n")
            continue

        if low == "stats":
            print("\n" + format_summary(router.aggregates) + "\n")
            continue

        if low == "widgets":
            print("\n" + format_widgets(router.store.list()) + "\n")
            continue

        if low == "clear":
            router.store.clear()
            print("\nAll widgets removed.\n")
            continue

        if low.startswith("remove "):
            wid = q.split(None, 1)[1].strip()
            if router.store.remove(wid):
                print(f"\nRemoved {wid}.\n")
            else:
                print(f"\n⚠️  No pinned widget with id {wid}.\n")
            continue

        if low == "pin":
            if last_pinnable is None:
                print("\n⚠️  Nothing to pin yet. Preview a widget or run a query first.\n")
                continue
            print("\n" + format_response(router.dispatch(last_pinnable)) + "\n")
            last_pinnable = None
            continue

        resp: RouterResponse = handle_message(q, router, model)
        print("\n" + format_response(resp) + "\n")
        if resp.kind in ("preview", "table") and resp.widget_id is None:
            last_pinnable = resp.pin_command()
            print("(type 'pin' to add this to the dashboard)\n")


if __name__ == "__main__":
    run_agent()
