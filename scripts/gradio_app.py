"""
Gradio Frontend for CitiInsight
Bike-share trips dashboard with an agent that can add widgets and run row queries.

Run with: python -m scripts.gradio_app
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import gradio as gr
from dotenv import load_dotenv

# Add project root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
load_dotenv(ROOT / ".env")

from citiinsight.agent_core import handle_message, open_dashboard
from citiinsight.commands import PinPayload
from citiinsight.errors import LoadError
from citiinsight.explain import format_payload, format_response, format_summary
from citiinsight.llm import configure_model
from citiinsight.router import CommandRouter

logger = logging.getLogger(__name__)


# ============================================================
# WELCOME MESSAGE
# ============================================================

WELCOME_MESSAGE = """## 👋 Welcome to CitiInsight!

I can: (1) query the trips table for rows (tables), and (2) add NEW dashboard widgets from the local CSV.

Type **show widget menu** to see all charts/tables you can add.
"""


# ============================================================
# SESSION STATE
# ============================================================

class DashboardSession:
    """Router, model and the last pinnable chat payload."""

    def __init__(self):
        self.model = configure_model()
        self.error: Optional[str] = None
        self.router: Optional[CommandRouter] = None
        self.last_pinnable: Optional[PinPayload] = None
        try:
            self.router = open_dashboard()
        except LoadError as e:
            self.error = str(e)

    def get_model_status(self) -> str:
        return "Agent Active" if self.model else "Shortcuts Only"


session = DashboardSession()


# ============================================================
# RENDERING
# ============================================================

def render_dashboard() -> str:
    if session.router is None:
        return f"### 🚫 Could not load data\n\n{session.error}"
    parts = ["### 📊 Summary", "```", format_summary(session.router.aggregates), "```", "### 📌 Pinned Widgets"]
    widgets = session.router.store.list()
    if not widgets:
        parts.append("_No widgets yet. Ask the agent to add one._")
    for w in widgets:
        parts.append(f"#### {w.title}  \n`{w.id}` · {w.provenance} · {w.kind}")
        parts.append(format_payload(w.payload, w.kind))
    return "\n\n".join(parts)


def process_message(message: str) -> str:
    if session.router is None:
        return f"🚫 {session.error}"
    resp = handle_message(message, session.router, session.model)
    text = format_response(resp)
    if resp.kind in ("preview", "table") and resp.widget_id is None:
        session.last_pinnable = resp.pin_command()
        text += "\n\n_Click 📌 Pin to add this to the dashboard._"
    return text


def pin_last() -> str:
    if session.router is None or session.last_pinnable is None:
        return "⚠️ Nothing to pin yet. Preview a widget or run a query first."
    resp = session.router.dispatch(session.last_pinnable)
    session.last_pinnable = None
    return format_response(resp)


def remove_widget(widget_id: str) -> str:
    if session.router is None:
        return render_dashboard()
    session.router.store.remove((widget_id or "").strip())
    return render_dashboard()


def clear_widgets() -> str:
    if session.router is not None:
        session.router.store.clear()
    return render_dashboard()


# ============================================================
# GRADIO UI
# ============================================================

def create_interface():
    """Create and configure the Gradio interface"""

    with gr.Blocks(title="CitiInsight") as demo:
        gr.Markdown(f"# 🚲 CitiInsight  \n_{session.get_model_status()}_")

        with gr.Tab("Dashboard"):
            board = gr.Markdown(render_dashboard())
            with gr.Row():
                widget_id = gr.Textbox(placeholder="widget id", show_label=False, scale=4)
                remove_btn = gr.Button("🗑️ Remove", scale=1)
                clear_btn = gr.Button("Clear all", variant="stop", scale=1)
                refresh_btn = gr.Button("🔄 Refresh", scale=1)

        with gr.Tab("Analyst"):
            chatbot = gr.Chatbot(value=[{"role": "assistant", "content": WELCOME_MESSAGE}], height=480)
            with gr.Row():
                msg = gr.Textbox(placeholder="e.g. 'add the trips by month chart'", show_label=False, scale=5)
                submit_btn = gr.Button("Send", variant="primary", scale=1)
            with gr.Row():
                menu_btn = gr.Button("📋 Widget menu")
                pin_btn = gr.Button("📌 Pin")

        def respond(message: str, chat_history: List):
            if not message.strip():
                return "", chat_history, render_dashboard()
            chat_history = chat_history + [{"role": "user", "content": message}]
            chat_history = chat_history + [{"role": "assistant", "content": process_message(message)}]
            return "", chat_history, render_dashboard()

        def pin(chat_history: List):
            chat_history = chat_history + [{"role": "assistant", "content": pin_last()}]
            return chat_history, render_dashboard()

        msg.submit(respond, [msg, chatbot], [msg, chatbot, board])
        submit_btn.click(respond, [msg, chatbot], [msg, chatbot, board])
        menu_btn.click(lambda h: respond("show widget menu", h), [chatbot], [msg, chatbot, board])
        pin_btn.click(pin, [chatbot], [chatbot, board])

        remove_btn.click(remove_widget, [widget_id], [board])
        clear_btn.click(clear_widgets, outputs=[board])
        refresh_btn.click(render_dashboard, outputs=[board])

    return demo


# ============================================================
# MAIN
# ============================================================

if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("CITIINSIGHT_LOG_LEVEL", "WARNING").upper())
    print("Starting CitiInsight...")
    print(f"Gradio version: {gr.__version__}")

    demo = create_interface()
    demo.launch(server_name="0.0.0.0", server_port=7860, share=False)
