"""
Command router.

Takes one command at a time and maps it to a catalog build, a pin into
the widget store, or a query against the injected row store. Every outcome,
including failures, comes back as a RouterResponse; nothing is raised to
the caller and failed commands never touch the store.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .aggregate import AggregateSet
from .catalog import TABLE, build_widget, catalog_menu, lookup
from .commands import (
    AddWidget, PinPayload, PreviewWidget, RemoteQuery, ShowMenu, parse_command,
)
from .errors import CommandError
from .store import LOCAL, REMOTE, WidgetStore

logger = logging.getLogger(__name__)

MENU_TITLE = "Widget Catalog (Add to Dashboard)"
NOT_LOADED = "Dashboard data is not loaded yet."
NOT_CONFIGURED = "Remote queries are not configured (no row store connected)."


@dataclass(frozen=True)
class RouterResponse:
    ok: bool
    kind: str  # menu | preview | pinned | table | text | error
    message: str
    title: Optional[str] = None
    widget_kind: Optional[str] = None
    provenance: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    items: Optional[List[Dict[str, str]]] = None
    widget_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def pin_command(self) -> Optional[PinPayload]:
        """A PinPayload for a previewed chart/table, so the caller can persist it later."""
        if not self.ok or self.payload is None or self.widget_kind is None:
            return None
        return PinPayload(
            kind=self.widget_kind,
            title=self.title or "Pinned Widget",
            payload=self.payload,
            provenance=self.provenance or "custom",
        )


def _error(message: str) -> RouterResponse:
    return RouterResponse(ok=False, kind="error", message=message)


class CommandRouter:
    """
    Synchronous dispatcher over the catalog, the widget store and a row store.

    ``executor`` is anything with ``run_query(RemoteQuery) -> list[dict]``;
    see ``citiinsight.tools.executor.DirectQueryExecutor``.
    """

    def __init__(
        self,
        aggregates: Optional[AggregateSet] = None,
        store: Optional[WidgetStore] = None,
        executor: Any = None,
    ):
        self.aggregates = aggregates
        self.store = store if store is not None else WidgetStore()
        self.executor = executor

    def set_aggregates(self, aggregates: AggregateSet) -> None:
        self.aggregates = aggregates

    def dispatch(self, command: Any) -> RouterResponse:
        try:
            cmd = parse_command(command)
        except CommandError as e:
            logger.info("Rejected command: %s", e.message)
            if e.field == "tool":
                return _error("Unrecognized command.")
            return _error(f"Invalid command: {e.message}")

        if isinstance(cmd, ShowMenu):
            return self._show_menu()
        if isinstance(cmd, PreviewWidget):
            return self._preview(cmd.widget_id)
        if isinstance(cmd, AddWidget):
            return self._add(cmd.widget_id)
        if isinstance(cmd, PinPayload):
            return self._pin(cmd)
        if isinstance(cmd, RemoteQuery):
            return self._remote_query(cmd)
        return _error("Unrecognized command.")

    # ----------------------------
    # Handlers
    # ----------------------------
    def _show_menu(self) -> RouterResponse:
        return RouterResponse(ok=True, kind="menu", message=MENU_TITLE, title=MENU_TITLE, items=catalog_menu())

    def _build(self, widget_id: str):
        definition = lookup(widget_id)
        if definition is None:
            return None, _error(f"Unknown widget: {widget_id}")
        if self.aggregates is None:
            return None, _error(NOT_LOADED)
        return (definition, build_widget(widget_id, self.aggregates)), None

    def _preview(self, widget_id: str) -> RouterResponse:
        built, err = self._build(widget_id)
        if err is not None:
            return err
        definition, payload = built
        return RouterResponse(
            ok=True,
            kind="preview",
            message=definition.title,
            title=definition.title,
            widget_kind=definition.kind,
            provenance=LOCAL,
            payload=payload,
        )

    def _add(self, widget_id: str) -> RouterResponse:
        built, err = self._build(widget_id)
        if err is not None:
            return err
        definition, payload = built
        instance_id = self.store.create(definition.kind, definition.title, payload, LOCAL)
        return RouterResponse(
            ok=True,
            kind="pinned",
            message=f"Added widget to dashboard: {widget_id}",
            title=definition.title,
            widget_kind=definition.kind,
            provenance=LOCAL,
            payload=payload,
            widget_id=instance_id,
        )

    def _pin(self, cmd: PinPayload) -> RouterResponse:
        try:
            instance_id = self.store.create(cmd.kind, cmd.title, cmd.payload, cmd.provenance)
        except ValueError as e:
            return _error(f"Invalid command: {e}")
        return RouterResponse(
            ok=True,
            kind="pinned",
            message=f"Pinned to dashboard: {cmd.title}",
            title=cmd.title,
            widget_kind=cmd.kind,
            provenance=cmd.provenance,
            payload=cmd.payload,
            widget_id=instance_id,
        )

    def _remote_query(self, query: RemoteQuery) -> RouterResponse:
        if self.executor is None:
            return _error(NOT_CONFIGURED)
        try:
            rows = list(self.executor.run_query(query) or [])
        except Exception as e:
            # executor is injected; any failure is reported verbatim, never retried
            logger.warning("Remote query on %s failed: %s", query.table, e)
            return _error(f"Query failed: {e}")

        title = f"Query results ({len(rows)} rows)"
        payload = {
            "columns": [{"key": c, "label": c} for c in query.columns] if query.columns else None,
            "rows": rows,
        }
        instance_id = self.store.create(TABLE, title, payload, REMOTE) if query.pin else None
        return RouterResponse(
            ok=True,
            kind="table",
            message=title,
            title=title,
            widget_kind=TABLE,
            provenance=REMOTE,
            payload=payload,
            widget_id=instance_id,
        )
