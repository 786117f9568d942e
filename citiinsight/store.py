"""
Widget instance store.

Holds the widgets pinned to the dashboard, newest first. Instances are
never edited; replace them instead.
"""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .catalog import WIDGET_KINDS

logger = logging.getLogger(__name__)

LOCAL = "local"
REMOTE = "remote"
CUSTOM = "custom"
PROVENANCES = (LOCAL, REMOTE, CUSTOM)


def _new_widget_id() -> str:
    return uuid.uuid4().hex

def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class WidgetInstance:
    id: str
    provenance: str
    kind: str
    title: str
    payload: Dict[str, Any]
    created_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "provenance": self.provenance,
            "kind": self.kind,
            "title": self.title,
            "payload": self.payload,
            "created_at": self.created_at,
        }


class WidgetStore:
    """Pinned widgets. All reads and writes go through one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._widgets: List[WidgetInstance] = []

    def create(self, kind: str, title: str, payload: Dict[str, Any], provenance: str = CUSTOM) -> str:
        if kind not in WIDGET_KINDS:
            raise ValueError(f"kind must be one of {WIDGET_KINDS}, got {kind!r}")
        if provenance not in PROVENANCES:
            raise ValueError(f"provenance must be one of {PROVENANCES}, got {provenance!r}")

        widget = WidgetInstance(
            id=_new_widget_id(),
            provenance=provenance,
            kind=kind,
            title=title or "Pinned Widget",
            payload=payload,
        )
        with self._lock:
            self._widgets.insert(0, widget)
        logger.debug("Pinned %s widget %s (%s)", provenance, widget.id, widget.title)
        return widget.id

    def list(self) -> Tuple[WidgetInstance, ...]:
        with self._lock:
            return tuple(self._widgets)

    def get(self, widget_id: str) -> Optional[WidgetInstance]:
        with self._lock:
            for w in self._widgets:
                if w.id == widget_id:
                    return w
        return None

    def remove(self, widget_id: str) -> bool:
        with self._lock:
            for i, w in enumerate(self._widgets):
                if w.id == widget_id:
                    del self._widgets[i]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._widgets = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._widgets)
