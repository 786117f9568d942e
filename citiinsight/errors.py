"""
Error types for CitiInsight.

Row-level problems never raise (bad rows are dropped by the sanitizer).
Everything here is raised at a boundary and turned into a user-visible
message by the command router or the entry points.
"""
from __future__ import annotations

from typing import Any, Optional


class CitiInsightError(Exception):
    """Base error for dashboard failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }


class LoadError(CitiInsightError):
    """Dataset missing, unparseable or empty. Fatal to dashboard population."""
    pass


class CommandError(CitiInsightError):
    """
    A command failed structural validation.

    Raised for unknown tools, missing required fields and malformed
    remote-query descriptors. Nothing has been executed when this is raised.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        self.field = field
        self.value = value
        super().__init__(message)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["field"] = self.field
        d["value"] = str(self.value)[:100] if self.value is not None else None
        return d


class RemoteQueryError(CitiInsightError):
    """The row store failed (transport, misconfiguration, bad SQL)."""
    pass
