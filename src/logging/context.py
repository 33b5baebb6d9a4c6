# src/logging/context.py - v2
"""Contextual logging support: attach document_id and stage to log records."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

# Context variables for structured logging, set per document by the runner.
_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    document_id: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(document_id=_document_id.get(), stage=_stage.get())


def set_document_context(document_id: str) -> None:
    """Set document-level context (called once per document)."""
    _document_id.set(document_id)
    _stage.set(None)


def set_stage_context(stage: str | None) -> None:
    _stage.set(stage)


@contextmanager
def stage_context(stage: str) -> Iterator[None]:
    """Scope the stage context variable to a block."""
    token = _stage.set(stage)
    try:
        yield
    finally:
        _stage.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _document_id.set(None)
    _stage.set(None)
