# src/logging/context.py - v2
"""Contextual logging support: attach file_path, language, operation and
request_id to log records.

The orchestrator sets these per request; asyncio tasks copy the current
context on creation, so concurrent requests for different files keep
separate values.
"""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)
_language: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "language", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    file_path: str | None = None
    language: str | None = None
    operation: str | None = None
    request_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        file_path=_file_path.get(),
        language=_language.get(),
        operation=_operation.get(),
        request_id=_request_id.get(),
    )


@contextmanager
def request_context(
    operation: str, file_path: str, language: str | None = None,
) -> Iterator[str]:
    """Bind request-level context for the duration of a block.

    Yields:
        The generated request id.
    """
    request_id = uuid.uuid4().hex[:12]
    tokens = [
        (_operation, _operation.set(operation)),
        (_file_path, _file_path.set(file_path)),
        (_language, _language.set(language)),
        (_request_id, _request_id.set(request_id)),
    ]
    try:
        yield request_id
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _file_path.set(None)
    _language.set(None)
    _operation.set(None)
    _request_id.set(None)
