# src/core/errors.py - v1
"""Typed failures raised by content sources, LLM collaborators and the orchestrator.

Each error carries a ``kind`` enum so callers can branch on the failure
class without parsing messages. None of them is fatal to the process:
every failure is scoped to a single path/language request.
"""

from __future__ import annotations

from enum import Enum


class ContentFetchKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"


class GenerationKind(str, Enum):
    SAFETY_BLOCKED = "safety_blocked"
    SERVICE_ERROR = "service_error"


class ResultKind(str, Enum):
    """Failure kinds shared by verification and translation."""

    SERVICE_ERROR = "service_error"
    MALFORMED_RESULT = "malformed_result"


class DocSyncError(Exception):
    """Base class for all request-scoped failures."""

    def __init__(self, kind: Enum, message: str, path: str | None = None):
        self.kind = kind
        self.path = path
        self.message = message
        prefix = f"[{kind.value}]"
        if path:
            prefix = f"{prefix} {path}:"
        super().__init__(f"{prefix} {message}")


class ContentFetchError(DocSyncError):
    """Repository tree or file content could not be fetched."""

    kind: ContentFetchKind


class GenerationError(DocSyncError):
    """The documentation generator gave no usable output."""

    kind: GenerationKind


class VerificationError(DocSyncError):
    """The verification oracle failed or returned an unusable verdict."""

    kind: ResultKind


class TranslationError(DocSyncError):
    """The translator failed or returned an unusable shape."""

    kind: ResultKind


class DocumentNotFoundError(DocSyncError):
    """An operation needs a canonical document that does not exist yet."""

    def __init__(self, path: str):
        super().__init__(
            ContentFetchKind.NOT_FOUND,
            "no documentation has been generated for this file",
            path=path,
        )
