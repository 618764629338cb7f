# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Documents and their parts are frozen: every mutation builds a new value
with model_copy() so cache entries are replaced, never edited in place.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# Opaque content-revision identifier (git blob SHA for every built-in source).
Fingerprint = str

DEFAULT_LANGUAGE = "en"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# === ENUMS ===


class VerificationStatus(str, Enum):
    """Lifecycle of a code example verification."""

    IDLE = "IDLE"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class QualityTier(str, Enum):
    """How much repair or guessing produced a parsed Document."""

    STRICT = "strict"
    RECOVERED = "recovered"
    RAW_FALLBACK = "raw_fallback"


# === DOCUMENT MODELS ===


class VerificationRecord(BaseModel):
    """Outcome of checking a document's code example against its source."""

    model_config = ConfigDict(frozen=True)

    status: VerificationStatus = VerificationStatus.IDLE
    logs: str = ""
    fixed_code: str | None = None


class Section(BaseModel):
    """One logical part of a generated document."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    code_example: str | None = None


class Document(BaseModel):
    """Structured documentation for a single source file."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    summary: str
    sections: list[Section] = Field(default_factory=list)
    language: str = DEFAULT_LANGUAGE
    source_fingerprint: Fingerprint = ""
    verification: VerificationRecord = Field(default_factory=VerificationRecord)
    last_updated: datetime = Field(default_factory=_utcnow)

    def first_code_example(self) -> str | None:
        """Return the first non-empty code example, if any."""
        for section in self.sections:
            if section.code_example:
                return section.code_example
        return None

    def code_examples(self) -> list[str | None]:
        """Code examples in section order (None where a section has none)."""
        return [s.code_example for s in self.sections]


class ParseResult(NamedTuple):
    """Document plus the quality tier the parser reached."""

    document: Document
    tier: QualityTier


class DocumentationResult(BaseModel):
    """Return value of Orchestrator.ensure_documented()."""

    model_config = ConfigDict(frozen=True)

    document: Document
    tier: QualityTier
    from_cache: bool = False


# === TRANSLATION ===


class TranslatedSection(BaseModel):
    """Translated prose of one section (code is never translated)."""

    title: str = ""
    content: str = ""


class TranslatedFields(BaseModel):
    """Prose fields returned by a Translator."""

    summary: str
    sections: list[TranslatedSection] = Field(default_factory=list)


# === REPOSITORY ===


class FileNode(BaseModel):
    """Entry of a repository tree listing."""

    name: str
    path: str
    type: Literal["file", "dir"]
    sha: Fingerprint = ""


class RepoRef(BaseModel):
    """Owner/repository pair parsed from a GitHub URL."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"
