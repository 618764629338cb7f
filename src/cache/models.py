# src/cache/models.py - v2
"""Cache domain models: StoreEntry, OverlayKey."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from docsync.core.models import Document, Fingerprint, QualityTier, VerificationRecord


class StoreEntry(BaseModel):
    """Canonical document of one file, as held by the DocumentStore.

    Frozen: each mutation produces a new entry that replaces the old one.
    """

    model_config = ConfigDict(frozen=True)

    document: Document
    tier: QualityTier
    stored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def fingerprint(self) -> Fingerprint:
        return self.document.source_fingerprint

    @property
    def verification(self) -> VerificationRecord:
        return self.document.verification


class OverlayKey(NamedTuple):
    """Key of a translated overlay."""

    path: str
    language: str
