# src/cache/document_store.py - v2
"""In-memory store of canonical (base-language) documents keyed by file path.

Entries are immutable StoreEntry values. Every mutation builds a new entry
and swaps it in under a lock, so concurrent writers get last-writer-wins
semantics and readers never observe a half-written entry. The store does
not merge; avoiding overlapping writes for one path is the orchestrator's job.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from docsync.cache.models import StoreEntry
from docsync.core.models import (
    Document,
    Fingerprint,
    QualityTier,
    VerificationRecord,
    VerificationStatus,
)

logger = logging.getLogger(__name__)

FIX_APPLIED_LOG = "Fix applied. Ready for re-verification."


class DocumentStore:
    """Process-lifetime cache of canonical documents."""

    def __init__(self) -> None:
        self._entries: dict[str, StoreEntry] = {}
        self._lock = threading.Lock()

    def upsert_generated(
        self,
        path: str,
        fingerprint: Fingerprint,
        document: Document,
        tier: QualityTier,
    ) -> StoreEntry:
        """Replace the entry for ``path`` with a freshly generated document.

        The document is stamped with ``fingerprint`` and an IDLE verification
        record regardless of what it carried before.
        """
        now = datetime.now(timezone.utc)
        stamped = document.model_copy(
            update={
                "source_fingerprint": fingerprint,
                "verification": VerificationRecord(status=VerificationStatus.IDLE),
                "last_updated": now,
            }
        )
        entry = StoreEntry(document=stamped, tier=tier, stored_at=now)
        with self._lock:
            previous = self._entries.get(path)
            self._entries[path] = entry
        if previous is not None and previous.fingerprint != fingerprint:
            logger.info(
                "Replaced documentation for %s (%s -> %s)",
                path, previous.fingerprint[:8], fingerprint[:8],
            )
        else:
            logger.debug("Stored documentation for %s (tier=%s)", path, tier.value)
        return entry

    def get(self, path: str) -> tuple[Document, VerificationRecord] | None:
        """Return the canonical document and its verification record."""
        entry = self.get_entry(path)
        if entry is None:
            return None
        return entry.document, entry.verification

    def get_entry(self, path: str) -> StoreEntry | None:
        with self._lock:
            return self._entries.get(path)

    def is_stale(self, path: str, current_fingerprint: Fingerprint) -> bool:
        """True when ``path`` has no entry or was documented from other bytes."""
        entry = self.get_entry(path)
        return entry is None or entry.fingerprint != current_fingerprint

    def set_verification(self, path: str, record: VerificationRecord) -> bool:
        """Replace only the verification record. No-op for unknown paths.

        Returns:
            True if an entry was updated.
        """
        with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                logger.debug("Ignoring verification for undocumented path %s", path)
                return False
            document = entry.document.model_copy(update={"verification": record})
            self._entries[path] = entry.model_copy(update={"document": document})
        return True

    def apply_fix(self, path: str, fixed_code: str) -> Document | None:
        """Replace every non-empty code example with ``fixed_code``.

        Resets verification to IDLE. Overlays derived from this path become
        wrong and must be invalidated by the caller.

        Returns:
            The updated document, or None when ``path`` is not documented.
        """
        with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                return None
            sections = [
                s.model_copy(update={"code_example": fixed_code}) if s.code_example else s
                for s in entry.document.sections
            ]
            document = entry.document.model_copy(
                update={
                    "sections": sections,
                    "verification": VerificationRecord(
                        status=VerificationStatus.IDLE, logs=FIX_APPLIED_LOG,
                    ),
                    "last_updated": datetime.now(timezone.utc),
                }
            )
            self._entries[path] = entry.model_copy(update={"document": document})
        fixed = sum(1 for s in sections if s.code_example)
        logger.info("Applied fix to %d section(s) of %s", fixed, path)
        return document

    def remove(self, path: str) -> bool:
        with self._lock:
            return self._entries.pop(path, None) is not None

    def paths(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._entries
