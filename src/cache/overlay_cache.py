# src/cache/overlay_cache.py - v2
"""Per-language translation overlays derived from canonical documents.

An overlay is never a source of truth: its code examples, fingerprint and
verification record are copies of the canonical entry. Overlays are
evicted wholesale whenever the canonical document is regenerated or its
code changes, and re-synchronized (verification only) when a verification
result lands.
"""

from __future__ import annotations

import logging
import threading

from docsync.cache.models import OverlayKey
from docsync.core.models import Document, VerificationRecord

logger = logging.getLogger(__name__)


class OverlayCache:
    """Process-lifetime cache of translated documents keyed by (path, language)."""

    def __init__(self) -> None:
        self._entries: dict[OverlayKey, Document] = {}
        self._lock = threading.Lock()

    def get(self, path: str, language: str) -> Document | None:
        with self._lock:
            return self._entries.get(OverlayKey(path, language))

    def put(self, path: str, language: str, document: Document) -> None:
        with self._lock:
            self._entries[OverlayKey(path, language)] = document
        logger.debug("Cached %s overlay for %s", language, path)

    def invalidate_path(self, path: str) -> int:
        """Evict every overlay of ``path``. Returns the number evicted."""
        with self._lock:
            stale = [key for key in self._entries if key.path == path]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info(
                "Evicted %d overlay(s) for %s: %s",
                len(stale), path, ", ".join(sorted(k.language for k in stale)),
            )
        return len(stale)

    def refresh_verification(self, path: str, record: VerificationRecord) -> int:
        """Copy ``record`` into every overlay of ``path``, leaving prose untouched.

        Returns:
            Number of overlays updated.
        """
        updated = 0
        with self._lock:
            for key, document in list(self._entries.items()):
                if key.path != path:
                    continue
                self._entries[key] = document.model_copy(update={"verification": record})
                updated += 1
        return updated

    def languages(self, path: str) -> list[str]:
        with self._lock:
            return sorted(k.language for k in self._entries if k.path == path)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
