# src/pipeline/orchestrator.py - v3
"""DocSync orchestrator: the only writer of the document and overlay caches.

Request flow:
  ensure_documented    fingerprint -> cache hit, or fetch -> generate -> parse -> store
  request_verification PENDING marker -> oracle -> write back + fan out to overlays
  request_translation  overlay hit, or translate prose -> merge canonical code -> cache
  apply_fix            rewrite code examples -> evict overlays

Verification and translation go through ensure_documented first, so an
edited file is regenerated (and its overlays evicted) before any
collaborator sees it.

Every request is single-flight per key (see pipeline.gating). Results
computed against a canonical entry that changed while the collaborator
call was in flight (new fingerprint, or different code examples) are not
written back.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from docsync.cache.document_store import DocumentStore
from docsync.cache.overlay_cache import OverlayCache
from docsync.core.errors import DocumentNotFoundError, TranslationError
from docsync.core.models import (
    DEFAULT_LANGUAGE,
    Document,
    DocumentationResult,
    FileNode,
    TranslatedFields,
    VerificationRecord,
    VerificationStatus,
)
from docsync.logging.context import request_context
from docsync.parsing.resilient_parser import RAW_FALLBACK_MAX_CHARS, parse
from docsync.pipeline.gating import RequestGate
from docsync.sources.filters import DEFAULT_EXTENSIONS, documentable_files

if TYPE_CHECKING:
    from docsync.agents.base import DocumentationGenerator, Translator, VerificationOracle
    from docsync.cache.models import StoreEntry
    from docsync.config.settings import Settings
    from docsync.sources.base_source import ContentSource

logger = logging.getLogger(__name__)


def file_name_of(path: str) -> str:
    """Basename of a repository path, used as the parser's fallback file_path."""
    return PurePosixPath(path).name or path


def same_revision(current: StoreEntry, previous: StoreEntry) -> bool:
    """True when both entries describe the same source bytes and the same code."""
    return (
        current.fingerprint == previous.fingerprint
        and current.document.code_examples() == previous.document.code_examples()
    )


def merge_translation(
    canonical: Document,
    fields: TranslatedFields,
    language: str,
    verification: VerificationRecord | None = None,
) -> Document:
    """Build an overlay: translated prose, canonical code and metadata.

    Missing or empty translated titles/contents fall back to the canonical
    text of the same section.
    """
    sections = []
    for index, section in enumerate(canonical.sections):
        translated = fields.sections[index] if index < len(fields.sections) else None
        sections.append(
            section.model_copy(
                update={
                    "title": (translated.title if translated and translated.title else section.title),
                    "content": (
                        translated.content if translated and translated.content else section.content
                    ),
                }
            )
        )
    return canonical.model_copy(
        update={
            "summary": fields.summary,
            "sections": sections,
            "language": language,
            "verification": verification or canonical.verification,
            "last_updated": datetime.now(timezone.utc),
        }
    )


class DocSyncOrchestrator:
    """Coordinates content fetching, LLM collaborators and both caches.

    Args:
        source: Repository content source.
        generator: Documentation generator collaborator.
        oracle: Verification oracle collaborator.
        translator: Translator collaborator.
        store: Canonical document cache (a fresh one if None).
        overlays: Translation overlay cache (a fresh one if None).
        settings: Supplies the canonical language, the raw-fallback bound
            and the documentable extensions. Built-in defaults if None.
    """

    def __init__(
        self,
        source: ContentSource,
        generator: DocumentationGenerator,
        oracle: VerificationOracle,
        translator: Translator,
        store: DocumentStore | None = None,
        overlays: OverlayCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._source = source
        self._generator = generator
        self._oracle = oracle
        self._translator = translator
        self._store = store if store is not None else DocumentStore()
        self._overlays = overlays if overlays is not None else OverlayCache()
        self._gate = RequestGate()

        if settings is not None:
            self._canonical_language = settings.default_language.lower()
            self._raw_max_chars = settings.raw_fallback_max_chars
            self._extensions = settings.documentable_extensions_list
        else:
            self._canonical_language = DEFAULT_LANGUAGE
            self._raw_max_chars = RAW_FALLBACK_MAX_CHARS
            self._extensions = list(DEFAULT_EXTENSIONS)

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def overlays(self) -> OverlayCache:
        return self._overlays

    @property
    def canonical_language(self) -> str:
        return self._canonical_language

    # === Browsing ===

    async def list_documentable(self) -> list[FileNode]:
        """Files of the source whose extension is documentable."""
        nodes = await self._source.list_files()
        files = documentable_files(nodes, self._extensions)
        logger.info("%s: %d documentable file(s) of %d entries", self._source.name, len(files), len(nodes))
        return files

    def view(self, path: str, language: str | None = None) -> Document | None:
        """Read-only lookup of what is currently cached for display."""
        language = (language or self._canonical_language).lower()
        if language == self._canonical_language:
            cached = self._store.get(path)
            return cached[0] if cached else None
        return self._overlays.get(path, language)

    # === Generation ===

    async def ensure_documented(self, path: str) -> DocumentationResult:
        """Return documentation for ``path``, generating it when stale.

        Raises:
            ContentFetchError: fingerprint or content could not be fetched.
            GenerationError: the generator failed (caches untouched).
        """
        with request_context("generate", path):
            return await self._gate.run(("generate", path), lambda: self._document(path))

    async def _document(self, path: str) -> DocumentationResult:
        fingerprint = await self._source.fetch_fingerprint(path)
        entry = self._store.get_entry(path)
        if entry is not None and entry.fingerprint == fingerprint:
            logger.debug("Cache hit for %s at %s", path, fingerprint[:8])
            return DocumentationResult(document=entry.document, tier=entry.tier, from_cache=True)

        content = await self._source.fetch_content(path)
        file_name = file_name_of(path)
        raw = await self._generator.generate(file_name, content)
        parsed = parse(raw, file_name, raw_max_chars=self._raw_max_chars)

        document = parsed.document.model_copy(
            update={"file_path": path, "language": self._canonical_language}
        )
        entry = self._store.upsert_generated(path, fingerprint, document, parsed.tier)
        evicted = self._overlays.invalidate_path(path)
        logger.info(
            "Documented %s (tier=%s, %d section(s), %d overlay(s) evicted)",
            path, parsed.tier.value, len(document.sections), evicted,
        )
        return DocumentationResult(document=entry.document, tier=entry.tier, from_cache=False)

    async def _canonical_entry(self, path: str) -> StoreEntry:
        """Current canonical entry, regenerated first if the source changed."""
        await self.ensure_documented(path)
        entry = self._store.get_entry(path)
        if entry is None:
            raise DocumentNotFoundError(path)
        return entry

    # === Verification ===

    async def request_verification(self, path: str) -> VerificationRecord:
        """Verify the first code example of ``path`` against its source.

        Documents the file first, or regenerates it when the source changed
        since it was documented. A document without any code
        example returns its current record unchanged.

        Raises:
            ContentFetchError, GenerationError: while documenting/fetching.
            VerificationError: SERVICE_ERROR or MALFORMED_RESULT; the
                previous record is restored.
        """
        with request_context("verify", path):
            return await self._gate.run(("verify", path), lambda: self._verify(path))

    async def _verify(self, path: str) -> VerificationRecord:
        entry = await self._canonical_entry(path)
        example = entry.document.first_code_example()
        if example is None:
            logger.info("Nothing to verify for %s: no code example", path)
            return entry.verification

        source_code = await self._source.fetch_content(path)
        previous = entry.verification
        self._publish_verification(path, VerificationRecord(status=VerificationStatus.PENDING))
        try:
            record = await self._oracle.verify(file_name_of(path), source_code, example)
        except (Exception, asyncio.CancelledError):
            self._rollback_pending(path, entry, previous)
            raise

        current = self._store.get_entry(path)
        if current is None or not same_revision(current, entry):
            logger.info("Discarding verification of %s: document changed while verifying", path)
            return record

        self._publish_verification(path, record)
        logger.info("Verification of %s finished: %s", path, record.status.value)
        return record

    def _publish_verification(self, path: str, record: VerificationRecord) -> None:
        if self._store.set_verification(path, record):
            self._overlays.refresh_verification(path, record)

    def _rollback_pending(
        self, path: str, entry: StoreEntry, previous: VerificationRecord,
    ) -> None:
        current = self._store.get_entry(path)
        if (
            current is not None
            and same_revision(current, entry)
            and current.verification.status is VerificationStatus.PENDING
        ):
            self._publish_verification(path, previous)

    # === Translation ===

    async def request_translation(self, path: str, language: str) -> Document:
        """Return ``path``'s documentation in ``language``.

        The canonical language short-circuits to the canonical document.
        A translator failure is not surfaced: the canonical document is
        returned and nothing is cached.
        """
        language = language.strip().lower()
        with request_context("translate", path, language):
            entry = await self._canonical_entry(path)
            if language == self._canonical_language:
                return entry.document

            cached = self._overlays.get(path, language)
            if cached is not None:
                logger.debug("Overlay hit for %s (%s)", path, language)
                return cached

            return await self._gate.run(
                ("translate", path, language), lambda: self._translate(path, language),
            )

    async def _translate(self, path: str, language: str) -> Document:
        entry = await self._canonical_entry(path)
        canonical = entry.document
        try:
            fields = await self._translator.translate(
                canonical.summary,
                [(s.title, s.content) for s in canonical.sections],
                language,
            )
        except TranslationError as exc:
            logger.warning("Translation of %s to %s failed, showing original: %s", path, language, exc)
            return canonical

        current = self._store.get_entry(path)
        if current is None or not same_revision(current, entry):
            logger.info("Not caching %s overlay of %s: document changed while translating", language, path)
            return merge_translation(canonical, fields, language)

        overlay = merge_translation(current.document, fields, language, current.verification)
        self._overlays.put(path, language, overlay)
        logger.info("Translated %s to %s", path, language)
        return overlay

    # === Fixes ===

    def apply_fix(self, path: str, fixed_code: str) -> Document:
        """Replace the code examples of ``path`` and evict its overlays.

        Raises:
            DocumentNotFoundError: ``path`` has not been documented.
        """
        with request_context("apply_fix", path):
            document = self._store.apply_fix(path, fixed_code)
            if document is None:
                raise DocumentNotFoundError(path)
            self._overlays.invalidate_path(path)
            return document
