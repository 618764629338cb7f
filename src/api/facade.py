# src/api/facade.py - v2
"""Public API facade: build a ready-to-use orchestrator.

Usage:
    from docsync.api.facade import create_orchestrator, open_source

    source = open_source("https://github.com/owner/repo")
    orchestrator = create_orchestrator(source)
    result = await orchestrator.ensure_documented("src/index.ts")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from docsync.agents.generator import LLMDocumentationGenerator
from docsync.agents.translator import LLMTranslator
from docsync.agents.verifier import LLMVerificationOracle
from docsync.cache.document_store import DocumentStore
from docsync.cache.overlay_cache import OverlayCache
from docsync.config.settings import Settings
from docsync.pipeline.llm_factory import LLMFactory
from docsync.pipeline.orchestrator import DocSyncOrchestrator
from docsync.sources.filters import parse_repo_url
from docsync.sources.github_source import GitHubSource
from docsync.sources.local_source import LocalSource

if TYPE_CHECKING:
    from docsync.sources.base_source import ContentSource

logger = logging.getLogger(__name__)


def open_source(target: str, settings: Settings | None = None) -> ContentSource:
    """Pick a content source for ``target``.

    A GitHub URL gives a GitHubSource; anything else is treated as a local
    directory.

    Raises:
        ContentFetchError: NOT_FOUND when a local target is not a directory.
    """
    settings = settings or Settings()
    repo = parse_repo_url(target)
    if repo is not None:
        logger.info("Using GitHub repository %s", repo.slug)
        return GitHubSource(
            repo,
            token=settings.github_token,
            api_base=settings.github_api_base,
            timeout_s=settings.github_timeout_s,
        )
    logger.info("Using local directory %s", target)
    return LocalSource(Path(target))


def create_orchestrator(
    source: ContentSource,
    settings: Settings | None = None,
    llm_factory: LLMFactory | None = None,
) -> DocSyncOrchestrator:
    """Wire LLM-backed collaborators and fresh caches around ``source``.

    Args:
        source: Content source to document.
        settings: Global settings. Loaded from .env if None.
        llm_factory: Client factory (one built from ``settings`` if None).
    """
    settings = settings or Settings()
    factory = llm_factory or LLMFactory(settings)
    retry_enabled = settings.llm_retry_enabled

    generator = LLMDocumentationGenerator(
        factory.get_client("generator"),
        max_source_chars=settings.max_source_chars,
        minified_line_length=settings.minified_line_length,
        max_tokens=settings.llm_max_tokens,
        retry_enabled=retry_enabled,
    )
    oracle = LLMVerificationOracle(
        factory.get_client("verifier"),
        max_source_chars=settings.max_source_chars,
        retry_enabled=retry_enabled,
    )
    translator = LLMTranslator(
        factory.get_client("translator"),
        max_tokens=settings.llm_max_tokens,
        retry_enabled=retry_enabled,
    )
    return DocSyncOrchestrator(
        source,
        generator=generator,
        oracle=oracle,
        translator=translator,
        store=DocumentStore(),
        overlays=OverlayCache(),
        settings=settings,
    )
