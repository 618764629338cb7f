# src/sources/base_source.py - v1
"""Abstract content source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docsync.core.models import FileNode, Fingerprint


class ContentSource(ABC):
    """Read-only access to the files of one repository revision.

    Implementations raise ContentFetchError with a NOT_FOUND,
    UNAUTHORIZED, RATE_LIMITED or UNAVAILABLE kind.
    """

    @abstractmethod
    async def fetch_fingerprint(self, path: str) -> Fingerprint:
        """Return the content fingerprint of the file at ``path``."""

    @abstractmethod
    async def fetch_content(self, path: str) -> str:
        """Return the decoded text of the file at ``path``."""

    @abstractmethod
    async def list_files(self) -> list[FileNode]:
        """List every file and directory of the tree."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable identifier of the source (repo slug or directory)."""
