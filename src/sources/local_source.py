# src/sources/local_source.py - v2
"""Content source backed by a directory on disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from docsync.cache.fingerprint import compute_fingerprint
from docsync.core.errors import ContentFetchError, ContentFetchKind
from docsync.core.models import FileNode, Fingerprint
from docsync.sources.base_source import ContentSource

logger = logging.getLogger(__name__)

_SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv"}


class LocalSource(ContentSource):
    """Files under ``root``; fingerprints are git blob SHAs of the bytes."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root).expanduser().resolve()
        if not self._root.is_dir():
            raise ContentFetchError(
                ContentFetchKind.NOT_FOUND, "not a directory", path=str(self._root),
            )

    @property
    def name(self) -> str:
        return str(self._root)

    async def list_files(self) -> list[FileNode]:
        return await asyncio.to_thread(self._walk)

    def _walk(self) -> list[FileNode]:
        nodes: list[FileNode] = []
        for path in sorted(self._root.rglob("*")):
            rel = path.relative_to(self._root)
            if any(part in _SKIP_DIRS for part in rel.parts):
                continue
            if path.is_dir():
                nodes.append(FileNode(name=path.name, path=rel.as_posix(), type="dir"))
            elif path.is_file():
                nodes.append(
                    FileNode(
                        name=path.name,
                        path=rel.as_posix(),
                        type="file",
                        sha=compute_fingerprint(path.read_bytes()),
                    )
                )
        return nodes

    async def fetch_fingerprint(self, path: str) -> Fingerprint:
        return compute_fingerprint(self._read_bytes(path))

    async def fetch_content(self, path: str) -> str:
        return self._read_bytes(path).decode("utf-8", errors="replace")

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if not target.is_relative_to(self._root):
            raise ContentFetchError(
                ContentFetchKind.UNAUTHORIZED, "path escapes the source root", path=path,
            )
        return target

    def _read_bytes(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise ContentFetchError(ContentFetchKind.NOT_FOUND, "file not found", path=path) from exc
        except IsADirectoryError as exc:
            raise ContentFetchError(ContentFetchKind.NOT_FOUND, "path is not a file", path=path) from exc
        except PermissionError as exc:
            raise ContentFetchError(
                ContentFetchKind.UNAUTHORIZED, "permission denied", path=path,
            ) from exc
        except OSError as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            raise ContentFetchError(ContentFetchKind.UNAVAILABLE, str(exc), path=path) from exc
