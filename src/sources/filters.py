# src/sources/filters.py - v1
"""Repository URL parsing and the documentable-file allow-list."""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import urlparse

from docsync.core.models import FileNode, RepoRef

DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs", ".java")


def parse_repo_url(url: str) -> RepoRef | None:
    """Extract owner/repo from a GitHub URL.

    Accepts ``https://github.com/owner/repo``, with or without a ``.git``
    suffix or trailing path segments. Returns None for anything else.
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    clean_path = parsed.path.removesuffix(".git")
    parts = [p for p in clean_path.split("/") if p]
    if len(parts) < 2:
        return None
    return RepoRef(owner=parts[0], repo=parts[1].removesuffix(".git"))


def is_documentable(path: str, extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS) -> bool:
    """True if the file's extension is on the allow-list (case-insensitive)."""
    suffix = PurePosixPath(path).suffix.lower()
    return bool(suffix) and suffix in {e.lower() for e in extensions}


def documentable_files(
    nodes: list[FileNode],
    extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
) -> list[FileNode]:
    """Keep only file nodes whose extension is documentable, sorted by path."""
    return sorted(
        (n for n in nodes if n.type == "file" and is_documentable(n.path, extensions)),
        key=lambda n: n.path,
    )
