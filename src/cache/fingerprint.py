# src/cache/fingerprint.py - v3
"""Content fingerprints for source files.

Uses the git blob object id (SHA-1 over ``blob <size>\\0<bytes>``), which is
exactly the ``sha`` GitHub reports for a file. Local and remote sources
therefore produce comparable fingerprints for identical bytes.
"""

from __future__ import annotations

import hashlib

from docsync.core.models import Fingerprint


def compute_fingerprint(raw_bytes: bytes) -> Fingerprint:
    """Compute the git blob SHA of a file's raw bytes."""
    header = f"blob {len(raw_bytes)}\0".encode("ascii")
    return hashlib.sha1(header + raw_bytes).hexdigest()  # noqa: S324


def compute_text_fingerprint(text: str) -> Fingerprint:
    """Fingerprint of UTF-8 encoded text."""
    return compute_fingerprint(text.encode("utf-8"))
