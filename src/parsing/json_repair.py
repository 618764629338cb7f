# src/parsing/json_repair.py - v1
"""Extraction and bounded syntactic repair of JSON emitted by an LLM.

Handles the usual artifacts: prose or code fences around the object,
a dangling trailing comma, a string cut off mid-literal, and unclosed
arrays/objects left by output truncation. Repair is attempted once; if
the repaired text still does not decode, the caller gets None.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


def extract_json_candidate(text: str) -> str:
    """Return the span from the first '{' to the last '}' inclusive.

    Falls back to the trimmed text when no such pair exists.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text.strip()
    return text[start : end + 1]


def repair_json(candidate: str) -> str:
    """Apply one round of syntactic repair to truncated/sloppy JSON.

    Steps, in order:
      1. Terminate an unterminated string literal with a closing quote.
      2. Drop commas that sit right before a closer or at the very end.
      3. Append the missing ']' / '}' closers, innermost first.
    """
    text = candidate.strip()
    stack, in_string, escaped = _scan(text)

    if in_string:
        if escaped:
            # A lone trailing backslash would escape the quote we add.
            text = text[:-1]
        text += '"'

    text = _drop_trailing_commas(text)
    text += "".join(_CLOSERS[opener] for opener in reversed(stack))
    return text


def decode_json_object(text: str, repair: bool = True) -> dict[str, Any] | None:
    """Decode the JSON object embedded in ``text``.

    Args:
        text: Raw LLM output, possibly wrapped in prose or code fences.
        repair: Retry once with repair_json() when the first decode fails.

    Returns:
        The decoded object, or None when nothing decodes to a JSON object.
    """
    candidate = extract_json_candidate(text)
    parsed = _loads(candidate)
    if parsed is None and repair:
        repaired = repair_json(candidate)
        parsed = _loads(repaired)
        if parsed is not None:
            logger.debug("JSON decoded after repair (%d chars)", len(repaired))
    if isinstance(parsed, dict):
        return parsed
    return None


def _loads(text: str) -> Any | None:
    if not text:
        return None
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _scan(text: str) -> tuple[list[str], bool, bool]:
    """Walk the text outside of string literals.

    Returns:
        (stack of unclosed openers, ends inside a string, ends on a backslash)
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(ch)
        elif ch in ("}", "]"):
            if stack and _CLOSERS[stack[-1]] == ch:
                stack.pop()
    return stack, in_string, escaped


def _drop_trailing_commas(text: str) -> str:
    """Remove commas (outside strings) followed only by whitespace and a closer or EOF."""
    out: list[str] = []
    in_string = False
    escaped = False
    n = len(text)
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            out.append(ch)
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j == n or text[j] in "}]":
                continue
        out.append(ch)
    return "".join(out)
