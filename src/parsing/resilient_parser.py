# src/parsing/resilient_parser.py - v1
"""Total parser from raw generator output to a Document.

Three tiers are tried in strict precedence, each a pure
``text -> Document | None`` function:

  1. strict      - JSON decode (with one bounded repair pass)
  2. recovered   - regex scavenging of summary/title/content/codeExample
  3. raw fallback - cleaned raw text wrapped as a single section

parse() never raises; the returned QualityTier tells callers how far down
the ladder the result came from.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from docsync.core.models import Document, ParseResult, QualityTier, Section
from docsync.parsing.json_repair import decode_json_object

logger = logging.getLogger(__name__)

RAW_FALLBACK_MAX_CHARS = 1000

DEFAULT_SUMMARY = "Analysis completed"
MISSING_CONTENT = "Content missing"
UNTITLED_SECTION = "Untitled"
RAW_FALLBACK_SUMMARY = "Raw Analysis Output (JSON Parse Failed)"
RAW_FALLBACK_TITLE = "Analysis"
RAW_FALLBACK_CODE = "// Code example unavailable due to formatting error"

_ESCAPED_STRING = r'"((?:[^"\\]|\\.)*)"'
_SUMMARY_RE = re.compile(r'"summary"\s*:\s*' + _ESCAPED_STRING, re.DOTALL)
_CONTENT_RE = re.compile(r'"content"\s*:\s*' + _ESCAPED_STRING, re.DOTALL)
_CODE_RE = re.compile(r'"codeExample"\s*:\s*' + _ESCAPED_STRING, re.DOTALL)
_TITLE_SPLIT_RE = re.compile(r'"title"\s*:\s*"')
_TITLE_RE = re.compile(r'((?:[^"\\]|\\.)*)"', re.DOTALL)
_RAW_NOISE_RE = re.compile(r'[{"}]')


def parse(
    raw_text: str,
    fallback_file_name: str,
    raw_max_chars: int = RAW_FALLBACK_MAX_CHARS,
) -> ParseResult:
    """Turn raw LLM output into a Document, degrading instead of failing.

    Args:
        raw_text: Generator output, possibly malformed or truncated.
        fallback_file_name: file_path used when the text does not carry one.
        raw_max_chars: Truncation bound for the raw fallback tier.

    Returns:
        ParseResult(document, tier).
    """
    raw_text = raw_text or ""

    doc = parse_strict(raw_text, fallback_file_name)
    if doc is not None:
        return ParseResult(doc, QualityTier.STRICT)

    logger.warning("JSON parse failed for %s, attempting recovery", fallback_file_name)
    doc = parse_recovered(raw_text, fallback_file_name)
    if doc is not None:
        logger.info(
            "Recovered %d section(s) for %s", len(doc.sections), fallback_file_name,
        )
        return ParseResult(doc, QualityTier.RECOVERED)

    logger.warning("Falling back to raw output for %s", fallback_file_name)
    return ParseResult(
        parse_raw(raw_text, fallback_file_name, raw_max_chars),
        QualityTier.RAW_FALLBACK,
    )


# ------------------------------------------------------------------
# Tier 1: strict
# ------------------------------------------------------------------


def parse_strict(raw_text: str, fallback_file_name: str) -> Document | None:
    """Decode (and if needed repair) the embedded JSON object."""
    data = decode_json_object(raw_text)
    if data is None:
        return None
    return document_from_mapping(data, fallback_file_name)


def document_from_mapping(data: dict[str, Any], fallback_file_name: str) -> Document:
    """Build a Document from a decoded object, defaulting every absent field."""
    file_path = data.get("filePath")
    summary = data.get("summary")
    raw_sections = data.get("sections")

    sections: list[Section] = []
    if isinstance(raw_sections, list):
        for raw in raw_sections:
            section = _section_from_mapping(raw)
            if section is not None:
                sections.append(section)

    return Document(
        file_path=_as_text(file_path) or fallback_file_name,
        summary=_as_text(summary) or DEFAULT_SUMMARY,
        sections=sections,
    )


def _section_from_mapping(raw: Any) -> Section | None:
    if not isinstance(raw, dict):
        return None
    return Section(
        title=_as_text(raw.get("title")) or UNTITLED_SECTION,
        content=_as_text(raw.get("content")) or MISSING_CONTENT,
        code_example=_as_text(raw.get("codeExample")) or None,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return ""


# ------------------------------------------------------------------
# Tier 2: regex scavenging
# ------------------------------------------------------------------


def parse_recovered(raw_text: str, fallback_file_name: str) -> Document | None:
    """Scavenge sections out of text that no longer decodes as JSON."""
    summary = DEFAULT_SUMMARY
    match = _SUMMARY_RE.search(raw_text)
    if match:
        summary = match.group(1)

    sections: list[Section] = []
    # The first chunk precedes any title and is header noise.
    for chunk in _TITLE_SPLIT_RE.split(raw_text)[1:]:
        title_match = _TITLE_RE.match(chunk)
        if title_match is None:
            continue
        title = title_match.group(1)

        content = MISSING_CONTENT
        content_match = _CONTENT_RE.search(chunk)
        if content_match:
            content = content_match.group(1)

        code_example = None
        code_match = _CODE_RE.search(chunk)
        if code_match:
            code_example = _unescape_code(code_match.group(1))

        sections.append(
            Section(title=title, content=content, code_example=code_example)
        )

    if not sections:
        return None
    return Document(file_path=fallback_file_name, summary=summary, sections=sections)


def _unescape_code(text: str) -> str:
    return text.replace("\\n", "\n").replace('\\"', '"')


# ------------------------------------------------------------------
# Tier 3: raw fallback
# ------------------------------------------------------------------


def parse_raw(
    raw_text: str,
    fallback_file_name: str,
    max_chars: int = RAW_FALLBACK_MAX_CHARS,
) -> Document:
    """Wrap cleaned raw output as a single 'Analysis' section. Always succeeds."""
    clean = _RAW_NOISE_RE.sub("", raw_text).replace("summary:", "").strip()
    content = clean[:max_chars]
    if len(clean) > max_chars:
        content += "..."
    return Document(
        file_path=fallback_file_name,
        summary=RAW_FALLBACK_SUMMARY,
        sections=[
            Section(
                title=RAW_FALLBACK_TITLE,
                content=content,
                code_example=RAW_FALLBACK_CODE,
            )
        ],
    )
