# src/agents/translator.py - v1
"""LLM-backed translator for document prose.

Only summary, titles and contents are sent; code examples never leave the
canonical document. Replies are decoded with the strict tier only.
"""

from __future__ import annotations

import json
import logging

from docsync.agents.base import LLMComponent, Translator
from docsync.agents.schemas import TranslationPayload
from docsync.core.errors import ResultKind, TranslationError
from docsync.core.models import TranslatedFields, TranslatedSection
from docsync.llm.retry import LLMRetryExhausted
from docsync.parsing.json_repair import decode_json_object

logger = logging.getLogger(__name__)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "zh": "Chinese",
    "pt": "Portuguese",
}


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.lower(), code)


def parse_translation(text: str, path: str | None = None) -> TranslatedFields:
    """Decode a translator reply.

    Raises:
        TranslationError: MALFORMED_RESULT when no object or no summary string.
    """
    data = decode_json_object(text)
    if data is None:
        raise TranslationError(
            ResultKind.MALFORMED_RESULT, "translator reply is not a JSON object", path=path,
        )
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise TranslationError(
            ResultKind.MALFORMED_RESULT, "translator reply has no summary", path=path,
        )

    sections = []
    raw_sections = data.get("sections")
    for raw in raw_sections if isinstance(raw_sections, list) else []:
        if not isinstance(raw, dict):
            sections.append(TranslatedSection())
            continue
        title = raw.get("title")
        content = raw.get("content")
        sections.append(
            TranslatedSection(
                title=title if isinstance(title, str) else "",
                content=content if isinstance(content, str) else "",
            )
        )
    return TranslatedFields(summary=summary, sections=sections)


class LLMTranslator(LLMComponent, Translator):
    component = "translator"
    prompt_name = "translator.txt"
    system_prompt = "You are a professional technical translator. Output strictly valid JSON."

    async def translate(
        self,
        summary: str,
        sections: list[tuple[str, str]],
        target_language: str,
    ) -> TranslatedFields:
        payload = json.dumps(
            {
                "summary": summary,
                "sections": [{"title": t, "content": c} for t, c in sections],
            },
            ensure_ascii=False,
        )
        prompt = self._load_prompt().format(
            language=language_name(target_language), payload=payload,
        )
        try:
            response = await self._complete(prompt, response_format=TranslationPayload)
        except LLMRetryExhausted as exc:
            raise TranslationError(
                ResultKind.SERVICE_ERROR, f"translation call failed: {exc.last_error}",
            ) from exc
        return parse_translation(response.content)
