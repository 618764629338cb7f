# src/agents/generator.py - v1
"""LLM-backed documentation generator.

Returns the model's raw text untouched; turning it into a Document is the
resilient parser's job. Minified or generated files (any line longer than
the configured limit) short-circuit to a canned "Analysis Skipped"
document without calling the model.
"""

from __future__ import annotations

import json
import logging

from docsync.agents.base import DocumentationGenerator, LLMComponent
from docsync.agents.schemas import DocumentPayload
from docsync.core.errors import GenerationError, GenerationKind
from docsync.llm.base_client import BaseLLMClient
from docsync.llm.retry import LLMRetryExhausted, RetryConfig

logger = logging.getLogger(__name__)

SKIPPED_SUMMARY = "Skipped: File appears to be minified or generated code."


def is_minified(content: str, max_line_length: int = 1000) -> bool:
    """True if any line exceeds ``max_line_length`` characters."""
    return any(len(line) > max_line_length for line in content.split("\n"))


def skipped_document_json(file_name: str, max_line_length: int = 1000) -> str:
    """Raw JSON of the placeholder document emitted for minified files."""
    return json.dumps(
        {
            "filePath": file_name,
            "summary": SKIPPED_SUMMARY,
            "sections": [
                {
                    "title": "Analysis Skipped",
                    "content": (
                        f"This file contains extremely long lines ({max_line_length}+ "
                        "characters), suggesting it is minified or machine-generated."
                    ),
                    "codeExample": "// No example available",
                }
            ],
        }
    )


class LLMDocumentationGenerator(LLMComponent, DocumentationGenerator):
    """Generate documentation JSON for one source file."""

    component = "generator"
    prompt_name = "generator.txt"
    system_prompt = (
        "You are a senior technical writer and software engineer. You value "
        "clarity, accuracy and human-readable explanations. Output strictly valid JSON."
    )

    def __init__(
        self,
        llm: BaseLLMClient,
        max_source_chars: int = 10_000,
        minified_line_length: int = 1000,
        max_tokens: int = 8192,
        retry_enabled: bool = True,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        super().__init__(
            llm, max_tokens=max_tokens, retry_enabled=retry_enabled, retry_configs=retry_configs,
        )
        self._max_source_chars = max_source_chars
        self._minified_line_length = minified_line_length

    def _format_prompt(self, file_name: str, content: str) -> str:
        return self._load_prompt().format(
            file_name=file_name,
            source_code=content[: self._max_source_chars],
        )

    async def generate(self, file_name: str, content: str) -> str:
        if is_minified(content, self._minified_line_length):
            logger.info("Skipping %s: looks minified", file_name)
            return skipped_document_json(file_name, self._minified_line_length)

        prompt = self._format_prompt(file_name, content)
        try:
            response = await self._complete(prompt, response_format=DocumentPayload)
        except LLMRetryExhausted as exc:
            logger.error("Documentation generation failed for %s: %s", file_name, exc)
            raise GenerationError(
                GenerationKind.SERVICE_ERROR,
                f"unable to contact the model: {exc.last_error}",
                path=file_name,
            ) from exc

        if response.is_empty:
            raise GenerationError(
                GenerationKind.SAFETY_BLOCKED,
                f"model returned no content (finish_reason={response.finish_reason})",
                path=file_name,
            )
        return response.content
