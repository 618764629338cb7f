# src/agents/base.py - v1
"""Collaborator interfaces consumed by the orchestrator, plus the shared
LLM plumbing (prompt loading, retry) used by the built-in implementations.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from docsync.llm.models import LLMResponse, Message
from docsync.llm.retry import NO_RETRY, RetryConfig, with_retry

if TYPE_CHECKING:
    from docsync.core.models import TranslatedFields, VerificationRecord
    from docsync.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"


# === Collaborator interfaces ===


class DocumentationGenerator(ABC):
    """Produces raw (untrusted) documentation text for a source file."""

    @abstractmethod
    async def generate(self, file_name: str, content: str) -> str:
        """Return raw generator output.

        Raises:
            GenerationError: SAFETY_BLOCKED or SERVICE_ERROR.
        """


class VerificationOracle(ABC):
    """Judges whether a documentation code example works against its source."""

    @abstractmethod
    async def verify(
        self, file_name: str, source_code: str, example_code: str,
    ) -> VerificationRecord:
        """Return a SUCCESS or FAILED record.

        Raises:
            VerificationError: SERVICE_ERROR or MALFORMED_RESULT.
        """


class Translator(ABC):
    """Translates the prose fields of a document."""

    @abstractmethod
    async def translate(
        self,
        summary: str,
        sections: list[tuple[str, str]],
        target_language: str,
    ) -> TranslatedFields:
        """Translate summary and (title, content) pairs.

        Raises:
            TranslationError: SERVICE_ERROR or MALFORMED_RESULT.
        """


# === Shared LLM plumbing ===


class LLMComponent:
    """Base for collaborators backed by a single LLM client.

    Subclasses set ``component`` (routing name), ``prompt_name`` (template
    file under prompts/) and ``system_prompt``.
    """

    component: str = "unknown"
    prompt_name: str = ""
    system_prompt: str = ""
    temperature: float = 0.2

    def __init__(
        self,
        llm: BaseLLMClient,
        max_tokens: int = 8192,
        retry_enabled: bool = True,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._llm = llm
        self._max_tokens = max_tokens
        self._retry_configs = retry_configs if retry_enabled else NO_RETRY
        self._prompt_template: str | None = None

    @property
    def prompt_file(self) -> Path:
        return PROMPTS_DIR / self.prompt_name

    def _load_prompt(self) -> str:
        if self._prompt_template is None:
            self._prompt_template = self.prompt_file.read_text(encoding="utf-8")
        return self._prompt_template

    async def _complete(
        self,
        prompt: str,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Send ``prompt`` with retry.

        Raises:
            LLMRetryExhausted: when the provider keeps failing.
        """
        prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()[:16]
        logger.debug(
            "Calling %s via %s (prompt %s, %d chars)",
            self.component, self._llm.provider_name, prompt_hash, len(prompt),
        )
        response: LLMResponse = await with_retry(
            self._llm.complete,
            messages=[Message(role="user", content=prompt)],
            system=self.system_prompt or None,
            max_tokens=self._max_tokens,
            temperature=self.temperature,
            response_format=response_format,
            component=self.component,
            retry_configs=self._retry_configs,
        )
        logger.debug(
            "%s responded: %d output tokens in %dms (finish=%s)",
            self.component, response.output_tokens, response.latency_ms,
            response.finish_reason,
        )
        return response
