# src/agents/verifier.py - v1
"""LLM-backed verification oracle.

The verdict is decoded with the strict tier only (extraction + one repair
pass). Scavenging is never applied here: a pass/fail verdict that had to
be guessed is reported as MALFORMED_RESULT instead of shown as a result.
"""

from __future__ import annotations

import logging

from docsync.agents.base import LLMComponent, VerificationOracle
from docsync.agents.schemas import VerificationPayload
from docsync.core.errors import ResultKind, VerificationError
from docsync.core.models import VerificationRecord, VerificationStatus
from docsync.llm.base_client import BaseLLMClient
from docsync.llm.retry import LLMRetryExhausted, RetryConfig
from docsync.parsing.json_repair import decode_json_object

logger = logging.getLogger(__name__)

_VERDICTS = {
    "SUCCESS": VerificationStatus.SUCCESS,
    "FAILED": VerificationStatus.FAILED,
}


def parse_verification(text: str, path: str | None = None) -> VerificationRecord:
    """Decode an oracle reply into a VerificationRecord.

    Raises:
        VerificationError: MALFORMED_RESULT when the reply is not a JSON
            object or its status is not SUCCESS/FAILED.
    """
    data = decode_json_object(text)
    if data is None:
        raise VerificationError(
            ResultKind.MALFORMED_RESULT, "oracle reply is not a JSON object", path=path,
        )

    raw_status = data.get("status")
    status = _VERDICTS.get(raw_status.strip().upper()) if isinstance(raw_status, str) else None
    if status is None:
        raise VerificationError(
            ResultKind.MALFORMED_RESULT, f"unexpected verdict {raw_status!r}", path=path,
        )

    logs = data.get("logs")
    fixed_code = data.get("fixedCode")
    if not isinstance(fixed_code, str) or not fixed_code.strip():
        fixed_code = None
    return VerificationRecord(
        status=status,
        logs=logs if isinstance(logs, str) else "",
        # A fix only makes sense for a failed example.
        fixed_code=fixed_code if status is VerificationStatus.FAILED else None,
    )


class LLMVerificationOracle(LLMComponent, VerificationOracle):
    """Simulate the example against the source with a fast model."""

    component = "verifier"
    prompt_name = "verifier.txt"
    system_prompt = "You are a strict compiler and runtime environment. Output strictly valid JSON."
    temperature = 0.0

    def __init__(
        self,
        llm: BaseLLMClient,
        max_source_chars: int = 10_000,
        max_tokens: int = 4096,
        retry_enabled: bool = True,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        super().__init__(
            llm, max_tokens=max_tokens, retry_enabled=retry_enabled, retry_configs=retry_configs,
        )
        self._max_source_chars = max_source_chars

    async def verify(
        self, file_name: str, source_code: str, example_code: str,
    ) -> VerificationRecord:
        prompt = self._load_prompt().format(
            file_name=file_name,
            source_code=source_code[: self._max_source_chars],
            example_code=example_code,
        )
        try:
            response = await self._complete(prompt, response_format=VerificationPayload)
        except LLMRetryExhausted as exc:
            raise VerificationError(
                ResultKind.SERVICE_ERROR,
                f"verification call failed: {exc.last_error}",
                path=file_name,
            ) from exc

        record = parse_verification(response.content, path=file_name)
        logger.info("Verification of %s: %s", file_name, record.status.value)
        return record
