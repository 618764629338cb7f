# src/llm/adapters/google_adapter.py - v2
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. Safety filters are turned off: source
code routinely trips them (``kill_process``, ``execute``, ``parent/child``)
and a blocked response is reported to callers as an empty completion.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import BaseModel

from docsync.llm.base_client import BaseLLMClient
from docsync.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def safety_settings() -> list[dict[str, str]]:
    """BLOCK_NONE for every harm category."""
    return [{"category": c, "threshold": "BLOCK_NONE"} for c in _SAFETY_CATEGORIES]


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = "gemini-2.5-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(
            self._model,
            system_instruction=system,
            safety_settings=safety_settings(),
        )

        gen_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if response_format is not None:
            gen_config["response_mime_type"] = "application/json"

        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        resp = await model.generate_content_async(
            contents, generation_config=gen_config,
        )
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=_response_text(resp),
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            finish_reason=_finish_reason(resp),
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"


def _response_text(resp: Any) -> str:
    # resp.text raises ValueError when the candidate was blocked or has no parts.
    try:
        return resp.text or ""
    except ValueError:
        logger.warning("Gemini returned no text parts (finish_reason=%s)", _finish_reason(resp))
        return ""


def _finish_reason(resp: Any) -> str | None:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        feedback = getattr(resp, "prompt_feedback", None)
        reason = getattr(feedback, "block_reason", None)
        return f"BLOCKED:{getattr(reason, 'name', reason)}" if reason else None
    reason = getattr(candidates[0], "finish_reason", None)
    return getattr(reason, "name", None) or (str(reason) if reason is not None else None)
