# src/llm/adapters/anthropic_adapter.py - v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK. Structured output is requested through a
forced tool call whose input schema is the response model's JSON schema.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import BaseModel

from docsync.llm.base_client import BaseLLMClient
from docsync.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install 'docsync[anthropic]'"
                ) from e
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or "")
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            # The Messages API takes the system prompt separately.
            "messages": [
                {"role": m.role, "content": m.content} for m in messages if m.role != "system"
            ],
        }
        if system:
            kwargs["system"] = system

        if response_format is not None:
            kwargs["tools"] = [
                {
                    "name": "structured_output",
                    "description": "Return structured data matching the schema",
                    "input_schema": response_format.model_json_schema(),
                }
            ]
            kwargs["tool_choice"] = {"type": "tool", "name": "structured_output"}

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response, response_format is not None),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            finish_reason=getattr(response, "stop_reason", None),
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @staticmethod
    def _extract_content(response: Any, structured: bool) -> str:
        """Extract text from Anthropic response content blocks."""
        for block in response.content:
            if structured and getattr(block, "type", None) == "tool_use":
                return json.dumps(block.input)
            if getattr(block, "type", None) == "text":
                return block.text
        return ""
