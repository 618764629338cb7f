# src/agents/schemas.py - v1
"""Advisory wire shapes requested from the LLM.

Passed as ``response_format`` so providers with JSON/structured modes can
constrain their output. Nothing downstream trusts these shapes: replies are
still decoded leniently and defaulted field by field.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SectionPayload(BaseModel):
    title: str
    content: str
    codeExample: str | None = Field(
        default=None, description="Short usage example (max 10 lines)."
    )


class DocumentPayload(BaseModel):
    filePath: str
    summary: str
    sections: list[SectionPayload]


class VerificationPayload(BaseModel):
    status: Literal["SUCCESS", "FAILED"]
    logs: str
    fixedCode: str | None = None


class TranslatedSectionPayload(BaseModel):
    title: str
    content: str


class TranslationPayload(BaseModel):
    summary: str
    sections: list[TranslatedSectionPayload]
