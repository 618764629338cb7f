# tests/conftest.py - v2
"""Shared test fixtures for all unit tests.

Provides sample documents, a mock LLM client, in-memory fakes for the
content source and the three LLM collaborators, and isolated settings.
No external dependencies: all I/O is mocked.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from docsync.agents.base import DocumentationGenerator, Translator, VerificationOracle
from docsync.cache.document_store import DocumentStore
from docsync.cache.fingerprint import compute_text_fingerprint
from docsync.cache.overlay_cache import OverlayCache
from docsync.config.settings import Settings
from docsync.core.errors import ContentFetchError, ContentFetchKind
from docsync.core.models import (
    Document,
    FileNode,
    Section,
    TranslatedFields,
    TranslatedSection,
    VerificationRecord,
    VerificationStatus,
)
from docsync.llm.models import LLMResponse
from docsync.sources.base_source import ContentSource


# === FAKES ===


class FakeSource(ContentSource):
    """In-memory repository: path -> file text. Fingerprints are git blob SHAs."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.fingerprint_calls = 0
        self.content_calls = 0

    @property
    def name(self) -> str:
        return "fake/repo"

    async def fetch_fingerprint(self, path: str) -> str:
        self.fingerprint_calls += 1
        return compute_text_fingerprint(self._read(path))

    async def fetch_content(self, path: str) -> str:
        self.content_calls += 1
        return self._read(path)

    async def list_files(self) -> list[FileNode]:
        nodes = [FileNode(name=p.rsplit("/", 1)[-1], path=p, type="file") for p in self.files]
        nodes.append(FileNode(name="src", path="src", type="dir"))
        return nodes

    def _read(self, path: str) -> str:
        if path not in self.files:
            raise ContentFetchError(ContentFetchKind.NOT_FOUND, "no such file", path=path)
        return self.files[path]


class FakeGenerator(DocumentationGenerator):
    """Returns queued raw outputs (or raises queued exceptions) in order."""

    def __init__(self, *outputs: str | Exception) -> None:
        self.outputs = list(outputs)
        self.calls: list[tuple[str, str]] = []

    async def generate(self, file_name: str, content: str) -> str:
        self.calls.append((file_name, content))
        out = self.outputs.pop(0) if len(self.outputs) > 1 else self.outputs[0]
        if isinstance(out, Exception):
            raise out
        return out


class FakeOracle(VerificationOracle):
    def __init__(self, result: VerificationRecord | Exception) -> None:
        self.result = result
        self.calls: list[tuple[str, str, str]] = []

    async def verify(self, file_name: str, source_code: str, example_code: str) -> VerificationRecord:
        self.calls.append((file_name, source_code, example_code))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeTranslator(Translator):
    """Prefixes every prose field with ``[lang]``."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, list[tuple[str, str]], str]] = []

    async def translate(
        self, summary: str, sections: list[tuple[str, str]], target_language: str,
    ) -> TranslatedFields:
        self.calls.append((summary, sections, target_language))
        if self.error is not None:
            raise self.error
        return TranslatedFields(
            summary=f"[{target_language}] {summary}",
            sections=[
                TranslatedSection(title=f"[{target_language}] {t}", content=f"[{target_language}] {c}")
                for t, c in sections
            ],
        )


# === FIXTURES: Sample data ===


SAMPLE_SOURCE = "export function add(a: number, b: number): number {\n  return a + b;\n}\n"


def generator_output(
    summary: str = "Adds two numbers.",
    code: str | None = "add(1, 2); // 3",
) -> str:
    """Well-formed generator output for a single-section document."""
    section: dict[str, str] = {"title": "Usage", "content": "Call add with two numbers."}
    if code is not None:
        section["codeExample"] = code
    return json.dumps({"filePath": "math.ts", "summary": summary, "sections": [section]})


@pytest.fixture
def sample_document() -> Document:
    """Canonical document with two sections, one carrying code."""
    return Document(
        file_path="src/math.ts",
        summary="Math helpers.",
        sections=[
            Section(title="Usage", content="Call add.", code_example="add(1, 2);"),
            Section(title="Notes", content="Pure functions only."),
        ],
    )


@pytest.fixture
def failed_record() -> VerificationRecord:
    return VerificationRecord(
        status=VerificationStatus.FAILED,
        logs="TypeError: add is not a function",
        fixed_code="import { add } from './math';\nadd(1, 2);",
    )


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture
def overlays() -> OverlayCache:
    return OverlayCache()


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource({"src/math.ts": SAMPLE_SOURCE})


# === FIXTURES: Settings ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


# === FIXTURES: Mock LLM client ===


def make_llm_response(content: str, finish_reason: str | None = "stop") -> LLMResponse:
    return LLMResponse(
        content=content,
        input_tokens=100,
        output_tokens=50,
        model="test-model",
        provider="test",
        latency_ms=500,
        finish_reason=finish_reason,
    )


@pytest.fixture
def mock_llm():
    """Mock LLM client whose complete() returns a JSON document."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=make_llm_response(generator_output()))
    client.provider_name = "test"
    return client


# === FIXTURES: Factories ===


@pytest.fixture
def make_source():
    return FakeSource


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def make_oracle():
    return FakeOracle


@pytest.fixture
def make_translator():
    return FakeTranslator


@pytest.fixture
def make_output():
    return generator_output


@pytest.fixture
def make_response():
    return make_llm_response
