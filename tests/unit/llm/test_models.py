# tests/unit/llm/test_models.py - v2
"""Tests for llm/models.py - LLM interface types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docsync.llm.models import LLMResponse, Message


class TestMessage:
    def test_all_roles(self):
        for role in ["user", "assistant", "system"]:
            assert Message(role=role, content="test").role == role

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="x")  # type: ignore[arg-type]


class TestLLMResponse:
    def test_create(self, make_response):
        r = make_response("output")
        assert r.provider == "test"
        assert r.finish_reason == "stop"
        assert r.raw_response is None

    @pytest.mark.parametrize("content,empty", [("", True), ("  \n", True), ("{}", False)])
    def test_is_empty(self, make_response, content, empty):
        assert make_response(content).is_empty is empty
