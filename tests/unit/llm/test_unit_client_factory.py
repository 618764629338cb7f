# tests/unit/llm/test_unit_client_factory.py - v1
"""Tests for llm/client_factory.py - provider registry and instantiation."""

from __future__ import annotations

import pytest

from docsync.llm.adapters.anthropic_adapter import AnthropicAdapter
from docsync.llm.adapters.google_adapter import GoogleAdapter
from docsync.llm.adapters.ollama_adapter import OllamaAdapter
from docsync.llm.adapters.openai_adapter import OpenAIAdapter
from docsync.llm.client_factory import (
    _PROVIDER_REGISTRY,
    UnsupportedProviderError,
    create_llm_client,
    register_provider,
    registered_providers,
)


class TestCreateLLMClient:
    def test_google_gets_api_key(self, settings):
        s = settings.model_copy(update={"google_api_key": "g-key"})
        client = create_llm_client("google", "gemini-2.5-flash", settings=s)
        assert isinstance(client, GoogleAdapter)
        assert client._api_key == "g-key"
        assert client._model == "gemini-2.5-flash"
        assert client.provider_name == "google"

    def test_anthropic(self, settings):
        s = settings.model_copy(update={"anthropic_api_key": "a-key"})
        client = create_llm_client("anthropic", "claude-sonnet-4-20250514", settings=s)
        assert isinstance(client, AnthropicAdapter)
        assert client._api_key == "a-key"

    def test_openai_kwargs_take_precedence(self, settings):
        s = settings.model_copy(update={"openai_api_key": "from-settings"})
        client = create_llm_client("openai", "gpt-4o", settings=s, api_key="explicit")
        assert isinstance(client, OpenAIAdapter)
        assert client._api_key == "explicit"

    def test_ollama_host(self, settings):
        client = create_llm_client("ollama", "llama3", settings=settings)
        assert isinstance(client, OllamaAdapter)
        assert client._host == settings.ollama_base_url

    def test_without_settings(self):
        client = create_llm_client("google", "gemini-2.5-flash")
        assert client._api_key == ""

    def test_unsupported(self):
        with pytest.raises(UnsupportedProviderError, match="Unsupported LLM provider"):
            create_llm_client("mistral", "large")


class TestRegistry:
    def test_builtins(self):
        assert registered_providers() == ["anthropic", "google", "ollama", "openai"]

    def test_register_custom(self, monkeypatch):
        monkeypatch.setitem(
            _PROVIDER_REGISTRY, "custom", "docsync.llm.adapters.ollama_adapter.OllamaAdapter",
        )
        client = create_llm_client("custom", "local-model")
        assert isinstance(client, OllamaAdapter)

    def test_register_provider(self, monkeypatch):
        monkeypatch.setattr(
            "docsync.llm.client_factory._PROVIDER_REGISTRY", dict(_PROVIDER_REGISTRY),
        )
        register_provider("other", "docsync.llm.adapters.openai_adapter.OpenAIAdapter")
        assert "other" in registered_providers()
        assert "other" not in _PROVIDER_REGISTRY
