# src/llm/client_factory.py - v3
"""Factory: instantiate LLM client from provider name.

Adapters are registered by dotted class path and imported lazily so a
deployment only needs the SDK of the providers it actually routes to.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from docsync.config.settings import Settings
from docsync.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "anthropic": "docsync.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "openai": "docsync.llm.adapters.openai_adapter.OpenAIAdapter",
    "google": "docsync.llm.adapters.google_adapter.GoogleAdapter",
    "ollama": "docsync.llm.adapters.ollama_adapter.OllamaAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: Any,
) -> BaseLLMClient:
    """Instantiate the adapter registered for ``provider``.

    Args:
        provider: Provider identifier (anthropic, openai, google, ollama).
        model: Model name (e.g. gemini-2.5-flash).
        settings: Application settings, used for API keys and endpoints.
        **kwargs: Additional adapter arguments (take precedence over settings).

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model
    if settings is not None:
        if provider == "anthropic":
            init_kwargs.setdefault("api_key", settings.anthropic_api_key)
        elif provider == "openai":
            init_kwargs.setdefault("api_key", settings.openai_api_key)
        elif provider == "google":
            init_kwargs.setdefault("api_key", settings.google_api_key)
        elif provider == "ollama":
            init_kwargs.setdefault("host", settings.ollama_base_url)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter (dotted path to a BaseLLMClient)."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def registered_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
