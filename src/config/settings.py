# src/config/settings.py - v3
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "google"
    llm_default_model: str = "gemini-2.5-flash"
    llm_default_temperature: float = 0.2
    llm_max_tokens: int = 8192
    llm_retry_enabled: bool = True

    # Provider API keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    google_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Per-phase LLM assignment
    llm_phase_documentation: str = ""
    llm_phase_review: str = ""

    # Per-component LLM assignment (highest priority)
    llm_generator: str = "google:gemini-3-pro-preview"
    llm_verifier: str = ""
    llm_translator: str = ""

    # === Generation limits ===
    max_source_chars: int = 10_000
    minified_line_length: int = 1000
    raw_fallback_max_chars: int = 1000

    # === Content sources ===
    github_api_base: str = "https://api.github.com"
    github_token: str = ""
    github_timeout_s: float = 30.0
    documentable_extensions: str = ".ts,.tsx,.js,.jsx,.py,.go,.rs,.java"

    # === Translation ===
    default_language: str = "en"
    supported_languages: str = "en,es,fr,de,ja,zh,pt"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("max_source_chars", "minified_line_length", "raw_fallback_max_chars")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("limit must be > 0")
        return v

    @field_validator("default_language")
    @classmethod
    def normalize_language(cls, v: str) -> str:  # noqa: N805
        return v.strip().lower()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.default_language not in self.supported_languages_list:
            errors.append(
                f"DEFAULT_LANGUAGE {self.default_language!r} is not in SUPPORTED_LANGUAGES"
            )

        for name in ("llm_phase_documentation", "llm_phase_review",
                     "llm_generator", "llm_verifier", "llm_translator"):
            value = getattr(self, name)
            if value and ":" not in value:
                errors.append(f"{name.upper()} must be 'provider:model', got {value!r}")

        if not self.documentable_extensions_list:
            errors.append("DOCUMENTABLE_EXTENSIONS must list at least one extension")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def documentable_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions, normalized to '.ext' lowercase."""
        exts = []
        for raw in self.documentable_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            exts.append(ext if ext.startswith(".") else f".{ext}")
        return exts

    @property
    def supported_languages_list(self) -> list[str]:
        """Parse comma-separated two-letter language codes."""
        return [c.strip().lower() for c in self.supported_languages.split(",") if c.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
