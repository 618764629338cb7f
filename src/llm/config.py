# src/llm/config.py - v2
"""Per-component LLM routing with 3-level cascade resolution.

Resolution order:
  1. Per-component env var (LLM_VERIFIER=openai:gpt-4o)
  2. Per-phase env var (LLM_PHASE_REVIEW=anthropic:claude-sonnet-4-20250514)
  3. Default provider + model (LLM_DEFAULT_PROVIDER + LLM_DEFAULT_MODEL)
  4. Hardcoded fallback (google:gemini-2.5-flash)

The documentation generator ships with a per-component default pointing at
the larger model; verification and translation use the faster default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from docsync.config.agents import PHASE_COMPONENT_MAP
from docsync.config.settings import Settings

_FALLBACK_PROVIDER = "google"
_FALLBACK_MODEL = "gemini-2.5-flash"

AssignmentSource = Literal["component", "phase", "default", "fallback"]


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved LLM provider:model for a component."""

    provider: str
    model: str
    source: AssignmentSource

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def phase_of(component: str) -> str | None:
    """Return the phase a component is routed under, if any."""
    for phase, components in PHASE_COMPONENT_MAP.items():
        if component in components:
            return phase
    return None


def parse_assignment(value: str) -> tuple[str, str] | None:
    """Split a 'provider:model' string. Returns None if empty or malformed."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    provider, model = provider.strip().lower(), model.strip()
    if not provider or not model:
        return None
    return provider, model


def resolve_llm(component: str, settings: Settings) -> LLMAssignment:
    """Resolve the LLM assignment for ``component`` using the cascade."""
    parsed = parse_assignment(getattr(settings, f"llm_{component}", ""))
    if parsed:
        return LLMAssignment(provider=parsed[0], model=parsed[1], source="component")

    phase = phase_of(component)
    if phase:
        parsed = parse_assignment(getattr(settings, f"llm_phase_{phase}", ""))
        if parsed:
            return LLMAssignment(provider=parsed[0], model=parsed[1], source="phase")

    if settings.llm_default_provider and settings.llm_default_model:
        return LLMAssignment(
            provider=settings.llm_default_provider.lower(),
            model=settings.llm_default_model,
            source="default",
        )

    return LLMAssignment(
        provider=_FALLBACK_PROVIDER, model=_FALLBACK_MODEL, source="fallback",
    )


def resolve_all(settings: Settings) -> dict[str, LLMAssignment]:
    """Resolve assignments for every routed component."""
    components = sorted({c for cs in PHASE_COMPONENT_MAP.values() for c in cs})
    return {c: resolve_llm(c, settings) for c in components}
