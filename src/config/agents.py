# src/config/agents.py - v2
"""Declarative LLM component configuration."""

from __future__ import annotations

# Phase-to-component mapping for LLM routing.
PHASE_COMPONENT_MAP: dict[str, list[str]] = {
    "documentation": ["generator"],
    "review": ["verifier", "translator"],
}
