"""Configuration loading and defaults."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_SETTINGS: Dict[str, Any] = {
    "llm": {
        "temperature": 0.2,
        "max_tokens": 4000,
        "timeout_seconds": 60,
    },
    "rate_limit": {
        "cooldown_seconds": 300,
    },
    # Hard token ceilings for free-tier backends. Providers not listed are unmetered.
    "budgets": {
        "groq": 1_000_000,
    },
    # Cheapest/fastest first, frontier providers last.
    "routing": {
        "chain": [
            "groq",
            "together",
            "fireworks",
            "huggingface",
            "anthropic",
            "openai",
            "openrouter",
        ],
    },
    "openrouter": {
        "default_domain": "http://localhost:5000",
        "title": "AI LaTeX Generator",
    },
    "logging": {
        "level": "INFO",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path: str = "config/settings.yaml") -> Dict[str, Any]:
    """Loads settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        merged = _deep_merge(merged, user_cfg)
    return merged


def parse_route(route: str) -> tuple[str, str]:
    """Parses 'provider' or 'provider:model' route strings.

    The model part is empty when the route names only a provider.
    """
    route = (route or "").strip()
    if not route:
        raise ValueError("Empty route")
    if ":" not in route:
        return route, ""
    provider, model = route.split(":", 1)
    if not provider.strip():
        raise ValueError(f"Invalid route format: {route}")
    return provider.strip(), model.strip()
