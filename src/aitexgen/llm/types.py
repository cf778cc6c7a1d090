"""Shared LLM data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class LLMRequest:
    prompt: str
    system: str
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: int
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResult:
    text: str
    provider: str
    model: str
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.tokens_in + self.tokens_out


class ProviderError(RuntimeError):
    """Provider failed to return a valid generation."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderUnavailableError(ProviderError):
    """Provider has no credential configured."""


class BudgetExceededError(ProviderError):
    """Request would push a budget-constrained provider over its token ceiling."""


class AllProvidersFailedError(ProviderError):
    """Every route in the provider chain failed."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("All provider routes failed: " + " | ".join(errors or ["no providers available"]))
        self.errors = list(errors)


def is_rate_limit_error(exc: BaseException) -> bool:
    """True for HTTP 429 responses or errors whose message mentions a rate limit."""
    if getattr(exc, "status_code", None) == 429:
        return True
    response = getattr(exc, "response", None)
    if getattr(response, "status_code", None) == 429:
        return True
    return "rate limit" in str(exc).lower()
