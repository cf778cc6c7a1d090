"""Token budgets for free-tier providers.

Costs are estimated from word counts before the request goes out, so an
over-budget call is rejected without touching the network. Once the provider
answers, the reservation is swapped for the usage it reports.
"""

from __future__ import annotations

import logging
import math
import threading

from .types import BudgetExceededError, LLMRequest, LLMResult, ProviderError, is_rate_limit_error

logger = logging.getLogger(__name__)

TOKENS_PER_WORD = 1.3


def estimate_tokens(text: str) -> int:
    return math.ceil(len((text or "").split()) * TOKENS_PER_WORD)


def estimate_request_tokens(system: str, prompt: str, max_tokens: int) -> int:
    """Rough request cost: system prompt + user prompt + the full response allowance."""
    return estimate_tokens(system) + estimate_tokens(prompt) + int(max_tokens)


class TokenBudget:
    def __init__(self, ceiling: int, used: int = 0) -> None:
        self.ceiling = int(ceiling)
        self._used = int(used)
        self._lock = threading.Lock()

    @property
    def used(self) -> int:
        with self._lock:
            return self._used

    @property
    def remaining(self) -> int:
        with self._lock:
            return max(self.ceiling - self._used, 0)

    def reserve(self, tokens: int) -> None:
        with self._lock:
            if self._used + tokens > self.ceiling:
                raise BudgetExceededError(
                    f"token budget exceeded ({self._used}+{tokens} > {self.ceiling})"
                )
            self._used += tokens

    def settle(self, reserved: int, actual: int) -> None:
        with self._lock:
            self._used += actual - reserved

    def release(self, reserved: int) -> None:
        with self._lock:
            self._used = max(self._used - reserved, 0)

    def exhaust(self) -> None:
        with self._lock:
            self._used = self.ceiling


class BudgetedProvider:
    """Wraps a provider so every call is charged against a TokenBudget."""

    def __init__(self, inner, budget: TokenBudget) -> None:
        self.inner = inner
        self.name = inner.name
        self.budget = budget

    def generate(self, request: LLMRequest) -> LLMResult:
        estimate = estimate_request_tokens(request.system, request.prompt, request.max_tokens)
        try:
            self.budget.reserve(estimate)
        except BudgetExceededError as exc:
            raise BudgetExceededError(f"{self.name} spending limit exceeded: {exc}") from exc

        try:
            result = self.inner.generate(request)
        except ProviderError as exc:
            if is_rate_limit_error(exc):
                # Treat a 429 as a sign the free quota is nearly gone.
                self.budget.exhaust()
            else:
                self.budget.release(estimate)
            raise
        except Exception:
            self.budget.release(estimate)
            raise

        self.budget.settle(estimate, result.total_tokens or estimate)
        logger.info("%s token usage: %d/%d", self.name, self.budget.used, self.budget.ceiling)
        return result
