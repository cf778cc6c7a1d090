import threading

import pytest

from aitexgen.llm.budget import BudgetedProvider, TokenBudget, estimate_request_tokens
from aitexgen.llm.types import BudgetExceededError, LLMRequest, LLMResult, ProviderError


def _request(prompt="one two three", max_tokens=100):
    return LLMRequest(
        prompt=prompt,
        system="be brief",
        model="llama3-8b-8192",
        temperature=0.2,
        max_tokens=max_tokens,
        timeout_seconds=5,
    )


class CountingProvider:
    name = "groq"

    def __init__(self, tokens_in=0, tokens_out=0, error=None):
        self.calls = 0
        self.tokens_in = tokens_in
        self.tokens_out = tokens_out
        self.error = error

    def generate(self, request):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return LLMResult(
            text="ok",
            provider=self.name,
            model=request.model,
            tokens_in=self.tokens_in,
            tokens_out=self.tokens_out,
        )


def test_estimate_counts_words_and_response_allowance():
    # ceil(2 * 1.3) + ceil(3 * 1.3) + 100
    assert estimate_request_tokens("be brief", "one two three", 100) == 3 + 4 + 100


def test_over_budget_request_is_rejected_before_the_call(monkeypatch):
    def no_network(*args, **kwargs):
        raise AssertionError("network must not be touched")

    monkeypatch.setattr("aitexgen.llm.providers.base.requests.post", no_network)
    inner = CountingProvider()
    provider = BudgetedProvider(inner, TokenBudget(ceiling=100))

    with pytest.raises(BudgetExceededError):
        provider.generate(_request())

    assert inner.calls == 0
    assert provider.budget.used == 0


def test_reported_usage_replaces_estimate():
    budget = TokenBudget(ceiling=1000)
    provider = BudgetedProvider(CountingProvider(tokens_in=20, tokens_out=30), budget)

    provider.generate(_request())

    assert budget.used == 50


def test_estimate_is_charged_when_usage_is_not_reported():
    budget = TokenBudget(ceiling=1000)
    provider = BudgetedProvider(CountingProvider(), budget)

    provider.generate(_request())

    assert budget.used == 107


def test_failed_call_releases_reservation():
    budget = TokenBudget(ceiling=1000)
    provider = BudgetedProvider(CountingProvider(error=ProviderError("boom", status_code=500)), budget)

    with pytest.raises(ProviderError):
        provider.generate(_request())

    assert budget.used == 0


def test_rate_limit_exhausts_budget():
    budget = TokenBudget(ceiling=1000)
    provider = BudgetedProvider(CountingProvider(error=ProviderError("slow down", status_code=429)), budget)

    with pytest.raises(ProviderError):
        provider.generate(_request())

    assert budget.remaining == 0


def test_concurrent_reservations_never_overshoot():
    budget = TokenBudget(ceiling=1000)
    accepted = []

    def worker():
        try:
            budget.reserve(10)
        except BudgetExceededError:
            return
        accepted.append(1)

    threads = [threading.Thread(target=worker) for _ in range(200)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(accepted) == 100
    assert budget.used == 1000
