from aitexgen.config import load_settings
from aitexgen.llm.budget import BudgetedProvider
from aitexgen.llm.providers.chat_completions_provider import ChatCompletionsProvider
from aitexgen.llm.registry import ProviderRegistry, ProviderRuntimeState, select_provider_chain
from aitexgen.orchestrator import available_models

ALL_KEYS = {
    "OPENAI_API_KEY": "sk-openai",
    "ANTHROPIC_API_KEY": "sk-ant",
    "GROQ_API_KEY": "gsk",
    "TOGETHER_API_KEY": "tg",
    "HUGGINGFACE_API_KEY": "hf",
    "FIREWORKS_API_KEY": "fw",
    "OPENROUTER_API_KEY": "or",
}


def test_selector_drops_unavailable_and_rate_limited():
    states = {
        "groq": ProviderRuntimeState(available=True, rate_limited_until=200.0),
        "together": ProviderRuntimeState(available=False),
        "anthropic": ProviderRuntimeState(available=True),
        "openai": ProviderRuntimeState(available=True, rate_limited_until=50.0),
    }

    chain = select_provider_chain(["groq", "together", "anthropic", "openai", "unknown"], states, now=100.0)

    assert chain == ["anthropic", "openai"]


def test_selector_never_returns_unavailable_providers():
    states = {name: ProviderRuntimeState(available=False) for name in ALL_KEYS}
    assert select_provider_chain(list(states), states, now=0.0) == []


def test_missing_credentials_only_reduce_availability():
    registry = ProviderRegistry.from_env(load_settings("does-not-exist.yaml"), env={"TOGETHER_API_KEY": "tg"})

    assert registry.available_providers() == ["together"]
    assert registry.chain(["groq", "together", "openai"]) == ["together"]
    assert registry.snapshot()["groq"]["available"] is False


def test_groq_budget_wraps_client_and_shows_in_snapshot():
    env = {"GROQ_API_KEY": "gsk", "TOGETHER_API_KEY": "tg"}
    registry = ProviderRegistry.from_env(load_settings("does-not-exist.yaml"), env=env)

    assert isinstance(registry.client("groq"), BudgetedProvider)
    assert isinstance(registry.client("together"), ChatCompletionsProvider)
    assert registry.snapshot()["groq"]["token_ceiling"] == 1_000_000
    assert "token_ceiling" not in registry.snapshot()["together"]


def test_openrouter_referer_comes_from_domain():
    env = {"OPENROUTER_API_KEY": "or", "DOMAIN": "https://latex.example"}
    registry = ProviderRegistry.from_env(load_settings("does-not-exist.yaml"), env=env)

    client = registry.client("openrouter")
    assert client._extra_headers["HTTP-Referer"] == "https://latex.example"


def test_cooldown_setting_is_honoured():
    now = [0.0]
    config = load_settings("does-not-exist.yaml")
    config["rate_limit"]["cooldown_seconds"] = 10
    registry = ProviderRegistry.from_env(config, env={"GROQ_API_KEY": "gsk"}, clock=lambda: now[0])

    registry.mark_rate_limited("groq")
    assert registry.is_selectable("groq") is False
    now[0] = 10.0
    assert registry.is_selectable("groq") is True


def test_available_models_by_tier():
    registry = ProviderRegistry.from_env(load_settings("does-not-exist.yaml"), env=dict(ALL_KEYS))

    free = {m["id"] for m in available_models(registry, "free")}
    pro = {m["id"] for m in available_models(registry, "pro")}
    power = available_models(registry, "power")

    assert free == {
        "llama3-8b-8192",
        "mixtral-8x7b-32768",
        "mistral-7b-instruct",
        "accounts/fireworks/models/mixtral-8x7b-instruct",
        "HuggingFaceH4/zephyr-7b-beta",
    }
    assert "claude-3-7-sonnet-20250219" in pro
    assert "gpt-4o" not in pro
    assert len(power) == 12
    assert {"id": "gpt-4o", "name": "gpt-4o (OpenAI)", "provider": "openai", "tier": "power"} in power


def test_available_models_skip_unavailable_providers():
    registry = ProviderRegistry.from_env(load_settings("does-not-exist.yaml"), env={"ANTHROPIC_API_KEY": "k"})

    assert available_models(registry, "basic") == [
        {
            "id": "claude-3-haiku-20240307",
            "name": "claude-3-haiku-20240307 (Anthropic)",
            "provider": "anthropic",
            "tier": "basic",
        }
    ]
