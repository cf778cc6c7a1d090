"""Static provider descriptors, model catalog and subscription tiers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class SubscriptionTier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"
    POWER = "power"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @classmethod
    def parse(cls, value: "str | SubscriptionTier") -> "SubscriptionTier":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown subscription tier: {value}") from exc

    def allows(self, required: "SubscriptionTier") -> bool:
        return required.rank <= self.rank


_TIER_ORDER = (
    SubscriptionTier.FREE,
    SubscriptionTier.BASIC,
    SubscriptionTier.PRO,
    SubscriptionTier.POWER,
)


@dataclass(frozen=True)
class ModelSpec:
    model_id: str
    tier: SubscriptionTier


@dataclass(frozen=True)
class ProviderDescriptor:
    name: str
    label: str
    base_url: str
    models: Tuple[ModelSpec, ...]
    env_key: str
    auth_scheme: str = "bearer"
    api_shape: str = "chat-completions"
    adapter: str = ""

    @property
    def adapter_kind(self) -> str:
        return self.adapter or self.api_shape

    @property
    def default_model(self) -> str:
        return self.models[0].model_id

    def owns(self, model_id: str) -> bool:
        return any(spec.model_id == model_id for spec in self.models)


PROVIDER_DESCRIPTORS: Dict[str, ProviderDescriptor] = {
    "openai": ProviderDescriptor(
        name="openai",
        label="OpenAI",
        base_url="https://api.openai.com/v1",
        models=(
            ModelSpec("gpt-4o", SubscriptionTier.POWER),
            ModelSpec("gpt-3.5-turbo", SubscriptionTier.BASIC),
        ),
        env_key="OPENAI_API_KEY",
        adapter="openai-sdk",
    ),
    "anthropic": ProviderDescriptor(
        name="anthropic",
        label="Anthropic",
        base_url="https://api.anthropic.com/v1/messages",
        models=(
            ModelSpec("claude-3-7-sonnet-20250219", SubscriptionTier.PRO),
            ModelSpec("claude-3-haiku-20240307", SubscriptionTier.BASIC),
        ),
        env_key="ANTHROPIC_API_KEY",
        auth_scheme="x-api-key",
        api_shape="message-api",
    ),
    "groq": ProviderDescriptor(
        name="groq",
        label="Groq",
        base_url="https://api.groq.com/openai/v1/chat/completions",
        models=(
            ModelSpec("llama3-8b-8192", SubscriptionTier.FREE),
            ModelSpec("mixtral-8x7b-32768", SubscriptionTier.FREE),
        ),
        env_key="GROQ_API_KEY",
    ),
    "together": ProviderDescriptor(
        name="together",
        label="TogetherAI",
        base_url="https://api.together.xyz/v1/chat/completions",
        models=(ModelSpec("mistral-7b-instruct", SubscriptionTier.FREE),),
        env_key="TOGETHER_API_KEY",
    ),
    "fireworks": ProviderDescriptor(
        name="fireworks",
        label="Fireworks",
        base_url="https://api.fireworks.ai/inference/v1/chat/completions",
        models=(ModelSpec("accounts/fireworks/models/mixtral-8x7b-instruct", SubscriptionTier.FREE),),
        env_key="FIREWORKS_API_KEY",
    ),
    "huggingface": ProviderDescriptor(
        name="huggingface",
        label="HuggingFace",
        base_url="https://api-inference.huggingface.co/models",
        models=(ModelSpec("HuggingFaceH4/zephyr-7b-beta", SubscriptionTier.FREE),),
        env_key="HUGGINGFACE_API_KEY",
        api_shape="raw-generation",
    ),
    "openrouter": ProviderDescriptor(
        name="openrouter",
        label="OpenRouter",
        base_url="https://openrouter.ai/api/v1/chat/completions",
        models=(
            ModelSpec("google/gemini-pro", SubscriptionTier.BASIC),
            ModelSpec("anthropic/claude-3-sonnet", SubscriptionTier.PRO),
            ModelSpec("openai/gpt-4", SubscriptionTier.POWER),
        ),
        env_key="OPENROUTER_API_KEY",
    ),
}
