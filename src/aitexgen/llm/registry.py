"""Provider registry: static descriptors plus per-process runtime state."""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..catalog import PROVIDER_DESCRIPTORS, ProviderDescriptor
from .budget import BudgetedProvider, TokenBudget
from .providers.anthropic_provider import AnthropicProvider
from .providers.chat_completions_provider import ChatCompletionsProvider
from .providers.huggingface_provider import HuggingFaceProvider
from .providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 300


@dataclass
class ProviderRuntimeState:
    available: bool
    rate_limited_until: Optional[float] = None
    last_error: Optional[str] = None
    calls: int = 0
    failures: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def is_rate_limited(self, now: float) -> bool:
        return self.rate_limited_until is not None and now < self.rate_limited_until


def select_provider_chain(
    priority: Iterable[str],
    states: Mapping[str, ProviderRuntimeState],
    now: float,
) -> List[str]:
    """Keeps priority order, dropping unknown, unavailable and rate-limited providers."""
    chain: List[str] = []
    for name in priority:
        state = states.get(name)
        if state is None or not state.available or state.is_rate_limited(now):
            continue
        if name not in chain:
            chain.append(name)
    return chain


def _build_client(descriptor: ProviderDescriptor, api_key: str, config: Dict[str, Any], env: Mapping[str, str]):
    kind = descriptor.adapter_kind
    if kind == "openai-sdk":
        return OpenAIProvider(descriptor, api_key)
    if kind == "message-api":
        return AnthropicProvider(descriptor, api_key)
    if kind == "raw-generation":
        return HuggingFaceProvider(descriptor, api_key)
    if kind == "chat-completions":
        extra_headers = None
        if descriptor.name == "openrouter":
            openrouter_cfg = config.get("openrouter", {})
            extra_headers = {
                "HTTP-Referer": env.get("DOMAIN") or openrouter_cfg.get("default_domain", "http://localhost:5000"),
                "X-Title": openrouter_cfg.get("title", "AI LaTeX Generator"),
            }
        return ChatCompletionsProvider(descriptor, api_key, extra_headers=extra_headers)
    raise ValueError(f"Unknown adapter kind for {descriptor.name}: {kind}")


class ProviderRegistry:
    def __init__(
        self,
        descriptors: Mapping[str, ProviderDescriptor],
        clients: Mapping[str, Any],
        budgets: Mapping[str, TokenBudget] | None = None,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.descriptors = dict(descriptors)
        self.budgets = dict(budgets or {})
        self.cooldown_seconds = float(cooldown_seconds)
        self._clock = clock
        self._clients: Dict[str, Any] = {}
        for name, client in clients.items():
            if client is None:
                continue
            budget = self.budgets.get(name)
            self._clients[name] = BudgetedProvider(client, budget) if budget is not None else client
        self._states = {
            name: ProviderRuntimeState(available=name in self._clients)
            for name in self.descriptors
        }

    @classmethod
    def from_env(cls, config: Dict[str, Any], env: Mapping[str, str] | None = None, **kwargs) -> "ProviderRegistry":
        env = os.environ if env is None else env
        clients: Dict[str, Any] = {}
        for name, descriptor in PROVIDER_DESCRIPTORS.items():
            api_key = env.get(descriptor.env_key)
            if not api_key:
                logger.info("%s unavailable: %s not set", descriptor.label, descriptor.env_key)
                continue
            clients[name] = _build_client(descriptor, api_key, config, env)

        budgets = {
            name: TokenBudget(int(ceiling))
            for name, ceiling in (config.get("budgets") or {}).items()
            if name in PROVIDER_DESCRIPTORS and ceiling
        }
        cooldown = config.get("rate_limit", {}).get("cooldown_seconds", DEFAULT_COOLDOWN_SECONDS)
        registry = cls(PROVIDER_DESCRIPTORS, clients, budgets=budgets, cooldown_seconds=cooldown, **kwargs)
        logger.info("Available providers: %s", ", ".join(registry.available_providers()) or "none")
        return registry

    def now(self) -> float:
        return self._clock()

    def descriptor(self, name: str) -> ProviderDescriptor:
        return self.descriptors[name]

    def client(self, name: str):
        return self._clients.get(name)

    def is_available(self, name: str) -> bool:
        state = self._states.get(name)
        return bool(state and state.available)

    def is_selectable(self, name: str) -> bool:
        state = self._states.get(name)
        if state is None:
            return False
        with state.lock:
            return state.available and not state.is_rate_limited(self.now())

    def available_providers(self) -> List[str]:
        return [name for name, state in self._states.items() if state.available]

    def chain(self, priority: Iterable[str]) -> List[str]:
        now = self.now()
        snapshot: Dict[str, ProviderRuntimeState] = {}
        for name, state in self._states.items():
            with state.lock:
                snapshot[name] = ProviderRuntimeState(
                    available=state.available,
                    rate_limited_until=state.rate_limited_until,
                )
        return select_provider_chain(priority, snapshot, now)

    def owner_of(self, model: str) -> Optional[str]:
        for name, descriptor in self.descriptors.items():
            if descriptor.owns(model):
                return name
        return None

    def mark_rate_limited(self, name: str) -> None:
        state = self._states[name]
        with state.lock:
            state.rate_limited_until = self.now() + self.cooldown_seconds
        logger.warning("%s rate limited, cooling down for %ds", name, int(self.cooldown_seconds))

    def record_failure(self, name: str, exc: BaseException) -> None:
        state = self._states[name]
        with state.lock:
            state.calls += 1
            state.failures += 1
            state.last_error = str(exc)

    def record_success(self, name: str) -> None:
        state = self._states[name]
        with state.lock:
            state.calls += 1

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        now = self.now()
        out: Dict[str, Dict[str, Any]] = {}
        for name, state in self._states.items():
            with state.lock:
                limited = state.is_rate_limited(now)
                row: Dict[str, Any] = {
                    "label": self.descriptors[name].label,
                    "available": state.available,
                    "rate_limited": limited,
                    "cooldown_remaining_seconds": int(state.rate_limited_until - now) if limited else 0,
                    "last_error": state.last_error,
                    "calls": state.calls,
                    "failures": state.failures,
                }
            budget = self.budgets.get(name)
            if budget is not None:
                row["tokens_used"] = budget.used
                row["token_ceiling"] = budget.ceiling
                row["tokens_remaining"] = budget.remaining
            out[name] = row
        return out
