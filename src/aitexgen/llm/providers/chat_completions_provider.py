"""OpenAI-compatible Chat Completions provider (Groq, TogetherAI, Fireworks, OpenRouter)."""

from __future__ import annotations

import time
from typing import Dict, Optional

from ...catalog import ProviderDescriptor
from ..types import LLMRequest, LLMResult, ProviderError, ProviderUnavailableError
from .base import bearer_headers, post_json


class ChatCompletionsProvider:
    def __init__(
        self,
        descriptor: ProviderDescriptor,
        api_key: Optional[str],
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.name = descriptor.name
        self._url = descriptor.base_url
        self._env_key = descriptor.env_key
        self._api_key = api_key
        self._extra_headers = dict(extra_headers or {})

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise ProviderUnavailableError(f"{self._env_key} missing")

        headers = bearer_headers(self._api_key)
        headers.update(self._extra_headers)
        payload = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system},
                {"role": "user", "content": request.prompt},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

        start = time.perf_counter()
        data = post_json(self._url, headers, payload, request.timeout_seconds)
        latency_ms = int((time.perf_counter() - start) * 1000)

        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError(f"{self.name}: malformed response, missing choices[0]") from exc

        usage = data.get("usage") or {}
        return LLMResult(
            text=(message.get("content") or "").strip(),
            provider=self.name,
            model=request.model,
            tokens_in=int(usage.get("prompt_tokens", 0) or 0),
            tokens_out=int(usage.get("completion_tokens", 0) or 0),
            latency_ms=latency_ms,
            raw={"id": data.get("id"), "total_tokens": usage.get("total_tokens")},
        )
