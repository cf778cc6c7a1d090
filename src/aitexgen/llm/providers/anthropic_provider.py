"""Anthropic Messages API provider."""

from __future__ import annotations

import time
from typing import Optional

from ...catalog import ProviderDescriptor
from ..types import LLMRequest, LLMResult, ProviderError, ProviderUnavailableError
from .base import post_json


class AnthropicProvider:
    def __init__(self, descriptor: ProviderDescriptor, api_key: Optional[str]) -> None:
        self.name = descriptor.name
        self._url = descriptor.base_url
        self._env_key = descriptor.env_key
        self._api_key = api_key

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise ProviderUnavailableError(f"{self._env_key} missing")

        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        payload = {
            "model": request.model,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "system": request.system,
            "messages": [{"role": "user", "content": request.prompt}],
        }

        start = time.perf_counter()
        data = post_json(self._url, headers, payload, request.timeout_seconds)
        latency_ms = int((time.perf_counter() - start) * 1000)

        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, list):
            raise ProviderError(f"{self.name}: malformed response, missing content")
        text = "".join(
            item.get("text", "")
            for item in content
            if isinstance(item, dict) and item.get("type") == "text"
        )

        usage = data.get("usage") or {}
        tokens_in = int(usage.get("input_tokens", 0) or 0)
        tokens_out = int(usage.get("output_tokens", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            raw={"id": data.get("id")},
        )
