"""OpenAI Chat Completions provider (official SDK)."""

from __future__ import annotations

import time
from typing import Any, Optional

from ...catalog import ProviderDescriptor
from ..types import LLMRequest, LLMResult, ProviderError, ProviderUnavailableError


class OpenAIProvider:
    def __init__(self, descriptor: ProviderDescriptor, api_key: Optional[str], client: Any = None) -> None:
        self.name = descriptor.name
        self._env_key = descriptor.env_key
        self._client = client
        if self._client is None and api_key:
            try:
                from openai import OpenAI
            except Exception as exc:  # pragma: no cover - depends on installed package
                raise ProviderError(f"openai package unavailable: {exc}") from exc
            self._client = OpenAI(api_key=api_key)

    def generate(self, request: LLMRequest) -> LLMResult:
        if self._client is None:
            raise ProviderUnavailableError(f"{self._env_key} missing")

        start = time.perf_counter()
        try:
            response = self._client.chat.completions.create(
                model=request.model,
                messages=[
                    {"role": "system", "content": request.system},
                    {"role": "user", "content": request.prompt},
                ],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                timeout=request.timeout_seconds,
            )
        except Exception as exc:
            raise ProviderError(str(exc), status_code=getattr(exc, "status_code", None)) from exc

        latency_ms = int((time.perf_counter() - start) * 1000)
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ProviderError(f"{self.name}: malformed response, missing choices[0]")
        text = getattr(choices[0].message, "content", "") or ""
        usage = getattr(response, "usage", None)

        tokens_in = int(getattr(usage, "prompt_tokens", 0) or 0)
        tokens_out = int(getattr(usage, "completion_tokens", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            raw={"id": getattr(response, "id", None)},
        )
