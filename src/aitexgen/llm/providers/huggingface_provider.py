"""HuggingFace Inference API provider (raw text generation)."""

from __future__ import annotations

import time
from typing import Optional

from ...catalog import ProviderDescriptor
from ..types import LLMRequest, LLMResult, ProviderError, ProviderUnavailableError
from .base import bearer_headers, post_json


def format_chat_prompt(system: str, prompt: str) -> str:
    return f"<|system|>\n{system}\n<|user|>\n{prompt}\n<|assistant|>"


class HuggingFaceProvider:
    def __init__(self, descriptor: ProviderDescriptor, api_key: Optional[str]) -> None:
        self.name = descriptor.name
        self._base_url = descriptor.base_url.rstrip("/")
        self._env_key = descriptor.env_key
        self._api_key = api_key

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise ProviderUnavailableError(f"{self._env_key} missing")

        payload = {
            "inputs": format_chat_prompt(request.system, request.prompt),
            "parameters": {
                "temperature": request.temperature,
                "max_new_tokens": request.max_tokens,
            },
        }

        start = time.perf_counter()
        data = post_json(
            f"{self._base_url}/{request.model}",
            bearer_headers(self._api_key),
            payload,
            request.timeout_seconds,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        # The endpoint answers with either an object or a one-element list.
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict) or "generated_text" not in data:
            raise ProviderError(f"{self.name}: malformed response, missing generated_text")

        return LLMResult(
            text=(data.get("generated_text") or "").strip(),
            provider=self.name,
            model=request.model,
            latency_ms=latency_ms,
        )
