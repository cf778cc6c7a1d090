"""LLM provider interface and shared HTTP helper."""

from __future__ import annotations

from typing import Any, Dict, Protocol

import requests

from ..types import LLMRequest, LLMResult, ProviderError


class LLMProvider(Protocol):
    name: str

    def generate(self, request: LLMRequest) -> LLMResult:
        ...


def post_json(url: str, headers: Dict[str, str], payload: Dict[str, Any], timeout: float) -> Any:
    """POSTs a JSON payload and returns the decoded body.

    Non-2xx responses, transport failures and undecodable bodies all surface
    as ProviderError; the HTTP status is kept when there is one.
    """
    try:
        res = requests.post(url, headers=headers, json=payload, timeout=timeout)
        res.raise_for_status()
        return res.json()
    except requests.HTTPError as exc:
        status = getattr(exc.response, "status_code", None)
        raise ProviderError(str(exc), status_code=status) from exc
    except Exception as exc:
        raise ProviderError(str(exc)) from exc


def bearer_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
