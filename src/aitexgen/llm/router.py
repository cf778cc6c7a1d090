"""Provider chain routing with per-provider failure isolation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..config import DEFAULT_SETTINGS, parse_route
from ..extraction import extract_latex
from .registry import ProviderRegistry
from .types import AllProvidersFailedError, LLMRequest, LLMResult, is_rate_limit_error

logger = logging.getLogger(__name__)


class LLMRouter:
    def __init__(self, config: Dict[str, Any], registry: ProviderRegistry) -> None:
        self.config = config
        self.registry = registry

    def _routes(self) -> List[Tuple[str, str]]:
        cfg_routes = self.config.get("routing", {}).get("chain") or DEFAULT_SETTINGS["routing"]["chain"]
        return [parse_route(str(r)) for r in cfg_routes]

    def _pinned_models(self) -> Dict[str, str]:
        return {provider: model for provider, model in self._routes() if model}

    def _resolve_override(self, model: str) -> Optional[Tuple[str, str]]:
        model = model.strip()
        try:
            provider_name, model_id = parse_route(model)
        except ValueError:
            provider_name, model_id = "", ""
        if model_id and provider_name in self.registry.descriptors:
            return provider_name, model_id
        owner = self.registry.owner_of(model)
        if owner is None:
            return None
        return owner, model

    def _build_request(self, prompt: str, system: str, model: str, meta: Dict[str, Any] | None) -> LLMRequest:
        llm_cfg = self.config.get("llm", {})
        return LLMRequest(
            prompt=prompt,
            system=system,
            model=model,
            temperature=float(llm_cfg.get("temperature", 0.2)),
            max_tokens=int(llm_cfg.get("max_tokens", 4000)),
            timeout_seconds=int(llm_cfg.get("timeout_seconds", 60)),
            meta=meta or {},
        )

    def _call(self, provider_name: str, model: str, prompt: str, system: str, meta) -> LLMResult:
        client = self.registry.client(provider_name)
        try:
            result = client.generate(self._build_request(prompt, system, model, meta))
        except Exception as exc:
            self.registry.record_failure(provider_name, exc)
            if is_rate_limit_error(exc):
                self.registry.mark_rate_limited(provider_name)
            raise
        self.registry.record_success(provider_name)
        result.text = extract_latex(result.text)
        return result

    def generate(
        self,
        prompt: str,
        system: str,
        model: str | None = None,
        meta: Dict[str, Any] | None = None,
    ) -> LLMResult:
        """Returns the first successful provider result, with LaTeX already extracted.

        An explicit model is tried once before the chain; its failure never
        aborts the request.
        """
        errors: list[str] = []

        model = (model or "").strip()
        if model:
            resolved = self._resolve_override(model)
            if resolved is None:
                errors.append(f"{model}: model not found in any provider")
                logger.warning("Requested model %s is not offered by any provider", model)
            elif not self.registry.is_selectable(resolved[0]):
                errors.append(f"{model}: provider {resolved[0]} unavailable or rate limited")
                logger.warning("Skipping requested model %s: %s not selectable", model, resolved[0])
            else:
                provider_name, model_id = resolved
                try:
                    result = self._call(provider_name, model_id, prompt, system, meta)
                    logger.info("Generated with requested model %s (%s)", model_id, provider_name)
                    return result
                except Exception as exc:
                    logger.error("Error with specified model %s: %s", model, exc)
                    errors.append(f"{provider_name}:{model_id}: {exc}")

        pinned = self._pinned_models()
        priority = [provider for provider, _ in self._routes()]
        for provider_name in self.registry.chain(priority):
            # Another request may have tripped the cool-down since the chain was built.
            if not self.registry.is_selectable(provider_name):
                continue
            model_id = pinned.get(provider_name) or self.registry.descriptor(provider_name).default_model
            try:
                result = self._call(provider_name, model_id, prompt, system, meta)
            except Exception as exc:
                logger.error("Error with provider %s: %s", provider_name, exc)
                errors.append(f"{provider_name}:{model_id}: {exc}")
                continue
            logger.info(
                "Generated with %s (%s) in %dms",
                self.registry.descriptor(provider_name).label,
                model_id,
                result.latency_ms,
            )
            return result

        raise AllProvidersFailedError(errors)
