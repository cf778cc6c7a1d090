"""Generate/modify operations consumed by the HTTP layer and the CLI."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from .catalog import SubscriptionTier
from .llm.registry import ProviderRegistry
from .llm.types import ProviderError
from .prompts import (
    LATEX_SYSTEM_PROMPT,
    GenerationRequest,
    ModificationRequest,
    build_generation_prompt,
    build_modification_prompt,
)

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "All AI providers failed to generate LaTeX. Please try again later."
MODIFICATION_FAILED_MESSAGE = (
    "All available AI providers failed to process your request. Please try again later."
)

_MAKETITLE_RE = re.compile(r"\\maketitle")


def _success(result) -> Dict[str, Any]:
    return {
        "success": True,
        "latex": result.text,
        "provider": result.provider,
        "model": result.model,
    }


def generate_latex(
    router,
    content: str,
    document_type: str,
    options: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    request = GenerationRequest.from_options(content, document_type, options)
    prompt = build_generation_prompt(request)
    try:
        result = router.generate(
            prompt=prompt,
            system=LATEX_SYSTEM_PROMPT,
            model=request.model,
            meta={"operation": "generate", "document_type": document_type},
        )
    except ProviderError as exc:
        logger.error("LaTeX generation failed: %s", exc)
        return {"success": False, "error": GENERATION_FAILED_MESSAGE}
    return _success(result)


def is_date_removal(request: ModificationRequest) -> bool:
    """An omission mentioning the date on a document whose title date is implicit."""
    return (
        request.is_omit
        and "date" in request.notes.lower()
        and "\\maketitle" in request.latex_content
        and "\\date{" not in request.latex_content
    )


def blank_title_date(latex_content: str) -> str:
    return _MAKETITLE_RE.sub(lambda _: "\\date{}\n\\maketitle", latex_content, count=1)


def modify_latex(
    router,
    latex_content: str,
    notes: str,
    is_omit: bool = False,
    options: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    options = options or {}
    request = ModificationRequest(
        latex_content=latex_content or "",
        notes=notes or "",
        is_omit=bool(is_omit),
        model=(options.get("model") or "").strip() or None,
    )

    if is_date_removal(request):
        logger.info("Removing implicit title date without calling a provider")
        return {"success": True, "latex": blank_title_date(request.latex_content)}

    try:
        result = router.generate(
            prompt=build_modification_prompt(request),
            system=LATEX_SYSTEM_PROMPT,
            model=request.model,
            meta={"operation": "omit" if request.is_omit else "modify"},
        )
    except ProviderError as exc:
        logger.error("LaTeX modification failed: %s", exc)
        return {"success": False, "error": MODIFICATION_FAILED_MESSAGE}
    except Exception as exc:
        logger.exception("Unexpected error modifying LaTeX")
        return {"success": False, "error": str(exc) or "Failed to modify LaTeX content", "latex": latex_content}
    return _success(result)


def available_models(registry: ProviderRegistry, tier: str | SubscriptionTier) -> List[Dict[str, Any]]:
    """Models the given tier may use, across every configured provider."""
    user_tier = SubscriptionTier.parse(tier)
    models: List[Dict[str, Any]] = []
    for name, descriptor in registry.descriptors.items():
        if not registry.is_available(name):
            continue
        for spec in descriptor.models:
            if user_tier.allows(spec.tier):
                models.append(
                    {
                        "id": spec.model_id,
                        "name": f"{spec.model_id} ({descriptor.label})",
                        "provider": name,
                        "tier": spec.tier.value,
                    }
                )
    return models
