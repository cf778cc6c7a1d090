"""Pulls LaTeX source out of free-form model output."""

from __future__ import annotations

import re

_LATEX_FENCE_RE = re.compile(r"```latex\s*(.*?)\s*```", re.DOTALL)
_ANY_FENCE_RE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)
_DOCUMENT_RE = re.compile(r"\\documentclass.*?\\end\{document\}", re.DOTALL)
_DOCUMENTCLASS = "\\documentclass"


def extract_latex(text: str) -> str:
    """Best-effort LaTeX substring of a model response.

    Rules are tried in order and never combined: a ```latex fence, any fence,
    a full \\documentclass ... \\end{document} span, an unterminated
    \\documentclass tail, and finally the whole response.
    """
    text = text or ""

    match = _LATEX_FENCE_RE.search(text)
    if match and match.group(1):
        return match.group(1).strip()

    match = _ANY_FENCE_RE.search(text)
    if match and match.group(1):
        return match.group(1).strip()

    match = _DOCUMENT_RE.search(text)
    if match:
        return match.group(0).strip()

    start = text.find(_DOCUMENTCLASS)
    if start >= 0:
        return text[start:].strip()

    return text.strip()
