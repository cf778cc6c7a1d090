"""Prompt builders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

EMPTY_CONTENT_PLACEHOLDER = "Generate a simple example document."

LATEX_SYSTEM_PROMPT = (
    "You are an expert LaTeX typesetter. Convert the user's content into a complete, "
    "compilable LaTeX document.\n"
    "Rules:\n"
    "- Always produce a full document starting with \\documentclass and ending with \\end{document}.\n"
    "- Only use packages available in a standard TeX Live installation.\n"
    "- Preserve the user's wording; structure it with sections, lists and tables where it fits.\n"
    "- Escape special characters (%, $, &, #, _, {, }) that appear in plain text.\n"
    "- Return the LaTeX inside a single ```latex fenced code block and nothing else."
)

LITERAL_CONTENT_RULES = (
    "IMPORTANT INSTRUCTIONS:\n"
    "1. INCORPORATE THE USER CONTENT EXACTLY AS PROVIDED - DO NOT IGNORE OR REPLACE THE TEXT ABOVE.\n"
    "2. DO NOT ADD ANY MATH EQUATIONS UNLESS EXPLICITLY REQUESTED.\n"
    "3. DO NOT INSERT MATHEMATICAL EXPRESSIONS THAT ARE NOT LITERALLY PRESENT IN THE USER CONTENT.\n"
    "4. TREAT ALL USER TEXT LITERALLY, ESPECIALLY WHEN REGENERATING CONTENT."
)


@dataclass(frozen=True)
class GenerationRequest:
    content: str
    document_type: str
    split_tables: Optional[bool] = None
    use_math: Optional[bool] = None
    model: Optional[str] = None

    @classmethod
    def from_options(cls, content: str, document_type: str, options: Dict[str, Any] | None = None) -> "GenerationRequest":
        options = options or {}
        if not (content or "").strip():
            content = EMPTY_CONTENT_PLACEHOLDER
        return cls(
            content=content,
            document_type=document_type,
            split_tables=options.get("split_tables"),
            use_math=options.get("use_math"),
            model=(options.get("model") or "").strip() or None,
        )


@dataclass(frozen=True)
class ModificationRequest:
    latex_content: str
    notes: str
    is_omit: bool = False
    model: Optional[str] = None


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def build_generation_prompt(request: GenerationRequest) -> str:
    prompt = f"Document Type: {request.document_type}\n\nUSER CONTENT:\n{request.content}\n"

    options = []
    if request.split_tables is not None:
        options.append(f"Split Tables: {_yes_no(request.split_tables)}")
    if request.use_math is not None:
        options.append(f"Use Math Mode: {_yes_no(request.use_math)}")
    if options:
        prompt = f"{prompt}\nOptions:\n" + "\n".join(options)

    return f"{prompt}\n\n{LITERAL_CONTENT_RULES}"


def build_modification_prompt(request: ModificationRequest) -> str:
    existing = f"EXISTING LATEX CODE:\n```latex\n{request.latex_content}\n```\n\n"
    if request.is_omit:
        return (
            existing
            + "REMOVE THE FOLLOWING CONTENT FROM THE LATEX CODE (make no other changes):\n"
            + f"{request.notes}\n\n"
            + "IMPORTANT NOTE ABOUT DATES: If this request is about removing a date and the document "
            + "uses \\maketitle without a \\date{} command, you should add \\date{} before \\maketitle "
            + "to explicitly set an empty date.\n\n"
            + "Return the complete modified LaTeX code with the specified content removed."
        )
    return (
        existing
        + "MODIFY THE LATEX CODE ACCORDING TO THESE INSTRUCTIONS:\n"
        + f"{request.notes}\n\n"
        + "Return the complete modified LaTeX code with the requested changes applied."
    )
