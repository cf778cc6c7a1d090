from aitexgen.extraction import extract_latex


def test_latex_fence_wins():
    assert extract_latex("prefix ```latex\nFOO\n``` suffix") == "FOO"


def test_latex_fence_preferred_over_earlier_plain_fence():
    text = "```\nnot this\n```\n```latex\n\\section{A}\n```"
    assert extract_latex(text) == "\\section{A}"


def test_any_fence_when_no_latex_tag():
    assert extract_latex("Sure!\n```\n\\documentclass{article}\n```\nDone.") == "\\documentclass{article}"


def test_document_span_without_fences():
    body = "\\documentclass{article}\n\\begin{document}\nHi\n\\end{document}"
    text = f"Here is the document:\n{body}\nLet me know if you need changes."
    assert extract_latex(text) == body


def test_unterminated_documentclass_runs_to_end():
    text = "Output follows \\documentclass{article}\n\\begin{document}\nHi  \n"
    assert extract_latex(text) == "\\documentclass{article}\n\\begin{document}\nHi"


def test_plain_text_is_trimmed():
    assert extract_latex("  \\section{Intro} hello \n") == "\\section{Intro} hello"


def test_empty_input():
    assert extract_latex("") == ""
    assert extract_latex(None) == ""
