import pytest

from aitexgen.config import DEFAULT_SETTINGS, load_settings, parse_route


def test_settings_yaml_merges_onto_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("llm:\n  timeout_seconds: 5\nrouting:\n  chain: [anthropic, groq]\n", encoding="utf-8")

    cfg = load_settings(str(path))

    assert cfg["llm"]["timeout_seconds"] == 5
    assert cfg["llm"]["max_tokens"] == DEFAULT_SETTINGS["llm"]["max_tokens"]
    assert cfg["routing"]["chain"] == ["anthropic", "groq"]
    assert cfg["budgets"]["groq"] == 1_000_000


def test_missing_settings_file_uses_defaults():
    cfg = load_settings("does-not-exist.yaml")
    assert cfg == DEFAULT_SETTINGS
    assert cfg is not DEFAULT_SETTINGS


def test_parse_route_forms():
    assert parse_route("groq") == ("groq", "")
    assert parse_route(" groq : mixtral-8x7b-32768 ") == ("groq", "mixtral-8x7b-32768")
    with pytest.raises(ValueError):
        parse_route(":model")
    with pytest.raises(ValueError):
        parse_route("")
