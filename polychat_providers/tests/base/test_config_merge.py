"""Configuration merge order: defaults, config file, environment, overrides."""
from __future__ import annotations

import json

from polychat_providers.config import (
    ConfigSettingsSource,
    StaticSettingsSource,
    get_provider_config,
    reset_config_cache,
)
from polychat_providers.config.defaults import OPENAI_DEFAULT_BASE_URL
from polychat_providers.config.env import env_prefix, is_placeholder, resolve_provider_key


def _use_file(monkeypatch, path, text):
    path.write_text(text, encoding="utf-8")
    monkeypatch.setenv("POLYCHAT_CONFIG_FILE", str(path))
    reset_config_cache()


def test_defaults_for_known_provider():
    cfg = get_provider_config("OpenAI")
    assert cfg["base_url"] == OPENAI_DEFAULT_BASE_URL  # nosec B101
    assert cfg["name"] == "OpenAI"  # nosec B101
    assert "api_key" not in cfg  # nosec B101
    assert get_provider_config("my-llm") == {}  # nosec B101


def test_json_file_then_env_then_overrides(monkeypatch, tmp_path):
    _use_file(
        monkeypatch,
        tmp_path / "providers.json",
        json.dumps({"OpenAI": {"organization": "org-file", "base_url": "https://file.example/v1"}}),
    )
    assert get_provider_config("openai")["organization"] == "org-file"  # nosec B101

    monkeypatch.setenv("OPENAI_BASE_URL", "https://env.example/v1")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    cfg = get_provider_config("openai", {"organization": "org-override", "name": None})
    assert cfg["base_url"] == "https://env.example/v1"  # nosec B101
    assert cfg["api_key"] == "sk-env"  # nosec B101
    assert cfg["organization"] == "org-override"  # nosec B101
    assert cfg["name"] == "OpenAI"  # nosec B101


def test_yaml_file_with_variable_expansion(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCAL_LLM_KEY", "local-secret")
    _use_file(
        monkeypatch,
        tmp_path / "providers.yaml",
        "my-llm:\n"
        "  base_url: http://localhost:1234\n"
        "  api_key: ${LOCAL_LLM_KEY}\n"
        "  models:\n"
        "    - id: llama-3-8b\n"
        "      capabilities: [tools]\n",
    )
    cfg = get_provider_config("my-llm")
    assert cfg["api_key"] == "local-secret"  # nosec B101
    assert cfg["models"][0]["id"] == "llama-3-8b"  # nosec B101


def test_unexpanded_reference_is_dropped(monkeypatch, tmp_path):
    _use_file(monkeypatch, tmp_path / "p.yaml", "openai:\n  api_key: ${OPENAI_API_KEY}\n")
    assert "api_key" not in get_provider_config("openai")  # nosec B101


def test_env_models_and_prefix(monkeypatch):
    monkeypatch.setenv("MY_LLM_MODELS", "a, b,,c")
    monkeypatch.setenv("MY_LLM_API_KEY", "k")
    cfg = get_provider_config("my-llm")
    assert cfg["models"] == ["a", "b", "c"]  # nosec B101
    assert cfg["api_key"] == "k"  # nosec B101
    assert env_prefix("my-llm") == "MY_LLM"  # nosec B101


def test_placeholder_keys_are_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "<your key>")
    assert resolve_provider_key("openai") == (None, None)  # nosec B101
    cfg = get_provider_config("openai", {"api_key": "changeme"})
    assert "api_key" not in cfg  # nosec B101
    assert is_placeholder("YOUR_API_KEY_HERE")  # nosec B101
    assert not is_placeholder("sk-live")  # nosec B101


def test_gemini_alias_variable(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    assert resolve_provider_key("gemini") == ("g-key", "GOOGLE_API_KEY")  # nosec B101
    monkeypatch.setenv("GEMINI_API_KEY", "primary")
    assert resolve_provider_key("gemini") == ("primary", "GEMINI_API_KEY")  # nosec B101


def test_dotenv_fills_unset_variables(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("# comment\nANTHROPIC_API_KEY='sk-ant'\nOPENAI_API_KEY=sk-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("POLYCHAT_DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-real")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "<placeholder>")
    reset_config_cache()
    assert get_provider_config("anthropic")["api_key"] == "sk-ant"  # nosec B101
    assert get_provider_config("openai")["api_key"] == "sk-real"  # nosec B101


def test_settings_sources(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    source = ConfigSettingsSource({"OpenAI": {"organization": "org-x"}})
    settings = source.get_provider_settings("openai")
    assert settings.api_key == "sk-env"  # nosec B101
    assert settings.organization == "org-x"  # nosec B101
    assert settings.models[0].id == "gpt-4o"  # nosec B101

    static = StaticSettingsSource({"Custom": {"api_key": "k", "models": ["m1", {"id": "m2", "capabilities": ["vision"]}]}})
    custom = static.get_provider_settings("custom")
    assert [m.id for m in custom.models] == ["m1", "m2"]  # nosec B101
    assert static.get_provider_settings("unknown").api_key == ""  # nosec B101
