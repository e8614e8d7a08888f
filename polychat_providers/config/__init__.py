"""Unified configuration layer for providers.

Merge order (later wins)
------------------------
1. Built-in defaults (``config.defaults``) for the known providers.
2. Optional external file pointed to by ``POLYCHAT_CONFIG_FILE``: JSON is
   tried first, then YAML (PyYAML). String values undergo ``${VAR}``
   expansion.
3. Environment variables: the credential (``OPENAI_API_KEY``,
   ``GEMINI_API_KEY``/``GOOGLE_API_KEY``...) and ``<PREFIX>_BASE_URL``,
   ``_API_VERSION``, ``_ORGANIZATION``, ``_NAME``, ``_MODELS``
   (comma-separated ids).
4. In-code overrides passed to :func:`get_provider_config`.

A ``.env`` file (path from ``POLYCHAT_DOTENV_FILE``, default ``.env``) is read
once and only fills variables that are unset or hold placeholders.

File structure example::

    openai:
      api_key: ${OPENAI_API_KEY}
      organization: org-123
    my-llm:
      base_url: http://localhost:1234
      models:
        - id: llama-3-8b
          capabilities: [tools]

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* reset_config_cache()
* SettingsSource, ConfigSettingsSource, StaticSettingsSource
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODELS,
    FIREWORKS_DEFAULT_BASE_URL,
    FIREWORKS_DEFAULT_MODELS,
    GEMINI_API_VERSION,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODELS,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODELS,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODELS,
    TENSORBLOCK_DEFAULT_BASE_URL,
    TENSORBLOCK_DEFAULT_MODELS,
    TOGETHER_DEFAULT_BASE_URL,
)
from .env import ENV_FIELD_MAP, env_prefix, is_placeholder, resolve_provider_key
from .settings_source import ConfigSettingsSource, SettingsSource, StaticSettingsSource


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"name": "OpenAI", "base_url": OPENAI_DEFAULT_BASE_URL, "models": OPENAI_DEFAULT_MODELS},
    "anthropic": {
        "name": "Anthropic",
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_version": ANTHROPIC_API_VERSION,
        "models": ANTHROPIC_DEFAULT_MODELS,
    },
    "gemini": {
        "name": "Gemini",
        "base_url": GEMINI_DEFAULT_BASE_URL,
        "api_version": GEMINI_API_VERSION,
        "models": GEMINI_DEFAULT_MODELS,
    },
    "openrouter": {
        "name": "OpenRouter",
        "base_url": OPENROUTER_DEFAULT_BASE_URL,
        "models": OPENROUTER_DEFAULT_MODELS,
    },
    "tensorblock": {
        "name": "TensorBlock",
        "base_url": TENSORBLOCK_DEFAULT_BASE_URL,
        "models": TENSORBLOCK_DEFAULT_MODELS,
    },
    "fireworks": {
        "name": "Fireworks.ai",
        "base_url": FIREWORKS_DEFAULT_BASE_URL,
        "models": FIREWORKS_DEFAULT_MODELS,
    },
    "together": {"name": "Together.ai", "base_url": TOGETHER_DEFAULT_BASE_URL},
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def reset_config_cache() -> None:
    """Forget the cached config file and ``.env`` state (tests)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Parse KEY=VALUE lines from the dotenv file into unset/placeholder variables."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = os.getenv("POLYCHAT_DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                os.environ[k] = v


def _expand(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("POLYCHAT_CONFIG_FILE")
    data: Any = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = {str(k).lower(): _expand(v) for k, v in data.items()}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is None:
            continue
        if field == "models":
            out[field] = [m.strip() for m in val.split(",") if m.strip()]
        else:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key:
        out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider id (case-insensitive)."""
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key")
    return cfg

__all__ = [
    "get_provider_config",
    "reset_config_cache",
    "DEFAULTS",
    "SettingsSource",
    "ConfigSettingsSource",
    "StaticSettingsSource",
]
