"""polychat_providers.config.defaults
=================================

Stable default values for the built-in providers: base URLs, API versions and
the model catalogs used until a provider fetches its own. These defaults can
be overridden via environment variables or an external configuration file.

This module avoids importing from other package modules to prevent circular
dependencies; only plain constants live here.
"""

from __future__ import annotations

from typing import Any, Dict, List

# ---- OpenAI ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_IMAGE_MODEL = "dall-e-3"
OPENAI_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "gpt-4o", "name": "GPT-4o", "capabilities": ["vision", "tools", "json"]},
    {"id": "gpt-4o-mini", "name": "GPT-4o mini", "capabilities": ["vision", "tools", "json"]},
    {"id": "o3-mini", "name": "o3-mini", "capabilities": ["tools", "json", "reasoning"]},
]

# ---- Anthropic ----
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096
ANTHROPIC_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "claude-3-5-sonnet-latest", "name": "Claude 3.5 Sonnet", "capabilities": ["vision", "tools"]},
    {"id": "claude-3-5-haiku-latest", "name": "Claude 3.5 Haiku", "capabilities": ["tools"]},
    {"id": "claude-3-opus-latest", "name": "Claude 3 Opus", "capabilities": ["vision", "tools"]},
]

# ---- Gemini ----
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_API_VERSION = "v1beta"
GEMINI_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "gemini-2.0-flash", "name": "Gemini 2.0 Flash", "capabilities": ["vision", "audio", "tools", "json"]},
    {"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro", "capabilities": ["vision", "audio", "tools", "json"]},
    {"id": "gemini-1.5-flash", "name": "Gemini 1.5 Flash", "capabilities": ["vision", "audio", "tools", "json"]},
]

# ---- OpenRouter ----
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "openrouter/auto", "name": "Auto Router", "capabilities": ["tools"]},
]

# ---- TensorBlock Forge (OpenAI-compatible gateway) ----
TENSORBLOCK_DEFAULT_BASE_URL = "http://54.177.123.202:8000/v1"
TENSORBLOCK_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "gpt-4o", "name": "GPT-4o"},
    {"id": "claude", "name": "Claude"},
]

# ---- Fireworks.ai ----
FIREWORKS_DEFAULT_BASE_URL = "https://api.fireworks.ai/inference/v1"
FIREWORKS_DEFAULT_MODELS: List[Dict[str, Any]] = [
    {"id": "accounts/fireworks/models/deepseek-r1", "name": "DeepSeek R1"},
    {"id": "accounts/fireworks/models/deepseek-v3", "name": "DeepSeek V3"},
    {"id": "accounts/fireworks/models/qwen2p5-coder-32b-instruct", "name": "Qwen2.5 Coder 32B Instruct"},
]

# ---- Together.ai ----
TOGETHER_DEFAULT_BASE_URL = "https://api.together.xyz/v1"

# ---- Custom OpenAI-compatible endpoints ----
CUSTOM_DEFAULT_BASE_URL = "http://localhost:8000"
CUSTOM_API_VERSION = "v1"

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_IMAGE_MODEL",
    "OPENAI_DEFAULT_MODELS",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "ANTHROPIC_DEFAULT_MODELS",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_API_VERSION",
    "GEMINI_DEFAULT_MODELS",
    "OPENROUTER_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODELS",
    "TENSORBLOCK_DEFAULT_BASE_URL",
    "TENSORBLOCK_DEFAULT_MODELS",
    "FIREWORKS_DEFAULT_BASE_URL",
    "FIREWORKS_DEFAULT_MODELS",
    "TOGETHER_DEFAULT_BASE_URL",
    "CUSTOM_DEFAULT_BASE_URL",
    "CUSTOM_API_VERSION",
]
