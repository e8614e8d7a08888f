"""polychat_providers.config.env
=============================

Environment variable mapping for provider credentials and settings.

Design Notes
------------
- Canonical credential variables live in ``ENV_MAP``; providers with
  historical alternates list them in ``ENV_ALIASES`` (canonical first).
- Other settings use ``<PREFIX>_<FIELD>`` where the prefix is the upper-cased
  provider id with non-alphanumerics replaced by ``_`` (``my-llm`` →
  ``MY_LLM``).

Failure Modes
-------------
- Helpers never raise on unknown providers or unset variables; they return
  ``None`` and let callers decide.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "tensorblock": "TENSORBLOCK_API_KEY",
    "fireworks": "FIREWORKS_API_KEY",
    "together": "TOGETHER_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

# settings field -> env suffix
ENV_FIELD_MAP: Dict[str, str] = {
    "base_url": "BASE_URL",
    "api_version": "API_VERSION",
    "organization": "ORGANIZATION",
    "name": "NAME",
    "models": "MODELS",
}


def env_prefix(provider: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", (provider or "").strip()).upper()


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a real key.

    Heuristics: contains 'placeholder', 'changeme' or 'your_api_key', is wrapped in
    angle brackets, or is an unexpanded ``${VAR}`` reference. Case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "your_api_key" in v
        or (v.startswith("<") and v.endswith(">"))
        or (v.startswith("${") and v.endswith("}"))
    )


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable credential variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p, f"{env_prefix(provider)}_API_KEY")
    yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable)`` for the first non-placeholder credential found."""
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "ENV_FIELD_MAP",
    "env_prefix",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
]
