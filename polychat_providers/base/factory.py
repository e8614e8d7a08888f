"""Provider Factory utilities.

Purpose
-------
Centralize creation of :class:`ChatProvider` instances. Adapters are imported
lazily using ``importlib`` so importing the package never pulls in vendor
SDKs (``anthropic``) that a caller does not use.

Resolution
----------
``ProviderKind.resolve`` maps a provider id to one of the closed set of
kinds, case-insensitively; the display names ``Fireworks.ai``, ``Together.ai``
and ``Forge`` are accepted as well. Unknown ids resolve to ``CUSTOM``: they are
served by the OpenAI-compatible custom adapter with their own settings.

Failure modes
-------------
:class:`UnknownProviderError` is raised when the adapter module cannot be
imported, the adapter class is missing, or its constructor fails. Errors are
chained from the underlying cause.
"""

from __future__ import annotations

from enum import Enum
from importlib import import_module
from typing import Any, Dict, Optional, Tuple, Union

from .dto.provider_settings import ProviderSettings
from .interfaces import ChatProvider


class UnknownProviderError(Exception):
    """Raised when a provider adapter cannot be resolved or initialized."""


# Display names the desktop client used as provider ids.
_KIND_ALIASES: Dict[str, str] = {
    "forge": "tensorblock",
    "fireworks.ai": "fireworks",
    "together.ai": "together",
}


class ProviderKind(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"
    TENSORBLOCK = "tensorblock"
    FIREWORKS = "fireworks"
    TOGETHER = "together"
    CUSTOM = "custom"

    @classmethod
    def resolve(cls, provider_id: Union[str, "ProviderKind"]) -> "ProviderKind":
        if isinstance(provider_id, ProviderKind):
            return provider_id
        key = (provider_id or "").strip().lower()
        key = _KIND_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.CUSTOM


class ProviderFactory:
    """Create provider adapters from a :class:`ProviderKind`."""

    # Map kinds to import paths and class names
    _PROVIDERS: Dict[ProviderKind, Dict[str, str]] = {
        ProviderKind.OPENAI: {"module": "polychat_providers.openai.client", "class": "OpenAIProvider"},
        ProviderKind.ANTHROPIC: {"module": "polychat_providers.anthropic.client", "class": "AnthropicProvider"},
        ProviderKind.GEMINI: {"module": "polychat_providers.gemini.client", "class": "GeminiProvider"},
        ProviderKind.OPENROUTER: {"module": "polychat_providers.openrouter.client", "class": "OpenRouterProvider"},
        ProviderKind.TENSORBLOCK: {"module": "polychat_providers.tensorblock.client", "class": "TensorBlockProvider"},
        ProviderKind.FIREWORKS: {"module": "polychat_providers.fireworks.client", "class": "FireworksProvider"},
        ProviderKind.TOGETHER: {"module": "polychat_providers.together.client", "class": "TogetherProvider"},
        ProviderKind.CUSTOM: {"module": "polychat_providers.custom.client", "class": "CustomProvider"},
    }

    @classmethod
    def create(
        cls,
        kind: Union[str, ProviderKind],
        provider_id: Optional[str] = None,
        settings: Optional[ProviderSettings] = None,
        **kwargs: Any,
    ) -> ChatProvider:
        """Create a provider adapter instance.

        Parameters
        ----------
        kind:
            Provider kind or provider id (resolved with ``ProviderKind.resolve``).
        provider_id:
            Identity of the new provider; defaults to the kind's value.
        settings:
            Provider settings; defaults to empty settings.
        **kwargs:
            Forwarded to the adapter constructor (``retry``, ``http_transport``,
            ``sleep``).

        Raises
        ------
        UnknownProviderError
            If the adapter module fails to import, the adapter class is
            missing, or the adapter constructor raises.
        """
        resolved = ProviderKind.resolve(kind)
        entry = cls._PROVIDERS[resolved]
        module_path, class_name = entry["module"], entry["class"]
        pid = provider_id or resolved.value

        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{pid}': {exc}"
            ) from exc

        try:
            klass = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{pid}'"
            ) from exc

        try:
            return klass(pid, settings or ProviderSettings(), **kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{pid}' adapter constructor: {exc}"
            ) from exc
        except Exception as exc:
            raise UnknownProviderError(f"Failed to initialize provider '{pid}': {exc}") from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported kinds in deterministic order."""
        return tuple(kind.value for kind in cls._PROVIDERS)


__all__ = ["ProviderKind", "ProviderFactory", "UnknownProviderError"]
