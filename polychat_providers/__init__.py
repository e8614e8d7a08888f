"""polychat_providers package

Unified chat-provider abstraction for multiple AI backends with a shared
streaming-completion engine.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Contract: :class:`ChatProvider`
    - Registry: :class:`ProviderRegistry`, :func:`build_registry`
    - Factory helper: :func:`create`
"""

from typing import Any, Optional

from .base.dto import ProviderSettings
from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, ProviderKind
from .base.interfaces import ChatProvider
from .config import get_provider_config
from .config.settings_source import settings_from_mapping
from .di import ProviderRegistry, build_registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProviderError",
    "ErrorCode",
    "ChatProvider",
    "ProviderFactory",
    "ProviderKind",
    "ProviderRegistry",
    "build_registry",
    "create",
]


def create(provider_id: str, settings: Optional[ProviderSettings] = None, **kwargs: Any) -> ChatProvider:
    """Instantiate one provider outside a registry.

    Settings default to the merged configuration for ``provider_id``
    (defaults, config file, environment). Construction failures are wrapped
    in :class:`ProviderError` with code ``CONFIGURATION``.
    """
    if settings is None:
        settings = settings_from_mapping(get_provider_config(provider_id))
    try:
        return ProviderFactory.create(ProviderKind.resolve(provider_id), provider_id, settings, **kwargs)
    except Exception as e:
        raise ProviderError(
            code=ErrorCode.CONFIGURATION,
            message=f"Failed to create provider '{provider_id}': {e}",
            provider=provider_id,
        ) from e
