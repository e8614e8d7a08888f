"""Provider registry: the composition root for chat providers.

Goals:
- One provider instance per provider id, reused by every caller.
- Settings injected through a :class:`SettingsSource` instead of a global.
- Reconfiguration builds a fresh provider and swaps the cache entry; live
  instances are never mutated, so requests in flight keep the provider they
  started with. A replaced provider is closed in the background once its
  in-flight calls finish; outside an event loop it waits for
  :meth:`ProviderRegistry.aclose`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from ..base.capabilities import Capability
from ..base.factory import ProviderFactory, ProviderKind
from ..base.interfaces import ChatProvider
from ..base.logging import LogContext, get_logger, log_event
from ..config.settings_source import ConfigSettingsSource, SettingsSource


class ProviderRegistry:
    """Lazily built, identity-stable cache of providers keyed by id."""

    def __init__(
        self,
        settings_source: Optional[SettingsSource] = None,
        factory: Type[ProviderFactory] = ProviderFactory,
        **provider_kwargs: Any,
    ) -> None:
        """
        Args:
            settings_source: Supplies ``ProviderSettings`` per provider id;
                defaults to :class:`ConfigSettingsSource`.
            factory: Factory used to build adapters.
            **provider_kwargs: Forwarded to every adapter constructor
                (``retry``, ``http_transport``, ``sleep``).
        """
        self._settings = settings_source or ConfigSettingsSource()
        self._factory = factory
        self._provider_kwargs = provider_kwargs
        self._providers: Dict[str, ChatProvider] = {}
        self._kinds: Dict[str, ProviderKind] = {}
        self._retired: List[ChatProvider] = []
        self._closing: Dict["asyncio.Task[None]", ChatProvider] = {}
        self._logger = get_logger("polychat.registry")

    def kind_of(self, provider_id: str) -> ProviderKind:
        kind = self._kinds.get(provider_id)
        if kind is None:
            kind = self._kinds[provider_id] = ProviderKind.resolve(provider_id)
        return kind

    def _build(self, provider_id: str) -> ChatProvider:
        kind = self.kind_of(provider_id)
        provider = self._factory.create(
            kind, provider_id, self._settings.get_provider_settings(provider_id), **self._provider_kwargs
        )
        return provider

    def get(self, provider_id: str) -> ChatProvider:
        provider = self._providers.get(provider_id)
        if provider is None:
            provider = self._build(provider_id)
            self._providers[provider_id] = provider
            log_event(
                self._logger, "registry.create", LogContext(provider=provider_id),
                level=logging.DEBUG, kind=self.kind_of(provider_id).value,
            )
        return provider

    def reconfigure(self, provider_id: str) -> ChatProvider:
        """Rebuild ``provider_id`` from current settings and replace the cache entry."""
        replacement = self._build(provider_id)
        previous = self._providers.get(provider_id)
        self._providers[provider_id] = replacement
        if previous is not None:
            self._retire(previous)
        log_event(
            self._logger, "registry.reconfigure", LogContext(provider=provider_id),
            level=logging.INFO, replaced=previous is not None,
        )
        return replacement

    def cached_ids(self) -> List[str]:
        return list(self._providers)

    def providers_with_capability(
        self, capability: Capability, provider_ids: Optional[Iterable[str]] = None
    ) -> List[ChatProvider]:
        """Providers among ``provider_ids`` advertising ``capability``.

        Without ``provider_ids`` the built-in kinds (other than ``custom``)
        and every already cached id are considered.
        """
        if provider_ids is None:
            candidates = [k for k in ProviderFactory.supported() if k != ProviderKind.CUSTOM.value]
            candidates += [pid for pid in self._providers if pid not in candidates]
        else:
            candidates = list(provider_ids)
        return [p for p in (self.get(pid) for pid in candidates) if capability in p.capabilities]

    def clear(self) -> None:
        """Drop cached providers; each is closed once idle."""
        for provider in self._providers.values():
            self._retire(provider)
        self._providers.clear()
        self._kinds.clear()

    def _retire(self, provider: ChatProvider) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._retired.append(provider)
            return
        task = loop.create_task(provider.aclose_when_idle())
        self._closing[task] = provider
        task.add_done_callback(self._closed)

    def _closed(self, task: "asyncio.Task[None]") -> None:
        self._closing.pop(task, None)
        if not task.cancelled() and task.exception() is not None:
            log_event(
                self._logger, "registry.close_failed", LogContext(),
                level=logging.WARNING, error=str(task.exception()),
            )

    async def aclose(self) -> None:
        """Close every provider now, including retired ones still draining."""
        draining = dict(self._closing)
        for task in draining:
            task.cancel()
        providers = [*self._retired, *draining.values(), *self._providers.values()]
        self._retired = []
        self._providers.clear()
        for provider in providers:
            await provider.aclose()


def build_registry(
    settings_source: Optional[SettingsSource] = None, **provider_kwargs: Any
) -> ProviderRegistry:
    """Construct a registry with the default factory."""
    return ProviderRegistry(settings_source, **provider_kwargs)


__all__ = ["ProviderRegistry", "build_registry"]
