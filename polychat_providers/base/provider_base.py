"""Shared provider implementation.

Purpose
-------
``BaseChatProvider`` implements the :class:`ChatProvider` contract once.
Concrete providers only supply a transport (``_build_transport``), their
capability defaults, and optionally a remote model listing or image
generation.

Credential lifecycle
--------------------
The transport is built from the current key at construction and rebuilt by
``update_api_key``. The swap is a single attribute assignment and
every call leases the current transport before its first await, so an
in-flight request finishes on the old client while new requests use the new
key. A replaced transport is closed as soon as its last lease is released
(or by ``aclose``); if the rebuild fails, the previous key and transport stay.

Failure modes
-------------
- Missing key: ``ProviderError(CONFIGURATION)`` before any network call.
- Image generation on a provider without the capability:
  ``ProviderError(UNSUPPORTED)`` before any network call.
- ``fetch_available_models`` never raises.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, ClassVar, Dict, FrozenSet, Iterable, List, Optional

import httpx

from .capabilities import BASELINE_CAPABILITIES, Capability, parse_capabilities
from .completion import ChatTransport, run_chat_completion
from .constants import IMAGE_GENERATION_TOOL_NAME
from .dto.completion_options import CompletionOptions
from .dto.image_generation import ImageGenerationOptions
from .dto.provider_settings import ProviderSettings
from .errors import ErrorCode, ProviderError, classify_exception
from .http import HttpRetryClient, RateLimitTracker
from .http.client import Sleep
from .logging import LogContext, get_logger, log_event
from .models import Message, ModelInfo, RateLimitInfo
from .resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig
from .streaming.stream_controller import StreamControlHandler
from .timeouts import get_timeout_config
from .tools import ImageGenerationTool, ToolRegistry


class BaseChatProvider(ABC):
    """Provider contract implementation shared by every backend."""

    default_name: ClassVar[str] = ""
    default_base_url: ClassVar[str] = ""
    provider_capabilities: ClassVar[FrozenSet[Capability]] = BASELINE_CAPABILITIES
    default_model_capabilities: ClassVar[FrozenSet[Capability]] = BASELINE_CAPABILITIES

    def __init__(
        self,
        provider_id: str,
        settings: Optional[ProviderSettings] = None,
        *,
        retry: RetryConfig = DEFAULT_RETRY_CONFIG,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._id = provider_id
        self._settings = settings or ProviderSettings()
        self._api_key = self._settings.api_key or ""
        self._retry = retry
        self._http_transport = http_transport
        self._sleep = sleep
        self._logger = get_logger(f"polychat.providers.{provider_id.lower()}")
        self._rate_limits = RateLimitTracker()
        self._models: List[ModelInfo] = self._models_from_settings()
        self._retired: List[ChatTransport] = []
        self._leases: Dict[int, int] = {}
        self._idle = asyncio.Event()
        self._idle.set()
        self._transport: ChatTransport = self._build_transport()

    # ---- identity & configuration ---------------------------------------
    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._settings.name or self.default_name or self._id

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def base_url(self) -> str:
        return (self._settings.base_url or self.default_base_url).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._settings.timeout_seconds or get_timeout_config().provider_timeout_seconds

    @property
    def log_context(self) -> LogContext:
        return LogContext(provider=self._id)

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return self.provider_capabilities

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    # ---- transport ------------------------------------------------------
    @abstractmethod
    def _build_transport(self) -> ChatTransport:
        """Create a transport authenticated with the current key."""

    def _http_client(self, base_url: str, *, headers: Optional[dict] = None) -> HttpRetryClient:
        """Retry client wired with this provider's timeout, retry policy and rate-limit parser."""
        client = HttpRetryClient(
            base_url=base_url,
            headers={**self._settings.headers, **(headers or {})},
            timeout=self.timeout,
            retry=self._retry,
            transport=self._http_transport,
            sleep=self._sleep,
            logger=self._logger,
            log_context=self.log_context,
        )
        client.add_response_interceptor(self._rate_limits)
        return client

    def update_api_key(self, api_key: str) -> None:
        previous_key, self._api_key = self._api_key, api_key or ""
        try:
            replacement = self._build_transport()
        except Exception:
            self._api_key = previous_key
            raise
        previous, self._transport = self._transport, replacement
        self._retired.append(previous)

    @asynccontextmanager
    async def _lease(self) -> AsyncIterator[ChatTransport]:
        """Pin the current transport for one call; close retired ones once idle."""
        transport = self._transport
        key = id(transport)
        self._leases[key] = self._leases.get(key, 0) + 1
        self._idle.clear()
        try:
            yield transport
        finally:
            remaining = self._leases.pop(key) - 1
            if remaining:
                self._leases[key] = remaining
            elif not self._leases:
                self._idle.set()
            await self._close_idle_retired()

    async def _close_idle_retired(self) -> None:
        idle = [t for t in self._retired if id(t) not in self._leases]
        self._retired = [t for t in self._retired if id(t) in self._leases]
        for transport in idle:
            await transport.aclose()

    def has_valid_api_key(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def _require_api_key(self, model: Optional[str] = None) -> None:
        if not self.has_valid_api_key():
            raise ProviderError(
                code=ErrorCode.CONFIGURATION,
                message=f"{self.name} API key is not configured",
                provider=self._id,
                model=model,
            )

    # ---- models ---------------------------------------------------------
    def _models_from_settings(self) -> List[ModelInfo]:
        return [
            ModelInfo(
                id=m.id,
                provider=self._id,
                name=m.name,
                capabilities=parse_capabilities(m.capabilities)
                if m.capabilities
                else self.default_model_capabilities,
            )
            for m in self._settings.models
        ]

    @property
    def available_models(self) -> List[ModelInfo]:
        return list(self._models)

    async def _fetch_remote_models(self) -> Optional[List[ModelInfo]]:
        """Remote catalog; ``None`` keeps the configured catalog."""
        return None

    async def fetch_available_models(self) -> List[ModelInfo]:
        try:
            async with self._lease():
                remote = await self._fetch_remote_models()
        except Exception as exc:  # noqa: BLE001 - catalog refresh degrades to the previous list
            log_event(
                self._logger, "models.fetch_failed", self.log_context,
                level=logging.WARNING, error_code=classify_exception(exc).value, error=str(exc),
            )
            return list(self._models)
        if remote:
            self._models = remote
        return list(self._models)

    def get_model_capabilities(self, model_id: str) -> FrozenSet[Capability]:
        for model in self._models:
            if model.id == model_id:
                return model.capabilities
        return self.default_model_capabilities

    def get_rate_limit_info(self) -> Optional[RateLimitInfo]:
        return self._rate_limits.info

    # ---- completions ----------------------------------------------------
    def image_generation_tool(self) -> ImageGenerationTool:
        return ImageGenerationTool(self.get_image_generation)

    def _tool_registry(
        self, options: CompletionOptions, tools: Optional[ToolRegistry]
    ) -> Optional[ToolRegistry]:
        """Add the built-in image tool when the caller advertises it and we can serve it."""
        wants_images = any(d.name == IMAGE_GENERATION_TOOL_NAME for d in options.tools)
        if wants_images and self.supports(Capability.IMAGE_GENERATION):
            return (tools or ToolRegistry()).merged([self.image_generation_tool()])
        return tools

    async def get_chat_completion(
        self,
        messages: Iterable[Message],
        options: CompletionOptions,
        handler: StreamControlHandler,
        *,
        tools: Optional[ToolRegistry] = None,
    ) -> Message:
        self._require_api_key(options.model)
        async with self._lease() as transport:
            return await run_chat_completion(
                transport=transport,
                provider_id=self._id,
                model=options.model,
                messages=messages,
                options=options,
                handler=handler,
                tools=self._tool_registry(options, tools),
                logger=self._logger,
            )

    async def get_image_generation(
        self, prompt: str, options: Optional[ImageGenerationOptions] = None
    ) -> List[str]:
        if not self.supports(Capability.IMAGE_GENERATION):
            raise ProviderError(
                code=ErrorCode.UNSUPPORTED,
                message=f"Image generation is not supported by {self.name}",
                provider=self._id,
            )
        self._require_api_key()
        try:
            async with self._lease():
                return await self._generate_images(prompt, options or ImageGenerationOptions())
        except ProviderError:
            raise
        except Exception as exc:
            code = classify_exception(exc)
            raise ProviderError(
                code=code,
                message=f"{self.name} image generation failed: {exc}",
                provider=self._id,
                model=(options.model if options else None),
                raw=exc,
            ) from exc

    async def _generate_images(self, prompt: str, options: ImageGenerationOptions) -> List[str]:
        raise ProviderError(
            code=ErrorCode.UNSUPPORTED,
            message=f"Image generation is not supported by {self.name}",
            provider=self._id,
        )

    async def aclose(self) -> None:
        transports = [*self._retired, self._transport]
        self._retired = []
        for transport in transports:
            await transport.aclose()

    async def aclose_when_idle(self) -> None:
        await self._idle.wait()
        await self.aclose()


__all__ = ["BaseChatProvider"]
